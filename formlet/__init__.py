from formlet.form import *  # noqa: F401,F403
from formlet.form import builders
from formlet.form.mask import NumberMask, StringMask
from formlet.form.picker import MultipleUserPickerModel, Profile, UserPickerModel
from formlet.form.remote import Failure, Loading, NotAsked, Success
from formlet.form.rich_text import RichTextDocument
from formlet.i18n import Translators
from formlet.log import configure_logging, get_logger
from formlet.result import Err, Ok
from formlet.view import mount, render, stylesheet, t

__version__ = "0.1.0"
