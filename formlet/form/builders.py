"""One builder per field kind.

Every builder is ``field`` specialised to a kind: it adapts the kind's native
value (a rich-text document, an upload state, a picker selection) to the
``parser`` / ``value`` / ``update`` triple the generic builder expects.
"""
from datetime import date
from typing import Any, Callable, List, Optional

from formlet.exceptions import FieldConfigurationError
from formlet.form.base import Form, field
from formlet.form.fields import (
    CheckboxOptions,
    DatePickerOptions,
    Field,
    FieldKind,
    FileOptions,
    RadioOptions,
    RichTextOptions,
    SelectOptions,
    TextOptions,
    ToggleOptions,
    UserPickerOptions,
)
from formlet.form.picker import MultipleUserPickerModel, Profile, UserPickerModel
from formlet.form.remote import Failure, Loading, RemoteData, Success
from formlet.form.rich_text import RichTextDocument
from formlet.i18n import DEFAULT_TRANSLATORS, Translators
from formlet.result import Err, Ok, Result

Parser = Callable[[Any], Result]
ExternalError = Optional[Callable[[Any], Optional[str]]]


def _builder(kind: FieldKind, options):
    return lambda base: Field(kind, options, base)


def text(
    options: TextOptions,
    *,
    value: Callable[[Any], str],
    update: Callable[[str, Any], Any],
    parser: Parser = Ok,
    external_error: ExternalError = None,
) -> Form:
    """Single or multi-line text input.

    With a mask on the options every update is re-formatted by the mask
    before it reaches ``update``.
    """
    mask = options.mask

    def masked_update(raw: str, values):
        return update(mask.apply(raw) if mask else raw, values)

    return field(
        _builder(FieldKind.TEXT, options),
        parser=parser,
        value=value,
        update=masked_update,
        external_error=external_error,
    )


def rich_text(
    options: RichTextOptions,
    *,
    value: Callable[[Any], RichTextDocument],
    update: Callable[[RichTextDocument, Any], Any],
    parser: Parser = Ok,
    external_error: ExternalError = None,
) -> Form:
    """Rich-text editor. ``parser`` receives the document as Markdown."""
    return field(
        _builder(FieldKind.RICH_TEXT, options),
        parser=lambda document: parser(document.to_markdown()),
        value=value,
        update=update,
        external_error=external_error,
    )


def toggle(
    options: ToggleOptions,
    *,
    value: Callable[[Any], bool],
    update: Callable[[bool, Any], Any],
    parser: Parser = Ok,
    external_error: ExternalError = None,
) -> Form:
    return field(
        _builder(FieldKind.TOGGLE, options),
        parser=parser,
        value=value,
        update=update,
        external_error=external_error,
    )


def checkbox(
    options: CheckboxOptions,
    *,
    value: Callable[[Any], bool],
    update: Callable[[bool, Any], Any],
    parser: Parser = Ok,
    external_error: ExternalError = None,
) -> Form:
    return field(
        _builder(FieldKind.CHECKBOX, options),
        parser=parser,
        value=value,
        update=update,
        external_error=external_error,
    )


def radio(
    options: RadioOptions,
    *,
    value: Callable[[Any], Any],
    update: Callable[[Any, Any], Any],
    parser: Parser = Ok,
    external_error: ExternalError = None,
) -> Form:
    if not options.choices:
        raise FieldConfigurationError(f"Radio field '{options.id}' needs at least one choice")
    return field(
        _builder(FieldKind.RADIO, options),
        parser=parser,
        value=value,
        update=update,
        external_error=external_error,
    )


def select(
    options: SelectOptions,
    *,
    value: Callable[[Any], str],
    update: Callable[[str, Any], Any],
    parser: Parser = Ok,
    external_error: ExternalError = None,
) -> Form:
    if not options.choices:
        raise FieldConfigurationError(f"Select field '{options.id}' needs at least one choice")
    return field(
        _builder(FieldKind.SELECT, options),
        parser=parser,
        value=value,
        update=update,
        external_error=external_error,
    )


def file(
    options: FileOptions,
    *,
    value: Callable[[Any], RemoteData],
    update: Callable[[RemoteData, Any], Any],
    parser: Parser = Ok,
    external_error: ExternalError = None,
    loading_error_message: Optional[str] = None,
    failure_error_message: Optional[str] = None,
    not_asked_error_message: Optional[str] = None,
    translators: Translators = DEFAULT_TRANSLATORS,
) -> Form:
    """File input whose value is the state of its upload.

    Only a finished upload parses: ``parser`` receives the uploaded file's
    URL. Every other state fails with the matching message.
    """
    loading = loading_error_message or translators.t("form.file.loading")
    failure = failure_error_message or translators.t("form.file.failure")
    not_asked = not_asked_error_message or translators.t("form.file.not_asked")

    def parse_upload(remote: RemoteData) -> Result:
        if isinstance(remote, Success):
            return parser(remote.value)
        if isinstance(remote, Loading):
            return Err(loading)
        if isinstance(remote, Failure):
            return Err(failure)
        return Err(not_asked)

    return field(
        _builder(FieldKind.FILE, options),
        parser=parse_upload,
        value=value,
        update=update,
        external_error=external_error,
    )


def date_picker(
    options: DatePickerOptions,
    *,
    value: Callable[[Any], Optional[date]],
    update: Callable[[Optional[date], Any], Any],
    parser: Parser = Ok,
    external_error: ExternalError = None,
) -> Form:
    return field(
        _builder(FieldKind.DATE_PICKER, options),
        parser=parser,
        value=value,
        update=update,
        external_error=external_error,
    )


def user_picker(
    options: UserPickerOptions,
    *,
    value: Callable[[Any], UserPickerModel],
    update: Callable[[UserPickerModel, Any], Any],
    parser: Callable[[Optional[Profile]], Result] = Ok,
    external_error: ExternalError = None,
) -> Form:
    """Picker for a single user. ``parser`` receives the selected profile."""
    return field(
        _builder(FieldKind.USER_PICKER, options),
        parser=lambda model: parser(model.selected),
        value=value,
        update=update,
        external_error=external_error,
    )


def user_picker_multiple(
    options: UserPickerOptions,
    *,
    value: Callable[[Any], MultipleUserPickerModel],
    update: Callable[[MultipleUserPickerModel, Any], Any],
    parser: Callable[[List[Profile]], Result] = Ok,
    external_error: ExternalError = None,
) -> Form:
    """Picker for several users. ``parser`` receives the selected profiles."""
    return field(
        _builder(FieldKind.USER_PICKER_MULTIPLE, options),
        parser=lambda model: parser(list(model.selected)),
        value=value,
        update=update,
        external_error=external_error,
    )
