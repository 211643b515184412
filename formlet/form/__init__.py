from formlet.form.accessor import BaseField, Lens
from formlet.form.base import (
    FilledField,
    FilledForm,
    Form,
    curried,
    field,
    fill,
    map,
    map_values,
    succeed,
    with_,
    with_conditional,
    with_decoration,
    with_nesting,
    with_no_output,
    with_optional,
)
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
from formlet.form.model import (
    ErrorTracking,
    FeedbackLevel,
    FormController,
    Model,
    ValidationStrategy,
    init,
)
from formlet.form.validator import Validator

# ``map``, ``field`` and ``fill`` are left out of star imports.
__all__ = [
    "BaseField",
    "CheckboxOptions",
    "DatePickerOptions",
    "ErrorTracking",
    "FeedbackLevel",
    "Field",
    "FieldKind",
    "FileOptions",
    "FilledField",
    "FilledForm",
    "Form",
    "FormController",
    "Lens",
    "Model",
    "RadioOptions",
    "RichTextOptions",
    "SelectOptions",
    "TextOptions",
    "ToggleOptions",
    "UserPickerOptions",
    "ValidationStrategy",
    "Validator",
    "curried",
    "init",
    "map_values",
    "succeed",
    "with_",
    "with_conditional",
    "with_decoration",
    "with_nesting",
    "with_no_output",
    "with_optional",
]
