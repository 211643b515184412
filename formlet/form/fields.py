"""The closed set of field kinds a form can render.

A ``Field`` pairs a ``FieldKind`` tag with that kind's options and a
``BaseField`` over the kind's value type. Renderers dispatch on the tag, so a
new kind is one more ``FieldKind`` member, one options record and one entry in
each dispatch table.
"""
from dataclasses import dataclass, replace
from datetime import date
from enum import Enum
from typing import Any, Callable, Dict, Optional, Tuple, Union

from formlet.form.accessor import BaseField, Lens
from formlet.form.mask import NumberMask, StringMask
from formlet.form.picker import Profile
from formlet.form.remote import is_success


class FieldKind(Enum):
    TEXT = "text"
    RICH_TEXT = "rich_text"
    TOGGLE = "toggle"
    CHECKBOX = "checkbox"
    RADIO = "radio"
    SELECT = "select"
    FILE = "file"
    DATE_PICKER = "date_picker"
    USER_PICKER = "user_picker"
    USER_PICKER_MULTIPLE = "user_picker_multiple"
    DECORATION = "decoration"


@dataclass(frozen=True, kw_only=True)
class FieldOptions:
    id: str
    label: str = ""
    disabled: bool = False
    container_class: str = ""


@dataclass(frozen=True, kw_only=True)
class TextOptions(FieldOptions):
    placeholder: str = ""
    input_type: str = "text"
    multiline: bool = False
    max_length: Optional[int] = None
    mask: Optional[Union[StringMask, NumberMask]] = None


@dataclass(frozen=True, kw_only=True)
class RichTextOptions(FieldOptions):
    placeholder: str = ""


@dataclass(frozen=True, kw_only=True)
class ToggleOptions(FieldOptions):
    pass


@dataclass(frozen=True, kw_only=True)
class CheckboxOptions(FieldOptions):
    pass


@dataclass(frozen=True, kw_only=True)
class RadioOptions(FieldOptions):
    choices: Tuple[Tuple[Any, str], ...] = ()
    direction: str = "vertical"


@dataclass(frozen=True, kw_only=True)
class SelectOptions(FieldOptions):
    choices: Tuple[Tuple[str, str], ...] = ()


@dataclass(frozen=True, kw_only=True)
class FileOptions(FieldOptions):
    accept: str = "*/*"


@dataclass(frozen=True, kw_only=True)
class DatePickerOptions(FieldOptions):
    min_date: Optional[date] = None
    max_date: Optional[date] = None


@dataclass(frozen=True, kw_only=True)
class UserPickerOptions(FieldOptions):
    placeholder: str = ""
    profiles: Tuple[Profile, ...] = ()


@dataclass(frozen=True, kw_only=True)
class DecorationOptions(FieldOptions):
    id: str = ""
    content: Any = None


def _always_filled(value: Any) -> bool:
    return False


IS_EMPTY: Dict[FieldKind, Callable[[Any], bool]] = {
    FieldKind.TEXT: lambda value: value == "",
    FieldKind.RICH_TEXT: lambda value: value.is_empty(),
    FieldKind.TOGGLE: _always_filled,
    FieldKind.CHECKBOX: _always_filled,
    FieldKind.RADIO: _always_filled,
    FieldKind.SELECT: _always_filled,
    FieldKind.FILE: lambda value: not is_success(value),
    FieldKind.DATE_PICKER: lambda value: value is None,
    FieldKind.USER_PICKER: lambda value: value.is_empty(),
    FieldKind.USER_PICKER_MULTIPLE: lambda value: value.is_empty(),
}


@dataclass(frozen=True)
class Field:
    kind: FieldKind
    options: FieldOptions
    base: Optional[BaseField] = None

    @property
    def id(self) -> str:
        return self.options.id

    @property
    def value(self) -> Any:
        return self.base.value if self.base is not None else None

    def is_empty(self) -> bool:
        # Decorations hold no input, so they never make a sub-form count as filled in
        if self.kind is FieldKind.DECORATION:
            return True
        return IS_EMPTY[self.kind](self.base.value)

    def is_disabled(self, form_disabled: bool = False) -> bool:
        return self.options.disabled or form_disabled

    def map_values(self, lens: Lens, parent: Any, id_prefix: Optional[str] = None) -> "Field":
        options = self.options
        if id_prefix and options.id:
            options = replace(options, id=f"{id_prefix}.{options.id}")
        base = self.base.lift(lens, parent) if self.base is not None else None
        return Field(self.kind, options, base)


def decoration(content: Any) -> Field:
    return Field(FieldKind.DECORATION, DecorationOptions(content=content))
