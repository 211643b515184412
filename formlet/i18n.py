"""Localization provider.

Forms never hardcode user-facing copy: every built-in message is looked up by
key through a ``Translators`` instance. Missing keys fall back to English.
"""
from typing import Callable, Dict, List, Optional, Tuple

ENGLISH_FALLBACKS: Dict[str, str] = {
    "form.error.required": "This field is required.",
    "form.error.invalid_int": "Must be a whole number.",
    "form.error.invalid_number": "Must be a valid number.",
    "form.error.min_length": "Must be at least {{length}} characters long.",
    "form.error.max_length": "Must be at most {{length}} characters long.",
    "form.error.min_value": "Must be at least {{value}}.",
    "form.error.max_value": "Must be at most {{value}}.",
    "form.error.email": "Must be a valid email address.",
    "form.error.url": "Must be a valid URL.",
    "form.error.regex": "Invalid format.",
    "form.error.custom_failed": "Validation failed due to an internal error.",
    "form.error.date_min": "Date must be on or after {{date}}.",
    "form.error.date_max": "Date must be on or before {{date}}.",
    "form.error.invalid_option": "Choose one of the available options.",
    "form.file.loading": "The file is still uploading.",
    "form.file.failure": "The file could not be uploaded.",
    "form.file.not_asked": "Choose a file to upload.",
    "form.file.upload_failed": "Something went wrong while uploading the file.",
    "form.submit": "Submit",
    "form.optional": "optional",
    "form.picker.no_results": "No users found",
    "form.toggle.on": "Yes",
    "form.toggle.off": "No",
}


class Translators:
    """Looks up strings by key, interpolating ``{{name}}`` placeholders.

    ``lookup`` is the application's own catalog. When it returns None (or
    is not given) the English fallback is used, and when there is no
    fallback either the key itself is returned so a missing string is
    visible instead of blank.
    """

    def __init__(self, lookup: Optional[Callable[[str], Optional[str]]] = None):
        self._lookup = lookup

    def t(self, key: str) -> str:
        if self._lookup is not None:
            found = self._lookup(key)
            if found is not None:
                return found
        return ENGLISH_FALLBACKS.get(key, key)

    def tr(self, key: str, replacements: List[Tuple[str, str]]) -> str:
        text = self.t(key)
        for name, value in replacements:
            text = text.replace("{{" + name + "}}", str(value))
        return text

    @classmethod
    def from_catalog(cls, catalog: Dict[str, str]) -> "Translators":
        return cls(catalog.get)


DEFAULT_TRANSLATORS = Translators()
