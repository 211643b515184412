"""Chainable parsers for field inputs.

``Validator`` builds the ``parser`` a field builder expects::

    age_parser = Validator().required().int().min_value(18)
    age_parser("20")   # Ok(20)
    age_parser("abc")  # Err("Must be a whole number.")

Each step receives the output of the previous one, so conversions such as
``int()`` change what later steps see. Default messages come from the
``Translators`` given to the chain.
"""
import datetime
import re
from typing import Any, Callable, Iterable, List, Optional, Union

from formlet.form.mask import NumberMask, StringMask
from formlet.i18n import DEFAULT_TRANSLATORS, Translators
from formlet.log import get_logger
from formlet.result import Err, Ok, Result

logger = get_logger(__name__)

EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")
URL_PATTERN = re.compile(
    r"^https?://(?:www\.)?[-a-zA-Z0-9@:%._+~#=]{1,256}\.[a-zA-Z0-9()]{1,6}\b(?:[-a-zA-Z0-9()@:%_+.~#?&/=]*)$"
)

Step = Callable[[Any], Result]
Number = Union[int, float]


def is_blank(value: Any) -> bool:
    """Checks emptiness the way ``required`` does: None, blank strings and empty collections."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, dict, tuple, set)):
        return not value
    return False


class Validator:
    """Immutable chain of validation steps; every method returns a new chain."""

    def __init__(self, translators: Translators = DEFAULT_TRANSLATORS, steps: Optional[List[Step]] = None):
        self.translators = translators
        self._steps: List[Step] = steps or []

    def _then(self, step: Step) -> "Validator":
        return Validator(self.translators, [*self._steps, step])

    def _check(self, predicate: Callable[[Any], bool], message: str) -> "Validator":
        return self._then(lambda value: Ok(value) if predicate(value) else Err(message))

    def validate(self, value: Any) -> Result:
        result: Result = Ok(value)
        for step in self._steps:
            result = result.and_then(step)
            if result.is_err():
                break
        return result

    __call__ = validate

    # -- Presence and text ---

    def trim(self) -> "Validator":
        return self._then(lambda value: Ok(value.strip() if isinstance(value, str) else value))

    def required(self, error_message: Optional[str] = None) -> "Validator":
        message = error_message or self.translators.t("form.error.required")
        return self._check(lambda value: not is_blank(value), message)

    def min_length(self, length: int, error_message: Optional[str] = None) -> "Validator":
        message = error_message or self.translators.tr("form.error.min_length", [("length", length)])
        return self._check(lambda value: value is None or len(value) >= length, message)

    def max_length(self, length: int, error_message: Optional[str] = None) -> "Validator":
        message = error_message or self.translators.tr("form.error.max_length", [("length", length)])
        return self._check(lambda value: value is None or len(value) <= length, message)

    def regex(self, pattern: str, error_message: Optional[str] = None) -> "Validator":
        compiled = re.compile(pattern)
        message = error_message or self.translators.t("form.error.regex")
        return self._check(lambda value: value in (None, "") or bool(compiled.fullmatch(str(value))), message)

    def email(self, error_message: Optional[str] = None) -> "Validator":
        message = error_message or self.translators.t("form.error.email")
        return self._check(lambda value: value in (None, "") or bool(EMAIL_PATTERN.match(value)), message)

    def url(self, error_message: Optional[str] = None) -> "Validator":
        message = error_message or self.translators.t("form.error.url")
        return self._check(lambda value: value in (None, "") or bool(URL_PATTERN.match(value)), message)

    def one_of(self, choices: Iterable[Any], error_message: Optional[str] = None) -> "Validator":
        allowed = list(choices)
        message = error_message or self.translators.t("form.error.invalid_option")
        return self._check(lambda value: value in allowed, message)

    # -- Conversions ---

    def unmask(self, mask: Union[StringMask, NumberMask]) -> "Validator":
        """Strips a text mask so ``int``/``float`` can read the digits."""
        return self._then(lambda value: Ok(mask.unmask(value)))

    def int(self, error_message: Optional[str] = None) -> "Validator":
        message = error_message or self.translators.t("form.error.invalid_int")

        def to_int(value):
            try:
                return Ok(int(str(value).strip()))
            except ValueError:
                return Err(message)

        return self._then(to_int)

    def float(self, error_message: Optional[str] = None) -> "Validator":
        message = error_message or self.translators.t("form.error.invalid_number")

        def to_float(value):
            try:
                return Ok(float(str(value).strip()))
            except ValueError:
                return Err(message)

        return self._then(to_float)

    def min_value(self, min_val: Number, error_message: Optional[str] = None) -> "Validator":
        message = error_message or self.translators.tr("form.error.min_value", [("value", min_val)])
        return self._check(lambda value: value >= min_val, message)

    def max_value(self, max_val: Number, error_message: Optional[str] = None) -> "Validator":
        message = error_message or self.translators.tr("form.error.max_value", [("value", max_val)])
        return self._check(lambda value: value <= max_val, message)

    def date_min(self, min_date: datetime.date, error_message: Optional[str] = None) -> "Validator":
        message = error_message or self.translators.tr("form.error.date_min", [("date", min_date.isoformat())])
        return self._check(lambda value: value is None or value >= min_date, message)

    def date_max(self, max_date: datetime.date, error_message: Optional[str] = None) -> "Validator":
        message = error_message or self.translators.tr("form.error.date_max", [("date", max_date.isoformat())])
        return self._check(lambda value: value is None or value <= max_date, message)

    # -- Escape hatches ---

    def map(self, fn: Callable[[Any], Any]) -> "Validator":
        return self._then(lambda value: Ok(fn(value)))

    def custom(self, validation_func: Callable[[Any], Union[Result, Optional[str]]]) -> "Validator":
        """Adds a step written by the caller.

        ``validation_func`` may return a ``Result`` (to convert the value) or
        an error message / None (to only check it). If it raises, the field
        fails with a generic message and the exception is logged.
        """
        def safe_validate(value):
            try:
                outcome = validation_func(value)
            except Exception as e:
                logger.warning("Custom validator raised", error=str(e), error_type=type(e).__name__)
                return Err(self.translators.t("form.error.custom_failed"))
            if isinstance(outcome, (Ok, Err)):
                return outcome
            return Err(outcome) if outcome else Ok(value)

        return self._then(safe_validate)
