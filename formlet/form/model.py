"""Form state between renders.

The only thing kept across renders is the raw values, which fields the user
has left (blurred), whether a submit was attempted, and the disabled flag.
Errors are never stored: every render fills the form again from the current
values, so a fixed field can't keep showing a stale error.
"""
import asyncio
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Callable, FrozenSet, Generic, Optional, Protocol, TypeVar

from formlet.core import create_signal
from formlet.exceptions import MissingCollaboratorError
from formlet.form.accessor import BaseField
from formlet.form.base import Form
from formlet.form.remote import Failure, Loading, Success
from formlet.i18n import DEFAULT_TRANSLATORS, Translators
from formlet.log import StructlogDiagnostics, get_logger
from formlet.result import Err, Ok, Result
from formlet.utils.async_task import run_async

logger = get_logger(__name__)

Values = TypeVar("Values")


class ValidationStrategy(Enum):
    # Show a field's error once the user leaves it
    ON_BLUR = "onblur"
    # Show errors only after a submit attempt
    ON_SUBMIT = "onsubmit"


class FeedbackLevel(Enum):
    SUCCESS = "success"
    FAILURE = "failure"


class Uploader(Protocol):
    async def upload(self, file: bytes) -> str:
        """Uploads ``file`` and returns its URL; raises on transport errors."""


class Feedback(Protocol):
    def show(self, level: FeedbackLevel, message: str) -> None: ...


class DiagnosticLog(Protocol):
    def failure(self, event: str, description: str, error: Exception) -> None: ...


@dataclass(frozen=True)
class ErrorTracking:
    show_all_errors: bool = False
    show_field_error: FrozenSet[str] = frozenset()


@dataclass(frozen=True)
class Model(Generic[Values]):
    values: Values
    error_tracking: ErrorTracking = field(default_factory=ErrorTracking)
    disabled: bool = False


def init(values: Values) -> Model:
    return Model(values=values)


class FormController(Generic[Values]):
    """
    Owns the ``Model`` of one form instance and applies every event to it.

    The model lives in a signal, so anything reading ``controller.model()``
    inside an effect (such as ``formlet.view.render.mount``) re-runs when it
    changes.
    """

    def __init__(
        self,
        initial_values: Values,
        *,
        uploader: Optional[Uploader] = None,
        feedback: Optional[Feedback] = None,
        diagnostics: Optional[DiagnosticLog] = None,
        focus: Optional[Callable[[str], None]] = None,
        translators: Translators = DEFAULT_TRANSLATORS,
        validation_strategy: ValidationStrategy = ValidationStrategy.ON_BLUR,
    ):
        self.model, self.set_model = create_signal(init(initial_values))
        self.uploader = uploader
        self.feedback = feedback
        self.diagnostics = diagnostics or StructlogDiagnostics()
        self.focus = focus
        self.translators = translators
        self.validation_strategy = validation_strategy

    @property
    def values(self) -> Values:
        return self.model.peek().values

    def edit(self, values: Values) -> None:
        """Replaces the values with the new ones produced by a field's ``update``."""
        self.set_model(replace(self.model.peek(), values=values))

    def update_values(self, fn: Callable[[Values], Values]) -> None:
        """Applies an outside change, e.g. data fetched after the form was shown."""
        self.edit(fn(self.values))

    def blur(self, field_id: str) -> None:
        model = self.model.peek()
        tracking = model.error_tracking
        if field_id in tracking.show_field_error:
            return
        self.set_model(replace(
            model,
            error_tracking=replace(tracking, show_field_error=tracking.show_field_error | {field_id}),
        ))

    def should_show_error(self, field_id: str) -> bool:
        tracking = self.model().error_tracking
        if tracking.show_all_errors:
            return True
        return (
            self.validation_strategy is ValidationStrategy.ON_BLUR
            and field_id in tracking.show_field_error
        )

    def set_disabled(self, disabled: bool) -> None:
        self.set_model(replace(self.model.peek(), disabled=disabled))

    def reset(self, values: Optional[Values] = None) -> None:
        """Starts over with fresh error tracking, keeping the values unless new ones are given."""
        model = self.model.peek()
        self.set_model(Model(values=model.values if values is None else values, disabled=model.disabled))

    def submit(self, form: Form, on_submit: Callable[[Any], Any]) -> Result:
        """Fills ``form`` once with the current values.

        On success the output goes to ``on_submit`` and the model is left as
        is. On failure every error becomes visible and the first invalid
        field is focused.
        """
        model = self.model.peek()
        result = form.fill(model.values).result
        if result.is_ok():
            logger.debug("Form submitted")
            on_submit(result.value)
            return result

        first_error_id, other_error_ids = result.error
        logger.debug("Submit blocked by invalid fields", first_error=first_error_id, error_count=1 + len(other_error_ids))
        self.set_model(replace(model, error_tracking=replace(model.error_tracking, show_all_errors=True)))
        if self.focus is not None:
            self.focus(first_error_id)
        return result

    def request_upload(self, base_field: BaseField, file: bytes) -> asyncio.Task:
        """Marks the file field as loading and starts uploading ``file``.

        Nothing stops a second upload on the same field while the first one
        is running; whichever completes last decides the field's value.
        """
        if self.uploader is None:
            raise MissingCollaboratorError("uploader", "request_upload")
        # Raises RuntimeError without a running loop, before the field is touched
        asyncio.get_running_loop()

        self.edit(base_field.update_with_values(Loading(), self.values))
        return run_async(
            self.uploader.upload,
            args=(file,),
            on_success=lambda url: self.complete_upload(base_field, Ok(url)),
            on_error=lambda error: self.complete_upload(base_field, Err(error)),
        )

    def complete_upload(self, base_field: BaseField, outcome: Result) -> None:
        """Stores the upload outcome into the values current right now."""
        if outcome.is_ok():
            self.edit(base_field.update_with_values(Success(outcome.value), self.values))
            return

        error = outcome.error
        self.edit(base_field.update_with_values(Failure(error), self.values))
        if self.feedback is not None:
            self.feedback.show(FeedbackLevel.FAILURE, self.translators.t("form.file.upload_failed"))
        self.diagnostics.failure("CompletedUploadingFile", "Error uploading file", error)
