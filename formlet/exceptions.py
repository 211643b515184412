from typing import Optional

from formlet.log import get_logger

logger = get_logger(__name__)


class FormletError(Exception):
    """Base class for errors raised when the engine is misused.

    Field validation failures are never raised; they are carried as values
    in a filled form.
    """


class FieldConfigurationError(FormletError):
    """Raised when a field builder receives inconsistent options."""


class MissingCollaboratorError(FormletError):
    """Raised when an operation needs a collaborator that was not provided."""

    def __init__(self, collaborator: str, operation: str):
        self.collaborator = collaborator
        self.operation = operation
        super().__init__(f"{operation} requires the '{collaborator}' collaborator")


def global_error_handler(error: Exception, description: Optional[str] = None):
    logger.error(
        description or "Unhandled error",
        error_type=error.__class__.__name__,
        error=str(error),
        exc_info=error,
    )
