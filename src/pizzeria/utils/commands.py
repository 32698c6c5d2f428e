"""Synchronous command processing with db logging and error translation."""

from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.utils.globals import current_domain

from pizzeria.errors import InternalError, PizzeriaError
from pizzeria.telemetry.logs import log_command
from pizzeria.utils.logging import get_logger

logger = get_logger(__name__)


def process(command, failure_message: str | None = None):
    """Run ``command`` in its own unit of work and return the handler's result.

    Domain errors pass through untouched. Anything else is a persistence
    failure: with ``failure_message`` it is reported as an InternalError,
    otherwise it propagates to the application's catch-all handler.
    """
    log_command(command)
    try:
        return current_domain.process(command, asynchronous=False)
    except (PizzeriaError, ValidationError, ObjectNotFoundError):
        raise
    except Exception as exc:
        if failure_message is None:
            raise
        logger.error("command_failed", command=type(command).__name__, error=str(exc))
        raise InternalError(failure_message) from exc
