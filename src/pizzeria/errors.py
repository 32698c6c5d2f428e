"""Error taxonomy for the pizzeria service.

Each error carries the HTTP status it maps to. Domain code raises these
directly; the API layer turns them into ``{"message": ...}`` responses.
"""


class PizzeriaError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code = 500

    def __init__(self, message: str, **details) -> None:
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict:
        return {"message": self.message, **self.details}


class InvalidInput(PizzeriaError):
    """Malformed or missing request fields."""

    status_code = 400


class Unauthenticated(PizzeriaError):
    """Missing, invalid or revoked session token."""

    status_code = 401

    def __init__(self, message: str = "unauthorized", **details) -> None:
        super().__init__(message, **details)


class Forbidden(PizzeriaError):
    """Authenticated, but the caller's roles do not allow the action."""

    status_code = 403


class NotFound(PizzeriaError):
    """A referenced entity does not exist."""

    status_code = 404


class UpstreamFailure(PizzeriaError):
    """The pizza factory rejected the order or could not be reached."""

    status_code = 500

    def __init__(self, message: str, report_url: str | None = None) -> None:
        super().__init__(message, reportPizzaCreationErrorToPizzaFactoryUrl=report_url)
        self.report_url = report_url


class InternalError(PizzeriaError):
    """Persistence or other unexpected failure."""

    status_code = 500
