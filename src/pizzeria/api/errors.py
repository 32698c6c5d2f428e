"""Exception handlers that turn errors into ``{"message": ...}`` responses."""

import traceback

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from protean.exceptions import ObjectNotFoundError, ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from pizzeria.config import get_settings
from pizzeria.errors import PizzeriaError
from pizzeria.telemetry.logs import log_unhandled_error
from pizzeria.utils.logging import get_logger

logger = get_logger(__name__)


def _validation_message(messages) -> str:
    if isinstance(messages, dict):
        parts = []
        for field, errors in messages.items():
            errors = errors if isinstance(errors, list) else [errors]
            parts.append(f"{field}: {', '.join(str(e) for e in errors)}")
        return "; ".join(parts)
    return str(messages)


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(PizzeriaError)
    async def pizzeria_error_handler(request: Request, exc: PizzeriaError):
        if exc.status_code >= 500:
            logger.error("request_failed", path=request.url.path, error=exc.message)
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(ValidationError)
    async def domain_validation_handler(request: Request, exc: ValidationError):
        return JSONResponse(status_code=400, content={"message": _validation_message(exc.messages)})

    @app.exception_handler(ObjectNotFoundError)
    async def not_found_handler(request: Request, exc: ObjectNotFoundError):
        return JSONResponse(status_code=404, content={"message": "not found"})

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        fields = sorted({".".join(str(p) for p in error["loc"][1:]) or "body" for error in exc.errors()})
        return JSONResponse(status_code=400, content={"message": f"invalid request: {', '.join(fields)}"})

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404:
            return JSONResponse(status_code=404, content={"message": "unknown endpoint"})
        return JSONResponse(status_code=exc.status_code, content={"message": str(exc.detail)})

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        caller_id = getattr(request.state, "caller_id", None)
        stack = "".join(traceback.format_exception(exc))
        logger.error(
            "unhandled_exception",
            path=request.url.path,
            method=request.method,
            caller_id=caller_id,
            exc_info=exc,
        )
        log_unhandled_error(exc, stack=stack, path=request.url.path, method=request.method, callerId=caller_id)

        content = {"message": str(exc) or type(exc).__name__}
        settings = get_settings()
        if settings.expose_stack_traces and not settings.is_production:
            content["stack"] = stack
        return JSONResponse(status_code=500, content=content)
