"""Structured log shipping to a Loki-compatible push endpoint.

These records are independent of the local structlog output: they are
queued on the telemetry dispatcher and never block the caller.
"""

import json
import time

from pizzeria.config import get_settings
from pizzeria.telemetry import get_dispatcher

MASK = "****"
_SENSITIVE_KEYS = {"password", "password_hash"}


def sanitize(value):
    """Return a copy of ``value`` with password fields masked at any depth."""
    if isinstance(value, dict):
        return {key: MASK if key in _SENSITIVE_KEYS and val else sanitize(val) for key, val in value.items()}
    if isinstance(value, list):
        return [sanitize(item) for item in value]
    return value


def loki_payload(level: str, type_: str, message: dict, stream: dict | None = None) -> dict:
    labels = {"component": get_settings().logging_source, "level": level, "type": type_, **(stream or {})}
    return {"streams": [{"stream": labels, "values": [[str(time.time_ns()), json.dumps(message, default=str)]]}]}


def ship_log(level: str, type_: str, message: dict, stream: dict | None = None) -> bool:
    settings = get_settings()
    if not settings.telemetry_enabled or not settings.logging_url:
        return False
    headers = {
        "Content-Type": "application/json",
        "Authorization": f"Bearer {settings.logging_user_id}:{settings.logging_api_key}",
    }
    return get_dispatcher().submit(settings.logging_url, loki_payload(level, type_, message, stream), headers)


def log_http(method: str, path: str, status: int, has_auth: bool, latency_ms: float, request_body=None) -> bool:
    return ship_log(
        "info" if status < 500 else "error",
        "http",
        {
            "status": status,
            "hasAuth": has_auth,
            "requestBody": sanitize(request_body),
            "responseTime": f"{round(latency_ms)}ms",
        },
        stream={"method": method, "path": path},
    )


def log_command(command) -> bool:
    """Record a persistence command with its payload, passwords masked."""
    payload = {key: val for key, val in command.to_dict().items() if not key.startswith("_")}
    return ship_log("info", "db", {"command": type(command).__name__, "payload": sanitize(payload)})


def log_factory_request(url: str, payload: dict, response: dict, success: bool) -> bool:
    return ship_log(
        "info" if success else "error",
        "factory",
        {"request": sanitize(payload), "response": response},
        stream={"endpoint": url},
    )


def log_unhandled_error(exc: BaseException, stack: str = "", **context) -> bool:
    return ship_log("error", "exception", {"message": str(exc), "stack": stack, **context})
