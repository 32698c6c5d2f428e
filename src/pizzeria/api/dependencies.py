"""FastAPI dependencies shared by the routers."""

from fastapi import Header, Request

from pizzeria.auth.guard import Caller, resolve_caller


async def get_caller(request: Request, authorization: str | None = Header(default=None)) -> Caller:
    """Resolve the bearer token on the request, or fail with 401."""
    caller = resolve_caller(authorization)
    request.state.caller_id = caller.id
    return caller
