"""
Endpoint helper utilities for the action-style API.

Action endpoints always answer HTTP 200 with the ``{success, data?, error?}``
envelope. Domain errors carry their own user-facing message; anything else is
logged and reported with the endpoint's generic failure message.
"""

from functools import wraps
from fastapi import Request
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from app.exceptions import (
    ConcurrentModificationError, OwnershipError, ResourceNotFoundError,
    SessionStateError, UploadValidationError
)
from app.middleware.auth_middleware import identity_from_request
from app.models.schemas import ActionResponse
from app.utils.logger import get_logger

logger = get_logger(__name__)

ACTION_PATH_PREFIX = "/api/actions/"
UNAUTHORIZED = "Unauthorized"
INVALID_REQUEST = "Invalid request data"

# Errors whose message is safe and meaningful for the caller
USER_FACING_ERRORS = (
    ResourceNotFoundError,
    OwnershipError,
    SessionStateError,
    UploadValidationError,
    ConcurrentModificationError
)


def action_endpoint(failure_message: str):
    """
    Decorator factory wrapping an async route handler in the action envelope.

    The handler must take the caller as an ``identity`` keyword argument; a
    missing identity short-circuits with ``Unauthorized`` before the handler
    runs. The handler's return value becomes ``data``.
    """
    def decorator(func):
        @wraps(func)
        async def wrapper(*args, **kwargs):
            if kwargs.get("identity") is None:
                return ActionResponse(success=False, error=UNAUTHORIZED)

            try:
                data = await func(*args, **kwargs)
            except USER_FACING_ERRORS as e:
                logger.info(f"{func.__name__} rejected: {e.message}")
                return ActionResponse(success=False, error=e.message)
            except Exception as e:
                logger.error(f"Error in {func.__name__}: {e}")
                return ActionResponse(success=False, error=failure_message)

            return ActionResponse(success=True, data=data)
        return wrapper
    return decorator


async def action_validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    Keep the action envelope when FastAPI rejects a body or query parameter.

    Validation runs before the route body, so the caller is checked here:
    anonymous callers get ``Unauthorized`` and never see field errors. REST
    routes keep FastAPI's default 422 response.
    """
    if not request.url.path.startswith(ACTION_PATH_PREFIX):
        return await request_validation_exception_handler(request, exc)

    if identity_from_request(request) is None:
        error = UNAUTHORIZED
    else:
        logger.info(f"Rejected {request.method} {request.url.path}: {exc.errors()}")
        error = INVALID_REQUEST
    return JSONResponse(status_code=200, content=ActionResponse(success=False, error=error).model_dump())
