"""
Decorators shared by the import Lambda handlers.

Handlers return plain dictionaries; these wrappers add the authenticated user,
turn exceptions into HTTP responses and log one line per request.
"""

import logging
import traceback
from datetime import datetime, timezone
from functools import wraps
from typing import Any, Callable, Dict, List, Tuple, Type

from pydantic import ValidationError

from utils.auth import NotAuthorized, NotFound, get_user_from_event
from utils.lambda_utils import create_response

logger = logging.getLogger(__name__)

# Checked in order; the first matching exception type decides the status.
ERROR_STATUS_CODES: List[Tuple[Tuple[Type[Exception], ...], int]] = [
    ((ValidationError, ValueError, KeyError), 400),
    ((NotAuthorized,), 403),
    ((NotFound,), 404),
]


def _error_message(error: Exception) -> str:
    # KeyError wraps its message in quotes when converted with str()
    if isinstance(error, KeyError) and error.args:
        return str(error.args[0])
    return str(error)


def _request_summary(event: Dict[str, Any]) -> str:
    request_context = event.get("requestContext") or {}
    request_id = request_context.get("requestId", "unknown")
    route = event.get("routeKey", "unknown")
    return f"[{request_id}] {route}"


def standard_error_handling(func: Callable) -> Callable:
    """
    Wrap a handler's result in a 200 response and map exceptions to error responses.

    Mapping:
    - ValidationError, ValueError, KeyError -> 400
    - NotAuthorized -> 403
    - NotFound -> 404
    - anything else -> 500, with the details kept in the log only

    A handler may also return a full response (a dict with statusCode) to pick
    its own status, e.g. 400 for an import that found nothing.
    """
    @wraps(func)
    def wrapper(*args, **kwargs) -> Dict[str, Any]:
        try:
            result = func(*args, **kwargs)
        except Exception as e:
            for error_types, status_code in ERROR_STATUS_CODES:
                if isinstance(e, error_types):
                    logger.warning(f"{func.__name__} rejected request with {status_code}: {_error_message(e)}")
                    return create_response(status_code, {"message": _error_message(e)})

            logger.error(f"Unexpected error in {func.__name__}: {str(e)}")
            logger.error(f"Stacktrace: {traceback.format_exc()}")
            return create_response(500, {"message": "Error processing import request"})

        if isinstance(result, dict) and "statusCode" in result:
            return result
        return create_response(200, result)

    return wrapper


def log_request_response(func: Callable) -> Callable:
    """Log the route, body size, response status and duration of each request."""
    @wraps(func)
    def wrapper(event: Dict[str, Any], *args, **kwargs) -> Dict[str, Any]:
        summary = _request_summary(event)
        body_size = len(event.get("body") or "")
        started = datetime.now(timezone.utc)
        logger.info(f"{summary} - request received ({body_size} body chars)")

        try:
            result = func(event, *args, **kwargs)
        except Exception as e:
            elapsed_ms = (datetime.now(timezone.utc) - started).total_seconds() * 1000
            logger.error(f"{summary} - failed after {elapsed_ms:.1f}ms: {str(e)}")
            raise

        elapsed_ms = (datetime.now(timezone.utc) - started).total_seconds() * 1000
        status_code = result.get("statusCode", "unknown") if isinstance(result, dict) else "unknown"
        logger.info(f"{summary} - {status_code} in {elapsed_ms:.1f}ms")
        return result

    return wrapper


def require_authenticated_user(func: Callable) -> Callable:
    """Resolve the caller from the JWT claims and pass their id in place of the Lambda context."""
    @wraps(func)
    def wrapper(event: Dict[str, Any], context: Any, *args, **kwargs) -> Dict[str, Any]:
        user = get_user_from_event(event)
        if not user:
            logger.warning(f"{_request_summary(event)} - no authenticated user")
            return create_response(401, {"message": "Unauthorized"})
        return func(event, user["id"], *args, **kwargs)

    return wrapper


def api_handler(
    require_auth: bool = True,
    log_requests: bool = True,
    handle_errors: bool = True
):
    """
    Combine the decorators above; error handling is innermost, logging outermost.

    Example:
        @api_handler()
        def handler(event, user_id):
            return {"count": 0}
    """
    def decorator(func: Callable) -> Callable:
        decorated = func
        if handle_errors:
            decorated = standard_error_handling(decorated)
        if require_auth:
            decorated = require_authenticated_user(decorated)
        if log_requests:
            decorated = log_request_response(decorated)
        return decorated

    return decorator
