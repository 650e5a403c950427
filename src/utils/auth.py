"""
Authentication utility functions.
"""
import logging
from typing import Dict, Any, Optional

logger = logging.getLogger(__name__)


class NotAuthorized(Exception):
    """Raised when a user is not authorized to access a resource."""
    pass


class NotFound(Exception):
    """Raised when a requested resource is not found."""
    pass


def get_user_from_event(event: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """
    Extract user information from the event.

    Args:
        event: The Lambda event object containing the request context

    Returns:
        Dictionary containing user information if found, None otherwise
        The dictionary includes:
        - id: The user's unique identifier (sub)
        - email: The user's email address
        - auth_time: The time when the user was authenticated
    """
    request_context = event.get("requestContext") or {}
    authorizer = request_context.get("authorizer") or {}
    claims = (authorizer.get("jwt") or {}).get("claims") or {}

    user_sub = claims.get("sub")
    if not user_sub:
        logger.warning("No sub claim found in authorizer claims")
        return None

    return {
        "id": user_sub,
        "email": claims.get("email", "unknown"),
        "auth_time": claims.get("auth_time")
    }


def checked_user_owns_key(user_id: str, key: str) -> str:
    """Ensure an uploaded object key lives under the user's prefix."""
    if not key.startswith(f"{user_id}/"):
        raise NotAuthorized("Not authorized to access this file")
    return key
