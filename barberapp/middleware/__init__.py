from .auth import authenticate, authorize, optional_auth
from .validation import validate_body, validate_query, validate_uuid

__all__ = [
    "authenticate",
    "authorize",
    "optional_auth",
    "validate_body",
    "validate_query",
    "validate_uuid",
]
