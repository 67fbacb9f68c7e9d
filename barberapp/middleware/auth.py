from functools import wraps

from flask import g, request

from ..errors import Forbidden, Unauthorized
from ..services import get_services


def bearer_token():
    """Token from the Authorization header; the ``Bearer`` prefix is optional."""
    header = request.headers.get("Authorization")
    if not header:
        return None
    if header.startswith("Bearer "):
        return header[7:].strip()
    return header.strip()


def authenticate(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if not request.headers.get("Authorization"):
            raise Unauthorized("Access denied. No token provided.")
        token = bearer_token()
        if not token:
            raise Unauthorized("Access denied. Invalid token format.")

        g.current_user = get_services().auth.validate_token(token)
        return view(*args, **kwargs)

    return wrapper


def authorize(*roles):
    """Require an authenticated user holding one of ``roles``."""

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            user = g.get("current_user")
            if user is None:
                raise Unauthorized("Unauthorized. User not authenticated.")
            if user.role not in roles:
                raise Forbidden(
                    f"Forbidden. Required roles: {', '.join(roles)}. User role: {user.role}"
                )
            return view(*args, **kwargs)

        return wrapper

    return decorator


def optional_auth(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        g.current_user = None
        token = bearer_token()
        if token:
            try:
                g.current_user = get_services().auth.validate_token(token)
            except Unauthorized:
                g.current_user = None
        return view(*args, **kwargs)

    return wrapper
