"""
Owner-or-admin rules shared by every barbershop mutation.

These helpers only look at ids and roles, so they can be exercised without a
request or a database.
"""

from typing import Iterable, Optional

from ..errors import Forbidden

ADMIN_ROLE = "admin"
SHOP_OWNER_ROLES = ("barber", "admin")


def is_admin(caller) -> bool:
    return caller is not None and caller.role == ADMIN_ROLE


def is_owner(owner_id: Optional[str], caller) -> bool:
    return caller is not None and owner_id is not None and caller.id == owner_id


def is_owner_or_admin(owner_id: Optional[str], caller) -> bool:
    return is_owner(owner_id, caller) or is_admin(caller)


def has_role(caller, roles: Iterable[str]) -> bool:
    return caller is not None and caller.role in tuple(roles)


def ensure_owner_or_admin(owner_id: Optional[str], caller, action: str = "modify this barbershop"):
    if not is_owner_or_admin(owner_id, caller):
        raise Forbidden(f"Unauthorized to {action}")


def ensure_role(caller, roles: Iterable[str], message: Optional[str] = None):
    roles = tuple(roles)
    if not has_role(caller, roles):
        raise Forbidden(message or f"Required roles: {', '.join(roles)}")
