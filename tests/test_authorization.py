from types import SimpleNamespace

import pytest

from barberapp.errors import Forbidden
from barberapp.services.authorization import (
    ensure_owner_or_admin,
    ensure_role,
    has_role,
    is_owner_or_admin,
)

OWNER_ID = "5b7d2c1e-0000-4000-8000-000000000001"


def user(role, id="5b7d2c1e-0000-4000-8000-0000000000ff"):
    return SimpleNamespace(id=id, role=role)


@pytest.mark.authz
class TestOwnerOrAdmin:
    """Test suite for the shared ownership rule."""

    def test_owner_passes(self):
        assert is_owner_or_admin(OWNER_ID, user("barber", OWNER_ID))

    def test_admin_passes(self):
        assert is_owner_or_admin(OWNER_ID, user("admin"))

    def test_other_barber_fails(self):
        assert not is_owner_or_admin(OWNER_ID, user("barber"))

    def test_missing_caller_fails(self):
        assert not is_owner_or_admin(OWNER_ID, None)

    def test_ensure_raises_with_action(self):
        with pytest.raises(Forbidden) as excinfo:
            ensure_owner_or_admin(OWNER_ID, user("client"), "delete this barbershop")
        assert excinfo.value.message == "Unauthorized to delete this barbershop"
        assert excinfo.value.status_code == 403


@pytest.mark.authz
class TestRoles:
    """Test suite for role checks."""

    def test_has_role(self):
        assert has_role(user("barber"), ("barber", "admin"))
        assert not has_role(user("client"), ("barber", "admin"))
        assert not has_role(None, ("barber",))

    def test_ensure_role_message(self):
        with pytest.raises(Forbidden) as excinfo:
            ensure_role(user("client"), ("barber", "admin"), "Only barbers can create barbershops")
        assert excinfo.value.message == "Only barbers can create barbershops"

    def test_ensure_role_default_message(self):
        with pytest.raises(Forbidden) as excinfo:
            ensure_role(user("client"), ["admin"])
        assert excinfo.value.message == "Required roles: admin"
