"""
Pytest configuration and shared fixtures for the barber API tests.

Every test gets its own app bound to a fresh in-memory SQLite database and a
temporary upload folder, so tests never share state.
"""

import json
import os
import tempfile

import pytest

# Must be set before main/config are imported
os.environ["TESTING"] = "True"
os.environ["FLASK_ENV"] = "testing"
os.environ.setdefault("UPLOAD_FOLDER", tempfile.mkdtemp(prefix="barber-uploads-"))

from barberapp.config import TestingConfig  # noqa: E402
from barberapp.extensions import db as database  # noqa: E402
from barberapp.models import Base  # noqa: E402
from barberapp.seeds import seed_admin  # noqa: E402
from barberapp.services import get_services  # noqa: E402
from main import create_app  # noqa: E402
from tests.helpers import auth_headers, post_json  # noqa: E402

ADMIN_EMAIL = "admin@barber.test"
ADMIN_PASSWORD = "admin-secret"


@pytest.fixture
def app(tmp_path):
    """Create a test app with its own database and upload folder."""

    class Config(TestingConfig):
        UPLOAD_FOLDER = str(tmp_path / "uploads")

    app = create_app(Config)

    yield app

    with app.app_context():
        database.session.remove()
        Base.metadata.drop_all(bind=database.engine)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def upload_dir(app):
    return app.config["UPLOAD_FOLDER"]


@pytest.fixture
def register_user(client):
    """Register through the API; returns ``{"user", "token", "headers"}``."""

    def _register(email, password="secret1", role="client", full_name=None):
        body = {"email": email, "password": password, "role": role}
        if full_name:
            body["fullName"] = full_name
        response = post_json(client, "/api/auth/register", body)
        assert response.status_code == 201, response.data
        data = json.loads(response.data)["data"]
        data["headers"] = auth_headers(data["token"])
        return data

    return _register


@pytest.fixture
def client_user(register_user):
    return register_user("client@example.com", full_name="Casey Client")


@pytest.fixture
def barber(register_user):
    return register_user("barber@example.com", role="barber", full_name="Bo Barber")


@pytest.fixture
def other_barber(register_user):
    return register_user("other@example.com", role="barber", full_name="Olly Other")


@pytest.fixture
def admin(app, client):
    with app.app_context():
        seed_admin(ADMIN_EMAIL, ADMIN_PASSWORD)

    response = post_json(
        client, "/api/auth/login", {"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD}
    )
    data = json.loads(response.data)["data"]
    data["headers"] = auth_headers(data["token"])
    return data


@pytest.fixture
def make_amenity(app):
    def _make(name, icon="star"):
        with app.app_context():
            return get_services().amenities.create(name, icon).to_dict()

    return _make


@pytest.fixture
def amenity(make_amenity):
    return make_amenity("Wi-Fi", "wifi")


@pytest.fixture
def make_barbershop(client):
    def _make(owner, **fields):
        body = {"name": "Sharp Cuts", "address": "1 Main Street"}
        body.update(fields)
        response = post_json(client, "/api/barbershops", body, headers=owner["headers"])
        assert response.status_code == 201, response.data
        return json.loads(response.data)["data"]

    return _make


@pytest.fixture
def barbershop(make_barbershop, barber):
    return make_barbershop(barber, about="Classic fades and hot towel shaves")
