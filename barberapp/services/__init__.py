from flask import current_app

from ..extensions import db
from ..repositories import AmenityRepository, BarbershopRepository, UserRepository
from .amenity_service import AmenityService
from .auth_service import AuthService
from .barbershop_service import BarbershopService
from .file_storage_service import FileStorageService

EXTENSION_KEY = "barberapp.services"


class Services:
    """Per-application service container, built once in ``create_app``."""

    def __init__(self, auth, barbershops, amenities, storage):
        self.auth = auth
        self.barbershops = barbershops
        self.amenities = amenities
        self.storage = storage


def build_services(app, session=None) -> Services:
    session = session or db.session
    users = UserRepository(session)
    amenity_repo = AmenityRepository(session)
    barbershop_repo = BarbershopRepository(session)

    config = app.config
    return Services(
        auth=AuthService(
            session,
            users,
            secret=config["JWT_SECRET"],
            algorithm=config.get("JWT_ALGORITHM", "HS256"),
            expires_in_days=config.get("JWT_EXPIRES_IN_DAYS", 7),
            bcrypt_rounds=config.get("BCRYPT_ROUNDS", 12),
        ),
        barbershops=BarbershopService(session, barbershop_repo, amenity_repo, users),
        amenities=AmenityService(session, amenity_repo),
        storage=FileStorageService(
            config["UPLOAD_FOLDER"],
            url_prefix=config.get("UPLOAD_URL_PREFIX", "/uploads"),
            logger=app.logger,
        ),
    )


def init_services(app) -> Services:
    services = build_services(app)
    services.storage.ensure_directories()
    app.extensions[EXTENSION_KEY] = services
    return services


def get_services() -> Services:
    return current_app.extensions[EXTENSION_KEY]


__all__ = [
    "AmenityService",
    "AuthService",
    "BarbershopService",
    "FileStorageService",
    "Services",
    "build_services",
    "get_services",
    "init_services",
]
