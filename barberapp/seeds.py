from flask import current_app
from sqlalchemy import func, select

from .extensions import db
from .models import Amenity, User
from .services import get_services

DEFAULT_AMENITIES = [
    {"icon": "wifi", "name": "Wi-Fi"},
    {"icon": "wheelchair-accessibility", "name": "Accessible"},
    {"icon": "car-outline", "name": "Parking"},
    {"icon": "human-handsup", "name": "Gender Neutral Toilets"},
    {"icon": "credit-card-outline", "name": "Credit Card"},
    {"icon": "air-conditioner", "name": "Air Conditioning"},
]


def seed_amenities() -> int:
    """Insert the default amenities into an empty table. Returns rows added."""
    existing = db.session.scalar(select(func.count()).select_from(Amenity))
    if existing:
        current_app.logger.info("Amenities already seeded")
        return 0

    db.session.add_all(Amenity(**data) for data in DEFAULT_AMENITIES)
    db.session.commit()
    current_app.logger.info(f"Seeded {len(DEFAULT_AMENITIES)} amenities")
    return len(DEFAULT_AMENITIES)


def seed_admin(email: str, password: str, full_name: str = "Administrator"):
    """Create an admin account unless one already uses ``email``."""
    email = email.strip().lower()
    user = db.session.scalar(select(User).where(User.email == email))
    if user:
        current_app.logger.info(f"Admin {email} already exists")
        return user

    user = User(
        email=email,
        password=get_services().auth.hash_password(password),
        full_name=full_name,
        role="admin",
    )
    db.session.add(user)
    db.session.commit()
    current_app.logger.info(f"Created admin {email}")
    return user
