import uuid
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Enum,
    ForeignKeyConstraint,
    Index,
    Numeric,
    String,
    Table,
    Text,
)
from sqlalchemy.orm import Mapped, declarative_base, mapped_column, relationship

Base = declarative_base()
metadata = Base.metadata

USER_ROLES = ("client", "barber", "admin")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def new_uuid() -> str:
    return str(uuid.uuid4())


def isoformat(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


class User(Base):
    __tablename__ = "users"
    __table_args__ = (Index("uq_users_email", "email", unique=True),)

    id = mapped_column(String(36), primary_key=True, default=new_uuid)
    email = mapped_column(String(255), nullable=False)
    password = mapped_column(String(255), nullable=False)
    role = mapped_column(
        Enum(*USER_ROLES, name="user_role", native_enum=False, validate_strings=True),
        nullable=False,
        default="client",
    )
    full_name = mapped_column(String(255))
    avatar_url = mapped_column(String(500))
    is_active = mapped_column(Boolean, nullable=False, default=True)
    created_at = mapped_column(DateTime(timezone=True), nullable=False, default=utc_now)
    updated_at = mapped_column(
        DateTime(timezone=True), nullable=False, default=utc_now, onupdate=utc_now
    )

    barbershops: Mapped[List["Barbershop"]] = relationship(
        "Barbershop", uselist=True, back_populates="owner"
    )

    def to_dict(self) -> dict:
        """Public profile. The password hash never leaves the model."""
        return {
            "id": self.id,
            "email": self.email,
            "role": self.role,
            "fullName": self.full_name,
            "avatarUrl": self.avatar_url,
            "isActive": self.is_active,
            "createdAt": isoformat(self.created_at),
            "updatedAt": isoformat(self.updated_at),
        }

    def to_owner_summary(self) -> dict:
        return {"id": self.id, "fullName": self.full_name, "email": self.email}


t_barbershop_amenities = Table(
    "barbershop_amenities",
    metadata,
    Column("barbershop_id", String(36), primary_key=True, nullable=False),
    Column("amenity_id", String(36), primary_key=True, nullable=False),
    ForeignKeyConstraint(
        ["barbershop_id"],
        ["barbershops.id"],
        ondelete="CASCADE",
        name="fk_barbershop_amenities_barbershop",
    ),
    ForeignKeyConstraint(
        ["amenity_id"],
        ["amenities.id"],
        ondelete="CASCADE",
        name="fk_barbershop_amenities_amenity",
    ),
    Index("idx_barbershop_amenities_amenity", "amenity_id"),
)


class Amenity(Base):
    __tablename__ = "amenities"

    id = mapped_column(String(36), primary_key=True, default=new_uuid)
    icon = mapped_column(String(100), nullable=False)
    name = mapped_column(String(255), nullable=False)

    barbershops: Mapped[List["Barbershop"]] = relationship(
        "Barbershop", secondary=t_barbershop_amenities, back_populates="amenities"
    )

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name, "icon": self.icon}


class Barbershop(Base):
    __tablename__ = "barbershops"
    __table_args__ = (
        ForeignKeyConstraint(
            ["created_by"], ["users.id"], ondelete="RESTRICT", name="fk_barbershops_owner"
        ),
        Index("idx_barbershops_created_by", "created_by"),
        Index("idx_barbershops_name", "name"),
    )

    id = mapped_column(String(36), primary_key=True, default=new_uuid)
    name = mapped_column(String(255), nullable=False)
    address = mapped_column(Text, nullable=False)
    phone = mapped_column(String(20))
    logo_url = mapped_column(String(500))
    cover_image_url = mapped_column(String(500))
    rating = mapped_column(Numeric(2, 1), nullable=False, default=0.0)
    about = mapped_column(Text)
    images = mapped_column(JSON, nullable=False, default=list)
    created_at = mapped_column(DateTime(timezone=True), nullable=False, default=utc_now)
    updated_at = mapped_column(
        DateTime(timezone=True), nullable=False, default=utc_now, onupdate=utc_now
    )
    created_by = mapped_column(String(36), nullable=False)

    owner: Mapped["User"] = relationship("User", back_populates="barbershops")
    amenities: Mapped[List["Amenity"]] = relationship(
        "Amenity", secondary=t_barbershop_amenities, back_populates="barbershops"
    )
    # Opening hours live and die with their barbershop.
    opening_hours: Mapped[List["OpeningHour"]] = relationship(
        "OpeningHour",
        uselist=True,
        back_populates="barbershop",
        cascade="all, delete-orphan",
    )

    def to_dict(self, include_owner: bool = True) -> dict:
        data = {
            "id": self.id,
            "name": self.name,
            "address": self.address,
            "phone": self.phone,
            "logoUrl": self.logo_url,
            "coverImageUrl": self.cover_image_url,
            "rating": float(self.rating) if self.rating is not None else 0.0,
            "about": self.about,
            "images": list(self.images or []),
            "createdAt": isoformat(self.created_at),
            "updatedAt": isoformat(self.updated_at),
            "createdBy": self.created_by,
            "amenities": [amenity.to_dict() for amenity in self.amenities],
            "openingHours": [hour.to_dict() for hour in self.opening_hours],
        }
        if include_owner:
            data["owner"] = self.owner.to_owner_summary() if self.owner else None
        return data


class OpeningHour(Base):
    __tablename__ = "opening_hours"
    __table_args__ = (
        ForeignKeyConstraint(
            ["barbershop_id"],
            ["barbershops.id"],
            ondelete="CASCADE",
            name="fk_opening_hours_barbershop",
        ),
        Index("idx_opening_hours_barbershop", "barbershop_id"),
    )

    id = mapped_column(String(36), primary_key=True, default=new_uuid)
    day = mapped_column(String(20), nullable=False)
    open_time = mapped_column(String(10))
    close_time = mapped_column(String(10))
    is_closed = mapped_column(Boolean, nullable=False, default=False)
    barbershop_id = mapped_column(String(36), nullable=False)

    barbershop: Mapped["Barbershop"] = relationship(
        "Barbershop", back_populates="opening_hours"
    )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "day": self.day,
            "openTime": self.open_time,
            "closeTime": self.close_time,
            "isClosed": self.is_closed,
        }
