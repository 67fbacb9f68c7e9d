from .amenity import AmenityQuery, BarbershopAmenitiesPayload, CreateAmenityPayload, UpdateAmenityPayload
from .auth import ChangePasswordPayload, LoginPayload, RegisterPayload, UpdateProfilePayload
from .barbershop import (
    BarbershopAmenityPayload,
    BarbershopQuery,
    CreateBarbershopPayload,
    OpeningHourPayload,
    RemoveImagePayload,
    UpdateBarbershopPayload,
)

__all__ = [
    "AmenityQuery",
    "BarbershopAmenitiesPayload",
    "BarbershopAmenityPayload",
    "BarbershopQuery",
    "ChangePasswordPayload",
    "CreateAmenityPayload",
    "CreateBarbershopPayload",
    "LoginPayload",
    "OpeningHourPayload",
    "RegisterPayload",
    "RemoveImagePayload",
    "UpdateAmenityPayload",
    "UpdateBarbershopPayload",
    "UpdateProfilePayload",
]
