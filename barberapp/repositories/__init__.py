from .amenity_repository import AmenityRepository
from .barbershop_repository import BarbershopRepository
from .user_repository import UserRepository

__all__ = ["AmenityRepository", "BarbershopRepository", "UserRepository"]
