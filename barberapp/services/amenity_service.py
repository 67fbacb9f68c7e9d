from typing import Dict, List, Optional, Sequence

from ..errors import Conflict, NotFound
from ..models import Amenity
from ..repositories import AmenityRepository


class AmenityService:
    def __init__(self, session, amenities: AmenityRepository):
        self.session = session
        self.amenities = amenities

    def find_all(self) -> List[Amenity]:
        return self.amenities.list_all()

    def find_by_id(self, amenity_id: str) -> Optional[Amenity]:
        return self.amenities.get(amenity_id)

    def find_by_ids(self, amenity_ids: Sequence[str]) -> List[Amenity]:
        return self.amenities.get_many(amenity_ids)

    def find_by_name(self, name: str) -> Optional[Amenity]:
        return self.amenities.find_by_name(name)

    def create(self, name: str, icon: str) -> Amenity:
        if self.find_by_name(name):
            raise Conflict("Amenity with this name already exists")

        amenity = self.amenities.add(Amenity(name=name, icon=icon))
        self.session.commit()
        return amenity

    def update(self, amenity_id: str, name: Optional[str] = None, icon: Optional[str] = None) -> Amenity:
        amenity = self.find_by_id(amenity_id)
        if not amenity:
            raise NotFound("Amenity not found")

        if name and name != amenity.name:
            existing = self.find_by_name(name)
            if existing and existing.id != amenity_id:
                raise Conflict("Amenity with this name already exists")

        if name is not None:
            amenity.name = name
        if icon is not None:
            amenity.icon = icon
        self.session.commit()
        return amenity

    def delete(self, amenity_id: str) -> None:
        amenity = self.find_by_id(amenity_id)
        if not amenity:
            raise NotFound("Amenity not found")

        if self.amenities.count_barbershops(amenity_id) > 0:
            raise Conflict("Cannot delete amenity that is associated with barbershops")

        self.amenities.delete(amenity)
        self.session.commit()

    def search_amenities(self, query: str) -> List[Amenity]:
        return self.amenities.search(query)

    def get_popular_amenities(self, limit: int = 10) -> List[dict]:
        """Amenities ranked by how many barbershops use them, ties by name."""
        return [
            {**amenity.to_dict(), "usageCount": count}
            for amenity, count in self.amenities.popular(limit)
        ]

    def get_barbershop_amenities(self, barbershop_ids: Sequence[str]) -> Dict[str, List[Amenity]]:
        # Every requested id gets an entry, even with no amenities
        grouped = self.amenities.by_barbershop(barbershop_ids)
        return {barbershop_id: grouped.get(barbershop_id, []) for barbershop_id in barbershop_ids}
