from typing import List, Optional, Sequence, Set

from ..errors import NotFound
from ..models import Barbershop, OpeningHour
from ..repositories import AmenityRepository, BarbershopRepository, UserRepository
from .authorization import SHOP_OWNER_ROLES, ensure_owner_or_admin, ensure_role

# Scalar columns that follow "provided value wins, else keep what is stored"
SCALAR_FIELDS = ("name", "address", "phone", "logo_url", "cover_image_url", "about")


class BarbershopService:
    def __init__(
        self,
        session,
        barbershops: BarbershopRepository,
        amenities: AmenityRepository,
        users: UserRepository,
    ):
        self.session = session
        self.barbershops = barbershops
        self.amenities = amenities
        self.users = users

    def find_all(self, sort_by: str = "name", sort_order: str = "ASC") -> List[Barbershop]:
        return self.barbershops.list_all(sort_by=sort_by, sort_order=sort_order)

    def find_by_id(self, barbershop_id: str) -> Optional[Barbershop]:
        return self.barbershops.get(barbershop_id)

    def find_by_user_id(self, user_id: str) -> List[Barbershop]:
        return self.barbershops.list_by_owner(user_id)

    def search_barbershops(self, query: str) -> List[Barbershop]:
        return self.barbershops.search(query)

    def _load_for_change(self, barbershop_id: str, caller_id: str, action: str) -> Barbershop:
        """Lock the barbershop row and check the caller may touch it."""
        barbershop = self.barbershops.get(barbershop_id, for_update=True)
        if not barbershop:
            raise NotFound("Barbershop not found")

        caller = self.users.get(caller_id)
        ensure_owner_or_admin(barbershop.created_by, caller, action)
        return barbershop

    def referenced_image_urls(self) -> Set[str]:
        return self.barbershops.referenced_image_urls()

    def ensure_can_modify(self, barbershop_id: str, caller_id: str) -> Barbershop:
        barbershop = self.barbershops.get(barbershop_id)
        if not barbershop:
            raise NotFound("Barbershop not found")
        ensure_owner_or_admin(barbershop.created_by, self.users.get(caller_id))
        return barbershop

    def create(self, data: dict, owner_id: str) -> Barbershop:
        owner = self.users.get(owner_id)
        if not owner:
            raise NotFound("User not found")
        ensure_role(owner, SHOP_OWNER_ROLES, "Only barbers can create barbershops")

        # Resolved before the owner link below, which would autoflush a pending row
        amenities = self.amenities.get_many(data["amenity_ids"]) if data.get("amenity_ids") else []

        barbershop = Barbershop(
            name=data["name"],
            address=data["address"],
            phone=data.get("phone"),
            logo_url=data.get("logo_url"),
            cover_image_url=data.get("cover_image_url"),
            about=data.get("about"),
            images=list(data.get("images") or []),
            created_by=owner.id,
            owner=owner,
            amenities=amenities,
        )

        for hour in data.get("opening_hours") or []:
            barbershop.opening_hours.append(
                OpeningHour(
                    day=hour["day"],
                    open_time=hour.get("open_time"),
                    close_time=hour.get("close_time"),
                    is_closed=hour.get("is_closed", False),
                )
            )

        self.barbershops.add(barbershop)
        self.session.commit()
        return self.barbershops.get(barbershop.id)

    def update(self, barbershop_id: str, updates: dict, caller_id: str) -> Barbershop:
        barbershop = self._load_for_change(barbershop_id, caller_id, "update this barbershop")

        for field in SCALAR_FIELDS:
            value = updates.get(field)
            if value is not None:
                setattr(barbershop, field, value)

        if updates.get("images") is not None:
            barbershop.images = list(updates["images"])

        # An explicit empty list clears the associations
        if updates.get("amenity_ids") is not None:
            self.barbershops.replace_amenities(
                barbershop, self.amenities.get_many(updates["amenity_ids"])
            )

        if updates.get("opening_hours") is not None:
            self.barbershops.replace_opening_hours(barbershop, updates["opening_hours"])

        self.session.commit()
        return self.barbershops.get(barbershop_id)

    def delete(self, barbershop_id: str, caller_id: str) -> None:
        barbershop = self._load_for_change(barbershop_id, caller_id, "delete this barbershop")
        self.barbershops.delete(barbershop)
        self.session.commit()

    def add_amenities(self, barbershop_id: str, amenity_ids: Sequence[str], caller_id: str) -> Barbershop:
        barbershop = self._load_for_change(barbershop_id, caller_id, "modify this barbershop")

        attached = {amenity.id for amenity in barbershop.amenities}
        new_amenities = [a for a in self.amenities.get_many(amenity_ids) if a.id not in attached]
        self.barbershops.replace_amenities(barbershop, list(barbershop.amenities) + new_amenities)

        self.session.commit()
        return self.barbershops.get(barbershop_id)

    def remove_amenity(self, barbershop_id: str, amenity_id: str, caller_id: str) -> Barbershop:
        barbershop = self._load_for_change(barbershop_id, caller_id, "modify this barbershop")

        self.barbershops.replace_amenities(
            barbershop, [a for a in barbershop.amenities if a.id != amenity_id]
        )
        self.session.commit()
        return self.barbershops.get(barbershop_id)

    def add_images(self, barbershop_id: str, urls: Sequence[str], caller_id: str) -> Barbershop:
        barbershop = self._load_for_change(barbershop_id, caller_id, "modify this barbershop")

        # Reassign so the JSON column is flagged dirty
        barbershop.images = list(barbershop.images or []) + list(urls)
        self.session.commit()
        return self.barbershops.get(barbershop_id)

    def remove_image(self, barbershop_id: str, url: str, caller_id: str) -> Barbershop:
        barbershop = self._load_for_change(barbershop_id, caller_id, "modify this barbershop")

        images = list(barbershop.images or [])
        if url not in images:
            raise NotFound("Image not found on this barbershop")
        barbershop.images = [image for image in images if image != url]
        self.session.commit()
        return self.barbershops.get(barbershop_id)
