from typing import Iterable, List, Optional, Set

from sqlalchemy import or_, select
from sqlalchemy.orm import joinedload, selectinload

from ..models import Amenity, Barbershop, OpeningHour, User
from .utils import like_pattern

SORT_COLUMNS = {
    "name": Barbershop.name,
    "rating": Barbershop.rating,
    "createdAt": Barbershop.created_at,
}


def _with_relations(query, include_owner: bool = True):
    """Eager-load amenities and opening hours, plus the owner summary columns."""
    options = [
        selectinload(Barbershop.amenities),
        selectinload(Barbershop.opening_hours),
    ]
    if include_owner:
        options.append(
            joinedload(Barbershop.owner).load_only(User.id, User.full_name, User.email)
        )
    return query.options(*options)


class BarbershopRepository:
    def __init__(self, session):
        self.session = session

    def list_all(self, sort_by: str = "name", sort_order: str = "ASC") -> List[Barbershop]:
        column = SORT_COLUMNS.get(sort_by, Barbershop.name)
        ordering = column.desc() if sort_order.upper() == "DESC" else column.asc()
        query = _with_relations(select(Barbershop)).order_by(ordering, Barbershop.id)
        return list(self.session.scalars(query).unique())

    def get(self, barbershop_id: str, for_update: bool = False) -> Optional[Barbershop]:
        query = _with_relations(select(Barbershop)).where(Barbershop.id == barbershop_id)
        if for_update:
            # Serializes concurrent writers on backends with row locks
            query = query.with_for_update(of=Barbershop)
        return self.session.scalars(query).unique().first()

    def list_by_owner(self, user_id: str) -> List[Barbershop]:
        query = (
            _with_relations(select(Barbershop), include_owner=False)
            .where(Barbershop.created_by == user_id)
            .order_by(Barbershop.name.asc())
        )
        return list(self.session.scalars(query))

    def search(self, text: str) -> List[Barbershop]:
        pattern = like_pattern(text)
        query = (
            _with_relations(select(Barbershop))
            .where(
                or_(
                    Barbershop.name.ilike(pattern, escape="\\"),
                    Barbershop.address.ilike(pattern, escape="\\"),
                    Barbershop.about.ilike(pattern, escape="\\"),
                )
            )
            .order_by(Barbershop.name.asc())
        )
        return list(self.session.scalars(query).unique())

    def add(self, barbershop: Barbershop) -> Barbershop:
        self.session.add(barbershop)
        self.session.flush()
        return barbershop

    def replace_amenities(self, barbershop: Barbershop, amenities: Iterable[Amenity]) -> None:
        barbershop.amenities = list(amenities)
        self.session.flush()

    def replace_opening_hours(self, barbershop: Barbershop, hours: Iterable[dict]) -> None:
        """Delete every existing row for the barbershop, then insert ``hours``."""
        barbershop.opening_hours.clear()
        self.session.flush()
        for hour in hours:
            barbershop.opening_hours.append(
                OpeningHour(
                    day=hour["day"],
                    open_time=hour.get("open_time"),
                    close_time=hour.get("close_time"),
                    is_closed=hour.get("is_closed", False),
                )
            )
        self.session.flush()

    def delete(self, barbershop: Barbershop) -> None:
        # Opening hours go through the delete-orphan cascade, join rows with the secondary
        self.session.delete(barbershop)
        self.session.flush()

    def referenced_image_urls(self) -> Set[str]:
        """Every image URL still stored on a barbershop or user."""
        urls = set()
        rows = self.session.execute(
            select(Barbershop.images, Barbershop.logo_url, Barbershop.cover_image_url)
        )
        for images, logo_url, cover_image_url in rows:
            urls.update(images or [])
            urls.update(url for url in (logo_url, cover_image_url) if url)
        urls.update(url for url in self.session.scalars(select(User.avatar_url)) if url)
        return urls
