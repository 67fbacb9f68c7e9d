from typing import Dict, List, Optional, Sequence, Tuple

from sqlalchemy import func, select

from ..models import Amenity, t_barbershop_amenities
from .utils import like_pattern


class AmenityRepository:
    def __init__(self, session):
        self.session = session

    def list_all(self) -> List[Amenity]:
        return list(self.session.scalars(select(Amenity).order_by(Amenity.name.asc())))

    def get(self, amenity_id: str) -> Optional[Amenity]:
        return self.session.get(Amenity, amenity_id)

    def get_many(self, amenity_ids: Sequence[str]) -> List[Amenity]:
        """Amenities for the given ids. Unknown ids are dropped, not reported."""
        if not amenity_ids:
            return []
        return list(
            self.session.scalars(select(Amenity).where(Amenity.id.in_(set(amenity_ids))))
        )

    def find_by_name(self, name: str) -> Optional[Amenity]:
        return self.session.scalar(select(Amenity).where(Amenity.name == name).limit(1))

    def search(self, query: str) -> List[Amenity]:
        return list(
            self.session.scalars(
                select(Amenity)
                .where(Amenity.name.ilike(like_pattern(query), escape="\\"))
                .order_by(Amenity.name.asc())
            )
        )

    def count_barbershops(self, amenity_id: str) -> int:
        return self.session.scalar(
            select(func.count())
            .select_from(t_barbershop_amenities)
            .where(t_barbershop_amenities.c.amenity_id == amenity_id)
        )

    def popular(self, limit: int) -> List[Tuple[Amenity, int]]:
        usage_count = func.count(t_barbershop_amenities.c.barbershop_id).label("usage_count")
        rows = self.session.execute(
            select(Amenity, usage_count)
            .outerjoin(t_barbershop_amenities, t_barbershop_amenities.c.amenity_id == Amenity.id)
            .group_by(Amenity.id)
            .order_by(usage_count.desc(), Amenity.name.asc())
            .limit(limit)
        ).all()
        return [(amenity, count) for amenity, count in rows]

    def by_barbershop(self, barbershop_ids: Sequence[str]) -> Dict[str, List[Amenity]]:
        rows = self.session.execute(
            select(t_barbershop_amenities.c.barbershop_id, Amenity)
            .join(Amenity, Amenity.id == t_barbershop_amenities.c.amenity_id)
            .where(t_barbershop_amenities.c.barbershop_id.in_(set(barbershop_ids)))
            .order_by(Amenity.name.asc())
        ).all()
        grouped: Dict[str, List[Amenity]] = {}
        for barbershop_id, amenity in rows:
            grouped.setdefault(barbershop_id, []).append(amenity)
        return grouped

    def add(self, amenity: Amenity) -> Amenity:
        self.session.add(amenity)
        self.session.flush()
        return amenity

    def delete(self, amenity: Amenity) -> None:
        self.session.delete(amenity)
        self.session.flush()
