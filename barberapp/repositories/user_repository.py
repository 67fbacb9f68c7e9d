from typing import Optional

from sqlalchemy import select

from ..models import User


class UserRepository:
    def __init__(self, session):
        self.session = session

    def get(self, user_id: str) -> Optional[User]:
        return self.session.get(User, user_id)

    def get_active(self, user_id: str) -> Optional[User]:
        return self.session.scalar(
            select(User).where(User.id == user_id, User.is_active.is_(True))
        )

    def find_by_email(self, email: str, active_only: bool = False) -> Optional[User]:
        query = select(User).where(User.email == email)
        if active_only:
            query = query.where(User.is_active.is_(True))
        return self.session.scalar(query)

    def add(self, user: User) -> User:
        self.session.add(user)
        self.session.flush()
        return user
