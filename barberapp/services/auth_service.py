import datetime
from typing import Optional

import bcrypt
import jwt

from ..errors import Conflict, InvalidCredentials, InvalidToken, NotFound, TokenExpired, Unauthorized
from ..models import User
from ..repositories import UserRepository


class AuthService:
    """Registration, login and bearer-token handling.

    Tokens are stateless HS256 JWTs carrying ``userId``, ``email`` and ``role``.
    There is no server-side session store, so logout has nothing to revoke.
    """

    def __init__(
        self,
        session,
        users: UserRepository,
        secret: str,
        algorithm: str = "HS256",
        expires_in_days: int = 7,
        bcrypt_rounds: int = 12,
    ):
        self.session = session
        self.users = users
        self.secret = secret
        self.algorithm = algorithm
        self.expires_in = datetime.timedelta(days=expires_in_days)
        self.bcrypt_rounds = bcrypt_rounds
        self._dummy_hash = None

    # -- passwords -------------------------------------------------------

    def hash_password(self, password: str) -> str:
        hashed = bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=self.bcrypt_rounds))
        return hashed.decode("utf-8")

    @property
    def dummy_hash(self) -> str:
        """A hash at the configured cost, checked when no account matches."""
        if self._dummy_hash is None:
            self._dummy_hash = self.hash_password("not-a-real-password")
        return self._dummy_hash

    @staticmethod
    def verify_password(password: str, hashed: str) -> bool:
        if not hashed:
            return False
        return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))

    # -- tokens ----------------------------------------------------------

    def generate_token(self, user: User) -> str:
        if not self.secret:
            raise RuntimeError("JWT_SECRET is not configured")
        now = datetime.datetime.now(datetime.timezone.utc)
        payload = {
            "userId": user.id,
            "email": user.email,
            "role": user.role,
            "iat": now,
            "exp": now + self.expires_in,
        }
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def decode_token(self, token: str) -> dict:
        try:
            return jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except jwt.ExpiredSignatureError:
            raise TokenExpired()
        except jwt.InvalidTokenError:
            raise InvalidToken()

    def validate_token(self, token: str) -> User:
        """Verify ``token`` and return the live user record it points to."""
        payload = self.decode_token(token)
        user_id = payload.get("userId")
        if not user_id:
            raise InvalidToken()

        user = self.users.get_active(user_id)
        if not user:
            raise Unauthorized("User not found")
        return user

    # -- accounts --------------------------------------------------------

    def register(
        self,
        email: str,
        password: str,
        full_name: Optional[str] = None,
        role: str = "client",
    ) -> dict:
        email = email.strip().lower()
        if self.users.find_by_email(email):
            raise Conflict("User with this email already exists")

        user = User(
            email=email,
            password=self.hash_password(password),
            full_name=full_name or None,
            role=role,
        )
        self.users.add(user)
        self.session.commit()

        return {"user": user.to_dict(), "token": self.generate_token(user)}

    def login(self, email: str, password: str) -> dict:
        user = self.users.find_by_email(email.strip().lower(), active_only=True)
        # Same error, and the same bcrypt work, for unknown email and wrong password
        if not user:
            self.verify_password(password, self.dummy_hash)
            raise InvalidCredentials()
        if not self.verify_password(password, user.password):
            raise InvalidCredentials()

        return {"user": user.to_dict(), "token": self.generate_token(user)}

    def get_user_by_id(self, user_id: str) -> Optional[User]:
        return self.users.get_active(user_id)

    def update_profile(self, user_id: str, full_name: Optional[str] = None) -> User:
        user = self.get_user_by_id(user_id)
        if not user:
            raise NotFound("User not found")

        if full_name is not None:
            user.full_name = full_name or None
        self.session.commit()
        return user

    def set_avatar(self, user_id: str, avatar_url: str) -> Optional[str]:
        """Store a new avatar URL and hand back the one it replaced."""
        user = self.get_user_by_id(user_id)
        if not user:
            raise NotFound("User not found")

        previous = user.avatar_url
        user.avatar_url = avatar_url
        self.session.commit()
        return previous

    def change_password(self, user_id: str, current_password: str, new_password: str) -> None:
        user = self.users.get(user_id)
        if not user:
            raise NotFound("User not found")

        if not self.verify_password(current_password, user.password):
            raise InvalidCredentials("Current password is incorrect")

        user.password = self.hash_password(new_password)
        self.session.commit()
