from typing import Annotated, Literal, Optional

from pydantic import AfterValidator, Field, StringConstraints

from .common import EMAIL_PATTERN, RequestSchema


def _fits_bcrypt(value: str) -> str:
    # bcrypt only looks at the first 72 bytes
    if len(value.encode("utf-8")) > 72:
        raise ValueError("Password must be at most 72 bytes long")
    return value


Email = Annotated[
    str,
    StringConstraints(strip_whitespace=True, to_lower=True, max_length=255, pattern=EMAIL_PATTERN),
]
NewPassword = Annotated[str, StringConstraints(min_length=6), AfterValidator(_fits_bcrypt)]
AnyPassword = Annotated[str, StringConstraints(min_length=1)]
FullName = Annotated[str, StringConstraints(strip_whitespace=True, max_length=255)]


class RegisterPayload(RequestSchema):
    email: Email
    password: NewPassword
    full_name: Optional[FullName] = Field(default=None, alias="fullName")
    # Admins are never self-registered
    role: Literal["client", "barber"] = "client"


class LoginPayload(RequestSchema):
    email: Email
    password: AnyPassword


class UpdateProfilePayload(RequestSchema):
    full_name: Optional[FullName] = Field(default=None, alias="fullName")


class ChangePasswordPayload(RequestSchema):
    current_password: AnyPassword = Field(alias="currentPassword")
    new_password: NewPassword = Field(alias="newPassword")
