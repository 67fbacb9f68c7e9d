from typing import Annotated, List, Literal, Optional

from pydantic import Field, StringConstraints

from .common import RequestSchema, UUIDStr

AmenityName = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=255)]
Icon = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=100)]


class CreateAmenityPayload(RequestSchema):
    name: AmenityName
    icon: Icon


class UpdateAmenityPayload(RequestSchema):
    name: Optional[AmenityName] = None
    icon: Optional[Icon] = None


class AmenityQuery(RequestSchema):
    search: Optional[str] = None
    popular: Literal["true", "false"] = "false"
    limit: int = Field(default=10, ge=1, le=100)


class BarbershopAmenitiesPayload(RequestSchema):
    barbershop_ids: List[UUIDStr] = Field(alias="barbershopIds", min_length=1)
