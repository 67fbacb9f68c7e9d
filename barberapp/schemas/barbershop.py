from typing import Annotated, List, Literal, Optional

from pydantic import Field, StringConstraints

from .common import RequestSchema, UrlStr, UUIDStr

Name = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=255)]
Address = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
Phone = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=20)]
# Time strings are stored as given; "" is accepted for closed days
TimeText = Annotated[str, StringConstraints(strip_whitespace=True, max_length=10)]


class OpeningHourPayload(RequestSchema):
    day: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=20)]
    open_time: Optional[TimeText] = Field(default=None, alias="openTime")
    close_time: Optional[TimeText] = Field(default=None, alias="closeTime")
    is_closed: bool = Field(alias="isClosed")


class CreateBarbershopPayload(RequestSchema):
    name: Name
    address: Address
    phone: Optional[Phone] = None
    logo_url: Optional[UrlStr] = Field(default=None, alias="logoUrl")
    cover_image_url: Optional[UrlStr] = Field(default=None, alias="coverImageUrl")
    about: Optional[str] = None
    amenity_ids: Optional[List[UUIDStr]] = Field(default=None, alias="amenityIds")
    opening_hours: Optional[List[OpeningHourPayload]] = Field(default=None, alias="openingHours")
    images: Optional[List[str]] = None


class UpdateBarbershopPayload(RequestSchema):
    name: Optional[Name] = None
    address: Optional[Address] = None
    phone: Optional[Phone] = None
    logo_url: Optional[UrlStr] = Field(default=None, alias="logoUrl")
    cover_image_url: Optional[UrlStr] = Field(default=None, alias="coverImageUrl")
    about: Optional[str] = None
    amenity_ids: Optional[List[UUIDStr]] = Field(default=None, alias="amenityIds")
    opening_hours: Optional[List[OpeningHourPayload]] = Field(default=None, alias="openingHours")
    images: Optional[List[str]] = None


class BarbershopAmenityPayload(RequestSchema):
    amenity_ids: List[UUIDStr] = Field(alias="amenityIds", min_length=1)


class RemoveImagePayload(RequestSchema):
    image_url: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)] = Field(alias="imageUrl")


class BarbershopQuery(RequestSchema):
    search: Optional[str] = None
    sort_by: Literal["name", "rating", "createdAt"] = Field(default="name", alias="sortBy")
    sort_order: Literal["ASC", "DESC"] = Field(default="ASC", alias="sortOrder")
