from typing import Annotated

from pydantic import BaseModel, ConfigDict, StringConstraints

UUID_PATTERN = r"^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[1-5][0-9a-fA-F]{3}-[89abAB][0-9a-fA-F]{3}-[0-9a-fA-F]{12}$"
EMAIL_PATTERN = r"^[^\s@]+@[^\s@]+\.[^\s@]+$"
URL_PATTERN = r"^https?://\S+$"

UUIDStr = Annotated[str, StringConstraints(pattern=UUID_PATTERN)]
UrlStr = Annotated[str, StringConstraints(strip_whitespace=True, max_length=500, pattern=URL_PATTERN)]


class RequestSchema(BaseModel):
    """Base for request payloads: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")
