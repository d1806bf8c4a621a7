# schemas.py
from datetime import datetime
from datetime import timezone
from typing import Annotated
from typing import Literal
from typing import Union
from uuid import uuid4

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field
from pydantic import PositiveInt
from pydantic import StrictBool
from pydantic import StrictInt
from pydantic import TypeAdapter
from pydantic import ValidationError
from pydantic import field_validator


class MalformedMessage(ValueError):
    """Inbound frame that is not valid JSON or does not match any known message."""


def new_id() -> str:
    return str(uuid4())


def utc_timestamp() -> str:
    # Same shape as JavaScript's Date.toISOString(): millisecond precision, "Z" suffix
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


# === Records ===


class Participant(BaseModel):
    id: str = Field(frozen=True)
    name: str
    avatar: str
    is_admin: bool = Field(default=False, alias="isAdmin", frozen=True)
    page: PositiveInt = 1

    model_config = ConfigDict(populate_by_name=True)


class Photo(BaseModel):
    id: str = Field(default_factory=new_id)
    url: str
    caption: str
    timestamp: str = Field(default_factory=utc_timestamp)


# === Inbound ===

PageNumber = Annotated[StrictInt, Field(ge=1)]


class UserJoin(BaseModel):
    type: Literal["USER_JOIN"]
    name: str
    avatar: str
    is_admin: StrictBool = Field(alias="isAdmin")
    page: PageNumber = 1

    @field_validator("page", mode="before")
    @classmethod
    def default_page(cls, v):
        # Clients send `page: 0` or `null` before they have navigated anywhere
        return v or 1


class PageChange(BaseModel):
    type: Literal["PAGE_CHANGE"]
    page: PageNumber


class PhotoUpload(BaseModel):
    type: Literal["PHOTO_UPLOAD"]
    url: str
    caption: str


class ResetApp(BaseModel):
    type: Literal["RESET_APP"]


InboundMessage = Annotated[
    Union[UserJoin, PageChange, PhotoUpload, ResetApp],
    Field(discriminator="type"),
]

_inbound_adapter = TypeAdapter(InboundMessage)


def parse_inbound(raw: str | bytes) -> InboundMessage:
    """Decode one client frame into its message model.

    Raises MalformedMessage for invalid JSON, non-object payloads, unknown
    message types and missing or mistyped fields.
    """
    try:
        return _inbound_adapter.validate_json(raw)
    except ValidationError as exc:
        raise MalformedMessage(_describe(exc)) from exc


def _describe(exc: ValidationError) -> str:
    errors = exc.errors(include_url=False)
    if not errors:
        return str(exc)
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ())) or "message"
    return f"{location}: {first.get('msg')}"


# === Outbound ===


class OutboundEvent(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    def to_frame(self) -> str:
        return self.model_dump_json(by_alias=True)


class InitPhotos(OutboundEvent):
    type: Literal["INIT_PHOTOS"] = "INIT_PHOTOS"
    photos: list[Photo]


class ExistingUsers(OutboundEvent):
    type: Literal["EXISTING_USERS"] = "EXISTING_USERS"
    users: list[Participant]


class UserJoined(OutboundEvent):
    type: Literal["USER_JOINED"] = "USER_JOINED"
    user: Participant


class UserPageUpdate(OutboundEvent):
    type: Literal["USER_PAGE_UPDATE"] = "USER_PAGE_UPDATE"
    user_id: str = Field(alias="userId")
    page: int


class NewPhoto(OutboundEvent):
    type: Literal["NEW_PHOTO"] = "NEW_PHOTO"
    photo: Photo


class AppReset(OutboundEvent):
    type: Literal["APP_RESET"] = "APP_RESET"


class UserLeft(OutboundEvent):
    type: Literal["USER_LEFT"] = "USER_LEFT"
    user_id: str = Field(alias="userId")
