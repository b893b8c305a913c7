"""Event domain models (events, accounts, attendances, comments)."""
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from foro.domain.common.types import now_ms


class AccountRole(str, Enum):
    """Account roles stored on the user document."""

    USUARIO = "usuario"  # attendee; receives new-event pushes
    ORGANIZADOR = "organizador"


class AttendanceStatus(str, Enum):
    CONFIRMED = "CONFIRMED"
    CANCELLED = "CANCELLED"


class CamelModel(BaseModel):
    """camelCase on the wire and in the store, snake_case in Python."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=True,
    )


class Document(CamelModel):
    """Base for models stored as documents."""

    id: str = ""

    @classmethod
    def from_document(cls, doc_id: str, data: Optional[dict[str, Any]]):
        """Build from a document id and its data (store-assigned id wins)."""
        return cls.model_validate({**(data or {}), "id": doc_id})

    def to_document(self) -> dict[str, Any]:
        """Document body without the id (the id is the document key)."""
        return self.model_dump(by_alias=True, exclude={"id"}, exclude_none=True)


class Event(Document):
    """Event published by an organizer."""

    organizer_id: str
    title: str
    description: str = ""
    date: str = ""  # dd/MM/yyyy
    time: str = ""  # HH:mm
    location: str = ""
    image_url: str = ""
    timestamp: int = Field(default_factory=now_ms)  # event moment, epoch ms
    created_at: int = Field(default_factory=now_ms)


class UserAccount(Document):
    """User document. id is the auth subject."""

    email: str = ""
    role: str = AccountRole.USUARIO.value
    fcm_token: Optional[str] = None
    display_name: Optional[str] = None
    phone: Optional[str] = None
    bio: Optional[str] = None
    photo_url: Optional[str] = None

    @property
    def can_receive_push(self) -> bool:
        return bool(self.fcm_token)


class Attendance(Document):
    """One user's attendance on one event."""

    user_id: str
    event_id: str
    status: AttendanceStatus = AttendanceStatus.CONFIRMED.value
    timestamp: int = Field(default_factory=now_ms)


class Comment(Document):
    """Rated comment on an event."""

    user_id: str
    event_id: str
    user_name: str = ""
    user_photo_url: str = ""
    text: str = ""
    rating: int = 0  # 1-5 stars; 0 on legacy documents
    timestamp: int = Field(default_factory=now_ms)
