"""Event domain repository protocols."""
from typing import Optional, Protocol

from foro.domain.events.models import Attendance, Comment, Event, UserAccount


class AccountRepository(Protocol):
    """User account repository protocol."""

    async def create_account(self, user_id: str, email: str, role: str) -> UserAccount:
        """Create or merge the account document."""
        ...

    async def get_account(self, user_id: str) -> Optional[UserAccount]:
        ...

    async def get_role(self, user_id: str) -> Optional[str]:
        ...

    async def update_profile(
        self,
        user_id: str,
        display_name: Optional[str] = None,
        phone: Optional[str] = None,
        bio: Optional[str] = None,
    ) -> None:
        """Update only the profile fields given."""
        ...

    async def update_photo_url(self, user_id: str, photo_url: str) -> None:
        ...

    async def save_token(self, user_id: str, token: str) -> None:
        """Overwrite the account's device push token."""
        ...

    async def find_accounts_by_role(self, role: str) -> list[UserAccount]:
        """All accounts with the role, in query order."""
        ...

    async def find_accounts_with_token(self, role: str, limit: int) -> list[UserAccount]:
        """Up to limit accounts with the role that hold a device token."""
        ...

    async def clear_token_on_accounts_with_token(self, tokens: list[str]) -> int:
        """Remove fcmToken from every account holding one of tokens. Returns documents updated."""
        ...


class EventRepository(Protocol):
    """Event repository protocol."""

    async def create(self, event: Event) -> Event:
        """Persist a new event; returns it with the store-assigned id."""
        ...

    async def get(self, event_id: str) -> Optional[Event]:
        ...

    async def update(self, event: Event) -> Event:
        ...

    async def delete(self, event_id: str) -> None:
        ...

    async def list_all(self) -> list[Event]:
        """All events, newest event moment first."""
        ...

    async def list_by_organizer(self, organizer_id: str) -> list[Event]:
        ...


class AttendanceRepository(Protocol):
    """Attendance repository protocol."""

    async def confirm(self, user_id: str, event_id: str) -> Attendance:
        ...

    async def cancel(self, user_id: str, event_id: str) -> Attendance:
        ...

    async def get_status(self, user_id: str, event_id: str) -> Optional[str]:
        ...

    async def count_confirmed(self, event_id: str) -> int:
        ...

    async def list_confirmed(self, event_id: str) -> list[Attendance]:
        ...

    async def list_attended_event_ids(self, user_id: str) -> list[str]:
        ...


class CommentRepository(Protocol):
    """Comment repository protocol."""

    async def add(self, comment: Comment) -> Comment:
        ...

    async def list_by_event(self, event_id: str) -> list[Comment]:
        """Comments for an event, newest first."""
        ...

    async def average_rating(self, event_id: str) -> float:
        ...
