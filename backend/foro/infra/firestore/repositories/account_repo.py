"""User account repository (Firestore `users` collection)."""
import logging
from typing import Optional

from google.cloud import firestore
from google.cloud.firestore_v1.base_query import FieldFilter

from foro.domain.events.models import UserAccount

logger = logging.getLogger(__name__)

# Firestore caps the value list of an `in` filter at 30 entries.
IN_FILTER_LIMIT = 30
# Firestore caps a write batch at 500 operations.
WRITE_BATCH_LIMIT = 500


class AccountRepositoryImpl:
    """Account repository implementation."""

    def __init__(self, client: firestore.AsyncClient, collection: str = "users"):
        self.client = client
        self.collection = client.collection(collection)

    async def create_account(self, user_id: str, email: str, role: str) -> UserAccount:
        """Create the user document, merging into an existing one (keeps token/profile)."""
        await self.collection.document(user_id).set({"email": email, "role": role}, merge=True)
        account = await self.get_account(user_id)
        return account or UserAccount(id=user_id, email=email, role=role)

    async def get_account(self, user_id: str) -> Optional[UserAccount]:
        snap = await self.collection.document(user_id).get()
        if not snap.exists:
            return None
        return UserAccount.from_document(snap.id, snap.to_dict())

    async def get_role(self, user_id: str) -> Optional[str]:
        account = await self.get_account(user_id)
        return account.role if account else None

    async def update_profile(
        self,
        user_id: str,
        display_name: Optional[str] = None,
        phone: Optional[str] = None,
        bio: Optional[str] = None,
    ) -> None:
        updates = {}
        if display_name is not None:
            updates["displayName"] = display_name
        if phone is not None:
            updates["phone"] = phone
        if bio is not None:
            updates["bio"] = bio
        if not updates:
            return
        await self.collection.document(user_id).update(updates)

    async def update_photo_url(self, user_id: str, photo_url: str) -> None:
        await self.collection.document(user_id).update({"photoUrl": photo_url})

    async def save_token(self, user_id: str, token: str) -> None:
        await self.collection.document(user_id).update({"fcmToken": token})
        logger.info("Device token saved for user %s", user_id)

    async def find_accounts_by_role(self, role: str) -> list[UserAccount]:
        query = self.collection.where(filter=FieldFilter("role", "==", role))
        return [UserAccount.from_document(s.id, s.to_dict()) async for s in query.stream()]

    async def find_accounts_with_token(self, role: str, limit: int) -> list[UserAccount]:
        query = (
            self.collection.where(filter=FieldFilter("role", "==", role))
            .where(filter=FieldFilter("fcmToken", "!=", None))
            .limit(limit)
        )
        return [UserAccount.from_document(s.id, s.to_dict()) async for s in query.stream()]

    async def clear_token_on_accounts_with_token(self, tokens: list[str]) -> int:
        """Delete fcmToken from every account whose token is in tokens."""
        unique = list(dict.fromkeys(t for t in tokens if t))
        refs = []
        for i in range(0, len(unique), IN_FILTER_LIMIT):
            chunk = unique[i:i + IN_FILTER_LIMIT]
            query = self.collection.where(filter=FieldFilter("fcmToken", "in", chunk))
            async for snap in query.stream():
                refs.append(snap.reference)
        for i in range(0, len(refs), WRITE_BATCH_LIMIT):
            batch = self.client.batch()
            for ref in refs[i:i + WRITE_BATCH_LIMIT]:
                batch.update(ref, {"fcmToken": firestore.DELETE_FIELD})
            await batch.commit()
        if refs:
            logger.info("Removed %d invalid device tokens", len(refs))
        return len(refs)
