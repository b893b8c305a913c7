"""Comment repository (Firestore `comments` collection)."""
from google.cloud import firestore
from google.cloud.firestore_v1.base_query import FieldFilter

from foro.domain.events.models import Comment


class CommentRepositoryImpl:
    """Comment repository implementation."""

    def __init__(self, client: firestore.AsyncClient, collection: str = "comments"):
        self.collection = client.collection(collection)

    async def add(self, comment: Comment) -> Comment:
        ref = self.collection.document()
        created = comment.model_copy(update={"id": ref.id})
        await ref.set(created.to_document())
        return created

    async def list_by_event(self, event_id: str) -> list[Comment]:
        query = (
            self.collection.where(filter=FieldFilter("eventId", "==", event_id))
            .order_by("timestamp", direction=firestore.Query.DESCENDING)
        )
        return [Comment.from_document(s.id, s.to_dict()) async for s in query.stream()]

    async def average_rating(self, event_id: str) -> float:
        """Mean rating over the event's comments; 0.0 when there are none."""
        query = self.collection.where(filter=FieldFilter("eventId", "==", event_id))
        ratings = []
        async for snap in query.stream():
            rating = (snap.to_dict() or {}).get("rating")
            if rating is not None:
                ratings.append(float(rating))
        return sum(ratings) / len(ratings) if ratings else 0.0
