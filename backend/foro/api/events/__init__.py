"""Events API."""
from fastapi import APIRouter

from foro.api.events import routes_attendance, routes_comments, routes_events

router = APIRouter()

# Attendance first: /events/attended must win over /events/{event_id}
router.include_router(routes_attendance.router, prefix="/events", tags=["attendance"])
router.include_router(routes_comments.router, prefix="/events", tags=["comments"])
router.include_router(routes_events.router, prefix="/events", tags=["events"])
