"""Comment API routes."""
from typing import List

from fastapi import APIRouter, Depends, status
from pydantic import Field

from foro.api.deps import get_comment_repo, get_current_account, get_event_service
from foro.domain.events.models import CamelModel, Comment, UserAccount
from foro.domain.events.repositories import CommentRepository
from foro.services.event_service import EventService

router = APIRouter()


class CommentCreateRequest(CamelModel):
    """Add comment request."""
    text: str = Field(min_length=1)
    rating: int = Field(ge=1, le=5)


@router.post("/{event_id}/comments", response_model=Comment, status_code=status.HTTP_201_CREATED)
async def add_comment(
    event_id: str,
    request: CommentCreateRequest,
    current_account: UserAccount = Depends(get_current_account),
    comments: CommentRepository = Depends(get_comment_repo),
    service: EventService = Depends(get_event_service),
):
    """Add a rated comment. Author name and photo are copied from the profile."""
    await service.get_event(event_id)
    comment = Comment(
        user_id=current_account.id,
        event_id=event_id,
        user_name=current_account.display_name or current_account.email,
        user_photo_url=current_account.photo_url or "",
        text=request.text,
        rating=request.rating,
    )
    return await comments.add(comment)


@router.get("/{event_id}/comments", response_model=List[Comment])
async def list_comments(
    event_id: str,
    _: UserAccount = Depends(get_current_account),
    comments: CommentRepository = Depends(get_comment_repo),
):
    """Comments for the event, newest first."""
    return await comments.list_by_event(event_id)


@router.get("/{event_id}/rating")
async def get_average_rating(
    event_id: str,
    _: UserAccount = Depends(get_current_account),
    comments: CommentRepository = Depends(get_comment_repo),
):
    return {"average": await comments.average_rating(event_id)}
