"""Comment routes for cards"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel

from kanban_boards.auth.jwt import get_current_user
from kanban_boards.dependencies import get_comment_service
from kanban_boards.models.commands import CreateCommentCommand, DeleteCommentCommand, UpdateCommentCommand
from kanban_boards.models.comment import Comment
from kanban_boards.models.user import User
from kanban_boards.routes.results import unwrap
from kanban_boards.services.comment_service import CommentService

router = APIRouter()


class CommentRequest(BaseModel):
    content: Optional[str] = None


@router.get("/cards/{card_id}/comments", response_model=List[Comment])
def list_comments(
    card_id: str,
    user: User = Depends(get_current_user),
    service: CommentService = Depends(get_comment_service),
):
    """List all comments for a card, oldest first"""
    return unwrap(service.get_card_comments(card_id, user.user_id))


@router.post("/cards/{card_id}/comments", response_model=Comment, status_code=status.HTTP_201_CREATED)
def create_comment(
    card_id: str,
    data: CommentRequest,
    user: User = Depends(get_current_user),
    service: CommentService = Depends(get_comment_service),
):
    """Add a comment to a card"""
    command = CreateCommentCommand(card_id=card_id, author_id=user.user_id, content=data.content)
    return unwrap(service.create_comment(command))


@router.get("/comments/{comment_id}", response_model=Comment)
def get_comment(
    comment_id: str,
    user: User = Depends(get_current_user),
    service: CommentService = Depends(get_comment_service),
):
    return unwrap(service.get_comment(comment_id, user.user_id))


@router.patch("/comments/{comment_id}", response_model=Comment)
def update_comment(
    comment_id: str,
    data: CommentRequest,
    user: User = Depends(get_current_user),
    service: CommentService = Depends(get_comment_service),
):
    command = UpdateCommentCommand(comment_id=comment_id, requester_id=user.user_id, content=data.content)
    return unwrap(service.update_comment(command))


@router.delete("/comments/{comment_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_comment(
    comment_id: str,
    user: User = Depends(get_current_user),
    service: CommentService = Depends(get_comment_service),
):
    unwrap(service.delete_comment(DeleteCommentCommand(comment_id=comment_id, requester_id=user.user_id)))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
