"""Activity routes"""

from typing import List

from fastapi import APIRouter, Depends, Query

from kanban_boards.auth.jwt import get_current_user
from kanban_boards.dependencies import get_activity_service
from kanban_boards.models.activity import Activity
from kanban_boards.models.user import User
from kanban_boards.routes.results import unwrap
from kanban_boards.services.activity import ActivityService

router = APIRouter()


@router.get("/boards/{board_id}/activity", response_model=List[Activity])
def board_activity(
    board_id: str,
    limit: int = Query(50, ge=1, le=200),
    user: User = Depends(get_current_user),
    service: ActivityService = Depends(get_activity_service),
):
    """Most recent activity on a board"""
    return unwrap(service.get_board_activity(board_id, user.user_id, limit))
