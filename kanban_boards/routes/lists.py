"""Board list routes"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel

from kanban_boards.auth.jwt import get_current_user
from kanban_boards.dependencies import get_board_list_service
from kanban_boards.models.board_list import BoardList
from kanban_boards.models.commands import (
    CreateBoardListCommand,
    DeleteBoardListCommand,
    UpdateBoardListCommand,
    UpdateBoardListPositionCommand,
)
from kanban_boards.models.user import User
from kanban_boards.routes.results import unwrap
from kanban_boards.services.board_list_service import BoardListService

router = APIRouter()


class ListCreateRequest(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    color: Optional[str] = None


class ListUpdateRequest(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    color: Optional[str] = None


class ListPositionRequest(BaseModel):
    position: Optional[int] = None


@router.get("/boards/{board_id}/lists", response_model=List[BoardList])
def list_board_lists(
    board_id: str,
    user: User = Depends(get_current_user),
    service: BoardListService = Depends(get_board_list_service),
):
    """Lists of a board ordered by position"""
    return unwrap(service.get_board_lists(board_id, user.user_id))


@router.get("/boards/{board_id}/lists/status")
def list_policy_status(
    board_id: str,
    user: User = Depends(get_current_user),
    service: BoardListService = Depends(get_board_list_service),
):
    """How close the board is to its list limit"""
    return unwrap(service.get_list_policy_status(board_id, user.user_id))


@router.post("/boards/{board_id}/lists", response_model=BoardList, status_code=status.HTTP_201_CREATED)
def create_list(
    board_id: str,
    data: ListCreateRequest,
    user: User = Depends(get_current_user),
    service: BoardListService = Depends(get_board_list_service),
):
    command = CreateBoardListCommand(
        board_id=board_id, user_id=user.user_id, title=data.title, description=data.description, color=data.color
    )
    return unwrap(service.create_board_list(command))


@router.patch("/lists/{list_id}", response_model=BoardList)
def update_list(
    list_id: str,
    data: ListUpdateRequest,
    user: User = Depends(get_current_user),
    service: BoardListService = Depends(get_board_list_service),
):
    command = UpdateBoardListCommand(
        list_id=list_id, user_id=user.user_id, title=data.title, description=data.description, color=data.color
    )
    return unwrap(service.update_board_list(command))


@router.put("/lists/{list_id}/position", response_model=List[BoardList])
def move_list(
    list_id: str,
    data: ListPositionRequest,
    user: User = Depends(get_current_user),
    service: BoardListService = Depends(get_board_list_service),
):
    """Move a list and return the board's lists in their new order"""
    command = UpdateBoardListPositionCommand(list_id=list_id, user_id=user.user_id, new_position=data.position)
    return unwrap(service.update_board_list_position(command))


@router.delete("/lists/{list_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_list(
    list_id: str,
    user: User = Depends(get_current_user),
    service: BoardListService = Depends(get_board_list_service),
):
    unwrap(service.delete_board_list(DeleteBoardListCommand(list_id=list_id, user_id=user.user_id)))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
