"""Board routes"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel

from kanban_boards.auth.jwt import get_current_user
from kanban_boards.dependencies import get_board_service
from kanban_boards.models.board import Board
from kanban_boards.models.board_detail import BoardDetail
from kanban_boards.models.commands import (
    ArchiveBoardCommand,
    CreateBoardCommand,
    DeleteBoardCommand,
    ToggleStarBoardCommand,
    UpdateBoardCommand,
)
from kanban_boards.models.user import User
from kanban_boards.routes.results import unwrap
from kanban_boards.services.board_service import BoardService

router = APIRouter()


class BoardCreateRequest(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None


class BoardUpdateRequest(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None


@router.get("", response_model=List[Board])
def list_boards(
    include_archived: bool = False,
    user: User = Depends(get_current_user),
    service: BoardService = Depends(get_board_service),
):
    """Boards owned by or shared with the current user"""
    return unwrap(service.get_user_boards(user.user_id, include_archived))


@router.post("", response_model=Board, status_code=status.HTTP_201_CREATED)
def create_board(
    data: BoardCreateRequest,
    user: User = Depends(get_current_user),
    service: BoardService = Depends(get_board_service),
):
    command = CreateBoardCommand(title=data.title, description=data.description, owner_id=user.user_id)
    return unwrap(service.create_board(command))


@router.get("/{board_id}", response_model=Board)
def get_board(
    board_id: str,
    user: User = Depends(get_current_user),
    service: BoardService = Depends(get_board_service),
):
    return unwrap(service.get_board(board_id, user.user_id))


@router.get("/{board_id}/detail", response_model=BoardDetail)
def get_board_detail(
    board_id: str,
    user: User = Depends(get_current_user),
    service: BoardService = Depends(get_board_service),
):
    """Board with its lists, cards, labels and members in one response"""
    return unwrap(service.get_board_detail(board_id, user.user_id))


@router.patch("/{board_id}", response_model=Board)
def update_board(
    board_id: str,
    data: BoardUpdateRequest,
    user: User = Depends(get_current_user),
    service: BoardService = Depends(get_board_service),
):
    command = UpdateBoardCommand(
        board_id=board_id, title=data.title, description=data.description, requested_by=user.user_id
    )
    return unwrap(service.update_board(command))


@router.post("/{board_id}/archive", response_model=Board)
def archive_board(
    board_id: str,
    user: User = Depends(get_current_user),
    service: BoardService = Depends(get_board_service),
):
    return unwrap(service.archive_board(ArchiveBoardCommand(board_id=board_id, requested_by=user.user_id)))


@router.post("/{board_id}/unarchive", response_model=Board)
def unarchive_board(
    board_id: str,
    user: User = Depends(get_current_user),
    service: BoardService = Depends(get_board_service),
):
    return unwrap(service.unarchive_board(ArchiveBoardCommand(board_id=board_id, requested_by=user.user_id)))


@router.post("/{board_id}/star", response_model=Board)
def toggle_star(
    board_id: str,
    user: User = Depends(get_current_user),
    service: BoardService = Depends(get_board_service),
):
    return unwrap(service.toggle_star_board(ToggleStarBoardCommand(board_id=board_id, requested_by=user.user_id)))


@router.delete("/{board_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_board(
    board_id: str,
    user: User = Depends(get_current_user),
    service: BoardService = Depends(get_board_service),
):
    """Delete a board with its cards, lists, members and labels"""
    unwrap(service.delete_board(DeleteBoardCommand(board_id=board_id, requested_by=user.user_id)))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
