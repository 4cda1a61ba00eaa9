"""Board member routes"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel

from kanban_boards.auth.jwt import get_current_user
from kanban_boards.dependencies import get_board_member_service
from kanban_boards.models.board import BoardMember, BoardRole
from kanban_boards.models.commands import (
    AddBoardMemberCommand,
    RemoveBoardMemberCommand,
    UpdateBoardMemberRoleCommand,
)
from kanban_boards.models.user import User
from kanban_boards.routes.results import unwrap
from kanban_boards.services.board_member_service import BoardMemberService

router = APIRouter()


class MemberAddRequest(BaseModel):
    user_id: Optional[str] = None
    role: Optional[BoardRole] = None


class MemberRoleRequest(BaseModel):
    role: Optional[BoardRole] = None


@router.get("/{board_id}/members", response_model=List[BoardMember])
def list_members(
    board_id: str,
    user: User = Depends(get_current_user),
    service: BoardMemberService = Depends(get_board_member_service),
):
    return unwrap(service.get_board_members(board_id, user.user_id))


@router.post("/{board_id}/members", response_model=BoardMember, status_code=status.HTTP_201_CREATED)
def add_member(
    board_id: str,
    data: MemberAddRequest,
    user: User = Depends(get_current_user),
    service: BoardMemberService = Depends(get_board_member_service),
):
    command = AddBoardMemberCommand(
        board_id=board_id, user_id=data.user_id, role=data.role, requested_by=user.user_id
    )
    return unwrap(service.add_board_member(command))


@router.put("/{board_id}/members/{member_user_id}", response_model=BoardMember)
def update_member_role(
    board_id: str,
    member_user_id: str,
    data: MemberRoleRequest,
    user: User = Depends(get_current_user),
    service: BoardMemberService = Depends(get_board_member_service),
):
    command = UpdateBoardMemberRoleCommand(
        board_id=board_id, target_user_id=member_user_id, new_role=data.role, requested_by=user.user_id
    )
    return unwrap(service.update_board_member_role(command))


@router.delete("/{board_id}/members/{member_user_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_member(
    board_id: str,
    member_user_id: str,
    user: User = Depends(get_current_user),
    service: BoardMemberService = Depends(get_board_member_service),
):
    command = RemoveBoardMemberCommand(board_id=board_id, target_user_id=member_user_id, requested_by=user.user_id)
    unwrap(service.remove_board_member(command))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
