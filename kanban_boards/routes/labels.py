"""Label routes for boards"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel

from kanban_boards.auth.jwt import get_current_user
from kanban_boards.dependencies import get_label_service
from kanban_boards.models.commands import CreateLabelCommand, UpdateLabelCommand
from kanban_boards.models.label import Label
from kanban_boards.models.user import User
from kanban_boards.routes.results import unwrap
from kanban_boards.services.label_service import LabelService

router = APIRouter()


class LabelCreateRequest(BaseModel):
    name: Optional[str] = None
    color: Optional[str] = None


class LabelUpdateRequest(BaseModel):
    name: Optional[str] = None
    color: Optional[str] = None


@router.get("/boards/{board_id}/labels", response_model=List[Label])
def list_labels(
    board_id: str,
    user: User = Depends(get_current_user),
    service: LabelService = Depends(get_label_service),
):
    """List all labels for a board"""
    return unwrap(service.get_board_labels(board_id, user.user_id))


@router.post("/boards/{board_id}/labels", response_model=Label, status_code=status.HTTP_201_CREATED)
def create_label(
    board_id: str,
    data: LabelCreateRequest,
    user: User = Depends(get_current_user),
    service: LabelService = Depends(get_label_service),
):
    command = CreateLabelCommand(board_id=board_id, user_id=user.user_id, name=data.name, color=data.color)
    return unwrap(service.create_label(command))


@router.patch("/labels/{label_id}", response_model=Label)
def update_label(
    label_id: str,
    data: LabelUpdateRequest,
    user: User = Depends(get_current_user),
    service: LabelService = Depends(get_label_service),
):
    command = UpdateLabelCommand(label_id=label_id, user_id=user.user_id, name=data.name, color=data.color)
    return unwrap(service.update_label(command))


@router.delete("/labels/{label_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_label(
    label_id: str,
    user: User = Depends(get_current_user),
    service: LabelService = Depends(get_label_service),
):
    """Delete a label and remove it from the board's cards"""
    unwrap(service.delete_label(label_id, user.user_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
