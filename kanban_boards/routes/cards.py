"""Card routes"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel

from kanban_boards.auth.jwt import get_current_user
from kanban_boards.dependencies import get_card_service
from kanban_boards.models.card import Card
from kanban_boards.models.commands import (
    CloneCardCommand,
    CreateCardCommand,
    DeleteCardCommand,
    MoveCardCommand,
    UpdateCardCommand,
)
from kanban_boards.models.user import User
from kanban_boards.routes.results import unwrap
from kanban_boards.services.card_service import CardService

router = APIRouter()


class CardCreateRequest(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None


class CardUpdateRequest(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None


class CardMoveRequest(BaseModel):
    list_id: Optional[str] = None
    position: Optional[int] = None


class CardCloneRequest(BaseModel):
    title: Optional[str] = None
    list_id: Optional[str] = None


@router.get("/lists/{list_id}/cards", response_model=List[Card])
def list_cards(
    list_id: str,
    user: User = Depends(get_current_user),
    service: CardService = Depends(get_card_service),
):
    return unwrap(service.get_list_cards(list_id, user.user_id))


@router.post("/lists/{list_id}/cards", response_model=Card, status_code=status.HTTP_201_CREATED)
def create_card(
    list_id: str,
    data: CardCreateRequest,
    user: User = Depends(get_current_user),
    service: CardService = Depends(get_card_service),
):
    command = CreateCardCommand(list_id=list_id, user_id=user.user_id, title=data.title, description=data.description)
    return unwrap(service.create_card(command))


@router.get("/cards/{card_id}", response_model=Card)
def get_card(
    card_id: str,
    user: User = Depends(get_current_user),
    service: CardService = Depends(get_card_service),
):
    return unwrap(service.get_card(card_id, user.user_id))


@router.patch("/cards/{card_id}", response_model=Card)
def update_card(
    card_id: str,
    data: CardUpdateRequest,
    user: User = Depends(get_current_user),
    service: CardService = Depends(get_card_service),
):
    command = UpdateCardCommand(card_id=card_id, user_id=user.user_id, title=data.title, description=data.description)
    return unwrap(service.update_card(command))


@router.post("/cards/{card_id}/move", response_model=Card)
def move_card(
    card_id: str,
    data: CardMoveRequest,
    user: User = Depends(get_current_user),
    service: CardService = Depends(get_card_service),
):
    """Move a card within its list, or to another list of the same board"""
    command = MoveCardCommand(
        card_id=card_id, user_id=user.user_id, target_list_id=data.list_id, new_position=data.position
    )
    return unwrap(service.move_card(command))


@router.post("/cards/{card_id}/clone", response_model=Card, status_code=status.HTTP_201_CREATED)
def clone_card(
    card_id: str,
    data: CardCloneRequest,
    user: User = Depends(get_current_user),
    service: CardService = Depends(get_card_service),
):
    command = CloneCardCommand(card_id=card_id, user_id=user.user_id, new_title=data.title, target_list_id=data.list_id)
    return unwrap(service.clone_card(command))


@router.delete("/cards/{card_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_card(
    card_id: str,
    user: User = Depends(get_current_user),
    service: CardService = Depends(get_card_service),
):
    unwrap(service.delete_card(DeleteCardCommand(card_id=card_id, user_id=user.user_id)))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# =============================================================================
# Card members and labels
# =============================================================================

@router.post("/cards/{card_id}/members/{member_user_id}", response_model=Card)
def assign_member(
    card_id: str,
    member_user_id: str,
    user: User = Depends(get_current_user),
    service: CardService = Depends(get_card_service),
):
    return unwrap(service.assign_member(card_id, user.user_id, member_user_id))


@router.delete("/cards/{card_id}/members/{member_user_id}", response_model=Card)
def unassign_member(
    card_id: str,
    member_user_id: str,
    user: User = Depends(get_current_user),
    service: CardService = Depends(get_card_service),
):
    return unwrap(service.unassign_member(card_id, user.user_id, member_user_id))


@router.post("/cards/{card_id}/labels/{label_id}", response_model=Card)
def add_label(
    card_id: str,
    label_id: str,
    user: User = Depends(get_current_user),
    service: CardService = Depends(get_card_service),
):
    return unwrap(service.add_label(card_id, user.user_id, label_id))


@router.delete("/cards/{card_id}/labels/{label_id}", response_model=Card)
def remove_label(
    card_id: str,
    label_id: str,
    user: User = Depends(get_current_user),
    service: CardService = Depends(get_card_service),
):
    return unwrap(service.remove_label(card_id, user.user_id, label_id))
