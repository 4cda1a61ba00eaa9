"""Service commands

Commands carry raw inbound values. They are deliberately loose (everything
optional) so that shape problems surface as field violations from the
validators instead of construction errors.
"""

from typing import Optional

from pydantic import BaseModel

from kanban_boards.models.board import BoardRole


# =============================================================================
# Boards
# =============================================================================

class CreateBoardCommand(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    owner_id: Optional[str] = None


class UpdateBoardCommand(BaseModel):
    board_id: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    requested_by: Optional[str] = None


class ArchiveBoardCommand(BaseModel):
    board_id: Optional[str] = None
    requested_by: Optional[str] = None


class DeleteBoardCommand(BaseModel):
    board_id: Optional[str] = None
    requested_by: Optional[str] = None


class ToggleStarBoardCommand(BaseModel):
    board_id: Optional[str] = None
    requested_by: Optional[str] = None


# =============================================================================
# Board members
# =============================================================================

class AddBoardMemberCommand(BaseModel):
    board_id: Optional[str] = None
    user_id: Optional[str] = None
    role: Optional[BoardRole] = None
    requested_by: Optional[str] = None


class RemoveBoardMemberCommand(BaseModel):
    board_id: Optional[str] = None
    target_user_id: Optional[str] = None
    requested_by: Optional[str] = None


class UpdateBoardMemberRoleCommand(BaseModel):
    board_id: Optional[str] = None
    target_user_id: Optional[str] = None
    new_role: Optional[BoardRole] = None
    requested_by: Optional[str] = None


# =============================================================================
# Board lists
# =============================================================================

class CreateBoardListCommand(BaseModel):
    board_id: Optional[str] = None
    user_id: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    color: Optional[str] = None


class UpdateBoardListCommand(BaseModel):
    list_id: Optional[str] = None
    user_id: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    color: Optional[str] = None


class DeleteBoardListCommand(BaseModel):
    list_id: Optional[str] = None
    user_id: Optional[str] = None


class UpdateBoardListPositionCommand(BaseModel):
    list_id: Optional[str] = None
    user_id: Optional[str] = None
    new_position: Optional[int] = None


# =============================================================================
# Cards
# =============================================================================

class CreateCardCommand(BaseModel):
    list_id: Optional[str] = None
    user_id: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None


class UpdateCardCommand(BaseModel):
    card_id: Optional[str] = None
    user_id: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None


class MoveCardCommand(BaseModel):
    card_id: Optional[str] = None
    user_id: Optional[str] = None
    target_list_id: Optional[str] = None  # None keeps the card in its list
    new_position: Optional[int] = None


class CloneCardCommand(BaseModel):
    card_id: Optional[str] = None
    user_id: Optional[str] = None
    new_title: Optional[str] = None
    target_list_id: Optional[str] = None


class DeleteCardCommand(BaseModel):
    card_id: Optional[str] = None
    user_id: Optional[str] = None


# =============================================================================
# Labels
# =============================================================================

class CreateLabelCommand(BaseModel):
    board_id: Optional[str] = None
    user_id: Optional[str] = None
    name: Optional[str] = None
    color: Optional[str] = None


class UpdateLabelCommand(BaseModel):
    label_id: Optional[str] = None
    user_id: Optional[str] = None
    name: Optional[str] = None
    color: Optional[str] = None


# =============================================================================
# Comments
# =============================================================================

class CreateCommentCommand(BaseModel):
    card_id: Optional[str] = None
    author_id: Optional[str] = None
    content: Optional[str] = None


class UpdateCommentCommand(BaseModel):
    comment_id: Optional[str] = None
    requester_id: Optional[str] = None
    content: Optional[str] = None


class DeleteCommentCommand(BaseModel):
    comment_id: Optional[str] = None
    requester_id: Optional[str] = None
