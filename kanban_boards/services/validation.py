"""Command validation and message resolution

Each command type has a pydantic schema describing its field rules. Running
a command through its schema turns pydantic errors into field violations
keyed by message keys (``validation.<field>.<rule>``), which the message
resolver maps to readable text.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Annotated, Any, Dict, Generic, List, Optional, Type, TypeVar

from pydantic import AfterValidator, BaseModel, StringConstraints, ValidationError

from kanban_boards.failures import FieldViolation, InputError, input_error
from kanban_boards.models.board import BoardRole
from kanban_boards.models.commands import (
    AddBoardMemberCommand,
    ArchiveBoardCommand,
    CloneCardCommand,
    CreateBoardCommand,
    CreateBoardListCommand,
    CreateCardCommand,
    CreateCommentCommand,
    CreateLabelCommand,
    DeleteBoardCommand,
    DeleteBoardListCommand,
    DeleteCardCommand,
    DeleteCommentCommand,
    MoveCardCommand,
    RemoveBoardMemberCommand,
    ToggleStarBoardCommand,
    UpdateBoardCommand,
    UpdateBoardListCommand,
    UpdateBoardListPositionCommand,
    UpdateBoardMemberRoleCommand,
    UpdateCardCommand,
    UpdateCommentCommand,
    UpdateLabelCommand,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

BOARD_TITLE_MAX_LENGTH = 100
DESCRIPTION_MAX_LENGTH = 500
LABEL_NAME_MAX_LENGTH = 50
COMMENT_CONTENT_MAX_LENGTH = 1000
HTML_TAG_PATTERN = re.compile(r"<[^>]*>")


# =============================================================================
# Message resolver
# =============================================================================

DEFAULT_MESSAGES: Dict[str, str] = {
    # Generic field rules (``validation.<field>.<rule>`` falls back to these)
    "validation.required": "{field} is required",
    "validation.max.length": "{field} must be at most {limit} characters",
    "validation.min.value": "{field} must be at least {limit}",
    "validation.html.forbidden": "{field} must not contain HTML tags",
    "validation.pattern": "{field} has an invalid format",
    "validation.invalid": "{field} is invalid",
    "validation.input.invalid": "Invalid input",
    # Users
    "validation.user.not.found": "user not found",
    # Boards
    "validation.board.not.found": "board not found",
    "validation.board.access.denied": "access denied",
    "validation.board.member.inactive": "member inactive",
    "validation.board.modification.access.denied": "You do not have permission to modify this board",
    "validation.board.archived.modification.denied": "Archived boards cannot be modified",
    "validation.board.modification.error": "Failed to apply board changes",
    "validation.board.update.error": "Failed to save board changes",
    "validation.board.archive.access.denied": "Only the board owner can archive or unarchive a board",
    "validation.board.archive.error": "Failed to change the board archive state",
    "validation.board.delete.access.denied": "Only the board owner can delete a board",
    "validation.board.star.access.denied": "Only the board owner can star a board",
    # Members
    "validation.board.member.manage.denied": "You do not have permission to manage board members",
    "validation.board.member.already.exists": "User is already a board member",
    "validation.board.member.not.found": "Board member not found",
    "validation.board.member.owner.immutable": "The board owner cannot be removed or have its role changed",
    "validation.board.member.self.removal": "You cannot remove yourself from a board",
    "validation.board.member.last": "last member: the only active member of a board cannot be removed",
    # Lists
    "validation.boardlist.not.found": "List not found",
    "validation.boardlist.delete.access.denied": "You do not have permission to delete this list",
    "validation.boardlist.position.invalid": "invalid position",
    "validation.boardlist.count.exceeded": "A board can have at most {limit} lists (current: {count})",
    "validation.boardlist.title.length.exceeded": "List titles can be at most {limit} characters",
    # Cards
    "validation.card.not.found": "Card not found",
    "validation.card.count.exceeded": "A list can have at most {limit} cards (current: {count})",
    "validation.card.title.length.exceeded": "Card titles can be at most {limit} characters",
    "validation.card.description.length.exceeded": "Card descriptions can be at most {limit} characters",
    "validation.card.position.invalid": "invalid position",
    "validation.card.move.other.board": "Cards can only move between lists of the same board",
    "validation.card.member.not.board.member": "Only board members can be assigned to cards",
    # Labels
    "validation.label.not.found": "Label not found",
    "validation.label.other.board": "Label belongs to another board",
    # Comments
    "validation.comment.not.found": "Comment not found",
    "validation.comment.update.access.denied": "Only the author can edit a comment",
    "validation.comment.delete.access.denied": "Only the author can delete a comment",
}


class MessageResolver:
    """Maps message keys to text, falling back to generic field rules"""

    def __init__(self, messages: Optional[Dict[str, str]] = None):
        self.messages = dict(DEFAULT_MESSAGES)
        if messages:
            self.messages.update(messages)

    def get_message(self, key: str, **params: Any) -> str:
        template = self.messages.get(key)
        if template is None:
            parts = key.split(".")
            if len(parts) >= 3 and parts[0] == "validation":
                params.setdefault("field", parts[1])
                template = self.messages.get("validation." + ".".join(parts[2:]))
        if template is None:
            return key
        try:
            return template.format(**params)
        except KeyError:
            return template


message_resolver = MessageResolver()


# =============================================================================
# Field rules
# =============================================================================

def _no_html(value: Optional[str]) -> Optional[str]:
    if value is not None and HTML_TAG_PATTERN.search(value):
        raise ValueError("html.forbidden")
    return value


RequiredId = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


def _text(max_length: Optional[int] = None):
    """Non-blank text without markup"""
    return Annotated[
        str, StringConstraints(strip_whitespace=True, min_length=1, max_length=max_length), AfterValidator(_no_html)
    ]


def _optional_title(max_length: Optional[int] = None):
    return Optional[_text(max_length)]


RequiredText = _text()
OptionalText = Optional[Annotated[str, AfterValidator(_no_html)]]
Description = Optional[
    Annotated[str, StringConstraints(max_length=DESCRIPTION_MAX_LENGTH), AfterValidator(_no_html)]
]


class _CreateBoardRules(BaseModel):
    title: _text(BOARD_TITLE_MAX_LENGTH)
    description: Description = None
    owner_id: RequiredId


class _UpdateBoardRules(BaseModel):
    board_id: RequiredId
    title: _optional_title(BOARD_TITLE_MAX_LENGTH) = None
    description: Description = None
    requested_by: RequiredId


class _BoardRequestRules(BaseModel):
    board_id: RequiredId
    requested_by: RequiredId


class _AddBoardMemberRules(BaseModel):
    board_id: RequiredId
    user_id: RequiredId
    role: BoardRole
    requested_by: RequiredId


class _RemoveBoardMemberRules(BaseModel):
    board_id: RequiredId
    target_user_id: RequiredId
    requested_by: RequiredId


class _UpdateBoardMemberRoleRules(BaseModel):
    board_id: RequiredId
    target_user_id: RequiredId
    new_role: BoardRole
    requested_by: RequiredId


class _CreateBoardListRules(BaseModel):
    # Title length is a board list policy, checked by the service
    board_id: RequiredId
    user_id: RequiredId
    title: RequiredText
    description: Description = None
    color: Optional[str] = None


class _UpdateBoardListRules(BaseModel):
    list_id: RequiredId
    user_id: RequiredId
    title: _optional_title() = None
    description: Description = None
    color: Optional[str] = None


class _ListRequestRules(BaseModel):
    list_id: RequiredId
    user_id: RequiredId


class _UpdateBoardListPositionRules(BaseModel):
    list_id: RequiredId
    user_id: RequiredId
    new_position: int


class _CreateCardRules(BaseModel):
    list_id: RequiredId
    user_id: RequiredId
    title: RequiredText
    description: OptionalText = None


class _UpdateCardRules(BaseModel):
    card_id: RequiredId
    user_id: RequiredId
    title: _optional_title() = None
    description: OptionalText = None


class _MoveCardRules(BaseModel):
    card_id: RequiredId
    user_id: RequiredId
    target_list_id: Optional[str] = None
    new_position: int


class _CloneCardRules(BaseModel):
    card_id: RequiredId
    user_id: RequiredId
    new_title: _optional_title() = None
    target_list_id: Optional[str] = None


class _CardRequestRules(BaseModel):
    card_id: RequiredId
    user_id: RequiredId


LabelColor = Annotated[str, StringConstraints(strip_whitespace=True, pattern=r"^#[0-9A-Fa-f]{6}$")]


class _CreateLabelRules(BaseModel):
    board_id: RequiredId
    user_id: RequiredId
    name: _text(LABEL_NAME_MAX_LENGTH)
    color: LabelColor


class _UpdateLabelRules(BaseModel):
    label_id: RequiredId
    user_id: RequiredId
    name: _optional_title(LABEL_NAME_MAX_LENGTH) = None
    color: Optional[LabelColor] = None


class _CreateCommentRules(BaseModel):
    card_id: RequiredId
    author_id: RequiredId
    content: _text(COMMENT_CONTENT_MAX_LENGTH)


class _UpdateCommentRules(BaseModel):
    comment_id: RequiredId
    requester_id: RequiredId
    content: _text(COMMENT_CONTENT_MAX_LENGTH)


class _DeleteCommentRules(BaseModel):
    comment_id: RequiredId
    requester_id: RequiredId


RULES: Dict[Type[BaseModel], Type[BaseModel]] = {
    CreateBoardCommand: _CreateBoardRules,
    UpdateBoardCommand: _UpdateBoardRules,
    ArchiveBoardCommand: _BoardRequestRules,
    DeleteBoardCommand: _BoardRequestRules,
    ToggleStarBoardCommand: _BoardRequestRules,
    AddBoardMemberCommand: _AddBoardMemberRules,
    RemoveBoardMemberCommand: _RemoveBoardMemberRules,
    UpdateBoardMemberRoleCommand: _UpdateBoardMemberRoleRules,
    CreateBoardListCommand: _CreateBoardListRules,
    UpdateBoardListCommand: _UpdateBoardListRules,
    DeleteBoardListCommand: _ListRequestRules,
    UpdateBoardListPositionCommand: _UpdateBoardListPositionRules,
    CreateCardCommand: _CreateCardRules,
    UpdateCardCommand: _UpdateCardRules,
    MoveCardCommand: _MoveCardRules,
    CloneCardCommand: _CloneCardRules,
    DeleteCardCommand: _CardRequestRules,
    CreateLabelCommand: _CreateLabelRules,
    UpdateLabelCommand: _UpdateLabelRules,
    CreateCommentCommand: _CreateCommentRules,
    UpdateCommentCommand: _UpdateCommentRules,
    DeleteCommentCommand: _DeleteCommentRules,
}


# =============================================================================
# Validation results
# =============================================================================

@dataclass(frozen=True)
class ValidationResult(Generic[T]):
    command: Optional[T] = None
    violations: List[FieldViolation] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.violations

    @property
    def is_invalid(self) -> bool:
        return bool(self.violations)


def _violation_key(error: dict) -> tuple:
    """Return (message key suffix, params) for a pydantic error"""
    kind = error["type"]
    ctx = error.get("ctx") or {}

    if kind in ("missing", "string_too_short") or error.get("input") is None:
        return "required", {}
    if kind in ("string_too_long", "too_long"):
        return "max.length", {"limit": ctx.get("max_length")}
    if kind in ("greater_than_equal", "greater_than"):
        return "min.value", {"limit": ctx.get("ge", ctx.get("gt"))}
    if kind == "string_pattern_mismatch":
        return "pattern", {}
    if kind == "value_error" and "error" in ctx:
        return str(ctx["error"]), {}
    return "invalid", {}


def violations_from(error: ValidationError, resolver: MessageResolver = message_resolver) -> List[FieldViolation]:
    violations = []
    for err in error.errors():
        field_name = str(err["loc"][0]) if err["loc"] else "command"
        suffix, params = _violation_key(err)
        rejected = None if err["type"] == "missing" else err.get("input")
        violations.append(FieldViolation(
            field=field_name,
            message=resolver.get_message(f"validation.{field_name}.{suffix}", **params),
            rejected_value=rejected,
        ))
    return violations


class CommandValidator:
    """Validates service commands against their field rules"""

    def __init__(self, resolver: MessageResolver = message_resolver):
        self.resolver = resolver

    def validate(self, command: T) -> ValidationResult[T]:
        rules = RULES.get(type(command))
        if rules is None:
            raise TypeError(f"No validation rules registered for {type(command).__name__}")

        try:
            rules.model_validate(command.model_dump())
        except ValidationError as e:
            return ValidationResult(command=command, violations=violations_from(e, self.resolver))
        return ValidationResult(command=command)

    def to_failure(self, result: ValidationResult) -> InputError:
        return input_error(self.resolver.get_message("validation.input.invalid"), result.violations)


command_validator = CommandValidator()
