"""Board permission resolution

The board owner gets every capability and is reported with a ``None`` role.
Any other requester needs an active membership row, whose role is looked up
in the capability table. Roles are never compared by rank.
"""

import logging
from enum import Enum
from typing import Dict, FrozenSet, Optional

from kanban_boards.failures import not_found, permission_denied
from kanban_boards.models.board import BoardRole
from kanban_boards.repositories.board_member_repository import BoardMemberRepository
from kanban_boards.repositories.board_repository import BoardRepository
from kanban_boards.result import Result
from kanban_boards.services.execution import attempt
from kanban_boards.services.validation import MessageResolver, message_resolver

logger = logging.getLogger(__name__)


class Capability(str, Enum):
    READ = "read"
    WRITE = "write"
    ADMIN = "admin"
    MANAGE_MEMBERS = "manage_members"
    ARCHIVE = "archive"
    TOGGLE_STAR = "toggle_star"
    DELETE = "delete"


ALL_CAPABILITIES: FrozenSet[Capability] = frozenset(Capability)

ROLE_CAPABILITIES: Dict[BoardRole, FrozenSet[Capability]] = {
    BoardRole.OWNER: ALL_CAPABILITIES,
    BoardRole.ADMIN: frozenset({
        Capability.READ, Capability.WRITE, Capability.ADMIN, Capability.MANAGE_MEMBERS,
    }),
    BoardRole.EDITOR: frozenset({Capability.READ, Capability.WRITE}),
    BoardRole.MEMBER: frozenset({Capability.READ}),
    BoardRole.VIEWER: frozenset({Capability.READ}),
}


def role_has(role: Optional[BoardRole], capability: Capability) -> bool:
    """None stands for the board owner"""
    if role is None:
        return True
    return capability in ROLE_CAPABILITIES.get(role, frozenset())


class BoardPermissionService:
    def __init__(
        self,
        board_repository: BoardRepository,
        board_member_repository: BoardMemberRepository,
        messages: MessageResolver = message_resolver,
    ):
        self.board_repository = board_repository
        self.board_member_repository = board_member_repository
        self.messages = messages

    def get_user_board_role(self, board_id: str, user_id: str) -> Result[Optional[BoardRole]]:
        found = attempt(lambda: self.board_repository.find_by_id(board_id), "BOARD_LOOKUP_ERROR")
        if found.is_failure:
            return Result.fail(found.failure)
        board = found.value
        if board is None:
            return Result.fail(not_found(
                self.messages.get_message("validation.board.not.found"), "BOARD_NOT_FOUND", {"boardId": board_id}
            ))

        if board.is_owned_by(user_id):
            return Result.ok(None)

        found = attempt(
            lambda: self.board_member_repository.find_by_board_id_and_user_id(board_id, user_id),
            "BOARD_MEMBER_LOOKUP_ERROR",
        )
        if found.is_failure:
            return Result.fail(found.failure)
        member = found.value
        if member is None:
            return Result.fail(permission_denied(
                self.messages.get_message("validation.board.access.denied"), "UNAUTHORIZED_ACCESS",
                {"boardId": board_id, "userId": user_id},
            ))
        if not member.is_active:
            return Result.fail(permission_denied(
                self.messages.get_message("validation.board.member.inactive"), "MEMBER_INACTIVE",
                {"boardId": board_id, "userId": user_id},
            ))
        return Result.ok(member.role)

    def has_capability(self, board_id: str, user_id: str, capability: Capability) -> Result[bool]:
        return self.get_user_board_role(board_id, user_id).map(lambda role: role_has(role, capability))

    def can_read(self, board_id: str, user_id: str) -> Result[bool]:
        return self.has_capability(board_id, user_id, Capability.READ)

    def can_write(self, board_id: str, user_id: str) -> Result[bool]:
        return self.has_capability(board_id, user_id, Capability.WRITE)

    def can_admin(self, board_id: str, user_id: str) -> Result[bool]:
        return self.has_capability(board_id, user_id, Capability.ADMIN)

    def can_manage_members(self, board_id: str, user_id: str) -> Result[bool]:
        return self.has_capability(board_id, user_id, Capability.MANAGE_MEMBERS)

    def can_archive(self, board_id: str, user_id: str) -> Result[bool]:
        return self.has_capability(board_id, user_id, Capability.ARCHIVE)

    def can_toggle_star(self, board_id: str, user_id: str) -> Result[bool]:
        return self.has_capability(board_id, user_id, Capability.TOGGLE_STAR)

    def can_delete(self, board_id: str, user_id: str) -> Result[bool]:
        return self.has_capability(board_id, user_id, Capability.DELETE)


def denied_by(check: Result[bool], message: str, error_code: str, context: Optional[dict] = None):
    """Return the failure blocking an action, or None when it is allowed

    Resolver failures are passed through verbatim; a False answer becomes a
    PermissionDenied carrying the given message and code.
    """
    if check.is_failure:
        return check.failure
    if not check.value:
        return permission_denied(message, error_code, context)
    return None
