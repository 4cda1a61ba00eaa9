"""Board member management"""

import logging
from typing import List

from kanban_boards.failures import conflict, not_found, permission_denied
from kanban_boards.models.activity import ActivityType
from kanban_boards.models.board import Board, BoardMember, BoardRole
from kanban_boards.models.commands import (
    AddBoardMemberCommand,
    RemoveBoardMemberCommand,
    UpdateBoardMemberRoleCommand,
)
from kanban_boards.repositories.board_member_repository import BoardMemberRepository
from kanban_boards.repositories.board_repository import BoardRepository
from kanban_boards.repositories.user_repository import UserRepository
from kanban_boards.result import Result
from kanban_boards.services.activity import ActivityHelper
from kanban_boards.services.base import BoardServiceBase
from kanban_boards.services.execution import attempt
from kanban_boards.services.permissions import BoardPermissionService, denied_by

logger = logging.getLogger(__name__)


class BoardMemberService(BoardServiceBase):
    def __init__(
        self,
        board_repository: BoardRepository,
        user_repository: UserRepository,
        board_member_repository: BoardMemberRepository,
        permission_service: BoardPermissionService,
        activity: ActivityHelper,
        **kwargs,
    ):
        super().__init__(board_repository, user_repository, **kwargs)
        self.board_member_repository = board_member_repository
        self.permission_service = permission_service
        self.activity = activity

    def _managed_board(self, command) -> Result[Board]:
        """Requester, validation, board, archived state and manage permission"""
        user = self._require_user(command.requested_by)
        if user.is_failure:
            return user

        invalid = self._validate(command)
        if invalid:
            return invalid

        found = self._find_board(command.board_id)
        if found.is_failure:
            return found
        board = found.value

        archived = self._reject_archived(board)
        if archived:
            return archived

        denied = denied_by(
            self.permission_service.can_manage_members(board.board_id, command.requested_by),
            self.messages.get_message("validation.board.member.manage.denied"),
            "UNAUTHORIZED_ACCESS",
            {"boardId": board.board_id},
        )
        if denied:
            logger.warning(f"User {command.requested_by} may not manage members of board {board.board_id}")
            return Result.fail(denied)
        return Result.ok(board)

    def _target_member(self, board_id: str, user_id: str) -> Result[BoardMember]:
        found = attempt(
            lambda: self.board_member_repository.find_by_board_id_and_user_id(board_id, user_id),
            "BOARD_MEMBER_LOOKUP_ERROR",
        )
        if found.is_failure:
            return found
        member = found.value
        if member is None or not member.is_active:
            return Result.fail(not_found(
                self.messages.get_message("validation.board.member.not.found"),
                "BOARD_MEMBER_NOT_FOUND",
                {"boardId": board_id, "userId": user_id},
            ))
        if member.role == BoardRole.OWNER:
            return Result.fail(permission_denied(
                self.messages.get_message("validation.board.member.owner.immutable"),
                "OWNER_MEMBER_IMMUTABLE",
                {"boardId": board_id, "userId": user_id},
            ))
        return Result.ok(member)

    def add_board_member(self, command: AddBoardMemberCommand) -> Result[BoardMember]:
        managed = self._managed_board(command)
        if managed.is_failure:
            return managed
        board = managed.value

        new_user = self._require_user(command.user_id)
        if new_user.is_failure:
            return new_user

        existing = attempt(
            lambda: self.board_member_repository.find_by_board_id_and_user_id(board.board_id, command.user_id),
            "BOARD_MEMBER_LOOKUP_ERROR",
        )
        if existing.is_failure:
            return existing
        if board.is_owned_by(command.user_id) or (existing.value is not None and existing.value.is_active):
            return Result.fail(conflict(
                self.messages.get_message("validation.board.member.already.exists"),
                "BOARD_MEMBER_ALREADY_EXISTS",
                {"boardId": board.board_id, "userId": command.user_id},
            ))

        member = BoardMember.create(board.board_id, command.user_id, command.role)
        saved = attempt(lambda: self.board_member_repository.save(member), "BOARD_MEMBER_SAVE_ERROR")
        if saved.is_failure:
            return saved

        logger.info(f"Member {command.user_id} added to board {board.board_id} as {command.role.value}")
        self.activity.log(
            ActivityType.BOARD_ADD_MEMBER,
            command.requested_by,
            {
                "memberId": command.user_id,
                "memberName": self.activity.user_name(command.user_id),
                "role": command.role.value,
            },
            board_id=board.board_id,
        )
        return Result.ok(saved.value)

    def remove_board_member(self, command: RemoveBoardMemberCommand) -> Result[None]:
        managed = self._managed_board(command)
        if managed.is_failure:
            return managed
        board = managed.value

        target = self._target_member(board.board_id, command.target_user_id)
        if target.is_failure:
            return target
        member = target.value

        if command.target_user_id == command.requested_by:
            return Result.fail(permission_denied(
                self.messages.get_message("validation.board.member.self.removal"),
                "SELF_REMOVAL_DENIED",
                {"boardId": board.board_id},
            ))

        active = attempt(
            lambda: self.board_member_repository.count_active_by_board_id(board.board_id), "BOARD_MEMBER_LOOKUP_ERROR"
        )
        if active.is_failure:
            return active
        if active.value <= 1:
            return Result.fail(permission_denied(
                self.messages.get_message("validation.board.member.last"),
                "LAST_MEMBER_REMOVAL_DENIED",
                {"boardId": board.board_id},
            ))

        deleted = attempt(
            lambda: self.board_member_repository.delete_by_id(member.member_id), "BOARD_MEMBER_DELETE_ERROR"
        )
        if deleted.is_failure:
            return deleted

        logger.info(f"Member {command.target_user_id} removed from board {board.board_id}")
        self.activity.log(
            ActivityType.BOARD_REMOVE_MEMBER,
            command.requested_by,
            {"memberId": command.target_user_id, "memberName": self.activity.user_name(command.target_user_id)},
            board_id=board.board_id,
        )
        return Result.ok()

    def update_board_member_role(self, command: UpdateBoardMemberRoleCommand) -> Result[BoardMember]:
        managed = self._managed_board(command)
        if managed.is_failure:
            return managed
        board = managed.value

        target = self._target_member(board.board_id, command.target_user_id)
        if target.is_failure:
            return target
        member = target.value

        old_role = member.role
        member.change_role(command.new_role)
        saved = attempt(lambda: self.board_member_repository.save(member), "BOARD_MEMBER_SAVE_ERROR")
        if saved.is_failure:
            return saved

        logger.info(f"Member {command.target_user_id} on board {board.board_id}: {old_role.value} -> {member.role.value}")
        self.activity.log(
            ActivityType.BOARD_UPDATE_MEMBER_ROLE,
            command.requested_by,
            {
                "memberId": command.target_user_id,
                "memberName": self.activity.user_name(command.target_user_id),
                "oldRole": old_role.value,
                "newRole": member.role.value,
            },
            board_id=board.board_id,
        )
        return Result.ok(saved.value)

    def get_board_members(self, board_id: str, user_id: str) -> Result[List[BoardMember]]:
        denied = denied_by(
            self.permission_service.can_read(board_id, user_id),
            self.messages.get_message("validation.board.access.denied"),
            "UNAUTHORIZED_ACCESS",
            {"boardId": board_id},
        )
        if denied:
            return Result.fail(denied)
        return attempt(lambda: self.board_member_repository.find_active_by_board_id(board_id), "BOARD_MEMBER_LOOKUP_ERROR")
