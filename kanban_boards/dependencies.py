"""Service wiring

One container per process holds the database, the repositories and the
services built on top of them. Routes receive services through the getters
below, which tests replace with ``app.dependency_overrides``.
"""

import logging
from functools import lru_cache

from fastapi import Depends

from kanban_boards.config import Settings, get_settings
from kanban_boards.repositories import (
    ActivityRepository,
    BoardListRepository,
    BoardMemberRepository,
    BoardRepository,
    CardRepository,
    CommentRepository,
    LabelRepository,
    UserRepository,
)
from kanban_boards.services.activity import ActivityHelper, ActivityService, NameLookup
from kanban_boards.services.board_list_service import BoardListService
from kanban_boards.services.board_member_service import BoardMemberService
from kanban_boards.services.board_service import BoardService
from kanban_boards.services.card_service import CardService
from kanban_boards.services.comment_service import CommentService
from kanban_boards.services.database import Database
from kanban_boards.services.label_service import LabelService
from kanban_boards.services.permissions import BoardPermissionService
from kanban_boards.services.policies import BoardListPolicy, CardPolicy
from kanban_boards.services.positions import ListPositionManager

logger = logging.getLogger(__name__)


class Container:
    def __init__(self, db: Database, config: Settings):
        self.db = db
        self.config = config

        self.users = UserRepository(db)
        self.boards = BoardRepository(db)
        self.board_members = BoardMemberRepository(db)
        self.lists = BoardListRepository(db)
        self.cards = CardRepository(db)
        self.labels = LabelRepository(db)
        self.comments = CommentRepository(db)
        self.activities = ActivityRepository(db)

        self.permission_service = BoardPermissionService(self.boards, self.board_members)
        self.activity = ActivityHelper(self.activities, NameLookup(self.users, self.boards))
        self.position_manager = ListPositionManager(self.lists)

        self.board_service = BoardService(
            self.boards, self.users, self.board_members, self.lists, self.cards, self.labels, self.comments,
            self.permission_service, self.activity,
        )
        self.board_member_service = BoardMemberService(
            self.boards, self.users, self.board_members, self.permission_service, self.activity,
        )
        self.board_list_service = BoardListService(
            self.boards, self.users, self.lists, self.cards, self.comments, self.permission_service,
            self.position_manager, BoardListPolicy(config), self.activity,
        )
        self.card_service = CardService(
            self.boards, self.users, self.lists, self.cards, self.board_members, self.labels, self.comments,
            self.permission_service, CardPolicy(config), self.activity,
        )
        self.label_service = LabelService(
            self.boards, self.users, self.labels, self.cards, self.permission_service,
        )
        self.comment_service = CommentService(
            self.boards, self.users, self.cards, self.comments, self.permission_service, self.activity,
        )
        self.activity_service = ActivityService(self.activities, self.permission_service)


def build_container(config: Settings) -> Container:
    db = Database(config.database_path or None)
    db.initialize()
    return Container(db, config)


@lru_cache()
def get_container() -> Container:
    return build_container(get_settings())


def get_user_repository(container: Container = Depends(get_container)) -> UserRepository:
    return container.users


def get_name_lookup(container: Container = Depends(get_container)) -> NameLookup:
    return container.activity.names


def get_board_service(container: Container = Depends(get_container)) -> BoardService:
    return container.board_service


def get_board_member_service(container: Container = Depends(get_container)) -> BoardMemberService:
    return container.board_member_service


def get_board_list_service(container: Container = Depends(get_container)) -> BoardListService:
    return container.board_list_service


def get_card_service(container: Container = Depends(get_container)) -> CardService:
    return container.card_service


def get_label_service(container: Container = Depends(get_container)) -> LabelService:
    return container.label_service


def get_activity_service(container: Container = Depends(get_container)) -> ActivityService:
    return container.activity_service


def get_comment_service(container: Container = Depends(get_container)) -> CommentService:
    return container.comment_service
