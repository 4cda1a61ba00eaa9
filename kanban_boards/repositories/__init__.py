"""TinyDB-backed repositories, one per aggregate"""

from kanban_boards.repositories.activity_repository import ActivityRepository
from kanban_boards.repositories.board_list_repository import BoardListRepository
from kanban_boards.repositories.board_member_repository import BoardMemberRepository
from kanban_boards.repositories.board_repository import BoardRepository
from kanban_boards.repositories.card_repository import CardRepository
from kanban_boards.repositories.comment_repository import CommentRepository
from kanban_boards.repositories.label_repository import LabelRepository
from kanban_boards.repositories.user_repository import UserRepository

__all__ = [
    "ActivityRepository",
    "BoardListRepository",
    "BoardMemberRepository",
    "BoardRepository",
    "CardRepository",
    "CommentRepository",
    "LabelRepository",
    "UserRepository",
]
