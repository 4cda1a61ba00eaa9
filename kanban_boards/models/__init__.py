"""Models package - domain entities and service commands"""

from kanban_boards.models.activity import Activity, ActivityType
from kanban_boards.models.board import Board, BoardMember, BoardRole
from kanban_boards.models.board_detail import BoardDetail
from kanban_boards.models.board_list import BoardList
from kanban_boards.models.card import Card
from kanban_boards.models.comment import Comment
from kanban_boards.models.label import Label
from kanban_boards.models.user import User

__all__ = [
    "Activity",
    "ActivityType",
    "Board",
    "BoardDetail",
    "BoardMember",
    "BoardRole",
    "BoardList",
    "Card",
    "Comment",
    "Label",
    "User",
]
