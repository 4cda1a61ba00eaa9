"""Read model for a whole board"""

from typing import Dict, List

from pydantic import BaseModel, Field

from kanban_boards.models.board import Board, BoardMember
from kanban_boards.models.board_list import BoardList
from kanban_boards.models.card import Card
from kanban_boards.models.label import Label
from kanban_boards.models.user import User


class BoardDetail(BaseModel):
    """A board with everything a board page renders

    Cards are ordered by list position, then by position within the list.
    """

    board: Board
    lists: List[BoardList] = Field(default_factory=list)
    cards: List[Card] = Field(default_factory=list)
    labels: List[Label] = Field(default_factory=list)
    members: List[BoardMember] = Field(default_factory=list)
    users: List[User] = Field(default_factory=list)
    comment_counts: Dict[str, int] = Field(default_factory=dict)
