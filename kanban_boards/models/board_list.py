"""Board list (column) model"""

from typing import Optional

from kanban_boards.models.base import Entity, new_id, now_utc

DEFAULT_LIST_COLOR = "#0079BF"

LIST_COLORS = frozenset({
    "#0079BF",  # Blue (default)
    "#D29034",  # Orange
    "#519839",  # Green
    "#B04632",  # Red
    "#89609E",  # Purple
    "#CD5A91",  # Pink
    "#4BBFDA",  # Light blue
    "#00AECC",  # Teal
    "#838C91",  # Gray
})


def is_valid_list_color(color: Optional[str]) -> bool:
    return bool(color and color.strip() in LIST_COLORS)


def normalize_list_color(color: Optional[str]) -> str:
    """Return the palette color, falling back to the default for unknown values"""
    if not is_valid_list_color(color):
        return DEFAULT_LIST_COLOR
    return color.strip()


class BoardList(Entity):
    list_id: str
    board_id: str
    title: str
    description: str = ""
    color: str = DEFAULT_LIST_COLOR
    position: int

    @classmethod
    def create(
        cls,
        board_id: str,
        title: str,
        position: int,
        description: Optional[str] = None,
        color: Optional[str] = None,
    ) -> "BoardList":
        now = now_utc()
        return cls(
            list_id=new_id(),
            board_id=board_id,
            title=title,
            description=description or "",
            color=normalize_list_color(color),
            position=position,
            created_at=now,
            updated_at=now,
        )

    def update_title(self, title: str) -> None:
        self.title = title
        self.mark_updated()

    def update_description(self, description: Optional[str]) -> None:
        self.description = description or ""
        self.mark_updated()

    def update_color(self, color: Optional[str]) -> None:
        self.color = normalize_list_color(color)
        self.mark_updated()

    def update_position(self, position: int) -> None:
        self.position = position
        self.mark_updated()
