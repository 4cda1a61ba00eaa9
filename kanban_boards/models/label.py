"""Board label model"""

from kanban_boards.models.base import Entity, new_id, now_utc


class Label(Entity):
    label_id: str
    board_id: str
    name: str
    color: str

    @classmethod
    def create(cls, board_id: str, name: str, color: str) -> "Label":
        now = now_utc()
        return cls(
            label_id=new_id(),
            board_id=board_id,
            name=name,
            color=color,
            created_at=now,
            updated_at=now,
        )

    def rename(self, name: str) -> None:
        self.name = name
        self.mark_updated()

    def recolor(self, color: str) -> None:
        self.color = color
        self.mark_updated()
