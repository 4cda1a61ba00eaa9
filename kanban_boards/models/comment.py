"""Card comment model"""

from kanban_boards.models.base import Entity, new_id, now_utc


class Comment(Entity):
    comment_id: str
    card_id: str
    board_id: str
    author_id: str
    content: str
    edited: bool = False

    @classmethod
    def create(cls, card_id: str, board_id: str, author_id: str, content: str) -> "Comment":
        now = now_utc()
        return cls(
            comment_id=new_id(),
            card_id=card_id,
            board_id=board_id,
            author_id=author_id,
            content=content.strip(),
            created_at=now,
            updated_at=now,
        )

    def update_content(self, content: str) -> None:
        self.content = content.strip()
        self.edited = True
        self.mark_updated()

    def is_author(self, user_id: str) -> bool:
        return self.author_id == user_id
