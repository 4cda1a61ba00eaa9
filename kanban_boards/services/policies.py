"""Board list and card policies

Policies reject input that is well formed but exceeds a configured limit.
They answer with a BusinessRuleViolation, or None when the request is fine.
"""

from enum import Enum
from typing import Optional

from kanban_boards.config import Settings, settings as default_settings
from kanban_boards.failures import BusinessRuleViolation, business_rule_violation
from kanban_boards.services.validation import MessageResolver, message_resolver


class ListCountStatus(str, Enum):
    NORMAL = "NORMAL"
    ABOVE_RECOMMENDED = "ABOVE_RECOMMENDED"
    WARNING = "WARNING"
    LIMIT_REACHED = "LIMIT_REACHED"


class BoardListPolicy:
    def __init__(self, config: Settings = default_settings, messages: MessageResolver = message_resolver):
        self.max_lists = config.max_lists_per_board
        self.recommended_lists = config.recommended_lists_per_board
        self.warning_threshold = config.list_warning_threshold
        self.max_title_length = config.max_list_title_length
        self.messages = messages

    def check_creation(self, current_count: int) -> Optional[BusinessRuleViolation]:
        if current_count >= self.max_lists:
            return business_rule_violation(
                self.messages.get_message(
                    "validation.boardlist.count.exceeded", limit=self.max_lists, count=current_count
                ),
                "LIST_CREATION_POLICY_VIOLATION",
                {"currentCount": current_count, "maxCount": self.max_lists},
            )
        return None

    def check_title(self, title: str) -> Optional[BusinessRuleViolation]:
        if len(title) > self.max_title_length:
            return business_rule_violation(
                self.messages.get_message("validation.boardlist.title.length.exceeded", limit=self.max_title_length),
                "TITLE_LENGTH_EXCEEDED",
                {"titleLength": len(title), "maxLength": self.max_title_length},
            )
        return None

    def count_status(self, count: int) -> ListCountStatus:
        if count >= self.max_lists:
            return ListCountStatus.LIMIT_REACHED
        if count >= self.warning_threshold:
            return ListCountStatus.WARNING
        if count > self.recommended_lists:
            return ListCountStatus.ABOVE_RECOMMENDED
        return ListCountStatus.NORMAL

    def status_report(self, count: int) -> dict:
        return {
            "count": count,
            "status": self.count_status(count).value,
            "recommended": self.recommended_lists,
            "warning_threshold": self.warning_threshold,
            "max": self.max_lists,
            "remaining": max(self.max_lists - count, 0),
        }


class CardPolicy:
    def __init__(self, config: Settings = default_settings, messages: MessageResolver = message_resolver):
        self.max_cards = config.max_cards_per_list
        self.max_title_length = config.max_card_title_length
        self.max_description_length = config.max_card_description_length
        self.messages = messages

    def check_creation(self, current_count: int) -> Optional[BusinessRuleViolation]:
        if current_count >= self.max_cards:
            return business_rule_violation(
                self.messages.get_message("validation.card.count.exceeded", limit=self.max_cards, count=current_count),
                "CARD_CREATION_POLICY_VIOLATION",
                {"currentCount": current_count, "maxCount": self.max_cards},
            )
        return None

    def check_content(self, title: Optional[str], description: Optional[str]) -> Optional[BusinessRuleViolation]:
        if title is not None and len(title) > self.max_title_length:
            return business_rule_violation(
                self.messages.get_message("validation.card.title.length.exceeded", limit=self.max_title_length),
                "TITLE_LENGTH_EXCEEDED",
                {"titleLength": len(title), "maxLength": self.max_title_length},
            )
        if description is not None and len(description) > self.max_description_length:
            return business_rule_violation(
                self.messages.get_message(
                    "validation.card.description.length.exceeded", limit=self.max_description_length
                ),
                "DESCRIPTION_LENGTH_EXCEEDED",
                {"descriptionLength": len(description), "maxLength": self.max_description_length},
            )
        return None
