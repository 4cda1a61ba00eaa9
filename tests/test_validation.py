"""Command validation and message resolution tests"""

import pytest

from kanban_boards.failures import InputError
from kanban_boards.models.commands import (
    AddBoardMemberCommand,
    CreateBoardCommand,
    CreateBoardListCommand,
    CreateLabelCommand,
    MoveCardCommand,
    UpdateBoardCommand,
    UpdateBoardListPositionCommand,
)
from kanban_boards.services.validation import CommandValidator, MessageResolver


@pytest.fixture
def validator():
    return CommandValidator()


def fields(result):
    return {v.field: v.message for v in result.violations}


class TestMessageResolver:
    """Test message lookup and fall-backs"""

    def test_known_key(self):
        assert MessageResolver().get_message("validation.board.not.found") == "board not found"

    def test_field_key_falls_back_to_generic_rule(self):
        resolver = MessageResolver()

        assert resolver.get_message("validation.title.required") == "title is required"
        assert resolver.get_message("validation.title.max.length", limit=100) == "title must be at most 100 characters"

    def test_unknown_key_is_returned(self):
        assert MessageResolver().get_message("nothing.here") == "nothing.here"

    def test_overrides(self):
        resolver = MessageResolver({"validation.title.required": "Please add a title"})

        assert resolver.get_message("validation.title.required") == "Please add a title"


class TestBoardCommands:
    """Test board command validation"""

    def test_valid_create(self, validator):
        result = validator.validate(CreateBoardCommand(title="Roadmap", description="Q3", owner_id="u1"))

        assert result.is_valid

    def test_missing_fields(self, validator):
        result = validator.validate(CreateBoardCommand())

        assert fields(result) == {"title": "title is required", "owner_id": "owner_id is required"}

    def test_blank_title_is_required(self, validator):
        result = validator.validate(CreateBoardCommand(title="   ", owner_id="u1"))

        assert fields(result) == {"title": "title is required"}

    def test_title_too_long(self, validator):
        result = validator.validate(CreateBoardCommand(title="x" * 101, owner_id="u1"))

        assert fields(result)["title"] == "title must be at most 100 characters"
        assert result.violations[0].rejected_value == "x" * 101

    def test_html_rejected(self, validator):
        result = validator.validate(CreateBoardCommand(title="<b>Board</b>", owner_id="u1"))

        assert fields(result) == {"title": "title must not contain HTML tags"}

    def test_description_too_long(self, validator):
        result = validator.validate(CreateBoardCommand(title="Board", description="d" * 501, owner_id="u1"))

        assert "description" in fields(result)

    def test_update_allows_partial_changes(self, validator):
        result = validator.validate(UpdateBoardCommand(board_id="b1", description="new", requested_by="u1"))

        assert result.is_valid

    def test_update_rejects_empty_title(self, validator):
        result = validator.validate(UpdateBoardCommand(board_id="b1", title="", requested_by="u1"))

        assert fields(result) == {"title": "title is required"}


class TestOtherCommands:
    """Test list, member, card and label command validation"""

    def test_list_title_length_is_left_to_policy(self, validator):
        result = validator.validate(CreateBoardListCommand(board_id="b1", user_id="u1", title="x" * 150))

        assert result.is_valid

    def test_position_required(self, validator):
        result = validator.validate(UpdateBoardListPositionCommand(list_id="l1", user_id="u1"))

        assert fields(result) == {"new_position": "new_position is required"}

    def test_member_role_required(self, validator):
        result = validator.validate(AddBoardMemberCommand(board_id="b1", user_id="u2", requested_by="u1"))

        assert fields(result) == {"role": "role is required"}

    def test_move_card_target_list_optional(self, validator):
        result = validator.validate(MoveCardCommand(card_id="c1", user_id="u1", new_position=0))

        assert result.is_valid

    def test_label_color_format(self, validator):
        result = validator.validate(CreateLabelCommand(board_id="b1", user_id="u1", name="Bug", color="red"))

        assert fields(result) == {"color": "color has an invalid format"}

    def test_to_failure(self, validator):
        result = validator.validate(CreateBoardCommand())

        failure = validator.to_failure(result)

        assert isinstance(failure, InputError)
        assert failure.error_code == "INVALID_INPUT"
        assert failure.status_code == 400
        assert len(failure.violations) == 2

    def test_unknown_command_type(self, validator):
        with pytest.raises(TypeError):
            validator.validate(object())
