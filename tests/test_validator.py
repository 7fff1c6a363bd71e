"""Tests for declaration validation."""

import pytest

from literature_server.game.validator import DeclarationValidator, validate_declaration
from literature_server.models.card import Hand, card_by_id


def hands_of(**cards: list[str]) -> dict[str, Hand]:
    return {pid: Hand(card_by_id(cid) for cid in ids) for pid, ids in cards.items()}


@pytest.fixture
def validator():
    return DeclarationValidator()


@pytest.fixture
def hands():
    """low-hearts split over p1 and p3, p5 holds none of it."""
    return hands_of(
        p1=["2-hearts", "3-hearts", "4-hearts", "9-clubs"],
        p3=["5-hearts", "6-hearts", "7-hearts"],
        p5=["8-spades"],
    )


CORRECT = {
    "p1": ["2-hearts", "3-hearts", "4-hearts"],
    "p3": ["5-hearts", "6-hearts", "7-hearts"],
}


class TestDeclarationValidator:
    """Tests for DeclarationValidator."""

    def test_correct_declaration(self, validator, hands):
        result = validator.validate("low-hearts", CORRECT, hands)
        assert result.is_valid
        assert result

    def test_one_wrong_owner_fails_all(self, validator, hands):
        """Moving exactly one card to the wrong owner flips the verdict."""
        assignment = {
            "p1": ["2-hearts", "3-hearts"],
            "p3": ["4-hearts", "5-hearts", "6-hearts", "7-hearts"],
        }
        result = validator.validate("low-hearts", assignment, hands)
        assert not result.is_valid
        assert "4-hearts" in result.error_message

    def test_missing_card(self, validator, hands):
        assignment = {"p1": ["2-hearts", "3-hearts", "4-hearts"], "p3": ["5-hearts", "6-hearts"]}
        assert not validator.validate("low-hearts", assignment, hands)

    def test_duplicate_card(self, validator, hands):
        assignment = {
            "p1": ["2-hearts", "3-hearts", "4-hearts"],
            "p3": ["5-hearts", "6-hearts", "6-hearts"],
        }
        assert not validator.validate("low-hearts", assignment, hands)

    def test_foreign_card(self, validator, hands):
        assignment = {
            "p1": ["2-hearts", "3-hearts", "9-clubs"],
            "p3": ["5-hearts", "6-hearts", "7-hearts"],
        }
        assert not validator.validate("low-hearts", assignment, hands)

    def test_unknown_set(self, validator, hands):
        result = validator.validate("low-rubies", CORRECT, hands)
        assert not result.is_valid

    def test_unknown_player(self, validator, hands):
        assignment = {"p1": ["2-hearts", "3-hearts", "4-hearts"], "p9": ["5-hearts", "6-hearts", "7-hearts"]}
        assert not validator.validate("low-hearts", assignment, hands)

    def test_empty_entries_are_fine(self, validator, hands):
        assignment = dict(CORRECT, p5=[])
        assert validator.validate("low-hearts", assignment, hands)

    def test_no_side_effects(self, validator, hands):
        before = {pid: h.ids() for pid, h in hands.items()}
        validator.validate("low-hearts", CORRECT, hands)
        assert {pid: h.ids() for pid, h in hands.items()} == before

    def test_shortcut(self, hands):
        assert validate_declaration("low-hearts", CORRECT, hands) is True
        assert validate_declaration("high-hearts", CORRECT, hands) is False
