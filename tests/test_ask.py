"""Tests for ask resolution."""

import pytest

from literature_server.config import RulesConfig
from literature_server.errors import (
    IllegalAsk,
    InvalidTarget,
    MatchAlreadyOver,
    NotYourTurn,
    SameTeamTarget,
    TargetHasNoCards,
    UnknownCard,
    UnknownPlayer,
)
from literature_server.game.ask import AskResolver, AskResult


@pytest.fixture
def resolver():
    return AskResolver()


def snapshot(state):
    return ({p.player_id: p.hand.ids() for p in state.players}, state.current_turn, state.turn_number)


class TestAskSuccess:
    """Tests for asks that find the card."""

    def test_card_moves_and_turn_stays(self, resolver, make_state):
        state = make_state()
        outcome = resolver.resolve(state, "p1", "p4", "Q-hearts")

        assert outcome.success
        assert outcome.result == AskResult.CARD_TRANSFERRED
        assert outcome.card.id == "Q-hearts"
        assert outcome.current_turn == "p1"
        assert state.current_turn == "p1"
        assert "Q-hearts" in state.player("p1").hand
        assert "Q-hearts" not in state.player("p4").hand
        assert state.card_counts()["p1"] == 10
        assert state.card_counts()["p4"] == 8
        assert state.turn_number == 1
        assert outcome.card_counts == state.card_counts()


class TestAskMiss:
    """Tests for asks that miss."""

    def test_turn_passes_to_target(self, resolver, make_state):
        state = make_state()
        # p2 holds 2-clubs, p4 does not
        outcome = resolver.resolve(state, "p1", "p4", "2-clubs")

        assert not outcome.success
        assert outcome.result == AskResult.TURN_PASSED
        assert outcome.card is None
        assert outcome.current_turn == "p4"
        assert state.card_counts() == {pid: 9 for pid in ["p1", "p2", "p3", "p4", "p5", "p6"]}
        assert outcome.card_counts == state.card_counts()

    def test_asking_for_own_card_misses(self, resolver, make_state):
        """Without the holding rule, asking for a card you hold just misses."""
        state = make_state()
        outcome = resolver.resolve(state, "p1", "p2", "2-hearts")
        assert outcome.result == AskResult.TURN_PASSED
        assert "2-hearts" in state.player("p1").hand


class TestAskRejected:
    """Tests for rejected asks. The state must be left untouched."""

    @pytest.mark.parametrize(
        "asker,target,card,error",
        [
            ("p2", "p1", "2-hearts", NotYourTurn),
            ("p1", "p1", "Q-hearts", InvalidTarget),
            ("p1", "p3", "9-hearts", SameTeamTarget),
            ("p1", "p9", "Q-hearts", UnknownPlayer),
            ("p9", "p4", "Q-hearts", UnknownPlayer),
            ("p1", "p4", "1-hearts", UnknownCard),
        ],
    )
    def test_rejections(self, resolver, make_state, asker, target, card, error):
        state = make_state()
        before = snapshot(state)
        with pytest.raises(error):
            resolver.resolve(state, asker, target, card)
        assert snapshot(state) == before

    def test_same_team_is_invalid_target(self, resolver, make_state):
        with pytest.raises(InvalidTarget) as exc_info:
            resolver.resolve(make_state(), "p1", "p5", "K-clubs")
        assert exc_info.value.code == "same_team_target"

    def test_target_without_cards(self, resolver, make_state):
        hands = {"p1": ["2-hearts"], "p2": [], "p3": [], "p4": ["Q-hearts"], "p5": [], "p6": []}
        state = make_state(hands)
        with pytest.raises(TargetHasNoCards):
            resolver.resolve(state, "p1", "p2", "5-diamonds")

    def test_match_over(self, resolver, make_state):
        state = make_state()
        state.game_over = True
        with pytest.raises(MatchAlreadyOver):
            resolver.resolve(state, "p1", "p4", "Q-hearts")

    def test_not_your_turn_message(self, resolver, make_state):
        with pytest.raises(NotYourTurn) as exc_info:
            resolver.resolve(make_state(), "p4", "p1", "2-hearts")
        assert exc_info.value.code == "not_your_turn"
        assert "not your turn" in str(exc_info.value)


class TestSetHoldingRule:
    """Tests for the optional rule that the asker must hold part of the set."""

    @pytest.fixture
    def strict(self):
        return AskResolver(RulesConfig(require_set_holding=True))

    def test_allowed_when_holding_set(self, strict, make_state):
        # p1 holds 2-4 of diamonds, asks for 5-diamonds from p2
        outcome = strict.resolve(make_state(), "p1", "p2", "5-diamonds")
        assert outcome.success

    def test_rejected_without_set(self, strict, make_state):
        state = make_state()
        before = snapshot(state)
        with pytest.raises(IllegalAsk):
            strict.resolve(state, "p1", "p4", "Q-hearts")
        assert snapshot(state) == before

    def test_rejected_for_own_card(self, strict, make_state):
        with pytest.raises(IllegalAsk):
            strict.resolve(make_state(), "p1", "p2", "2-hearts")
