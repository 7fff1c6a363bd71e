"""Tests for the game engine."""

import random
import threading

import pytest

from literature_server.errors import (
    MatchAlreadyOver,
    MatchNotStarted,
    NotYourTurn,
    SameTeamTarget,
    UnknownPlayer,
)
from literature_server.game.engine import GameEngine, Seat
from literature_server.models.card import SetKey, cards_in_set
from literature_server.models.player import Team

LOW_HEARTS = ["2-hearts", "3-hearts", "4-hearts", "5-hearts", "6-hearts", "7-hearts"]


def true_assignment(state, key: SetKey) -> dict[str, list[str]]:
    """Build the correct assignment for a set from the real hands."""
    assignment: dict[str, list[str]] = {}
    for player in state.players:
        held = [c.id for c in player.hand.cards_in_set(key)]
        if held:
            assignment[player.player_id] = held
    return assignment


class TestStartMatch:
    """Tests for match setup."""

    def test_deal(self, engine):
        assert engine.started
        assert not engine.is_over
        assert engine.card_counts() == {pid: 9 for pid in engine.player_ids()}

    def test_first_turn_is_seated(self, engine):
        view = engine.view_for("p1")
        assert view.current_turn in engine.player_ids()

    def test_seeded_match_is_reproducible(self, seats):
        first = GameEngine(rng=random.Random(9)).start_match(seats)
        second = GameEngine(rng=random.Random(9)).start_match(seats)
        assert first.current_turn == second.current_turn
        for a, b in zip(first.players, second.players):
            assert a.hand.to_list() == b.hand.to_list()

    def test_wrong_player_count(self, seats):
        with pytest.raises(ValueError):
            GameEngine().start_match(seats[:5])

    def test_unbalanced_teams(self, seats):
        seats[1] = Seat(player_id="p2", name="Player2", team=Team.A)
        with pytest.raises(ValueError):
            GameEngine().start_match(seats)

    def test_duplicate_ids(self, seats):
        seats[1] = Seat(player_id="p1", name="Player2", team=Team.B)
        with pytest.raises(ValueError):
            GameEngine().start_match(seats)

    def test_not_started(self):
        engine = GameEngine()
        assert not engine.started
        with pytest.raises(MatchNotStarted):
            engine.submit_ask("p1", "p2", "2-hearts")
        with pytest.raises(MatchNotStarted):
            engine.view_for("p1")


class TestViews:
    """Tests for per-player views."""

    def test_only_own_hand_visible(self, engine):
        for pid in engine.player_ids():
            view = engine.view_for(pid)
            assert view.viewer == pid
            for player in view.players:
                if player.player_id == pid:
                    assert len(player.hand) == 9
                else:
                    assert player.hand is None
                assert player.card_count == 9

    def test_wire_form_hides_other_hands(self, engine):
        wire = engine.view_for("p2").to_wire()
        hands = {p["player_id"]: p["hand"] for p in wire["players"]}
        assert hands["p2"] is not None
        assert all(hands[pid] is None for pid in hands if pid != "p2")

    def test_unknown_viewer(self, engine):
        with pytest.raises(UnknownPlayer):
            engine.view_for("nobody")

    def test_team_of(self, engine):
        assert engine.team_of("p1") == Team.A
        assert engine.team_of("p2") == Team.B


class TestScenarios:
    """End-to-end sequences on known hands."""

    def test_hit_then_miss(self, rigged_engine):
        engine, _ = rigged_engine

        hit = engine.submit_ask("p1", "p4", "Q-hearts")
        assert hit.success
        counts = engine.card_counts()
        assert counts["p1"] == 10
        assert counts["p4"] == 8
        assert engine.view_for("p1").current_turn == "p1"

        miss = engine.submit_ask("p1", "p4", "2-clubs")
        assert not miss.success
        assert engine.view_for("p1").current_turn == "p4"
        assert engine.card_counts()["p1"] == 10
        assert engine.card_counts()["p4"] == 8

    def test_declaration_with_wrong_owner(self, rigged_engine):
        engine, state = rigged_engine
        outcome = engine.submit_declare("p1", "low-hearts", {"p1": LOW_HEARTS[:5], "p3": LOW_HEARTS[5:]})

        assert not outcome.is_valid
        assert outcome.awarded_team == Team.B
        assert all(not p.hand.has_set(SetKey.LOW_HEARTS) for p in state.players)
        assert engine.card_counts()["p1"] == 3

    def test_rejected_request_changes_nothing(self, rigged_engine):
        engine, _ = rigged_engine
        with pytest.raises(NotYourTurn):
            engine.submit_ask("p4", "p1", "2-hearts")
        with pytest.raises(SameTeamTarget):
            engine.submit_ask("p1", "p3", "9-hearts")
        assert engine.card_counts() == {pid: 9 for pid in engine.player_ids()}
        assert engine.view_for("p1").current_turn == "p1"

    def test_match_end_and_callback(self, rigged_engine):
        engine, state = rigged_engine
        ended = []
        engine.set_callbacks(on_game_end=ended.append)

        # Team A (p1, p3, p5) holds low hearts, low spades and high clubs outright
        for key in (SetKey.LOW_HEARTS, SetKey.LOW_SPADES, SetKey.HIGH_CLUBS):
            state.current_turn = next(
                p.player_id for p in state.players if p.hand.has_set(key)
            )
            outcome = engine.submit_declare(state.current_turn, key, true_assignment(state, key))
            assert outcome.is_valid

        # Two wrong claims by team B hand A its fourth and fifth sets
        state.current_turn = "p2"
        engine.submit_declare("p2", SetKey.LOW_CLUBS, {"p4": [c.id for c in cards_in_set("low-clubs")]})
        assert not engine.is_over
        state.current_turn = "p4"
        final = engine.submit_declare("p4", SetKey.HIGH_DIAMONDS, {"p2": [c.id for c in cards_in_set("high-diamonds")]})

        assert final.game_over
        assert final.winning_team == Team.A
        assert engine.is_over
        assert ended == [state]

        with pytest.raises(MatchAlreadyOver):
            engine.submit_ask(final.current_turn, "p1", "2-hearts")
        with pytest.raises(MatchAlreadyOver):
            engine.submit_declare(final.current_turn, SetKey.HIGH_HEARTS, {})


class TestInvariants:
    """Property checks over random play."""

    @pytest.mark.parametrize("seed", [1, 2, 3, 4, 5])
    def test_cards_conserved_through_random_play(self, seats, seed):
        rng = random.Random(seed)
        engine = GameEngine(rng=random.Random(seed))
        state = engine.start_match(seats)
        deck_ids = {c.id for key in SetKey for c in cards_in_set(key)}

        for step in range(500):
            if engine.is_over:
                break
            me = state.player(state.current_turn)
            targets = [p for p in state.team_players(me.team.opponent) if p.has_cards()]
            open_sets = [k for k in SetKey if not state.is_declared(k)]

            if step % 4 == 3 or not targets or not me.has_cards():
                key = rng.choice(open_sets)
                assignment = true_assignment(state, key)
                if rng.random() < 0.3:
                    assignment = {me.player_id: [c.id for c in cards_in_set(key)]}
                engine.submit_declare(me.player_id, key, assignment)
            else:
                target = rng.choice(targets)
                card = rng.choice(sorted(deck_ids))
                engine.submit_ask(me.player_id, target.player_id, card)

            in_hands = [cid for p in state.players for cid in p.hand.ids()]
            assert len(in_hands) == len(set(in_hands))
            assert len(in_hands) + 6 * len(state.declared_sets) == 54
            assert len(state.declared_sets) <= 9
            assert state.team_score(Team.A) + state.team_score(Team.B) == len(state.declared_sets)

        assert engine.is_over
        assert state.winning_team is not None
        assert state.team_score(state.winning_team) == 5


class TestConcurrency:
    """Tests for serialized request handling."""

    def test_racing_asks_accept_one(self, rigged_engine):
        """Many threads ask at once; each accepted hit is applied exactly once."""
        engine, state = rigged_engine
        wanted = ["Q-hearts", "K-hearts", "A-hearts", "9-diamonds", "10-diamonds", "J-diamonds"]
        errors: list[Exception] = []

        def ask(card_id: str) -> None:
            try:
                engine.submit_ask("p1", "p4", card_id)
            except Exception as e:
                errors.append(e)

        threads = [threading.Thread(target=ask, args=(cid,)) for cid in wanted]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert errors == []
        assert engine.card_counts()["p1"] == 15
        assert engine.card_counts()["p4"] == 3
        assert state.turn_number == 6
