"""
Tests for saving and restoring the game state.

Validates that:
- Every phase round-trips exactly, including the undo snapshot
- Incomplete or inconsistent saves are rejected
- The store falls back to a fresh match and deletes bad saves
"""

import json
import logging

import pytest

from ..engine_core.action import Action
from ..engine_core.reducer import apply_action
from ..engine_core.setup import create_initial_state
from ..engine_core.state import GameOver, Player, WaterResolution
from ..engine_core.sticks import StickThrow
from ..persistence import (
    IncompatibleStateError,
    StateStore,
    dumps_state,
    loads_state,
)
from .test_integration import play_random_match


def _mid_game_state():
    state = create_initial_state()
    for action in (
        Action.throw(StickThrow.from_count(1)),
        Action.throw(StickThrow.from_count(2)),
        Action.move("d5", 13),
        Action.throw(StickThrow.from_count(3)),
    ):
        state = apply_action(state, action).new_state
    return state


class TestRoundTrip:
    """Serializing then restoring reproduces the state."""

    def test_initial_state(self, initial_state):
        assert loads_state(dumps_state(initial_state)) == initial_state

    def test_moving_with_snapshot(self):
        state = _mid_game_state()
        assert state.pending_moves
        assert state.previous is not None

        restored = loads_state(dumps_state(state))
        assert restored == state
        assert restored.previous == state.previous

    def test_water_resolution(self, make_state):
        state = make_state(light=[1], dark=[27, 10], phase=WaterResolution("d1"))
        restored = loads_state(dumps_state(state))
        assert restored == state
        assert restored.water_token_id == "d1"

    def test_game_over(self, make_state):
        state = make_state(light=[1], dark=[], phase=GameOver(winner=Player.DARK))
        assert loads_state(dumps_state(state)).winner == Player.DARK

    def test_every_state_of_a_match(self):
        states = play_random_match(3, max_steps=400)
        assert len(states) > 1
        for state in states:
            assert loads_state(dumps_state(state)) == state

    def test_flat_field_names(self, initial_state):
        data = json.loads(dumps_state(initial_state))
        assert data["phase"] == "Determination"
        assert data["setup_turn_step"] == 0
        assert data["stick_rolls_history"] == [False] * 4
        assert data["tokens"][0] == {"id": "l1", "owner": "Light", "position": 1}


class TestIncompatible:
    """Stale or corrupt saves are rejected, never repaired."""

    def _saved(self):
        return json.loads(dumps_state(create_initial_state()))

    def test_missing_setup_step(self):
        data = self._saved()
        del data["setup_turn_step"]
        with pytest.raises(IncompatibleStateError):
            loads_state(json.dumps(data))

    def test_missing_tokens(self):
        data = self._saved()
        del data["tokens"]
        with pytest.raises(IncompatibleStateError):
            loads_state(json.dumps(data))

    def test_not_json(self):
        with pytest.raises(IncompatibleStateError):
            loads_state("{not json")

    def test_two_tokens_on_one_square(self):
        data = self._saved()
        data["tokens"][1]["position"] = 1
        with pytest.raises(IncompatibleStateError):
            loads_state(json.dumps(data))

    def test_unknown_phase(self):
        data = self._saved()
        data["phase"] = "Sleeping"
        with pytest.raises(IncompatibleStateError):
            loads_state(json.dumps(data))

    def test_waters_without_token(self):
        data = self._saved()
        data["phase"] = "WaterResolution"
        with pytest.raises(IncompatibleStateError):
            loads_state(json.dumps(data))

    def test_waters_token_off_square_27(self, make_state):
        state = make_state(light=[1], dark=[27, 10], phase=WaterResolution("d1"))
        data = json.loads(dumps_state(state))
        data["water_token_id"] = "d2"
        with pytest.raises(IncompatibleStateError):
            loads_state(json.dumps(data))

    def test_waters_token_of_other_player(self, make_state):
        state = make_state(light=[1], dark=[27, 10], phase=WaterResolution("d1"))
        data = json.loads(dumps_state(state))
        data["current_player"] = "Light"
        with pytest.raises(IncompatibleStateError):
            loads_state(json.dumps(data))

    def test_pending_move_for_unknown_token(self):
        data = json.loads(dumps_state(_mid_game_state()))
        data["pending_moves"][0]["token_id"] = "zz"
        with pytest.raises(IncompatibleStateError):
            loads_state(json.dumps(data))

    def test_pending_move_for_opponent_token(self):
        data = json.loads(dumps_state(_mid_game_state()))
        assert data["current_player"] == "Light"
        data["pending_moves"][0]["token_id"] = "d1"
        with pytest.raises(IncompatibleStateError):
            loads_state(json.dumps(data))

    def test_pending_move_from_wrong_square(self):
        data = json.loads(dumps_state(_mid_game_state()))
        assert data["pending_moves"][0]["from_pos"] == 9
        data["pending_moves"][0]["from_pos"] = 8
        with pytest.raises(IncompatibleStateError):
            loads_state(json.dumps(data))

    def test_nested_snapshot(self):
        data = json.loads(dumps_state(_mid_game_state()))
        assert data["last_state"] is not None
        data["last_state"]["last_state"] = self._saved()
        with pytest.raises(IncompatibleStateError):
            loads_state(json.dumps(data))


class TestStateStore:
    """File-backed store."""

    def test_missing_file_gives_fresh_state(self, tmp_path):
        store = StateStore(tmp_path / "game.json")
        assert store.load() == create_initial_state()

    def test_save_and_load(self, tmp_path):
        store = StateStore(tmp_path / "nested" / "game.json")
        state = _mid_game_state()
        store.save(state)

        assert store.exists()
        assert store.load() == state

    def test_corrupt_save_is_discarded(self, tmp_path, caplog):
        path = tmp_path / "game.json"
        data = json.loads(dumps_state(create_initial_state()))
        del data["setup_turn_step"]
        path.write_text(json.dumps(data), encoding="utf-8")

        with caplog.at_level(logging.WARNING, logger="senet.persistence.store"):
            state = StateStore(path).load()

        assert state == create_initial_state()
        assert not path.exists()
        assert "resetting" in caplog.text

    def test_clear(self, tmp_path):
        store = StateStore(tmp_path / "game.json")
        store.save(create_initial_state())
        store.clear()
        assert not store.exists()
