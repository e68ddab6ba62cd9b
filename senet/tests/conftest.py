"""
Pytest fixtures for Senet tests.
"""

import pytest

from ..engine_core.board import REMOVED, TOKENS_PER_PLAYER
from ..engine_core.setup import create_initial_state
from ..engine_core.state import GameState, Player, Rolling, Token, SETUP_DONE
from ..engine_core.sticks import StickOracle, StickThrow


class ScriptedOracle(StickOracle):
    """Oracle that replays a fixed list of stick counts."""

    def __init__(self, counts):
        super().__init__(seed=0)
        self.counts = list(counts)

    def throw(self) -> StickThrow:
        return StickThrow.from_count(self.counts.pop(0))


@pytest.fixture
def initial_state() -> GameState:
    """A fresh match in the Determination phase."""
    return create_initial_state()


@pytest.fixture
def make_state():
    """
    Build a state from token positions.

    Unlisted tokens of a side are parked on REMOVED, so always give
    both sides at least one token on the board unless testing a win.
    Token ids follow list order: light=[5, 9] gives l1 on 5, l2 on 9.
    """
    def build(
        light=(),
        dark=(),
        player=Player.DARK,
        phase=None,
        setup_step=SETUP_DONE,
        stick_result=None,
    ) -> GameState:
        tokens = []
        for prefix, owner, positions in (("l", Player.LIGHT, light), ("d", Player.DARK, dark)):
            padded = list(positions) + [REMOVED] * (TOKENS_PER_PLAYER - len(positions))
            tokens.extend(
                Token(token_id=f"{prefix}{i + 1}", owner=owner, position=pos)
                for i, pos in enumerate(padded)
            )
        return GameState(
            tokens=tuple(tokens),
            current_player=player,
            phase=phase if phase is not None else Rolling(),
            stick_result=stick_result,
            setup_turn_step=setup_step,
        )

    return build


@pytest.fixture
def scripted_oracle():
    """Factory for oracles replaying given stick counts."""
    return ScriptedOracle
