"""
Game Setup - Creates the initial game state.

Light tokens start on the odd squares 1-9, Dark tokens on the even
squares 2-10. Nobody owns Dark yet: the Determination phase settles
that by throwing for a 1.
"""

from __future__ import annotations

from .board import TOKENS_PER_PLAYER
from .state import GameState, Player, Token, Determination, SETUP_DETERMINING


INITIAL_MESSAGE = "Let's play Senet! Throw sticks to determine who goes first."


def _create_tokens() -> tuple[Token, ...]:
    light = [
        Token(token_id=f"l{i + 1}", owner=Player.LIGHT, position=2 * i + 1)
        for i in range(TOKENS_PER_PLAYER)
    ]
    dark = [
        Token(token_id=f"d{i + 1}", owner=Player.DARK, position=2 * i + 2)
        for i in range(TOKENS_PER_PLAYER)
    ]
    return tuple(light + dark)


def create_initial_state() -> GameState:
    """
    Set up a new match.

    Returns:
        Initial GameState in the Determination phase
    """
    return GameState(
        tokens=_create_tokens(),
        # Placeholder until a player throws a 1
        current_player=Player.DARK,
        phase=Determination(),
        stick_result=None,
        stick_faces=(False, False, False, False),
        move_history=(),
        previous=None,
        message=INITIAL_MESSAGE,
        setup_turn_step=SETUP_DETERMINING,
    )
