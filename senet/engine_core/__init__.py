"""
Engine Core - Deterministic Senet state management and rules.

The engine is the runtime that:
1. Creates the initial GameState
2. Resolves stick throws
3. Generates legal moves
4. Applies actions via the reducer
5. Detects the winner
"""

from .state import (
    GameState,
    GamePhase,
    Player,
    Token,
    Move,
    Phase,
    Determination,
    Rolling,
    Moving,
    WaterResolution,
    GameOver,
)
from .sticks import StickThrow, StickOracle, throw_sticks, move_distance, has_extra_turn
from .action import Action, ActionType, ActionPayload, ActionResult, ErrorCode
from .action_generator import MoveGenerator, legal_moves, is_legal, is_protected
from .reducer import Reducer, apply_action, check_win_condition
from .setup import create_initial_state

__all__ = [
    "GameState",
    "GamePhase",
    "Player",
    "Token",
    "Move",
    "Phase",
    "Determination",
    "Rolling",
    "Moving",
    "WaterResolution",
    "GameOver",
    "StickThrow",
    "StickOracle",
    "throw_sticks",
    "move_distance",
    "has_extra_turn",
    "Action",
    "ActionType",
    "ActionPayload",
    "ActionResult",
    "ErrorCode",
    "MoveGenerator",
    "legal_moves",
    "is_legal",
    "is_protected",
    "Reducer",
    "apply_action",
    "check_win_condition",
    "create_initial_state",
]
