"""
Action System - Actions, payloads, and results.

Actions represent:
1. Player actions (throw, move, the two House of Waters options)
2. System actions (undo, reset)

All state changes flow through actions. Throws carry their StickThrow,
so the reducer itself never touches randomness.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .sticks import StickThrow


class ActionType(Enum):
    """Types of actions in the system."""
    # Player actions
    THROW = "throw"
    MOVE = "move"
    WATER_RETURN = "water_return"  # Option A: back to the House of Second Life
    WATER_THROW = "water_throw"  # Option B: throw for a 4

    # System actions
    UNDO = "undo"
    RESET = "reset"


class ErrorCode(str, Enum):
    """Structured failure codes."""
    WRONG_PHASE = "WRONG_PHASE"
    ILLEGAL_MOVE = "ILLEGAL_MOVE"
    NO_SNAPSHOT = "NO_SNAPSHOT"
    GAME_OVER = "GAME_OVER"
    NO_HANDLER = "NO_HANDLER"


@dataclass(frozen=True)
class ActionPayload:
    """
    Payload for an action - contains the action parameters.

    Different action types use different fields.
    Validation happens in the reducer.
    """
    sticks: StickThrow | None = None
    token_id: str | None = None
    to_pos: int | None = None


@dataclass(frozen=True)
class Action:
    """A complete action to be applied to the game state."""
    action_type: ActionType
    payload: ActionPayload = field(default_factory=ActionPayload)

    @classmethod
    def throw(cls, sticks: StickThrow) -> Action:
        """Factory for a stick throw (Determination or Rolling)."""
        return cls(action_type=ActionType.THROW, payload=ActionPayload(sticks=sticks))

    @classmethod
    def move(cls, token_id: str, to_pos: int) -> Action:
        """Factory for moving a token to a destination."""
        return cls(
            action_type=ActionType.MOVE,
            payload=ActionPayload(token_id=token_id, to_pos=to_pos),
        )

    @classmethod
    def water_return(cls) -> Action:
        return cls(action_type=ActionType.WATER_RETURN)

    @classmethod
    def water_throw(cls, sticks: StickThrow) -> Action:
        return cls(action_type=ActionType.WATER_THROW, payload=ActionPayload(sticks=sticks))

    @classmethod
    def undo(cls) -> Action:
        return cls(action_type=ActionType.UNDO)

    @classmethod
    def reset(cls) -> Action:
        return cls(action_type=ActionType.RESET)


@dataclass
class ActionResult:
    """
    Result of applying an action.

    Contains:
    - Whether action succeeded
    - New state (if succeeded)
    - Errors (if failed)
    - Human-readable changes (for the UI)
    """
    success: bool
    new_state: Any | None = None  # GameState
    error: str | None = None
    error_code: ErrorCode | None = None

    state_changes: list[str] = field(default_factory=list)

    @classmethod
    def failure(cls, error: str, error_code: ErrorCode | None = None) -> ActionResult:
        """Create a failure result."""
        return cls(success=False, error=error, error_code=error_code)

    @classmethod
    def success_with_state(
        cls,
        state: Any,
        changes: list[str] | None = None,
    ) -> ActionResult:
        """Create a success result with new state."""
        return cls(
            success=True,
            new_state=state,
            state_changes=changes or [],
        )
