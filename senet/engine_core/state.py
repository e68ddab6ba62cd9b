"""
Game State - The single aggregate the rules engine operates on.

Design principles:
- Immutable: frozen dataclasses and tuples, every change returns a new state
- Serializable: round-trips through persistence.schemas
- Phase is a tagged variant; data that only exists in one phase
  (the legal moves, the token stuck in the Waters, the winner)
  lives on that phase's variant
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import ClassVar, Union

from .board import BOARD_END, on_path


class Player(Enum):
    """The two sides."""
    LIGHT = "Light"
    DARK = "Dark"

    @property
    def opponent(self) -> Player:
        return Player.DARK if self is Player.LIGHT else Player.LIGHT

    def __str__(self) -> str:
        return self.value


class GamePhase(Enum):
    """High-level game phases."""
    DETERMINATION = "Determination"  # Rolling to see who plays Dark
    ROLLING = "Rolling"  # Current player must throw
    MOVING = "Moving"  # Awaiting a chosen move
    WATER_RESOLUTION = "WaterResolution"  # Token stuck in the House of Waters
    GAME_OVER = "GameOver"


# Setup-turn-step values
SETUP_DETERMINING = 0
SETUP_DARK_FIRST_MOVE = 1
SETUP_LIGHT_FIRST_MOVE = 2
SETUP_DONE = 3


@dataclass(frozen=True)
class Token:
    """A playing piece. position 31 means it has left the board."""
    token_id: str
    owner: Player
    position: int

    @property
    def is_on_board(self) -> bool:
        return on_path(self.position)

    @property
    def has_exited(self) -> bool:
        return self.position > BOARD_END

    def moved_to(self, position: int) -> Token:
        return Token(token_id=self.token_id, owner=self.owner, position=position)


@dataclass(frozen=True)
class Move:
    """
    A legal move, computed from the state and never stored on its own.

    is_swap: the destination holds an enemy token that goes back to from_pos.
    is_backward: produced by the forced-backward fallback.
    """
    token_id: str
    from_pos: int
    to_pos: int
    is_swap: bool = False
    is_backward: bool = False


# =============================================================================
# Phase variants
# =============================================================================

@dataclass(frozen=True)
class Determination:
    kind: ClassVar[GamePhase] = GamePhase.DETERMINATION


@dataclass(frozen=True)
class Rolling:
    kind: ClassVar[GamePhase] = GamePhase.ROLLING


@dataclass(frozen=True)
class Moving:
    """Legal moves for the pending throw."""
    moves: tuple[Move, ...]
    kind: ClassVar[GamePhase] = GamePhase.MOVING


@dataclass(frozen=True)
class WaterResolution:
    """The current player must deal with token_id on the House of Waters."""
    token_id: str
    kind: ClassVar[GamePhase] = GamePhase.WATER_RESOLUTION


@dataclass(frozen=True)
class GameOver:
    winner: Player
    kind: ClassVar[GamePhase] = GamePhase.GAME_OVER


Phase = Union[Determination, Rolling, Moving, WaterResolution, GameOver]


@dataclass(frozen=True)
class GameState:
    """
    Complete game state at a point in time.

    This is the canonical state that the engine operates on.
    All state changes go through the reducer.
    """
    tokens: tuple[Token, ...]
    current_player: Player = Player.DARK
    phase: Phase = field(default_factory=Determination)

    # Last throw
    stick_result: int | None = None
    stick_faces: tuple[bool, ...] = (False, False, False, False)

    # Append-only match log
    move_history: tuple[str, ...] = ()

    # One-level undo: the state before the last throw
    previous: GameState | None = None

    message: str = ""
    setup_turn_step: int = SETUP_DETERMINING

    @property
    def phase_kind(self) -> GamePhase:
        return self.phase.kind

    @property
    def water_token_id(self) -> str | None:
        if isinstance(self.phase, WaterResolution):
            return self.phase.token_id
        return None

    @property
    def winner(self) -> Player | None:
        if isinstance(self.phase, GameOver):
            return self.phase.winner
        return None

    @property
    def pending_moves(self) -> tuple[Move, ...]:
        if isinstance(self.phase, Moving):
            return self.phase.moves
        return ()

    def get_token(self, token_id: str) -> Token | None:
        """Get token by ID."""
        for t in self.tokens:
            if t.token_id == token_id:
                return t
        return None

    def token_at(self, position: int) -> Token | None:
        """Token occupying an on-path square, if any."""
        if not on_path(position):
            return None
        for t in self.tokens:
            if t.position == position:
                return t
        return None

    def tokens_of(self, player: Player) -> list[Token]:
        return [t for t in self.tokens if t.owner == player]

    def with_token(self, token: Token) -> GameState:
        """Return new state with one token replaced."""
        new_tokens = tuple(
            token if t.token_id == token.token_id else t
            for t in self.tokens
        )
        return self._copy_with(tokens=new_tokens)

    def with_log(self, *entries: str) -> GameState:
        return self._copy_with(move_history=self.move_history + entries)

    def without_snapshot(self) -> GameState:
        return self._copy_with(previous=None)

    def _copy_with(self, **kwargs) -> GameState:
        """Create a copy with some fields replaced."""
        return replace(self, **kwargs)
