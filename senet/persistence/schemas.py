"""
Pydantic Schemas for the saved game - the flat text form of a GameState.

The saved shape is flat: the phase is a plain name and the phase payloads
(the pending moves, the token in the Waters, the winner) are optional
side fields. Validation turns a flat record back into the tagged phase
variant and rejects anything that does not describe a reachable board:

- tokens and setup_turn_step are required; records written before they
  existed are incompatible
- at most one token per square, unique token ids
- phase side fields must be present for their phase and agree with the
  board: the Waters token sits on 27 and belongs to the player to move,
  pending moves start from the mover's own tokens
- the undo snapshot is one level deep
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, ValidationError, model_validator

from ..engine_core.board import BOARD_END, HOUSE_OF_WATERS, REMOVED, on_path
from ..engine_core.state import (
    Determination,
    GameOver,
    GamePhase,
    GameState,
    Move,
    Moving,
    Player,
    Rolling,
    Token,
    WaterResolution,
    SETUP_DETERMINING,
    SETUP_DONE,
)
from ..engine_core.sticks import NUM_STICKS


class IncompatibleStateError(ValueError):
    """A saved blob that cannot be restored and must be discarded."""


# =============================================================================
# Enums
# =============================================================================

class PlayerName(str, Enum):
    LIGHT = "Light"
    DARK = "Dark"


class PhaseName(str, Enum):
    DETERMINATION = "Determination"
    ROLLING = "Rolling"
    MOVING = "Moving"
    WATER_RESOLUTION = "WaterResolution"
    GAME_OVER = "GameOver"


# =============================================================================
# Models
# =============================================================================

class TokenModel(BaseModel):
    """A token as saved."""
    id: str
    owner: PlayerName
    position: int = Field(ge=0, le=REMOVED)


class MoveModel(BaseModel):
    """A pending legal move, saved with the Moving phase."""
    token_id: str
    from_pos: int = Field(ge=1, le=BOARD_END)
    to_pos: int = Field(ge=1, le=REMOVED)
    is_swap: bool = False
    is_backward: bool = False


class SavedGame(BaseModel):
    """The whole GameState, including the one-level undo snapshot."""
    tokens: list[TokenModel]
    current_player: PlayerName
    phase: PhaseName
    setup_turn_step: int = Field(ge=SETUP_DETERMINING, le=SETUP_DONE)

    stick_result: Optional[int] = Field(None, ge=0, le=NUM_STICKS)
    stick_rolls_history: list[bool] = Field(
        default_factory=lambda: [False] * NUM_STICKS,
        min_length=NUM_STICKS,
        max_length=NUM_STICKS,
    )
    move_history: list[str] = Field(default_factory=list)
    last_state: Optional["SavedGame"] = None
    message: str = ""

    # Phase payloads
    pending_moves: list[MoveModel] = Field(default_factory=list)
    water_token_id: Optional[str] = None
    winner: Optional[PlayerName] = None

    @model_validator(mode="after")
    def check_board(self) -> "SavedGame":
        ids = [t.id for t in self.tokens]
        if len(set(ids)) != len(ids):
            raise ValueError("duplicate token ids")

        occupied = [t.position for t in self.tokens if on_path(t.position)]
        if len(set(occupied)) != len(occupied):
            raise ValueError("two tokens share a square")

        by_id = {t.id: t for t in self.tokens}
        if self.phase == PhaseName.WATER_RESOLUTION:
            stuck = by_id.get(self.water_token_id)
            if stuck is None or stuck.position != HOUSE_OF_WATERS:
                raise ValueError("WaterResolution needs the id of the token in the Waters")
            if stuck.owner != self.current_player:
                raise ValueError("the token in the Waters must belong to the player to move")
        if self.phase == PhaseName.GAME_OVER and self.winner is None:
            raise ValueError("GameOver needs a winner")
        if self.phase == PhaseName.MOVING and (self.stick_result is None or not self.pending_moves):
            raise ValueError("Moving needs a stick result and its legal moves")
        for move in self.pending_moves:
            token = by_id.get(move.token_id)
            if token is None or token.owner != self.current_player:
                raise ValueError(f"pending move for a token the player does not own: {move.token_id}")
            if token.position != move.from_pos:
                raise ValueError(f"pending move for {move.token_id} starts off its square")

        if self.last_state is not None and self.last_state.last_state is not None:
            raise ValueError("the undo snapshot cannot carry its own snapshot")
        return self


SavedGame.model_rebuild()


# =============================================================================
# Conversion
# =============================================================================

def state_to_model(state: GameState) -> SavedGame:
    """Flatten a GameState into its saved form."""
    return SavedGame(
        tokens=[
            TokenModel(id=t.token_id, owner=PlayerName(t.owner.value), position=t.position)
            for t in state.tokens
        ],
        current_player=PlayerName(state.current_player.value),
        phase=PhaseName(state.phase_kind.value),
        setup_turn_step=state.setup_turn_step,
        stick_result=state.stick_result,
        stick_rolls_history=list(state.stick_faces),
        move_history=list(state.move_history),
        last_state=state_to_model(state.previous) if state.previous else None,
        message=state.message,
        pending_moves=[
            MoveModel(
                token_id=m.token_id,
                from_pos=m.from_pos,
                to_pos=m.to_pos,
                is_swap=m.is_swap,
                is_backward=m.is_backward,
            )
            for m in state.pending_moves
        ],
        water_token_id=state.water_token_id,
        winner=PlayerName(state.winner.value) if state.winner else None,
    )


def _phase_from_model(model: SavedGame):
    kind = GamePhase(model.phase.value)
    if kind == GamePhase.DETERMINATION:
        return Determination()
    if kind == GamePhase.ROLLING:
        return Rolling()
    if kind == GamePhase.MOVING:
        return Moving(moves=tuple(
            Move(
                token_id=m.token_id,
                from_pos=m.from_pos,
                to_pos=m.to_pos,
                is_swap=m.is_swap,
                is_backward=m.is_backward,
            )
            for m in model.pending_moves
        ))
    if kind == GamePhase.WATER_RESOLUTION:
        return WaterResolution(token_id=model.water_token_id)
    return GameOver(winner=Player(model.winner.value))


def model_to_state(model: SavedGame) -> GameState:
    """Rebuild a GameState from its saved form."""
    return GameState(
        tokens=tuple(
            Token(token_id=t.id, owner=Player(t.owner.value), position=t.position)
            for t in model.tokens
        ),
        current_player=Player(model.current_player.value),
        phase=_phase_from_model(model),
        stick_result=model.stick_result,
        stick_faces=tuple(model.stick_rolls_history),
        move_history=tuple(model.move_history),
        previous=model_to_state(model.last_state) if model.last_state else None,
        message=model.message,
        setup_turn_step=model.setup_turn_step,
    )


def dumps_state(state: GameState) -> str:
    """Serialize a GameState to JSON text."""
    return state_to_model(state).model_dump_json()


def loads_state(text: str | bytes) -> GameState:
    """
    Restore a GameState from JSON text.

    Raises:
        IncompatibleStateError: text is not a complete, consistent saved game
    """
    try:
        model = SavedGame.model_validate_json(text)
    except ValidationError as e:
        raise IncompatibleStateError(str(e)) from e
    return model_to_state(model)
