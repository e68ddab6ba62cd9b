"""
Persistence - Save and restore the full game state.

The only persistence in the system is one saved match, stored as
JSON text. Stale or corrupt saves are discarded, never repaired.
"""

from .schemas import (
    SavedGame,
    TokenModel,
    MoveModel,
    IncompatibleStateError,
    dumps_state,
    loads_state,
    state_to_model,
    model_to_state,
)
from .store import StateStore, DEFAULT_STATE_PATH

__all__ = [
    "SavedGame",
    "TokenModel",
    "MoveModel",
    "IncompatibleStateError",
    "dumps_state",
    "loads_state",
    "state_to_model",
    "model_to_state",
    "StateStore",
    "DEFAULT_STATE_PATH",
]
