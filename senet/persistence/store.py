"""
State Store - Saves the live GameState to a local JSON file.

The store:
- Holds exactly one saved match
- Writes the full state after every transition (when the session autosaves)
- Never repairs a stale save: anything that fails validation is
  deleted and a fresh match is started instead
"""

from __future__ import annotations
import logging
from pathlib import Path

from ..engine_core.setup import create_initial_state
from ..engine_core.state import GameState
from .schemas import IncompatibleStateError, dumps_state, loads_state


logger = logging.getLogger(__name__)

DEFAULT_STATE_PATH = Path.home() / ".senet" / "gamestate.json"


class StateStore:
    """
    File-based store for the saved match.

    Usage:
        store = StateStore("~/.senet/gamestate.json")
        state = store.load()  # fresh state if nothing usable is saved
        ...
        store.save(state)
    """

    def __init__(self, path: str | Path | None = None):
        if path is None:
            path = DEFAULT_STATE_PATH
        self.path = Path(path).expanduser()

    def exists(self) -> bool:
        return self.path.exists()

    def load(self) -> GameState:
        """
        Load the saved match.

        Returns a fresh initial state if nothing is saved or the save is
        incompatible.
        """
        if not self.path.exists():
            return create_initial_state()

        try:
            text = self.path.read_text(encoding="utf-8")
            return loads_state(text)
        except IncompatibleStateError as e:
            logger.warning("Detected old or corrupt state format in %s, resetting: %s", self.path, e)
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Failed to read saved state %s, resetting: %s", self.path, e)

        self.clear()
        return create_initial_state()

    def save(self, state: GameState):
        """Write the full state, replacing any previous save."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp_path.write_text(dumps_state(state), encoding="utf-8")
        tmp_path.replace(self.path)

    def clear(self):
        """Delete the saved match."""
        self.path.unlink(missing_ok=True)
