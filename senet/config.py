"""
Configuration - Settings for a Senet session.

Values come from the environment when present:
- SENET_STATE_PATH: where the match is saved (default ~/.senet/gamestate.json)
- SENET_SEED: integer seed for the sticks (default: unseeded; a
  non-integer value is ignored with a warning)
- SENET_AUTOSAVE: "0"/"false" disables saving after each action
- SENET_LOG_LEVEL: logging level name (default WARNING)
"""

from __future__ import annotations
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from .persistence.store import DEFAULT_STATE_PATH


logger = logging.getLogger(__name__)

_FALSE_VALUES = {"0", "false", "no", "off"}


def _parse_seed(value: str | None) -> int | None:
    if not value:
        return None
    try:
        return int(value)
    except ValueError:
        logger.warning("Ignoring non-integer SENET_SEED %r, sticks are unseeded", value)
        return None


@dataclass
class SenetConfig:
    """Session configuration."""
    state_path: Path = field(default_factory=lambda: DEFAULT_STATE_PATH)
    seed: int | None = None
    autosave: bool = True
    log_level: str = "WARNING"

    @classmethod
    def from_env(cls) -> SenetConfig:
        """Build a config from SENET_* environment variables."""
        state_path = os.getenv("SENET_STATE_PATH")
        seed = os.getenv("SENET_SEED")
        autosave = os.getenv("SENET_AUTOSAVE", "1")
        return cls(
            state_path=Path(state_path).expanduser() if state_path else DEFAULT_STATE_PATH,
            seed=_parse_seed(seed),
            autosave=autosave.strip().lower() not in _FALSE_VALUES,
            log_level=os.getenv("SENET_LOG_LEVEL", "WARNING").upper(),
        )

