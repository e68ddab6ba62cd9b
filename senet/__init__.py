"""
Senet - Rules engine for the ancient Egyptian race game.

A deterministic, rules-driven engine for two-player Senet on the
30-square path. The package provides:
- Stick throws with an injectable random source
- Legal move generation (captures, protection, the Houses)
- Turn/phase transitions with single-level undo
- Sessions driving the engine from UI events
- Save/restore of the full game state
"""

__version__ = "0.1.0"
