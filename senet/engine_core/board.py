"""
Board - Square numbering and the named Houses of the Senet path.

The path runs 1..30. Tokens past square 30 have left the board and are
parked on the REMOVED sentinel. The visual layout is a reverse "S"
(1-10, 20-11, 21-30) but all rules use the linear numbering.
"""

from __future__ import annotations


BOARD_START = 1
BOARD_END = 30

# Position of a token that has borne off
REMOVED = 31

TOKENS_PER_PLAYER = 5

HOUSE_OF_SECOND_LIFE = 15
HOUSE_OF_BEAUTY = 26
HOUSE_OF_WATERS = 27
HOUSE_OF_THREE_JUDGES = 28
HOUSE_OF_TWO_JUDGES = 29
HOUSE_OF_HORUS = 30

# Squares 27-30 grant no protection
PROTECTION_LIMIT = HOUSE_OF_WATERS

SPECIAL_SQUARES: dict[int, tuple[str, str]] = {
    HOUSE_OF_SECOND_LIFE: ("House of Second Life", "Life"),
    HOUSE_OF_BEAUTY: ("House of Beauty", "Beauty"),
    HOUSE_OF_WATERS: ("House of Waters", "Waters"),
    HOUSE_OF_THREE_JUDGES: ("House of Three Judges", "III"),
    HOUSE_OF_TWO_JUDGES: ("House of Two Judges", "II"),
    HOUSE_OF_HORUS: ("House of Horus", "Horus"),
}

VISUAL_GRID_ORDER: tuple[int, ...] = (
    *range(1, 11),
    *range(20, 10, -1),
    *range(21, 31),
)


def on_path(position: int) -> bool:
    """True if the position is a square of the board."""
    return BOARD_START <= position <= BOARD_END


def has_exited(position: int) -> bool:
    return position > BOARD_END


def house_name(square: int) -> str | None:
    """Full name of a House, or None for a plain square."""
    entry = SPECIAL_SQUARES.get(square)
    return entry[0] if entry else None


def house_short_name(square: int) -> str | None:
    entry = SPECIAL_SQUARES.get(square)
    return entry[1] if entry else None
