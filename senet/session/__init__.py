"""
Session Module - Drives one match from UI events.

A session holds the live game state, throws the sticks, tracks the
board selection, and saves the state after every accepted action.
"""

from .manager import Session
from .view import BoardView, SquareView, build_board_view

__all__ = [
    "Session",
    "BoardView",
    "SquareView",
    "build_board_view",
]
