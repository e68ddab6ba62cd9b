"""
Board View - What a renderer needs to draw one frame.

Squares come in visual order (1-10, 20-11, 21-30), each with its occupant,
its House label, and whether a click on it selects a token or completes a
move. Exiting the board has no square, so the view carries a separate
exit target for the square number REMOVED.
"""

from __future__ import annotations
from dataclasses import dataclass, field

from ..engine_core.board import REMOVED, VISUAL_GRID_ORDER, house_name, house_short_name
from ..engine_core.state import GamePhase, GameState, Player


@dataclass(frozen=True)
class SquareView:
    square: int
    token_id: str | None = None
    owner: Player | None = None
    house: str | None = None
    label: str | None = None
    selectable: bool = False  # Source of a legal move
    reachable: bool = False  # Destination for the selected token
    selected: bool = False


@dataclass(frozen=True)
class BoardView:
    squares: tuple[SquareView, ...]
    current_player: Player
    phase: GamePhase
    message: str
    stick_result: int | None
    stick_faces: tuple[bool, ...]
    log: tuple[str, ...] = ()
    exit_reachable: bool = False  # Click REMOVED to bear off the selected token
    can_undo: bool = False
    winner: Player | None = None
    exited: dict[Player, int] = field(default_factory=dict)


def build_board_view(state: GameState, selected_token_id: str | None = None) -> BoardView:
    """Build the renderer's view of a state and the current selection."""
    moves = state.pending_moves
    sources = {m.from_pos for m in moves}
    targets = {m.to_pos for m in moves if m.token_id == selected_token_id}

    squares = []
    for square in VISUAL_GRID_ORDER:
        token = state.token_at(square)
        squares.append(SquareView(
            square=square,
            token_id=token.token_id if token else None,
            owner=token.owner if token else None,
            house=house_name(square),
            label=house_short_name(square),
            selectable=square in sources,
            reachable=square in targets,
            selected=token is not None and token.token_id == selected_token_id,
        ))

    return BoardView(
        squares=tuple(squares),
        current_player=state.current_player,
        phase=state.phase_kind,
        message=state.message,
        stick_result=state.stick_result,
        stick_faces=state.stick_faces,
        log=state.move_history,
        exit_reachable=REMOVED in targets,
        can_undo=state.previous is not None and state.phase_kind != GamePhase.GAME_OVER,
        winner=state.winner,
        exited={
            player: sum(1 for t in state.tokens_of(player) if t.has_exited)
            for player in Player
        },
    )
