"""
Move Generator - Generates all legal moves from a game state.

The move generator is used by:
1. The reducer, when a throw moves the game into the Moving phase
2. The session/board view, to highlight sources and destinations
3. Validation (is this move in the legal set?)

Rules applied, in order:
- Light's first move must use the token on square 9
- Houses of Three/Two Judges hold a token until an exact 3/2
- Nothing passes the House of Beauty without landing on it
- Exits only from 28 (exact 3), 29 (exact 2) or 30 (any throw)
- No landing on your own token; enemy tokens are swapped back
  unless protected by an adjacent ally
- If nothing moves forward, the same throw is tried backward
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable

from .board import (
    BOARD_END,
    BOARD_START,
    HOUSE_OF_BEAUTY,
    HOUSE_OF_HORUS,
    HOUSE_OF_THREE_JUDGES,
    HOUSE_OF_TWO_JUDGES,
    PROTECTION_LIMIT,
    REMOVED,
    on_path,
)
from .state import GameState, Move, Moving, Player, Token, SETUP_LIGHT_FIRST_MOVE
from .sticks import move_distance


# The token Light must move first
LIGHT_OPENING_SQUARE = 9

# Square a token may exit from -> exact distance required (None: any)
EXIT_SQUARES: dict[int, int | None] = {
    HOUSE_OF_HORUS: None,
    HOUSE_OF_TWO_JUDGES: 2,
    HOUSE_OF_THREE_JUDGES: 3,
}


def is_protected(position: int, owner: Player, tokens: Iterable[Token]) -> bool:
    """
    A token is safe from capture when an ally sits on an adjacent square.

    Adjacency is numeric along the path (20 and 21 are neighbours).
    Squares 27-30 never protect.
    """
    if position >= PROTECTION_LIMIT:
        return False
    neighbours = {position - 1, position + 1}
    return any(
        t.owner == owner and t.position in neighbours and on_path(t.position)
        for t in tokens
    )


@dataclass
class MoveGenerator:
    """
    Generates legal moves for the current player.

    Stateless - the throw distance comes from the state unless given.
    """

    def generate(self, state: GameState, distance: int | None = None) -> list[Move]:
        """
        Generate all legal moves for the current player.

        Returns an empty list if no throw is known.
        """
        if distance is None:
            if state.stick_result is None:
                return []
            distance = move_distance(state.stick_result)

        player = state.current_player
        on_board = [t for t in state.tokens_of(player) if t.is_on_board]

        if state.setup_turn_step == SETUP_LIGHT_FIRST_MOVE and player == Player.LIGHT:
            opener = next((t for t in on_board if t.position == LIGHT_OPENING_SQUARE), None)
            if opener:
                move = self._forward_move(state, opener, distance)
                return [move] if move else []

        moves = []
        for token in on_board:
            move = self._forward_move(state, token, distance)
            if move:
                moves.append(move)

        if moves:
            return moves

        # Forced backward: no House gating applies
        for token in on_board:
            target = token.position - distance
            if target < BOARD_START:
                continue
            move = self._landing_move(state, token, target, backward=True)
            if move:
                moves.append(move)
        return moves

    def _forward_move(self, state: GameState, token: Token, distance: int) -> Move | None:
        """Forward move for one token, or None if the token cannot move."""
        pos = token.position
        if pos == HOUSE_OF_THREE_JUDGES and distance != 3:
            return None
        if pos == HOUSE_OF_TWO_JUDGES and distance != 2:
            return None
        if pos < HOUSE_OF_BEAUTY and pos + distance > HOUSE_OF_BEAUTY:
            return None

        target = pos + distance
        if target > BOARD_END:
            if pos not in EXIT_SQUARES:
                return None
            required = EXIT_SQUARES[pos]
            if required is not None and distance != required:
                return None
            return Move(token_id=token.token_id, from_pos=pos, to_pos=REMOVED)

        return self._landing_move(state, token, target)

    def _landing_move(
        self,
        state: GameState,
        token: Token,
        target: int,
        backward: bool = False,
    ) -> Move | None:
        """Apply occupancy and protection rules to an on-path destination."""
        occupier = state.token_at(target)
        if occupier is None:
            return Move(
                token_id=token.token_id,
                from_pos=token.position,
                to_pos=target,
                is_backward=backward,
            )

        if occupier.owner == token.owner:
            return None
        if is_protected(occupier.position, occupier.owner, state.tokens):
            return None

        return Move(
            token_id=token.token_id,
            from_pos=token.position,
            to_pos=target,
            is_swap=True,
            is_backward=backward,
        )


def legal_moves(state: GameState, distance: int | None = None) -> list[Move]:
    """
    Convenience function to get legal moves.

    Creates a MoveGenerator and generates moves.
    """
    generator = MoveGenerator()
    return generator.generate(state, distance)


def is_legal(state: GameState, token_id: str, to_pos: int) -> bool:
    """Check a (token, destination) pair against the pending moves."""
    if not isinstance(state.phase, Moving):
        return False
    return any(
        m.token_id == token_id and m.to_pos == to_pos
        for m in state.phase.moves
    )


def find_move(state: GameState, token_id: str, to_pos: int) -> Move | None:
    for m in state.pending_moves:
        if m.token_id == token_id and m.to_pos == to_pos:
            return m
    return None
