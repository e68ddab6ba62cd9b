"""
Reducer - Applies actions to game state.

The reducer is the single point of state mutation.
All state changes must go through apply_action().

Design principles:
- Pure function: (state, action) -> new_state
- Validates before applying
- Returns ActionResult with success/failure; rule violations are
  failures, never exceptions, and leave the caller's state untouched
- Runs the win check after every token mutation
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Callable, Iterable

from .action import Action, ActionResult, ActionType, ErrorCode
from .action_generator import MoveGenerator, find_move
from .board import (
    BOARD_START,
    HOUSE_OF_SECOND_LIFE,
    HOUSE_OF_WATERS,
    REMOVED,
    TOKENS_PER_PLAYER,
)
from .setup import create_initial_state
from .sticks import has_extra_turn
from .state import (
    GameOver,
    GamePhase,
    GameState,
    Moving,
    Player,
    Rolling,
    Token,
    WaterResolution,
    SETUP_DARK_FIRST_MOVE,
    SETUP_DONE,
    SETUP_LIGHT_FIRST_MOVE,
)


# Token Dark advances for free once determined
DARK_OPENING_FROM = 10
DARK_OPENING_TO = 11

# Option B escapes the Waters only on this count
WATER_ESCAPE_COUNT = 4


def check_win_condition(tokens: Iterable[Token]) -> Player | None:
    """
    Check if someone has won.

    A player wins once all five of their tokens are past square 30.
    """
    tokens = list(tokens)
    for player in (Player.LIGHT, Player.DARK):
        finished = sum(1 for t in tokens if t.owner == player and t.has_exited)
        if finished == TOKENS_PER_PLAYER:
            return player
    return None


def _first_free(state: GameState, squares: Iterable[int]) -> int | None:
    for square in squares:
        if state.token_at(square) is None:
            return square
    return None


@dataclass
class Reducer:
    """
    Reducer applies actions to game state.

    Stateless - all state is in GameState.
    """
    generator: MoveGenerator = field(default_factory=MoveGenerator)

    def apply(self, state: GameState, action: Action) -> ActionResult:
        """
        Apply an action to the game state.

        Returns ActionResult with new state or error.
        """
        validation_error = self._validate_action(state, action)
        if validation_error:
            message, code = validation_error
            return ActionResult.failure(message, error_code=code)

        handler = self._get_handler(action.action_type)
        if not handler:
            return ActionResult.failure(
                f"No handler for action type: {action.action_type}",
                error_code=ErrorCode.NO_HANDLER,
            )

        return handler(state, action)

    def _validate_action(
        self, state: GameState, action: Action
    ) -> tuple[str, ErrorCode] | None:
        """
        Validate that an action is allowed in the current phase.

        Returns (message, code) if invalid, None if valid.
        """
        kind = state.phase_kind
        action_type = action.action_type

        if action_type == ActionType.RESET:
            return None

        if kind == GamePhase.GAME_OVER:
            return "Game is over - only reset is allowed", ErrorCode.GAME_OVER

        allowed = {
            ActionType.THROW: {GamePhase.DETERMINATION, GamePhase.ROLLING},
            ActionType.MOVE: {GamePhase.MOVING},
            ActionType.WATER_RETURN: {GamePhase.WATER_RESOLUTION},
            ActionType.WATER_THROW: {GamePhase.WATER_RESOLUTION},
        }
        phases = allowed.get(action_type)
        if phases is not None and kind not in phases:
            return f"Cannot {action_type.value} during {kind.value}", ErrorCode.WRONG_PHASE

        return None

    def _get_handler(self, action_type: ActionType) -> Callable | None:
        """Get the handler function for an action type."""
        handlers = {
            ActionType.THROW: self._handle_throw,
            ActionType.MOVE: self._handle_move,
            ActionType.WATER_RETURN: self._handle_water_return,
            ActionType.WATER_THROW: self._handle_water_throw,
            ActionType.UNDO: self._handle_undo,
            ActionType.RESET: self._handle_reset,
        }
        return handlers.get(action_type)

    # -------------------------------------------------------------------------
    # Throwing
    # -------------------------------------------------------------------------

    def _handle_throw(self, state: GameState, action: Action) -> ActionResult:
        sticks = action.payload.sticks
        if sticks is None:
            return ActionResult.failure("Throw needs a stick result", ErrorCode.ILLEGAL_MOVE)
        if state.phase_kind == GamePhase.DETERMINATION:
            return self._handle_determination_throw(state, action)

        count = sticks.count
        distance = sticks.distance
        player = state.current_player
        thrown = state._copy_with(
            previous=state.without_snapshot(),
            stick_result=count,
            stick_faces=sticks.faces,
        )

        moves = self.generator.generate(thrown, distance)
        if not moves:
            log = f"{player} threw {count}. No moves."
            new_state = self._hand_over(
                thrown.with_log(log),
                player.opponent,
                f"Threw {count} ({distance} moves). No valid moves! Turn passed.",
            )
            return ActionResult.success_with_state(new_state, changes=[log])

        new_state = thrown._copy_with(
            phase=Moving(moves=tuple(moves)),
            message=f"Threw {count} ({distance} spaces). Select a token.",
        )
        return ActionResult.success_with_state(
            new_state,
            changes=[f"{player} threw {count}"],
        )

    def _handle_determination_throw(self, state: GameState, action: Action) -> ActionResult:
        """The first player to throw a 1 plays Dark."""
        sticks = action.payload.sticks
        count = sticks.count

        if count != 1:
            new_state = state._copy_with(
                stick_result=count,
                stick_faces=sticks.faces,
                message=f"Threw {count}. Need a 1 to start. Pass sticks.",
            )
            return ActionResult.success_with_state(new_state)

        tokens = tuple(
            t.moved_to(DARK_OPENING_TO)
            if t.owner == Player.DARK and t.position == DARK_OPENING_FROM else t
            for t in state.tokens
        )
        log = f"Dark determined (threw 1). Auto-moved {DARK_OPENING_FROM}->{DARK_OPENING_TO}."
        new_state = state._copy_with(
            tokens=tokens,
            stick_result=count,
            stick_faces=sticks.faces,
            phase=Rolling(),
            current_player=Player.DARK,
            setup_turn_step=SETUP_DARK_FIRST_MOVE,
            message=(
                "You threw a 1! You are Dark. Token moved "
                f"{DARK_OPENING_FROM}->{DARK_OPENING_TO}. Throw again for your first move."
            ),
        ).with_log(log)
        return ActionResult.success_with_state(new_state, changes=[log])

    # -------------------------------------------------------------------------
    # Moving
    # -------------------------------------------------------------------------

    def _handle_move(self, state: GameState, action: Action) -> ActionResult:
        token_id = action.payload.token_id
        to_pos = action.payload.to_pos
        move = find_move(state, token_id, to_pos)
        if move is None:
            return ActionResult.failure(
                f"Token {token_id} cannot move to {to_pos}",
                error_code=ErrorCode.ILLEGAL_MOVE,
            )

        player = state.current_player
        mover = state.get_token(move.token_id)
        log = f"{player} moved {move.from_pos} -> {move.to_pos}"
        new_state = state

        if move.is_swap:
            enemy = state.token_at(move.to_pos)
            new_state = new_state.with_token(enemy.moved_to(move.from_pos))
            log += " (Swapped)"

        landing = move.to_pos
        if landing == HOUSE_OF_SECOND_LIFE:
            landing = _first_free(
                new_state.with_token(mover.moved_to(REMOVED)),
                range(BOARD_START, HOUSE_OF_SECOND_LIFE),
            )
            log += f" (Life -> {landing})"
        new_state = new_state.with_token(mover.moved_to(landing))

        if move.is_backward:
            log += " (Backward)"

        if move.to_pos == HOUSE_OF_WATERS:
            log += " (Fell into Waters)"
            next_player = player.opponent
        elif state.stick_result is not None and has_extra_turn(state.stick_result):
            log += " (Extra Turn)"
            next_player = player
        else:
            next_player = player.opponent

        setup_step = state.setup_turn_step
        if setup_step == SETUP_DARK_FIRST_MOVE and player == Player.DARK:
            setup_step = SETUP_LIGHT_FIRST_MOVE
        elif setup_step == SETUP_LIGHT_FIRST_MOVE and player == Player.LIGHT:
            setup_step = SETUP_DONE

        new_state = new_state._copy_with(
            stick_result=None,
            setup_turn_step=setup_step,
        ).with_log(log)

        finished = self._check_game_over(new_state)
        if finished:
            return ActionResult.success_with_state(finished, changes=[log])

        new_state = self._hand_over(
            new_state, next_player, f"{next_player}'s Turn. Throw Sticks."
        )
        return ActionResult.success_with_state(new_state, changes=[log])

    # -------------------------------------------------------------------------
    # House of Waters
    # -------------------------------------------------------------------------

    def _handle_water_return(self, state: GameState, action: Action) -> ActionResult:
        """Option A: back to the House of Second Life, turn ends without a throw."""
        player = state.current_player
        token = state.get_token(state.water_token_id)
        vacated = state.with_token(token.moved_to(REMOVED))
        square = _first_free(vacated, range(HOUSE_OF_SECOND_LIFE, BOARD_START - 1, -1))

        log = f"{player} chose Water Option A ({square})."
        new_state = state.with_token(token.moved_to(square)).with_log(log)
        new_state = self._hand_over(
            new_state,
            player.opponent,
            "Returned to House of Second Life. Turn Ended.",
        )
        return ActionResult.success_with_state(new_state, changes=[log])

    def _handle_water_throw(self, state: GameState, action: Action) -> ActionResult:
        """Option B: a 4 frees the token and grants an extra turn, anything else ends the turn."""
        sticks = action.payload.sticks
        if sticks is None:
            return ActionResult.failure("Throw needs a stick result", ErrorCode.ILLEGAL_MOVE)

        player = state.current_player
        count = sticks.count
        thrown = state._copy_with(stick_result=count, stick_faces=sticks.faces)

        if count == WATER_ESCAPE_COUNT:
            token = state.get_token(state.water_token_id)
            log = f"{player} escaped Waters (threw {count})."
            new_state = thrown.with_token(token.moved_to(REMOVED)).with_log(log)

            finished = self._check_game_over(new_state)
            if finished:
                return ActionResult.success_with_state(finished, changes=[log])

            new_state = self._hand_over(
                new_state, player, f"Threw {count}! Escaped Waters! Take an extra turn."
            )
            return ActionResult.success_with_state(new_state, changes=[log])

        log = f"{player} failed to escape Waters."
        new_state = self._hand_over(
            thrown.with_log(log),
            player.opponent,
            f"Threw {count}. Failed to escape. Turn ends.",
        )
        return ActionResult.success_with_state(new_state, changes=[log])

    # -------------------------------------------------------------------------
    # Undo / reset
    # -------------------------------------------------------------------------

    def _handle_undo(self, state: GameState, action: Action) -> ActionResult:
        if state.previous is None:
            return ActionResult.failure("Nothing to undo", error_code=ErrorCode.NO_SNAPSHOT)
        return ActionResult.success_with_state(
            state.previous.without_snapshot(),
            changes=["Undid last throw"],
        )

    def _handle_reset(self, state: GameState, action: Action) -> ActionResult:
        return ActionResult.success_with_state(
            create_initial_state(),
            changes=["Match reset"],
        )

    # -------------------------------------------------------------------------
    # Turn transitions
    # -------------------------------------------------------------------------

    def _hand_over(self, state: GameState, next_player: Player, message: str) -> GameState:
        """
        Give the turn to next_player.

        A player who owns the token on the House of Waters starts the turn
        by resolving it instead of throwing.
        """
        stuck = state.token_at(HOUSE_OF_WATERS)
        if stuck is not None and stuck.owner == next_player:
            return state._copy_with(
                current_player=next_player,
                phase=WaterResolution(token_id=stuck.token_id),
                message=f"{next_player} is stuck in House of Waters! Choose Option.",
            )
        return state._copy_with(
            current_player=next_player,
            phase=Rolling(),
            message=message,
        )

    def _check_game_over(self, state: GameState) -> GameState | None:
        winner = check_win_condition(state.tokens)
        if winner is None:
            return None
        return state._copy_with(
            phase=GameOver(winner=winner),
            message=f"{winner} Wins the Game!",
        ).with_log(f"GAME OVER: {winner} wins!")


def apply_action(state: GameState, action: Action) -> ActionResult:
    """
    Convenience function to apply an action.

    Creates a Reducer and applies the action.
    """
    reducer = Reducer()
    return reducer.apply(state, action)
