"""
Session - Drives the engine from UI events.

A session represents one match:
- Holds the live GameState (the only source of truth)
- Owns the stick oracle (seedable) and the state store
- Tracks which token the player has selected on the board
- Saves the full state after every accepted action

UI events map onto actions:
    throw button            -> THROW (Determination / Rolling)
    square click            -> select a token, then MOVE it
    "Return to 15" button   -> WATER_RETURN
    "Throw for 4" button    -> WATER_THROW
    undo / reset buttons    -> UNDO / RESET

Rejected actions leave the state untouched; they are logged and
returned as failed ActionResults.
"""

from __future__ import annotations
import logging

from ..config import SenetConfig
from ..engine_core.action import Action, ActionResult
from ..engine_core.reducer import Reducer
from ..engine_core.setup import create_initial_state
from ..engine_core.state import GamePhase, GameState, Move
from ..engine_core.sticks import StickOracle
from ..persistence.store import StateStore
from .view import BoardView, build_board_view


logger = logging.getLogger(__name__)


class Session:
    """
    One Senet match.

    Usage:
        session = Session.open(SenetConfig.from_env())
        session.throw()
        session.click(9)   # select the token on 9
        session.click(12)  # move it to 12
    """

    def __init__(
        self,
        state: GameState | None = None,
        oracle: StickOracle | None = None,
        store: StateStore | None = None,
        reducer: Reducer | None = None,
        autosave: bool = True,
    ):
        self._state = state if state is not None else create_initial_state()
        self.oracle = oracle or StickOracle()
        self.store = store
        self.reducer = reducer or Reducer()
        self.autosave = autosave and store is not None
        self.selected_token_id: str | None = None

    @classmethod
    def open(cls, config: SenetConfig | None = None) -> Session:
        """Resume the saved match, or start a fresh one."""
        config = config or SenetConfig()
        logging.getLogger("senet").setLevel(config.log_level)
        store = StateStore(config.state_path)
        return cls(
            state=store.load(),
            oracle=StickOracle(seed=config.seed),
            store=store,
            autosave=config.autosave,
        )

    @property
    def state(self) -> GameState:
        return self._state

    @property
    def legal_moves(self) -> tuple[Move, ...]:
        return self._state.pending_moves

    @property
    def is_over(self) -> bool:
        return self._state.phase_kind == GamePhase.GAME_OVER

    def view(self) -> BoardView:
        return build_board_view(self._state, self.selected_token_id)

    # -------------------------------------------------------------------------
    # UI events
    # -------------------------------------------------------------------------

    def throw(self) -> ActionResult:
        """Throw the sticks for the Determination or a normal turn."""
        return self.dispatch(Action.throw(self.oracle.throw()))

    def click(self, square: int) -> ActionResult | None:
        """
        Handle a click on a square.

        With a token selected, a click on one of its destinations moves it.
        A click on the source of a legal move selects that token, or clears
        the selection if it is already selected. Other clicks are ignored
        and return None.
        """
        if self._state.phase_kind != GamePhase.MOVING:
            return None

        moves = self.legal_moves
        if self.selected_token_id and any(
            m.token_id == self.selected_token_id and m.to_pos == square for m in moves
        ):
            return self.dispatch(Action.move(self.selected_token_id, square))

        if any(m.from_pos == square for m in moves):
            token = self._state.token_at(square)
            if token and token.token_id == self.selected_token_id:
                self.selected_token_id = None
            elif token:
                self.selected_token_id = token.token_id
        return None

    def resolve_water_return(self) -> ActionResult:
        """Option A: send the stuck token to the House of Second Life."""
        return self.dispatch(Action.water_return())

    def resolve_water_throw(self) -> ActionResult:
        """Option B: throw, hoping for a 4."""
        return self.dispatch(Action.water_throw(self.oracle.throw()))

    def undo(self) -> ActionResult:
        return self.dispatch(Action.undo())

    def reset(self) -> ActionResult:
        return self.dispatch(Action.reset())

    # -------------------------------------------------------------------------
    # Dispatch
    # -------------------------------------------------------------------------

    def dispatch(self, action: Action) -> ActionResult:
        """Apply an action; on success it replaces the live state."""
        result = self.reducer.apply(self._state, action)
        if not result.success:
            logger.debug(
                "Ignored %s: %s (%s)",
                action.action_type.value,
                result.error,
                result.error_code.value if result.error_code else "-",
            )
            return result

        self._state = result.new_state
        self.selected_token_id = None

        for change in result.state_changes:
            logger.debug(change)
        if self.is_over:
            logger.info("Game over: %s wins", self._state.winner)

        if self.autosave:
            self.store.save(self._state)
        return result
