"""
The GameSession and the interaction state machine operating on it.

The state machine is the entrypoint into the domain layer for the presentation surface / service layer.
It turns raw gestures (clicks, drags, drops, promotion choices) into move attempts against the rules engine and
reports back which effects (feedback cues, re-projection) the owner should perform.

States
----
* IDLE: nothing selected
* PIECE_SELECTED: a piece of the side to move is selected, its legal destinations are known
* AWAITING_PROMOTION: a pawn move to the last rank waits for the promotion piece. The position is untouched.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Self

from src.board.events import (
    DragStarted,
    Dropped,
    Effect,
    InputEvent,
    PlayCue,
    PromotionChosen,
    Render,
    ResetRequested,
    SquareClicked,
    Transition,
)
from src.board.feedback import Cue
from src.board.rules import AppliedMove, RulesEngine, build_uci, parse_uci
from src.board.square import Square
from src.core.exceptions import (
    EngineUnavailableError,
    GameError,
    GameStateError,
    IllegalMoveError,
)
from src.core.models import SessionModel
from src.core.shared_types import InteractionState, PieceType

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MoveSquares:
    """Just the from/to part of a move (used for highlighting the last move and for a pending promotion)."""

    from_square: Square
    to_square: Square


@dataclass(frozen=True)
class MoveRecord:
    """One committed half-move. Never changes once appended to the history."""

    from_square: Square
    to_square: Square
    promotion: Optional[PieceType]
    is_capture: bool

    @classmethod
    def from_applied(cls, move: AppliedMove) -> Self:
        return cls(move.from_square, move.to_square, move.promotion, move.is_capture)

    def to_uci(self) -> str:
        return build_uci(self.from_square, self.to_square, self.promotion)


# --- RESULT OF A MOVE ATTEMPT ---
@dataclass(frozen=True)
class MoveAccepted:
    move: AppliedMove


@dataclass(frozen=True)
class MoveRejected:
    from_square: Square
    to_square: Square
    promotion: Optional[PieceType]
    reason: str


MoveOutcome = MoveAccepted | MoveRejected


@dataclass
class GameSession:
    """
    Authoritative mutable state of a single game.
    ----

    NOTE: The position itself lives inside the engine. Only the engine mutates it, and only through apply_move / new_game.
    """

    engine: RulesEngine
    starting_fen: Optional[str] = None
    selected_square: Optional[Square] = None
    legal_destinations: list[Square] = field(default_factory=list)
    pending_promotion: Optional[MoveSquares] = None
    move_history: list[MoveRecord] = field(default_factory=list)
    last_move: Optional[MoveSquares] = None

    @classmethod
    def start(cls, engine: RulesEngine, starting_fen: Optional[str] = None) -> Self:
        """
        A session always starts from a fresh position.

        NOTE: Unlike reset(), an unusable starting FEN surfaces as InvalidFENError here: it is bad input, not a broken engine.
        """
        engine.new_game(starting_fen)
        return cls(engine=engine, starting_fen=starting_fen)

    @classmethod
    def from_model(cls, model: SessionModel, engine: RulesEngine) -> Self:
        """
        Rebuild a session from its transport representation
        ----

        1. start from the stored starting position
        2. replay every stored move through the engine (so position and notation get rebuilt by the rules themselves)
        3. restore the selection / the pending promotion, both must still fit the replayed position
        """
        session = cls.start(engine, model.starting_fen)

        for uci in model.moves_uci:
            try:
                from_square, to_square, promotion = parse_uci(uci)
                applied = engine.apply_move(from_square, to_square, promotion)
            except GameError as e:
                logger.error("Cannot replay stored move %r: %s", uci, e)
                raise GameStateError(
                    f"Stored move history cannot be replayed at move {uci!r}."
                ) from e
            session.record(applied)

        if model.selected_square and model.pending_promotion:
            raise GameStateError(
                "A session cannot have a selected square and a pending promotion at the same time."
            )

        try:
            if model.selected_square:
                square = Square.from_algebraic(model.selected_square)
                if not session.is_movable(square):
                    raise GameStateError(
                        f"Selected square {square} holds no piece of the side to move."
                    )
                session.select(square)
            if model.pending_promotion:
                from_alg, to_alg = model.pending_promotion
                pending = MoveSquares(
                    Square.from_algebraic(from_alg), Square.from_algebraic(to_alg)
                )
                if not session.is_legal_promotion(pending):
                    raise GameStateError(
                        f"{pending.from_square}-{pending.to_square} is not a pending pawn promotion."
                    )
                session.pending_promotion = pending
        except (GameError, ValueError) as e:
            raise GameStateError(f"Cannot restore interaction state: {e}") from e

        return session

    def to_model(self) -> SessionModel:
        """Encode back into a format the Service layer uses"""
        pending = (
            [
                self.pending_promotion.from_square.to_algebraic(),
                self.pending_promotion.to_square.to_algebraic(),
            ]
            if self.pending_promotion
            else None
        )
        return SessionModel(
            starting_fen=self.starting_fen,
            moves_uci=[move.to_uci() for move in self.move_history],
            selected_square=(
                self.selected_square.to_algebraic() if self.selected_square else None
            ),
            pending_promotion=pending,
        )

    @property
    def state(self) -> InteractionState:
        if self.pending_promotion is not None:
            return InteractionState.AWAITING_PROMOTION
        if self.selected_square is not None:
            return InteractionState.PIECE_SELECTED
        return InteractionState.IDLE

    @property
    def half_move_count(self) -> int:
        return len(self.move_history)

    def reset(self) -> None:
        """
        Throw everything away and start over from the starting position.

        NOTE: The engine is asked for the new position FIRST. If that fails the session is unusable and must not continue.
        """
        try:
            self.engine.new_game(self.starting_fen)
        except GameError as e:
            raise EngineUnavailableError(
                f"Could not obtain a fresh position from the rules engine: {e}"
            ) from e

        self.selected_square = None
        self.legal_destinations = []
        self.pending_promotion = None
        self.move_history = []
        self.last_move = None

    def select(self, square: Square) -> None:
        self.selected_square = square
        self.legal_destinations = self.engine.legal_moves_from(square)

    def clear_selection(self) -> None:
        self.selected_square = None
        self.legal_destinations = []

    def record(self, move: AppliedMove) -> None:
        """Commit an applied move to the history."""
        self.move_history.append(MoveRecord.from_applied(move))
        self.last_move = MoveSquares(move.from_square, move.to_square)

    # --- CHECKS ---
    def is_movable(self, square: Square) -> bool:
        """Does the square hold a piece of the side to move?"""
        piece = self.engine.piece_at(square)
        return piece is not None and piece.color == self.engine.side_to_move()

    def is_promotion(self, from_square: Square, to_square: Square) -> bool:
        piece = self.engine.piece_at(from_square)
        return (
            piece is not None
            and piece.type == PieceType.PAWN
            and to_square.is_promotion_rank()
        )

    def is_legal_promotion(self, move: MoveSquares) -> bool:
        """A pawn of the side to move that can legally reach the last rank."""
        return self.is_promotion(
            move.from_square, move.to_square
        ) and move.to_square in self.engine.legal_moves_from(move.from_square)


class InteractionStateMachine:
    """
    Single entrypoint `handle(event)`: one event is processed to completion before the next one.

    Returns the new state together with the effects the owner should perform (in order).
    """

    def __init__(self, session: GameSession) -> None:
        self.session = session
        self._handlers: dict[type, Callable[[Any], list[Effect]]] = {
            SquareClicked: self._on_square_clicked,
            DragStarted: self._on_drag_started,
            Dropped: self._on_dropped,
            PromotionChosen: self._on_promotion_chosen,
            ResetRequested: self._on_reset,
        }

    @property
    def state(self) -> InteractionState:
        return self.session.state

    def handle(self, event: InputEvent) -> Transition:
        handler = self._handlers[type(event)]
        effects = handler(event)
        return Transition(state=self.session.state, effects=effects)

    # --- EVENT HANDLERS ---
    def _on_square_clicked(self, event: SquareClicked) -> list[Effect]:
        """
        Click policy
        ----

        * a legal destination of the selected piece: attempt the move (or wait for the promotion piece)
        * a piece of the side to move: (re)select it
        * anything else: deselect
        """
        if self._is_awaiting_promotion(event):
            return [Render()]

        session = self.session
        if (
            session.selected_square is not None
            and event.square in session.legal_destinations
        ):
            return self._target(session.selected_square, event.square)

        if self._is_movable(event.square):
            session.select(event.square)
        else:
            session.clear_selection()
        return [Render()]

    def _on_drag_started(self, event: DragStarted) -> list[Effect]:
        """Picking up a piece selects it. Picking up anything else does nothing."""
        if self._is_awaiting_promotion(event):
            return [Render()]

        if not self._is_movable(event.square):
            return []

        self.session.select(event.square)
        return [Render()]

    def _on_dropped(self, event: Dropped) -> list[Effect]:
        """Select + target in one go. A drop onto a square the piece cannot reach ends the gesture without a selection."""
        if self._is_awaiting_promotion(event):
            return [Render()]

        session = self.session
        if not self._is_movable(event.from_square):
            session.clear_selection()
            return [Render()]

        session.select(event.from_square)
        if event.to_square in session.legal_destinations:
            return self._target(event.from_square, event.to_square)

        session.clear_selection()
        return [Render()]

    def _on_promotion_chosen(self, event: PromotionChosen) -> list[Effect]:
        """Complete the pending pawn move. Whatever the outcome, the promotion is no longer pending (no retries)."""
        pending = self.session.pending_promotion
        if pending is None:
            logger.debug("Promotion piece %s chosen without a pending promotion.", event.piece)
            return []

        self.session.pending_promotion = None
        return self._commit(pending.from_square, pending.to_square, event.piece)

    def _on_reset(self, _: ResetRequested) -> list[Effect]:
        self.session.reset()
        logger.info("Session reset to the starting position.")
        return [Render()]

    # --- TRANSITION HELPERS ---
    def _target(self, from_square: Square, to_square: Square) -> list[Effect]:
        """The selected piece goes to one of its legal destinations."""
        self.session.clear_selection()

        if self._is_promotion(from_square, to_square):
            self.session.pending_promotion = MoveSquares(from_square, to_square)
            logger.debug("Awaiting promotion piece for %s-%s", from_square, to_square)
            return [Render()]

        return self._commit(from_square, to_square, None)

    def _commit(
        self, from_square: Square, to_square: Square, promotion: Optional[PieceType]
    ) -> list[Effect]:
        """Either position, history and last move ALL get updated, or none of them."""
        outcome = self._attempt_move(from_square, to_square, promotion)
        if isinstance(outcome, MoveRejected):
            logger.warning(
                "Illegal move attempt %s: %s",
                build_uci(outcome.from_square, outcome.to_square, outcome.promotion),
                outcome.reason,
            )
            return [Render()]

        self.session.record(outcome.move)
        logger.debug("Committed %s", outcome.move.san)
        return [PlayCue(self._cue_for(outcome.move)), Render()]

    def _attempt_move(
        self, from_square: Square, to_square: Square, promotion: Optional[PieceType]
    ) -> MoveOutcome:
        try:
            applied = self.session.engine.apply_move(from_square, to_square, promotion)
        except IllegalMoveError as e:
            return MoveRejected(from_square, to_square, promotion, reason=str(e))
        return MoveAccepted(applied)

    def _cue_for(self, move: AppliedMove) -> Cue:
        """Only one cue per move: game over > check > capture > plain move"""
        engine = self.session.engine
        if engine.is_game_over():
            return Cue.GAME_OVER
        if engine.is_in_check():
            return Cue.CHECK
        if move.is_capture:
            return Cue.CAPTURE
        return Cue.MOVE

    # --- CHECKS ---
    def _is_awaiting_promotion(self, event: InputEvent) -> bool:
        """While a promotion is pending, no other move can be attempted."""
        if self.session.pending_promotion is None:
            return False
        logger.debug("Ignoring %s while awaiting the promotion piece.", event)
        return True

    def _is_movable(self, square: Square) -> bool:
        return self.session.is_movable(square)

    def _is_promotion(self, from_square: Square, to_square: Square) -> bool:
        return self.session.is_promotion(from_square, to_square)
