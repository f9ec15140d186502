"""Wires the state machine to its collaborators: a feedback dispatcher and the presentation surface listening for views."""

import logging
from typing import Callable, Optional, Self

from src.board.engine import PythonChessEngine
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
)
from src.board.feedback import FeedbackDispatcher
from src.board.pieces import piece_type_from_char
from src.board.projection import ViewState, project
from src.board.rules import RulesEngine
from src.board.session import GameSession, InteractionStateMachine
from src.board.square import Square
from src.core.exceptions import FeedbackError
from src.core.models import SessionModel

logger = logging.getLogger(__name__)

ViewListener = Callable[[ViewState], None]
EngineFactory = Callable[[], RulesEngine]


class BoardController:
    """Owns one session. Presentation surfaces send events in and get a ViewState back (and via `on_update`)."""

    def __init__(
        self,
        machine: InteractionStateMachine,
        feedback: FeedbackDispatcher,
        on_update: Optional[ViewListener] = None,
    ) -> None:
        self.machine = machine
        self.feedback = feedback
        self.on_update = on_update

    @classmethod
    def new(
        cls,
        feedback: FeedbackDispatcher,
        starting_fen: Optional[str] = None,
        on_update: Optional[ViewListener] = None,
        engine_factory: EngineFactory = PythonChessEngine,
    ) -> Self:
        session = GameSession.start(engine_factory(), starting_fen)
        return cls(InteractionStateMachine(session), feedback, on_update)

    @classmethod
    def from_model(
        cls,
        model: SessionModel,
        feedback: FeedbackDispatcher,
        engine_factory: EngineFactory = PythonChessEngine,
    ) -> Self:
        session = GameSession.from_model(model, engine_factory())
        return cls(InteractionStateMachine(session), feedback)

    @property
    def session(self) -> GameSession:
        return self.machine.session

    def to_model(self) -> SessionModel:
        return self.session.to_model()

    def view(self) -> ViewState:
        return project(self.session)

    def submit(self, event: InputEvent) -> ViewState:
        """Process one event to completion: transition, then perform its effects in order."""
        transition = self.machine.handle(event)
        for effect in transition.effects:
            self._perform(effect)
        return self.view()

    # --- CONVENIENCE: ALGEBRAIC NOTATION IN ---
    def square_clicked(self, square: str) -> ViewState:
        return self.submit(SquareClicked(Square.from_algebraic(square)))

    def drag_started(self, square: str) -> ViewState:
        return self.submit(DragStarted(Square.from_algebraic(square)))

    def dropped(self, from_square: str, to_square: str) -> ViewState:
        return self.submit(
            Dropped(Square.from_algebraic(from_square), Square.from_algebraic(to_square))
        )

    def promotion_chosen(self, piece: str) -> ViewState:
        return self.submit(PromotionChosen(piece_type_from_char(piece)))

    def reset(self) -> ViewState:
        return self.submit(ResetRequested())

    # --- EFFECTS ---
    def _perform(self, effect: Effect) -> None:
        if isinstance(effect, PlayCue):
            self._play(effect)
        elif isinstance(effect, Render) and self.on_update is not None:
            self.on_update(self.view())

    def _play(self, effect: PlayCue) -> None:
        """Cue delivery never blocks or rolls back a committed move."""
        try:
            self.feedback.dispatch(effect.cue)
        except FeedbackError as e:
            logger.warning("Feedback cue %s failed: %s", effect.cue, e)
