"""Orchestration of communication from API router to the board domain and persistence layers (and the reverse direction)."""

import logging
from uuid import UUID

from src.api.models import (
    CreateSessionRequest,
    DeleteSessionRequest,
    DropRequest,
    GetSessionRequest,
    PatternRequest,
    PatternResponse,
    PromotionRequest,
    ResetRequest,
    SessionResponse,
    SquareRequest,
    ViewStateResponse,
)
from src.board.events import (
    DragStarted,
    Dropped,
    InputEvent,
    PromotionChosen,
    ResetRequested,
    SquareClicked,
)
from src.board.feedback import Cue, RecordingFeedback
from src.board.handler import BoardController
from src.board.pieces import piece_type_from_char
from src.board.square import Square
from src.core.exceptions import PatternTooShortError, RepositoryError
from src.core.models import SessionModel
from src.db.repository import SessionRepository

logger = logging.getLogger(__name__)


class BoardService:
    """Orchestration of layers for the pattern board."""

    def __init__(
        self, repository: SessionRepository, min_pattern_half_moves: int = 21
    ) -> None:
        self.repo = repository
        self.min_pattern_half_moves = min_pattern_half_moves

    # -- API routes logic ---
    def create_session(self, request: CreateSessionRequest) -> SessionResponse:
        """Start a new board session (standard starting position unless a FEN is supplied)."""

        # Create the domain objects, and convert into SessionModel
        controller = BoardController.new(
            RecordingFeedback(), starting_fen=request.starting_fen
        )
        _, session_id = self.repo.create_session(controller.to_model())
        logger.info("Created board session %s", session_id)

        return self._create_session_response(session_id, controller, [])

    def get_session(self, request: GetSessionRequest) -> SessionResponse:
        """
        Retrieve current view of the board.
        ----
        Used by the frontend to redraw after a page reload.
        """
        stored_model = self._fetch_session(request.session_id)
        controller = BoardController.from_model(stored_model, RecordingFeedback())
        return self._create_session_response(request.session_id, controller, [])

    def click(self, request: SquareRequest) -> SessionResponse:
        return self._handle_event(
            request.session_id, SquareClicked(Square.from_algebraic(request.square))
        )

    def drag(self, request: SquareRequest) -> SessionResponse:
        return self._handle_event(
            request.session_id, DragStarted(Square.from_algebraic(request.square))
        )

    def drop(self, request: DropRequest) -> SessionResponse:
        event = Dropped(
            Square.from_algebraic(request.from_square),
            Square.from_algebraic(request.to_square),
        )
        return self._handle_event(request.session_id, event)

    def choose_promotion(self, request: PromotionRequest) -> SessionResponse:
        return self._handle_event(
            request.session_id, PromotionChosen(piece_type_from_char(request.piece))
        )

    def reset(self, request: ResetRequest) -> SessionResponse:
        return self._handle_event(request.session_id, ResetRequested())

    def delete_session(self, request: DeleteSessionRequest) -> None:
        """Handle a request to delete a session record."""
        if self.repo.delete_session(request.session_id) is None:
            raise RepositoryError(
                f"Session with session_id={request.session_id} not found."
            )
        logger.info("Deleted board session %s", request.session_id)

    def pattern(self, request: PatternRequest) -> PatternResponse:
        """
        The move notation as credential payload.
        ----

        The board itself accepts games of any length; the minimum length of a pattern is enforced here.
        """
        stored_model = self._fetch_session(request.session_id)
        view = BoardController.from_model(stored_model, RecordingFeedback()).view()

        if not view.notation:
            raise PatternTooShortError(
                "Please make at least one move for your pattern."
            )
        if view.half_move_count < self.min_pattern_half_moves:
            raise PatternTooShortError(
                f"Your pattern must contain at least {self.min_pattern_half_moves} half-moves "
                f"(currently {view.half_move_count})."
            )
        return PatternResponse(
            session_id=request.session_id,
            pattern=view.notation,
            half_move_count=view.half_move_count,
        )

    # -- Internal helpers --
    def _handle_event(self, session_id: UUID, event: InputEvent) -> SessionResponse:
        """
        1. Retrieve persisted SessionModel from repository
        2. Rebuild the controller (cues get recorded, so they can be sent to the client)
        3. Process the event
        4. Store the new state
        """
        stored_model = self._fetch_session(session_id)
        feedback = RecordingFeedback()
        controller = BoardController.from_model(stored_model, feedback)

        controller.submit(event)

        self.repo.update_session(session_id, controller.to_model())
        return self._create_session_response(session_id, controller, feedback.cues)

    def _create_session_response(
        self, session_id: UUID, controller: BoardController, cues: list[Cue]
    ) -> SessionResponse:
        return SessionResponse(
            session_id=session_id,
            view=ViewStateResponse.from_view(controller.view()),
            cues=cues,
        )

    def _fetch_session(self, session_id: UUID) -> SessionModel:
        """Attempt to find the session in the repository and raise error if it fails."""
        session_model = self.repo.get_session(session_id)
        if session_model is None:
            raise RepositoryError(f"Session with {session_id=} not found.")
        return session_model
