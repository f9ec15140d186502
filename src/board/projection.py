"""
Board projection: a pure function from session state to everything a presentation surface needs to draw.

Calling `project` twice without an event in between gives equal ViewStates.
"""

from dataclasses import dataclass
from typing import Callable, Optional

from src.board.rules import BoardGrid, RulesEngine
from src.board.session import GameSession, MoveSquares
from src.board.square import BOARD_DIMENSIONS, Square
from src.core.shared_types import Color, InteractionState, PieceType

# Checked in this order: the first matching condition decides the status line.
STATUS_MESSAGES: tuple[tuple[Callable[[RulesEngine], bool], str], ...] = (
    (lambda engine: engine.is_checkmate(), "Checkmate!"),
    (lambda engine: engine.is_stalemate(), "Stalemate!"),
    (lambda engine: engine.is_threefold_repetition(), "Threefold repetition!"),
    (lambda engine: engine.is_insufficient_material(), "Insufficient material!"),
    (lambda engine: engine.is_draw(), "Draw!"),
    (lambda engine: engine.is_in_check(), "Check!"),
)


@dataclass(frozen=True)
class GameStateFlags:
    checkmate: bool
    stalemate: bool
    threefold_repetition: bool
    insufficient_material: bool
    draw: bool


@dataclass(frozen=True)
class ViewState:
    board: BoardGrid
    selected_square: Optional[Square]
    legal_destinations: tuple[Square, ...]
    side_to_move: Color
    is_check: bool
    checked_king: Optional[Square]
    last_move: Optional[MoveSquares]
    notation: str
    half_move_count: int
    interaction_state: InteractionState
    awaiting_promotion: bool
    promoting_side: Optional[Color]
    status: str
    is_game_over: bool
    flags: GameStateFlags


def project(session: GameSession) -> ViewState:
    engine = session.engine
    side_to_move = engine.side_to_move()
    board = engine.board_snapshot()
    is_check = engine.is_in_check()
    awaiting_promotion = session.pending_promotion is not None

    return ViewState(
        board=board,
        selected_square=session.selected_square,
        legal_destinations=tuple(session.legal_destinations),
        side_to_move=side_to_move,
        is_check=is_check,
        checked_king=locate_king(board, side_to_move) if is_check else None,
        last_move=session.last_move,
        notation=" ".join(engine.history_notation()),
        half_move_count=session.half_move_count,
        interaction_state=session.state,
        # the position is unchanged while a promotion is pending, so it is still the promoting side's turn
        awaiting_promotion=awaiting_promotion,
        promoting_side=side_to_move if awaiting_promotion else None,
        status=game_status(engine),
        is_game_over=engine.is_game_over(),
        flags=GameStateFlags(
            checkmate=engine.is_checkmate(),
            stalemate=engine.is_stalemate(),
            threefold_repetition=engine.is_threefold_repetition(),
            insufficient_material=engine.is_insufficient_material(),
            draw=engine.is_draw(),
        ),
    )


def game_status(engine: RulesEngine) -> str:
    """Human readable status line. Empty while the game simply continues."""
    return next(
        (message for condition, message in STATUS_MESSAGES if condition(engine)), ""
    )


def locate_king(board: BoardGrid, color: Color) -> Optional[Square]:
    """NOTE: row 0 of the grid is the 8th rank."""
    num_ranks = BOARD_DIMENSIONS[1]
    for row_idx, row in enumerate(board):
        for file_idx, piece in enumerate(row):
            if piece is not None and piece.type == PieceType.KING and piece.color == color:
                return Square(file_idx + 1, num_ranks - row_idx)
    return None
