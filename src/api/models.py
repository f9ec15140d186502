"""Requests and Response models"""

from typing import Optional, Self
from uuid import UUID

from pydantic import BaseModel, field_validator

from src.board.feedback import Cue
from src.board.pieces import PIECE_TO_FEN, PROMOTION_OPTIONS
from src.board.projection import ViewState
from src.board.square import BOARD_DIMENSIONS, FILE_NAMES
from src.core.exceptions import InvalidRequestError
from src.core.shared_types import Color, InteractionState

AlgebraicSquare = str
FenCharacter = str

PROMOTION_CHARACTERS = [PIECE_TO_FEN[piece_type] for piece_type in PROMOTION_OPTIONS]


def _validate_square(value: str) -> str:
    """Square must be written in algebraic notation, e.g. 'e4', and exist on the board."""

    def _is_algebraic_notation(value: str) -> bool:
        if len(value) != 2:
            return False

        first_character = value[0]
        second_character = value[1]
        if first_character not in FILE_NAMES or not second_character.isnumeric():
            return False
        return 1 <= int(second_character) <= BOARD_DIMENSIONS[1]

    if not _is_algebraic_notation(value):
        raise InvalidRequestError(f"Cannot interpret {value!r} as a valid square name.")
    return value


# --- REQUEST MODELS ---
class CreateSessionRequest(BaseModel):
    starting_fen: Optional[str] = None

    @field_validator("starting_fen")
    @classmethod
    def validate_starting_fen(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value

        parts = value.strip().split(" ")
        if len(parts) != 6:
            raise InvalidRequestError(
                "FEN string must contain 6 space-separated parts."
            )
        return value.strip()


class GetSessionRequest(BaseModel):
    session_id: UUID


class DeleteSessionRequest(BaseModel):
    session_id: UUID


class ResetRequest(BaseModel):
    session_id: UUID


class PatternRequest(BaseModel):
    session_id: UUID


class SquareRequest(BaseModel):
    """A click on a square, or a piece being picked up from it."""

    session_id: UUID
    square: AlgebraicSquare

    @field_validator("square")
    @classmethod
    def validate_square(cls, value: str) -> str:
        return _validate_square(value)


class DropRequest(BaseModel):
    session_id: UUID
    from_square: AlgebraicSquare
    to_square: AlgebraicSquare

    @field_validator(*["from_square", "to_square"])
    @classmethod
    def validate_square(cls, value: str) -> str:
        return _validate_square(value)


class PromotionRequest(BaseModel):
    session_id: UUID
    piece: str

    @field_validator("piece")
    @classmethod
    def validate_piece(cls, value: str) -> str:
        if value.lower() not in PROMOTION_CHARACTERS:
            raise InvalidRequestError(
                f"Cannot promote to {value!r}. Pick one from {','.join(PROMOTION_CHARACTERS)}"
            )
        return value.lower()


# --- RESPONSE MODELS ---
class LastMoveResponse(BaseModel):
    from_square: AlgebraicSquare
    to_square: AlgebraicSquare


class GameStateFlagsResponse(BaseModel):
    checkmate: bool
    stalemate: bool
    threefold_repetition: bool
    insufficient_material: bool
    draw: bool


class ViewStateResponse(BaseModel):
    """
    Render-ready projection of a session.

    `board` holds 8 rows (8th rank first) of FEN characters (upper case: white, lower case: black), None for empty squares.
    """

    board: list[list[Optional[FenCharacter]]]
    selected_square: Optional[AlgebraicSquare]
    legal_destinations: list[AlgebraicSquare]
    side_to_move: Color
    is_check: bool
    checked_king: Optional[AlgebraicSquare]
    last_move: Optional[LastMoveResponse]
    notation: str
    half_move_count: int
    interaction_state: InteractionState
    awaiting_promotion: bool
    promoting_side: Optional[Color]
    status: str
    is_game_over: bool
    flags: GameStateFlagsResponse

    @classmethod
    def from_view(cls, view: ViewState) -> Self:
        return cls(
            board=[
                [piece.to_fen() if piece else None for piece in row]
                for row in view.board
            ],
            selected_square=(
                view.selected_square.to_algebraic() if view.selected_square else None
            ),
            legal_destinations=[sq.to_algebraic() for sq in view.legal_destinations],
            side_to_move=view.side_to_move,
            is_check=view.is_check,
            checked_king=(
                view.checked_king.to_algebraic() if view.checked_king else None
            ),
            last_move=(
                LastMoveResponse(
                    from_square=view.last_move.from_square.to_algebraic(),
                    to_square=view.last_move.to_square.to_algebraic(),
                )
                if view.last_move
                else None
            ),
            notation=view.notation,
            half_move_count=view.half_move_count,
            interaction_state=view.interaction_state,
            awaiting_promotion=view.awaiting_promotion,
            promoting_side=view.promoting_side,
            status=view.status,
            is_game_over=view.is_game_over,
            flags=GameStateFlagsResponse(
                checkmate=view.flags.checkmate,
                stalemate=view.flags.stalemate,
                threefold_repetition=view.flags.threefold_repetition,
                insufficient_material=view.flags.insufficient_material,
                draw=view.flags.draw,
            ),
        )


class SessionResponse(BaseModel):
    session_id: UUID
    view: ViewStateResponse
    cues: list[Cue] = []


class PatternResponse(BaseModel):
    """The move notation used verbatim as a credential payload."""

    session_id: UUID
    pattern: str
    half_move_count: int
