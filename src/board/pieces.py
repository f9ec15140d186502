"""Defines the types of chess pieces"""

from dataclasses import dataclass

from src.core.exceptions import InvalidRequestError
from src.core.shared_types import Color, PieceType

FEN_TO_PIECE: dict[str, PieceType] = {
    "p": PieceType.PAWN,
    "n": PieceType.KNIGHT,
    "b": PieceType.BISHOP,
    "r": PieceType.ROOK,
    "q": PieceType.QUEEN,
    "k": PieceType.KING,
}

PIECE_TO_FEN: dict[PieceType, str] = {value: key for key, value in FEN_TO_PIECE.items()}

# In the order a promotion dialog offers them
PROMOTION_OPTIONS: tuple[PieceType, ...] = (
    PieceType.QUEEN,
    PieceType.ROOK,
    PieceType.BISHOP,
    PieceType.KNIGHT,
)


def piece_type_from_char(character: str) -> PieceType:
    """'q' -> QUEEN etc. Case insensitive."""
    try:
        return FEN_TO_PIECE[character.lower()]
    except KeyError:
        raise InvalidRequestError(
            f"Cannot interpret {character!r} as a piece type."
        ) from None


@dataclass(frozen=True)
class Piece:
    """An occupied square holds exactly one Piece. Empty squares are represented by None."""

    type: PieceType
    color: Color

    def to_fen(self) -> str:
        return (
            PIECE_TO_FEN[self.type].upper()
            if self.color == Color.WHITE
            else PIECE_TO_FEN[self.type].lower()
        )
