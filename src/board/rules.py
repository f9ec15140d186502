"""
Contract for the rules engine.

The interaction layer never decides on legality itself: it asks an engine satisfying this Protocol.
"""

from dataclasses import dataclass
from typing import Optional, Protocol

from src.board.pieces import PIECE_TO_FEN, Piece, piece_type_from_char
from src.board.square import Square
from src.core.shared_types import Color, PieceType

# 8 rows (rank 8 first) of 8 squares (file a first)
BoardGrid = tuple[tuple[Optional[Piece], ...], ...]


@dataclass(frozen=True)
class AppliedMove:
    """What the engine reports back after it accepted and played a move."""

    from_square: Square
    to_square: Square
    promotion: Optional[PieceType]
    is_capture: bool
    resulting_check: bool
    san: str

    def to_uci(self) -> str:
        return build_uci(self.from_square, self.to_square, self.promotion)


def build_uci(
    from_square: Square, to_square: Square, promotion: Optional[PieceType] = None
) -> str:
    """
    Universal Chess Interface:
    ---
    * "e2e4": move the piece on e2 to e4
    * "e7e8q": (pawn) moves from e7 to e8 and promotes to a queen
    """
    piece_char = PIECE_TO_FEN[promotion] if promotion else ""
    return f"{from_square.to_algebraic()}{to_square.to_algebraic()}{piece_char}"


class RulesEngine(Protocol):
    """Owns the position. Mutates it only through apply_move / new_game."""

    def new_game(self, fen: Optional[str] = None) -> None:
        """Start from the standard starting position (or the given FEN)."""
        ...

    def piece_at(self, square: Square) -> Optional[Piece]: ...

    def side_to_move(self) -> Color: ...

    def legal_moves_from(self, square: Square) -> list[Square]:
        """Destinations of the piece on `square`. Empty for empty squares or the opponent's pieces."""
        ...

    def apply_move(
        self,
        from_square: Square,
        to_square: Square,
        promotion: Optional[PieceType] = None,
    ) -> AppliedMove:
        """Raises IllegalMoveError if the move is not legal in the current position."""
        ...

    def is_in_check(self) -> bool: ...

    def is_checkmate(self) -> bool: ...

    def is_stalemate(self) -> bool: ...

    def is_threefold_repetition(self) -> bool: ...

    def is_insufficient_material(self) -> bool: ...

    def is_draw(self) -> bool: ...

    def is_game_over(self) -> bool: ...

    def board_snapshot(self) -> BoardGrid: ...

    def history_notation(self) -> list[str]:
        """Standard algebraic notation, one entry per half-move."""
        ...


def parse_uci(uci: str) -> tuple[Square, Square, Optional[PieceType]]:
    """Reverse of build_uci. NOTE: 'e7e8q' carries the promotion piece as a 5th character."""
    from_square = Square.from_algebraic(uci[:2])
    to_square = Square.from_algebraic(uci[2:4])
    promotion = piece_type_from_char(uci[4]) if len(uci) == 5 else None
    return from_square, to_square, promotion
