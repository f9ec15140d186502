"""
Rules engine adapter backed by python-chess.

python-chess does the heavy lifting (legal move generation, check detection, castling, en passant, draw rules, SAN).
This module only translates between its integer squares / piece codes and our Square / Piece types.
"""

import logging
from typing import Optional

import chess

from src.board.pieces import Piece
from src.board.rules import AppliedMove, BoardGrid, build_uci
from src.board.square import BOARD_DIMENSIONS, Square
from src.core.exceptions import IllegalMoveError, InvalidFENError
from src.core.shared_types import Color, PieceType

logger = logging.getLogger(__name__)

TO_PIECE_TYPE: dict[chess.PieceType, PieceType] = {
    chess.PAWN: PieceType.PAWN,
    chess.KNIGHT: PieceType.KNIGHT,
    chess.BISHOP: PieceType.BISHOP,
    chess.ROOK: PieceType.ROOK,
    chess.QUEEN: PieceType.QUEEN,
    chess.KING: PieceType.KING,
}
FROM_PIECE_TYPE: dict[PieceType, chess.PieceType] = {
    value: key for key, value in TO_PIECE_TYPE.items()
}

# python-chess counts half-moves since the last capture / pawn move: 100 plies = 50 moves
FIFTY_MOVE_RULE_PLIES = 100


def to_index(square: Square) -> chess.Square:
    return chess.square(square.file - 1, square.rank - 1)


def from_index(index: chess.Square) -> Square:
    return Square(chess.square_file(index) + 1, chess.square_rank(index) + 1)


def to_color(color: chess.Color) -> Color:
    return Color.WHITE if color == chess.WHITE else Color.BLACK


class PythonChessEngine:
    """Implements the RulesEngine protocol on top of a chess.Board."""

    def __init__(self) -> None:
        self._board = chess.Board()
        self._notation: list[str] = []

    def new_game(self, fen: Optional[str] = None) -> None:
        """Replace the position with a fresh one. Nothing changes if the FEN turns out to be invalid."""
        board = self._parse_fen(fen) if fen else chess.Board()
        self._board = board
        self._notation = []

    def piece_at(self, square: Square) -> Optional[Piece]:
        piece = self._board.piece_at(to_index(square))
        if piece is None:
            return None
        return Piece(TO_PIECE_TYPE[piece.piece_type], to_color(piece.color))

    def side_to_move(self) -> Color:
        return to_color(self._board.turn)

    def legal_moves_from(self, square: Square) -> list[Square]:
        """
        Destination squares of the piece standing on `square`.

        NOTE: python-chess lists a separate move per promotion piece. Those collapse into a single destination here.
        """
        origin = to_index(square)
        destinations: list[Square] = []
        for move in self._board.legal_moves:
            if move.from_square != origin:
                continue
            destination = from_index(move.to_square)
            if destination not in destinations:
                destinations.append(destination)
        return destinations

    def apply_move(
        self,
        from_square: Square,
        to_square: Square,
        promotion: Optional[PieceType] = None,
    ) -> AppliedMove:
        """
        Attempt to make a move
        -----

        1. build the move (with the promotion piece, if any)
        2. check legality (wrong turn, moving into check, missing / superfluous promotion piece ...)
        3. snapshot SAN + capture flag BEFORE pushing, both depend on the position prior to the move
        4. push the move and report back
        """
        move = chess.Move(
            to_index(from_square),
            to_index(to_square),
            promotion=FROM_PIECE_TYPE[promotion] if promotion else None,
        )
        if not self._board.is_legal(move):
            raise IllegalMoveError(
                f"Move not allowed: {build_uci(from_square, to_square, promotion)}"
            )

        san = self._board.san(move)
        is_capture = self._board.is_capture(move)
        self._board.push(move)
        self._notation.append(san)

        return AppliedMove(
            from_square=from_square,
            to_square=to_square,
            promotion=promotion,
            is_capture=is_capture,
            resulting_check=self._board.is_check(),
            san=san,
        )

    # --- POSITION QUERIES ---
    def is_in_check(self) -> bool:
        return self._board.is_check()

    def is_checkmate(self) -> bool:
        return self._board.is_checkmate()

    def is_stalemate(self) -> bool:
        return self._board.is_stalemate()

    def is_threefold_repetition(self) -> bool:
        """The current position occurred (at least) three times."""
        return self._board.is_repetition(3)

    def is_insufficient_material(self) -> bool:
        return self._board.is_insufficient_material()

    def is_fifty_move_rule(self) -> bool:
        return self._board.halfmove_clock >= FIFTY_MOVE_RULE_PLIES

    def is_draw(self) -> bool:
        return (
            self.is_stalemate()
            or self.is_insufficient_material()
            or self.is_threefold_repetition()
            or self.is_fifty_move_rule()
        )

    def is_game_over(self) -> bool:
        return self.is_checkmate() or self.is_draw()

    def board_snapshot(self) -> BoardGrid:
        """Rows from the 8th rank down to the 1st, each row from the a-file to the h-file."""
        num_files, num_ranks = BOARD_DIMENSIONS
        return tuple(
            tuple(self.piece_at(Square(file, rank)) for file in range(1, num_files + 1))
            for rank in range(num_ranks, 0, -1)
        )

    def history_notation(self) -> list[str]:
        return list(self._notation)

    # --- HELPERS ---
    def _parse_fen(self, fen: str) -> chess.Board:
        try:
            board = chess.Board(fen)
        except ValueError as e:
            raise InvalidFENError(f"Cannot interpret supplied string as FEN: {fen}") from e

        if not board.is_valid():
            raise InvalidFENError(f"FEN does not describe a valid position: {fen}")
        logger.debug("Loaded custom starting position %s", fen)
        return board
