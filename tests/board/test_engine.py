"""Unit tests for /src/board/engine.py"""

import pytest

from src.board.engine import PythonChessEngine, from_index, to_index
from src.board.pieces import Piece
from src.board.square import Square
from src.core.exceptions import IllegalMoveError, InvalidFENError
from src.core.shared_types import Color, PieceType

PROMOTION_FEN = "k7/4P3/8/8/8/8/8/4K3 w - - 0 1"
CASTLING_FEN = "r3k2r/8/8/8/8/8/8/R3K2R w KQkq - 0 1"
FIFTY_MOVES_FEN = "k7/8/8/8/8/8/8/KQ6 w - - 100 80"


def sq(name: str) -> Square:
    return Square.from_algebraic(name)


@pytest.fixture
def engine() -> PythonChessEngine:
    return PythonChessEngine()


def play(engine: PythonChessEngine, *moves: str) -> None:
    """Play a sequence of moves given as 'e2e4' strings."""
    for move in moves:
        engine.apply_move(sq(move[:2]), sq(move[2:4]))


# -- SQUARE CONVERSION --
def test_square_index_roundtrip() -> None:
    """python-chess numbers squares 0 (a1) to 63 (h8), rank by rank."""
    for rank in range(1, 9):
        for file in range(1, 9):
            index = (rank - 1) * 8 + (file - 1)
            assert to_index(Square(file, rank)) == index
            assert from_index(index) == Square(file, rank)


# -- NEW GAME --
def test_starting_position(engine: PythonChessEngine) -> None:
    assert engine.side_to_move() == Color.WHITE
    assert engine.piece_at(sq("e1")) == Piece(PieceType.KING, Color.WHITE)
    assert engine.piece_at(sq("d8")) == Piece(PieceType.QUEEN, Color.BLACK)
    assert engine.piece_at(sq("e4")) is None
    assert engine.history_notation() == []


def test_new_game_discards_history(engine: PythonChessEngine) -> None:
    play(engine, "e2e4", "e7e5")
    engine.new_game()
    assert engine.history_notation() == []
    assert engine.piece_at(sq("e2")) == Piece(PieceType.PAWN, Color.WHITE)
    assert engine.side_to_move() == Color.WHITE


def test_new_game_custom_position(engine: PythonChessEngine) -> None:
    engine.new_game(PROMOTION_FEN)
    assert engine.piece_at(sq("e7")) == Piece(PieceType.PAWN, Color.WHITE)
    assert engine.piece_at(sq("e8")) is None


@pytest.mark.parametrize(
    "fen",
    [
        "complete nonsense",
        "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR x KQkq - 0 1",
        "8/8/8/8/8/8/8/8 w - - 0 1",  # no kings on the board
    ],
)
def test_new_game_invalid_fen(engine: PythonChessEngine, fen: str) -> None:
    """Keep the current position when the requested one is unusable."""
    play(engine, "e2e4")
    with pytest.raises(InvalidFENError):
        engine.new_game(fen)
    assert engine.history_notation() == ["e4"]


# -- LEGAL MOVES --
def test_legal_moves_from_pawn(engine: PythonChessEngine) -> None:
    destinations = engine.legal_moves_from(sq("e2"))
    assert set(destinations) == {sq("e3"), sq("e4")}


def test_legal_moves_from_knight(engine: PythonChessEngine) -> None:
    destinations = engine.legal_moves_from(sq("g1"))
    assert set(destinations) == {sq("f3"), sq("h3")}


@pytest.mark.parametrize("square", ["e4", "e7", "a1"])
def test_no_legal_moves(engine: PythonChessEngine, square: str) -> None:
    """Empty square, opponent's piece and a piece that is blocked in."""
    assert engine.legal_moves_from(sq(square)) == []


def test_promotion_destinations_collapse(engine: PythonChessEngine) -> None:
    """Four promotion options, still just one destination square."""
    engine.new_game(PROMOTION_FEN)
    assert engine.legal_moves_from(sq("e7")) == [sq("e8")]


def test_castling_destinations(engine: PythonChessEngine) -> None:
    """Castling shows up as a king move by two files."""
    engine.new_game(CASTLING_FEN)
    destinations = engine.legal_moves_from(sq("e1"))
    assert sq("g1") in destinations
    assert sq("c1") in destinations


def test_pinned_piece_has_no_moves(engine: PythonChessEngine) -> None:
    """Check safety is part of legality: the knight on e2 is pinned to its king by the rook on e8."""
    engine.new_game("4r1k1/8/8/8/8/8/4N3/4K3 w - - 0 1")
    assert engine.legal_moves_from(sq("e2")) == []


# -- APPLYING MOVES --
def test_apply_move(engine: PythonChessEngine) -> None:
    applied = engine.apply_move(sq("e2"), sq("e4"))
    assert applied.from_square == sq("e2")
    assert applied.to_square == sq("e4")
    assert applied.promotion is None
    assert not applied.is_capture
    assert not applied.resulting_check
    assert applied.san == "e4"
    assert applied.to_uci() == "e2e4"
    assert engine.side_to_move() == Color.BLACK
    assert engine.piece_at(sq("e4")) == Piece(PieceType.PAWN, Color.WHITE)


def test_apply_capture(engine: PythonChessEngine) -> None:
    play(engine, "e2e4", "d7d5")
    applied = engine.apply_move(sq("e4"), sq("d5"))
    assert applied.is_capture
    assert applied.san == "exd5"


def test_apply_move_giving_check(engine: PythonChessEngine) -> None:
    play(engine, "e2e4", "f7f5")
    applied = engine.apply_move(sq("d1"), sq("h5"))
    assert applied.resulting_check
    assert applied.san == "Qh5+"
    assert engine.is_in_check()


@pytest.mark.parametrize(
    "from_name, to_name",
    [
        ("e2", "e5"),  # pawn cannot move three squares
        ("e7", "e5"),  # not your turn
        ("e4", "e5"),  # no piece there
        ("e1", "e2"),  # own piece in the way
    ],
)
def test_apply_illegal_move(
    engine: PythonChessEngine, from_name: str, to_name: str
) -> None:
    with pytest.raises(IllegalMoveError):
        engine.apply_move(sq(from_name), sq(to_name))
    assert engine.history_notation() == []
    assert engine.side_to_move() == Color.WHITE


def test_promotion_requires_piece(engine: PythonChessEngine) -> None:
    engine.new_game(PROMOTION_FEN)
    with pytest.raises(IllegalMoveError):
        engine.apply_move(sq("e7"), sq("e8"))
    assert engine.piece_at(sq("e7")) == Piece(PieceType.PAWN, Color.WHITE)


def test_promotion_piece_on_normal_move(engine: PythonChessEngine) -> None:
    with pytest.raises(IllegalMoveError):
        engine.apply_move(sq("e2"), sq("e4"), PieceType.QUEEN)


def test_promotion_to_king_rejected(engine: PythonChessEngine) -> None:
    engine.new_game(PROMOTION_FEN)
    with pytest.raises(IllegalMoveError):
        engine.apply_move(sq("e7"), sq("e8"), PieceType.KING)


@pytest.mark.parametrize(
    "piece_type", [PieceType.QUEEN, PieceType.ROOK, PieceType.BISHOP, PieceType.KNIGHT]
)
def test_promotion(engine: PythonChessEngine, piece_type: PieceType) -> None:
    engine.new_game(PROMOTION_FEN)
    applied = engine.apply_move(sq("e7"), sq("e8"), piece_type)
    assert applied.promotion == piece_type
    assert engine.piece_at(sq("e8")) == Piece(piece_type, Color.WHITE)
    assert engine.piece_at(sq("e7")) is None
    assert applied.to_uci().startswith("e7e8")


# -- GAME STATE QUERIES --
def test_fools_mate(engine: PythonChessEngine) -> None:
    play(engine, "f2f3", "e7e5", "g2g4", "d8h4")
    assert engine.is_checkmate()
    assert engine.is_in_check()
    assert engine.is_game_over()
    assert not engine.is_draw()
    assert engine.history_notation() == ["f3", "e5", "g4", "Qh4#"]


def test_stalemate(engine: PythonChessEngine) -> None:
    engine.new_game("7k/5K2/6Q1/8/8/8/8/8 b - - 0 1")
    assert engine.is_stalemate()
    assert not engine.is_checkmate()
    assert engine.is_draw()
    assert engine.is_game_over()


def test_insufficient_material(engine: PythonChessEngine) -> None:
    engine.new_game("k7/8/8/8/8/8/8/K7 w - - 0 1")
    assert engine.is_insufficient_material()
    assert engine.is_draw()
    assert engine.is_game_over()


def test_threefold_repetition(engine: PythonChessEngine) -> None:
    """Knights out and back in twice: the starting position appears for the third time."""
    knight_dance = ("g1f3", "g8f6", "f3g1", "f6g8")
    play(engine, *knight_dance)
    assert not engine.is_threefold_repetition()
    play(engine, *knight_dance)
    assert engine.is_threefold_repetition()
    assert engine.is_draw()


def test_fifty_move_rule(engine: PythonChessEngine) -> None:
    engine.new_game(FIFTY_MOVES_FEN)
    assert engine.is_draw()
    assert not engine.is_insufficient_material()
    assert not engine.is_stalemate()


def test_ongoing_game(engine: PythonChessEngine) -> None:
    assert not engine.is_in_check()
    assert not engine.is_checkmate()
    assert not engine.is_stalemate()
    assert not engine.is_threefold_repetition()
    assert not engine.is_insufficient_material()
    assert not engine.is_draw()
    assert not engine.is_game_over()


# -- SNAPSHOT --
def test_board_snapshot_orientation(engine: PythonChessEngine) -> None:
    """Row 0 is the 8th rank, column 0 is the a-file."""
    grid = engine.board_snapshot()
    assert len(grid) == 8
    assert all(len(row) == 8 for row in grid)
    assert grid[0][0] == Piece(PieceType.ROOK, Color.BLACK)
    assert grid[0][4] == Piece(PieceType.KING, Color.BLACK)
    assert grid[7][4] == Piece(PieceType.KING, Color.WHITE)
    assert grid[6][0] == Piece(PieceType.PAWN, Color.WHITE)
    assert all(piece is None for row in grid[2:6] for piece in row)
