"""
Type definitions used across layers
"""

from enum import StrEnum


class Color(StrEnum):
    WHITE = "white"
    BLACK = "black"


class PieceType(StrEnum):
    PAWN = "pawn"
    KNIGHT = "knight"
    BISHOP = "bishop"
    ROOK = "rook"
    QUEEN = "queen"
    KING = "king"


class InteractionState(StrEnum):
    IDLE = "idle"
    PIECE_SELECTED = "piece selected"
    AWAITING_PROMOTION = "awaiting promotion"
