"""
A square on the board

(placed in its own module as multiple other modules need to import it)
"""

from __future__ import annotations

from dataclasses import dataclass
from string import ascii_lowercase

from src.core.exceptions import InvalidSquareError

BOARD_DIMENSIONS = (8, 8)
FILE_NAMES = ascii_lowercase[: BOARD_DIMENSIONS[0]]


@dataclass(frozen=True)
class Square:
    """
    One of the 64 squares. Files and ranks both count from 1, so 'a1' is (1, 1) and 'h8' is (8, 8).

    NOTE: Construction is validated, so a Square outside of the board cannot exist.
    """

    file: int
    rank: int

    def __post_init__(self) -> None:
        if not self.is_within_bounds():
            raise InvalidSquareError(
                f"Square (file={self.file}, rank={self.rank}) is not on the board."
            )

    @classmethod
    def from_algebraic(cls, sq: str) -> Square:
        """Algebraic notation: 'a1' - 'h8' get converted to (1,1) - (8,8)"""
        if len(sq) != 2 or sq[0] not in FILE_NAMES or not sq[1].isdigit():
            raise InvalidSquareError(f"Cannot interpret {sq!r} as a square name.")
        file = FILE_NAMES.index(sq[0]) + 1
        rank = int(sq[1])
        return cls(file, rank)

    def to_algebraic(self) -> str:
        return f"{FILE_NAMES[self.file - 1]}{self.rank}"

    def is_within_bounds(self) -> bool:
        return (1 <= self.file <= BOARD_DIMENSIONS[0]) and (
            1 <= self.rank <= BOARD_DIMENSIONS[1]
        )

    def is_promotion_rank(self) -> bool:
        """Pawns promote on the first (black) or the final (white) rank."""
        return self.rank in (1, BOARD_DIMENSIONS[1])

    def __str__(self) -> str:
        return self.to_algebraic()
