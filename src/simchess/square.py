"""
A square on the board

(placed in its own module as multiple other modules need to import it)
"""

from __future__ import annotations

from dataclasses import dataclass

# (rows, cols). Row 0 is Black's back rank, row 7 is White's.
BOARD_DIMENSIONS = (8, 8)
FILES = "abcdefgh"


@dataclass(frozen=True, order=True)
class Square:
    row: int
    col: int

    @classmethod
    def from_algebraic(cls, sq: str) -> Square:
        """Algebraic notation: 'a8' - 'h1' get converted to (0,0) - (7,7)"""
        col = ord(sq[0].lower()) - ord("a")
        row = BOARD_DIMENSIONS[0] - int(sq[1:])
        return cls(row, col)

    def to_algebraic(self) -> str:
        return f"{FILES[self.col]}{BOARD_DIMENSIONS[0] - self.row}"

    def is_within_bounds(self) -> bool:
        return (0 <= self.row < BOARD_DIMENSIONS[0]) and (
            0 <= self.col < BOARD_DIMENSIONS[1]
        )
