"""
A square on the board

(placed in its own module as multiple other modules need to import it)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

# Chess board is always 8x8. Files and ranks are 0-based: file 0 is the a-file, rank 0 is the 1st rank.
BOARD_DIMENSIONS = (8, 8)
FILE_LABELS = "abcdefgh"
RANK_LABELS = "12345678"


@dataclass(frozen=True)
class Square:
    file: int
    rank: int

    @classmethod
    def new(cls, file: int, rank: int) -> Optional[Square]:
        """The only way raw coordinates become a Square: anything off the board gives None."""
        if not (0 <= file < BOARD_DIMENSIONS[0]) or not (0 <= rank < BOARD_DIMENSIONS[1]):
            return None
        return cls(file, rank)

    @classmethod
    def from_algebraic(cls, sq: str) -> Optional[Square]:
        """Algebraic notation: 'a1' - 'h8' get converted to (0,0) - (7,7). Anything else gives None."""
        if len(sq) != 2 or sq[0] not in FILE_LABELS or sq[1] not in RANK_LABELS:
            return None
        return cls.new(FILE_LABELS.index(sq[0]), int(sq[1]) - 1)

    @classmethod
    def from_index(cls, index: int) -> Square:
        """Inverse of `index`"""
        return cls(file=index % 8, rank=7 - index // 8)

    @property
    def index(self) -> int:
        """Position in the board array. Rank 8 is stored first (top-to-bottom as printed from White's side)."""
        return (7 - self.rank) * 8 + self.file

    def offset(self, df: int, dr: int) -> Optional[Square]:
        return Square.new(self.file + df, self.rank + dr)

    def file_label(self) -> str:
        return FILE_LABELS[self.file]

    def to_algebraic(self) -> str:
        return f"{self.file_label()}{self.rank + 1}"

    def __str__(self) -> str:
        return self.to_algebraic()
