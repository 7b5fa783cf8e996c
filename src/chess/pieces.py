"""Defines the types of chess pieces and what can stand on a square"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


class PieceType(Enum):
    PAWN = auto()
    KNIGHT = auto()
    BISHOP = auto()
    ROOK = auto()
    QUEEN = auto()
    KING = auto()


class Color(Enum):
    WHITE = auto()
    BLACK = auto()

    def opposite(self) -> Color:
        return Color.BLACK if self == Color.WHITE else Color.WHITE


FEN_TO_PIECE: dict[str, PieceType] = {
    "p": PieceType.PAWN,
    "n": PieceType.KNIGHT,
    "b": PieceType.BISHOP,
    "r": PieceType.ROOK,
    "q": PieceType.QUEEN,
    "k": PieceType.KING,
}

PIECE_TO_FEN: dict[PieceType, str] = {value: key for key, value in FEN_TO_PIECE.items()}

# Move notation uses the upper case letters, and the pawn letter is left out when writing a move
SAN_TO_PIECE: dict[str, PieceType] = {key.upper(): value for key, value in FEN_TO_PIECE.items()}
PIECE_TO_SAN: dict[PieceType, str] = {
    piece_type: ("" if piece_type == PieceType.PAWN else letter)
    for letter, piece_type in SAN_TO_PIECE.items()
}


@dataclass(frozen=True)
class OccupiedSquare:
    """What occupies a square. An empty square is simply `None` on the board."""

    piece: PieceType
    color: Color

    @classmethod
    def from_fen(cls, character: str) -> OccupiedSquare:
        """lower case: Black pieces, upper case: White pieces. Raises KeyError for anything that is not a piece letter."""
        color = Color.WHITE if character.isupper() else Color.BLACK
        piece_type = FEN_TO_PIECE[character.lower()]
        return cls(piece_type, color)

    def to_fen(self) -> str:
        return (
            PIECE_TO_FEN[self.piece].upper()
            if self.color == Color.WHITE
            else PIECE_TO_FEN[self.piece]
        )
