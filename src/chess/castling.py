"""Helpers for castling availability. Need to be imported by multiple sources"""

from enum import Enum, auto


class CastlingDirection(Enum):
    """The four castling directions. Values represent their encodings in FEN string."""

    WHITE_KING_SIDE = "K"
    WHITE_QUEEN_SIDE = "Q"
    BLACK_KING_SIDE = "k"
    BLACK_QUEEN_SIDE = "q"


class CastlingSide(Enum):
    """Side a castle token (O-O / O-O-O) refers to, independent of color."""

    KING_SIDE = auto()
    QUEEN_SIDE = auto()


# Order in which the rights are written in a FEN string
CASTLING_ORDER: tuple[CastlingDirection, ...] = (
    CastlingDirection.WHITE_KING_SIDE,
    CastlingDirection.WHITE_QUEEN_SIDE,
    CastlingDirection.BLACK_KING_SIDE,
    CastlingDirection.BLACK_QUEEN_SIDE,
)

ALL_CASTLING_RIGHTS: frozenset[CastlingDirection] = frozenset(CastlingDirection)


def castling_to_fen(castling_rights: frozenset[CastlingDirection]) -> str:
    """create the part of the FEN string that encodes castling rights"""
    castling_chars = "".join(
        [direction.value for direction in CASTLING_ORDER if direction in castling_rights]
    )
    return castling_chars or "-"
