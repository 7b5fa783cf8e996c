"""
Type definitions used across layers
"""

from enum import StrEnum


class Status(StrEnum):
    IN_PROGRESS = "in progress"
    CHECKMATE = "checkmate"
    STALEMATE = "stalemate"


# --- Same names as the domain enums in src/chess/pieces.py, but string valued so they serialize cleanly.
# --- NOTE let the imports show which versions are used in what part of the code


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


class GameResult(StrEnum):
    """Result markers as written at the end of a PGN game."""

    UNKNOWN = "*"
    WHITE_WINS = "1-0"
    BLACK_WINS = "0-1"
    DRAW = "1/2-1/2"
