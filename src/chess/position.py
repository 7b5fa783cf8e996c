"""
Representation of a single position. The part that can be encoded in a FEN string.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from src.chess.board import Board
from src.chess.castling import ALL_CASTLING_RIGHTS, CastlingDirection
from src.chess.pieces import Color
from src.chess.square import Square

STARTING_PLACEMENT = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR"


@dataclass(frozen=True)
class Position:
    """
    Everything needed to continue a game from here.
    ----

    * board: where the pieces are
    * color_to_move: whose turn it is
    * castling_rights: the directions in which castling is still available. Carried along unchanged by every move.
    * en_passant_square: the square a pawn skipped over with a double step on the last move (if any)
    * half_move_clock: moves since the last pawn move or capture
    * full_move_counter: starts at 1 and increments after every move black makes

    Positions never change. Applying a move gives a brand-new Position (see `src.chess.rules.apply_move`),
    so looking at "what if I played this?" never needs to be undone.

    NOTE: exactly one king per color is assumed when looking for check.
    """

    board: Board
    color_to_move: Color
    castling_rights: frozenset[CastlingDirection]
    en_passant_square: Optional[Square]
    half_move_clock: int
    full_move_counter: int

    @classmethod
    def starting_position(cls) -> Position:
        return cls(
            board=Board.from_fen(STARTING_PLACEMENT),
            color_to_move=Color.WHITE,
            castling_rights=ALL_CASTLING_RIGHTS,
            en_passant_square=None,
            half_move_clock=0,
            full_move_counter=1,
        )
