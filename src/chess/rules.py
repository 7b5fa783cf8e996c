"""
Rules that look at whole positions rather than at single pieces:

* applying a move (position -> new position)
* check detection (is the king attacked?)
* legality (which pseudo-legal moves do not leave your own king in check?)

Check detection re-uses the move generator as its attack oracle: a square is attacked if any of the opponent's
pseudo-legal moves lands on it. Legal move generation is therefore roughly quadratic in the number of moves,
fine for playing a game move by move but not for searching move trees.
"""

import logging
from typing import Optional

from src.chess.moves import PAWN_DIRECTION, ValidMove, generate_pseudo_legal_moves
from src.chess.pieces import Color, OccupiedSquare, PieceType
from src.chess.position import Position
from src.chess.square import Square
from src.core.exceptions import InvariantViolation

logger = logging.getLogger(__name__)


# --- MOVE APPLICATION ---
def apply_move(position: Position, move: ValidMove) -> Position:
    """
    Position after `move` has been played. The given position is left untouched.
    ----

    1. Empty the origin square, place the moved piece on the destination (a pawn reaching the last rank stays a pawn)
    2. En passant: also remove the captured pawn, which stands right behind the destination square
    3. Other side to move
    4. Castling rights are carried over as they are
    5. The en passant square is whatever the move installs (only a pawn double step does), any previous one is gone
    6. Half move clock resets on pawn moves and captures, otherwise counts up
    7. Full move counter goes up after black moved
    """
    changes: dict[Square, Optional[OccupiedSquare]] = {
        move.from_square: None,
        move.to_square: OccupiedSquare(move.piece, move.color),
    }

    if move.is_en_passant:
        captured_pawn_square = move.to_square.offset(0, -PAWN_DIRECTION[move.color])
        if captured_pawn_square is None:
            raise InvariantViolation(
                f"En passant capture onto {move.to_square} has no square behind it"
            )
        changes[captured_pawn_square] = None

    resets_clock = move.piece == PieceType.PAWN or move.is_capture
    return Position(
        board=position.board.replace(changes),
        color_to_move=position.color_to_move.opposite(),
        castling_rights=position.castling_rights,
        en_passant_square=move.en_passant_target,
        half_move_clock=0 if resets_clock else position.half_move_clock + 1,
        full_move_counter=(
            position.full_move_counter + 1
            if move.color == Color.BLACK
            else position.full_move_counter
        ),
    )


# --- CHECK DETECTION ---
def locate_king(position: Position, color: Color) -> Optional[Square]:
    """First king of the given color found on the board (there should only be one)."""
    kings = position.board.locate_pieces(PieceType.KING, color)
    return kings[0] if kings else None


def square_attacked(
    position: Position, square: Square, by_color: Color
) -> Optional[ValidMove]:
    """One of the moves by which `by_color` could land on `square`, if there is any."""
    return next(
        (
            move
            for move in generate_pseudo_legal_moves(position, by_color)
            if move.to_square == square
        ),
        None,
    )


def in_check(position: Position, color: Color) -> bool:
    """
    Is the king of `color` attacked by the opponent?

    NOTE: a board without a king of that color can never be in check.
    """
    king_square = locate_king(position, color)
    if king_square is None:
        logger.debug("No %s king on the board, not in check", color.name.lower())
        return False
    return square_attacked(position, king_square, color.opposite()) is not None


# --- LEGALITY ---
def legal_moves(position: Position) -> list[ValidMove]:
    """
    Moves of the side to move that do not put (or leave) their own king in check.
    ----

    plan, for every pseudo-legal move:
    1. apply it to get the hypothetical next position
    2. determine if the mover's king is in check there
    3. keep it if not

    This is the one place where moving into check and discovered checks on your own king get filtered.
    """
    mover = position.color_to_move
    return [
        move
        for move in generate_pseudo_legal_moves(position, mover)
        if not in_check(apply_move(position, move), mover)
    ]


def in_mate(position: Position) -> bool:
    """Side to move is in check and has no way out."""
    return in_check(position, position.color_to_move) and not legal_moves(position)


def in_stalemate(position: Position) -> bool:
    """Side to move is not in check, but has no legal move either."""
    return not in_check(position, position.color_to_move) and not legal_moves(position)
