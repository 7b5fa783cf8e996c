"""
Geometry/Base movement and capturing rules

Key idea: Use strategy pattern to define the pseudo-legal move sets for each piece type.
Pseudo-legal means: geometrically possible for the piece in isolation. Whether the move leaves your own king in check is decided later (see rules.py).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

from src.chess.pieces import PIECE_TO_SAN, Color, OccupiedSquare, PieceType
from src.chess.position import Position
from src.chess.square import Square

Vector = tuple[int, int]

# Starting rank of the pawns (0-based), the only rank a pawn can make a double step from.
PAWN_START_RANK: dict[Color, int] = {Color.WHITE: 1, Color.BLACK: 6}
PAWN_DIRECTION: dict[Color, int] = {Color.WHITE: 1, Color.BLACK: -1}


@dataclass(frozen=True)
class ValidMove:
    """
    A move of a piece, as generated from a position.
    ---

    * takes: the type of piece that gets captured (for en passant: the pawn next to the destination)
    * is_en_passant: the capture happens en passant, so the captured pawn is NOT on the destination square
    * en_passant_target: only set on a pawn double step; becomes the en passant square of the next position
    """

    color: Color
    from_square: Square
    to_square: Square
    piece: PieceType
    takes: Optional[PieceType] = None
    is_en_passant: bool = False
    en_passant_target: Optional[Square] = None

    @property
    def is_capture(self) -> bool:
        return self.takes is not None

    def to_san(self) -> str:
        """
        Short algebraic notation: <piece letter><file of origin for pawn captures><x if capture><destination>

        NOTE: no disambiguation squares for pieces, promotion suffixes, castling or check/mate markers (yet)
        """
        disambiguation = (
            self.from_square.file_label()
            if self.piece == PieceType.PAWN and self.is_capture
            else ""
        )
        takes = "x" if self.is_capture else ""
        return f"{PIECE_TO_SAN[self.piece]}{disambiguation}{takes}{self.to_square.to_algebraic()}"

    def to_uci(self) -> str:
        """Universal Chess Interface notation: <from_square><to_square>"""
        return f"{self.from_square.to_algebraic()}{self.to_square.to_algebraic()}"


def _move_onto(
    square: Square, target_square: Square, mover: OccupiedSquare, position: Position
) -> ValidMove:
    captured = position.board.piece(target_square)
    return ValidMove(
        color=mover.color,
        from_square=square,
        to_square=target_square,
        piece=mover.piece,
        takes=captured.piece if captured is not None else None,
    )


def _mover(square: Square, position: Position) -> OccupiedSquare:
    occupancy = position.board.piece(square)
    if occupancy is None:
        raise ValueError(f"No piece on {square} to generate moves for")
    return occupancy


# --- MOVEMENT RULES ---
def raycasting_move(
    square: Square, position: Position, directions: list[Vector]
) -> list[ValidMove]:
    """
    Raycasting algorithm
    -----

    The main trick we use to check the 'line of sight of a piece'.
    We define move directions and move along them until we hit another piece or
    the edge of the board. Own piece: stop before it. Opponent's piece: stop on it (capture).
    """
    mover = _mover(square, position)

    moves: list[ValidMove] = []
    for df, dr in directions:
        target_square = square.offset(df, dr)
        while target_square is not None:
            occupancy = position.board.piece(target_square)
            if occupancy is not None:
                # only need to add the first occupied square found if it is the opponent's: then it can be captured.
                if occupancy.color != mover.color:
                    moves.append(_move_onto(square, target_square, mover, position))
                break

            moves.append(_move_onto(square, target_square, mover, position))
            target_square = target_square.offset(df, dr)
    return moves


def single_step_move(
    square: Square, position: Position, deltas: list[Vector]
) -> list[ValidMove]:
    """Raycasting is for sliding pieces. This is the equivalent for kings and knights that just jump a single step along a direction"""
    mover = _mover(square, position)

    moves: list[ValidMove] = []
    for df, dr in deltas:
        target_square = square.offset(df, dr)
        if target_square is None:
            continue

        occupancy = position.board.piece(target_square)
        square_available = occupancy is None or occupancy.color != mover.color
        if square_available:
            moves.append(_move_onto(square, target_square, mover, position))

    return moves


def candidate_pawn_moves(square: Square, position: Position) -> list[ValidMove]:
    """
    A pawn:
    - moves by a single square forward (onto an empty square).
    - It can move by two from its starting rank, if both squares are empty. This installs the skipped square as en passant target.
    - takes diagonally
    - takes en passant: diagonally onto the (empty) en passant square. The captured pawn is removed when the move is applied.

    NOTE: a pawn reaching the last rank stays a pawn, promotion is not applied.
    """
    mover = _mover(square, position)
    board = position.board
    direction = PAWN_DIRECTION[mover.color]

    moves: list[ValidMove] = []
    one_step = square.offset(0, direction)
    if one_step is not None and board.piece(one_step) is None:
        moves.append(ValidMove(mover.color, square, one_step, PieceType.PAWN))

        two_steps = square.offset(0, 2 * direction)
        if (
            square.rank == PAWN_START_RANK[mover.color]
            and two_steps is not None
            and board.piece(two_steps) is None
        ):
            moves.append(
                ValidMove(
                    mover.color,
                    square,
                    two_steps,
                    PieceType.PAWN,
                    en_passant_target=one_step,
                )
            )

    # pawns take diagonally:
    for df in (-1, 1):
        target_square = square.offset(df, direction)
        if target_square is None:
            continue

        occupancy = board.piece(target_square)
        if occupancy is not None:
            if occupancy.color != mover.color:
                moves.append(_move_onto(square, target_square, mover, position))
        elif target_square == position.en_passant_square:
            moves.append(
                ValidMove(
                    mover.color,
                    square,
                    target_square,
                    PieceType.PAWN,
                    takes=PieceType.PAWN,
                    is_en_passant=True,
                )
            )
    return moves


KNIGHT_DELTAS: list[Vector] = [
    (2, 1),
    (2, -1),
    (-2, 1),
    (-2, -1),
    (1, 2),
    (1, -2),
    (-1, 2),
    (-1, -2),
]
DIAGONALS: list[Vector] = [(1, 1), (-1, 1), (1, -1), (-1, -1)]
STRAIGHTS: list[Vector] = [(1, 0), (-1, 0), (0, 1), (0, -1)]


def candidate_knight_moves(square: Square, position: Position) -> list[ValidMove]:
    """Knights always move such that |delta_rank| + |delta_file| = 3"""
    return single_step_move(square, position, KNIGHT_DELTAS)


def candidate_bishop_moves(square: Square, position: Position) -> list[ValidMove]:
    """Bishops move diagonally: |delta_rank| = |delta_file|"""
    return raycasting_move(square, position, DIAGONALS)


def candidate_rook_moves(square: Square, position: Position) -> list[ValidMove]:
    """Rooks move either horizontally or vertically"""
    return raycasting_move(square, position, STRAIGHTS)


def candidate_queen_moves(square: Square, position: Position) -> list[ValidMove]:
    """
    The Queen combines the rook moves (horizontal + vertical movements) and bishop moves (diagonal movement)
    """
    return raycasting_move(square, position, STRAIGHTS + DIAGONALS)


def candidate_king_moves(square: Square, position: Position) -> list[ValidMove]:
    """
    The king can move by a single square at the time.

    NOTE: castling moves are not generated.
    """
    return single_step_move(square, position, STRAIGHTS + DIAGONALS)


# -- STRATEGY PATTERN: MOVEMENT RULES ---
CandidateMovesFn = Callable[[Square, Position], list[ValidMove]]
MOVEMENT_RULES: dict[PieceType, CandidateMovesFn] = {
    PieceType.PAWN: candidate_pawn_moves,
    PieceType.KNIGHT: candidate_knight_moves,
    PieceType.BISHOP: candidate_bishop_moves,
    PieceType.ROOK: candidate_rook_moves,
    PieceType.QUEEN: candidate_queen_moves,
    PieceType.KING: candidate_king_moves,
}


def generate_pseudo_legal_moves(position: Position, color: Color) -> list[ValidMove]:
    """
    Every move any piece of `color` could make, ignoring whether it leaves its own king in check.
    Pieces are visited in board-array order.
    """
    candidate_moves: list[ValidMove] = []
    for starting_square, occupancy in position.board.occupied():
        if occupancy.color != color:
            continue
        movement_rule = MOVEMENT_RULES[occupancy.piece]
        candidate_moves.extend(movement_rule(starting_square, position))
    return candidate_moves
