"""
Short algebraic notation (SAN) -> the one legal move it describes.

<piece letter?><origin file?><origin rank?><x?><destination>(=<promotion piece>)?(+|#)?   or   O-O / O-O-O

Resolution works by building a match template (PartialMove) from the token and filtering the legal moves with it.
Exactly one move has to survive the filter.

NOTE: the origin hint is read from the token but not (yet) used to disambiguate, so e.g. "Nbd2" resolves like "Nd2".
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterable, Optional

from src.chess.castling import CastlingSide
from src.chess.moves import ValidMove
from src.chess.pieces import SAN_TO_PIECE, PieceType
from src.chess.position import Position
from src.chess.rules import legal_moves
from src.chess.square import FILE_LABELS, Square
from src.core.exceptions import MoveResolutionError, ResolutionFailure

logger = logging.getLogger(__name__)

NOTATION_PATTERN = re.compile(
    r"^(?:"
    r"(?P<piece>[PNBRQK])?(?P<from_file>[a-h])?(?P<from_rank>[1-8])?(?P<takes>x)?(?P<to>[a-h][1-8])"
    r"(?:=(?P<promotion>[PNBRQK]))?"
    r"|(?P<castles>O-O(?:-O)?)"
    r")(?P<check_or_mate>[+#])?$"
)

CASTLES_TO_SIDE: dict[str, CastlingSide] = {
    "O-O": CastlingSide.KING_SIDE,
    "O-O-O": CastlingSide.QUEEN_SIDE,
}


class CheckOrMate(Enum):
    CHECK = auto()
    MATE = auto()


MARKER_TO_CHECK_OR_MATE: dict[str, CheckOrMate] = {
    "+": CheckOrMate.CHECK,
    "#": CheckOrMate.MATE,
}


@dataclass(frozen=True)
class PartialSquare:
    """A square of which only the file, only the rank, or both may be known (0-based, like Square)."""

    file: Optional[int] = None
    rank: Optional[int] = None

    def matches(self, square: Square) -> bool:
        if self.file is not None and self.file != square.file:
            return False
        if self.rank is not None and self.rank != square.rank:
            return False
        return True


@dataclass(frozen=True)
class PartialMove:
    """
    Match template for moves
    ---

    * piece and to_square are required
    * from_square: constrain the origin (if set)
    * takes: True -> must capture, False -> must not capture, None -> either
    """

    piece: PieceType
    to_square: Square
    from_square: Optional[PartialSquare] = None
    takes: Optional[bool] = None


@dataclass(frozen=True)
class ParsedNotation:
    """Everything a notation token says, before looking at a position."""

    token: str
    piece: Optional[PieceType] = None
    origin: Optional[PartialSquare] = None
    takes: bool = False
    to_square: Optional[Square] = None
    promotion: Optional[PieceType] = None
    check_or_mate: Optional[CheckOrMate] = None
    castles: Optional[CastlingSide] = None

    def to_partial_move(self) -> Optional[PartialMove]:
        """Template to look up the move with. Castling tokens have none: there is no destination square to match."""
        if self.to_square is None:
            return None
        return PartialMove(
            piece=self.piece or PieceType.PAWN,
            to_square=self.to_square,
            from_square=None,
            takes=self.takes,
        )


def parse_notation(token: str) -> ParsedNotation:
    """Read the token. Raises MoveResolutionError(NO_SYNTAX_MATCH) if it is not move notation at all."""
    match = NOTATION_PATTERN.match(token)
    if match is None:
        raise MoveResolutionError(token, ResolutionFailure.NO_SYNTAX_MATCH)

    groups = match.groupdict()
    check_or_mate = (
        MARKER_TO_CHECK_OR_MATE[groups["check_or_mate"]]
        if groups["check_or_mate"]
        else None
    )
    if groups["castles"]:
        return ParsedNotation(
            token=token,
            check_or_mate=check_or_mate,
            castles=CASTLES_TO_SIDE[groups["castles"]],
        )

    origin = None
    if groups["from_file"] or groups["from_rank"]:
        origin = PartialSquare(
            file=FILE_LABELS.index(groups["from_file"]) if groups["from_file"] else None,
            rank=int(groups["from_rank"]) - 1 if groups["from_rank"] else None,
        )

    return ParsedNotation(
        token=token,
        piece=SAN_TO_PIECE[groups["piece"]] if groups["piece"] else None,
        origin=origin,
        takes=groups["takes"] is not None,
        to_square=Square.from_algebraic(groups["to"]),
        promotion=SAN_TO_PIECE[groups["promotion"]] if groups["promotion"] else None,
        check_or_mate=check_or_mate,
    )


def move_matches(move: ValidMove, template: PartialMove) -> bool:
    if move.piece != template.piece:
        return False
    if template.from_square is not None and not template.from_square.matches(
        move.from_square
    ):
        return False
    if move.to_square != template.to_square:
        return False
    if template.takes is not None and move.is_capture != template.takes:
        return False
    return True


def filter_moves(moves: Iterable[ValidMove], template: PartialMove) -> list[ValidMove]:
    return [move for move in moves if move_matches(move, template)]


def find_moves(position: Position, template: PartialMove) -> list[ValidMove]:
    """Legal moves of the side to move that fit the template."""
    return filter_moves(legal_moves(position), template)


def resolve_move(position: Position, token: str) -> ValidMove:
    """
    The single legal move the token describes.
    ----

    Raises MoveResolutionError with reason
    * NO_SYNTAX_MATCH: not notation
    * NO_LEGAL_MATCH: no legal move fits (always the case for castling, which is never generated)
    * AMBIGUOUS: more than one legal move fits
    """
    parsed = parse_notation(token)
    template = parsed.to_partial_move()
    if template is None:
        raise MoveResolutionError(
            token, ResolutionFailure.NO_LEGAL_MATCH, "castling is not supported"
        )

    candidates = find_moves(position, template)
    logger.debug("Token %r matches %d legal move(s)", token, len(candidates))

    if not candidates:
        raise MoveResolutionError(token, ResolutionFailure.NO_LEGAL_MATCH)
    if len(candidates) > 1:
        raise MoveResolutionError(
            token,
            ResolutionFailure.AMBIGUOUS,
            ", ".join(move.to_uci() for move in candidates),
        )
    return candidates[0]
