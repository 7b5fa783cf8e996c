"""
FEN codec: Position <-> string.

FEN, or Forsyth-Edwards Notation, is a standard notation for describing a particular board position of a chess game.
The purpose of FEN is to provide all the necessary information to restart a game from a particular position.

<board position string> <active color> <castling rights> <en passant square> <half move clock> <full move counter>

* The string to describe the board position is described in the Board class
* The active color is either "w" or "b"
* Castling rights are denoted as "k" for king-side or "q" for queen-side. Capital letters for the white pieces, small letters for the black pieces.
    In the starting position: KQkq (all rights available), and a "-" when no right is left.
* The en passant square indicates the square a pawn skipped over on the previous move. If not available a "-" is used.
* The half move clock counts the number of moves made since the last pawn move or capture.
* The full move counter starts at 1 and increments after every move black makes.

ex) The standard starting position has a FEN
rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1
"""

from typing import Optional

from src.chess.board import Board
from src.chess.castling import CastlingDirection, castling_to_fen
from src.chess.pieces import Color
from src.chess.position import Position
from src.chess.square import Square
from src.core.exceptions import FENErrorKind, InvalidFENError

STARTING_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"
NUM_FIELDS = 6
ASCII_DIGITS = frozenset("0123456789")

FEN_TO_COLOR: dict[str, Color] = {"w": Color.WHITE, "b": Color.BLACK}
COLOR_TO_FEN: dict[Color, str] = {value: key for key, value in FEN_TO_COLOR.items()}


def parse_fen(fen: str) -> Position:
    """Parse the FEN into a Position. Raises InvalidFENError describing the first problem found."""
    fields = fen.split(" ")
    if len(fields) < NUM_FIELDS:
        raise InvalidFENError(FENErrorKind.UNEXPECTED_END, fields[-1], fen)
    if len(fields) > NUM_FIELDS:
        raise InvalidFENError(FENErrorKind.UNEXPECTED_CHARACTER, " ", fen)

    # an empty field can only come from two spaces in a row
    if any(field == "" for field in fields):
        raise InvalidFENError(FENErrorKind.UNEXPECTED_CHARACTER, " ", fen)

    (
        placement,
        active_color,
        castling_str,
        en_passant_algebraic,
        half_move_clock,
        full_move_counter,
    ) = fields

    return Position(
        board=Board.from_fen(placement, fen),
        color_to_move=_parse_color(active_color, fen),
        castling_rights=_parse_castling_rights(castling_str, fen),
        en_passant_square=_parse_en_passant(en_passant_algebraic, fen),
        half_move_clock=_parse_counter(half_move_clock, fen),
        full_move_counter=_parse_counter(full_move_counter, fen),
    )


def to_fen(position: Position) -> str:
    """reverse operation: write a FEN from the given position"""
    en_passant_algebraic = (
        position.en_passant_square.to_algebraic()
        if position.en_passant_square is not None
        else "-"
    )
    return " ".join(
        [
            position.board.to_fen(),
            COLOR_TO_FEN[position.color_to_move],
            castling_to_fen(position.castling_rights),
            en_passant_algebraic,
            str(position.half_move_clock),
            str(position.full_move_counter),
        ]
    )


def is_valid_fen(fen: str) -> bool:
    """
    Check if given string follows proper FEN notation.
    """
    try:
        parse_fen(fen)
    except InvalidFENError:
        return False
    return True


def _parse_color(active_color: str, fen: str) -> Color:
    if active_color not in FEN_TO_COLOR:
        raise InvalidFENError(FENErrorKind.UNEXPECTED_CHARACTER, active_color, fen)
    return FEN_TO_COLOR[active_color]


def _parse_castling_rights(castling_str: str, fen: str) -> frozenset[CastlingDirection]:
    """A valid castling encoding is any combination of K, Q, k, q or a '-' if no rights are left."""
    if castling_str == "-":
        return frozenset()

    rights: set[CastlingDirection] = set()
    for character in castling_str:
        try:
            rights.add(CastlingDirection(character))
        except ValueError:
            raise InvalidFENError(
                FENErrorKind.UNEXPECTED_CHARACTER, character, fen
            ) from None
    return frozenset(rights)


def _parse_en_passant(en_passant_algebraic: str, fen: str) -> Optional[Square]:
    """Valid en passant square encoding should be a square that exists on the board or a '-'"""
    if en_passant_algebraic == "-":
        return None

    square = Square.from_algebraic(en_passant_algebraic)
    if square is None:
        raise InvalidFENError(FENErrorKind.INVALID_EN_PASSANT, en_passant_algebraic, fen)
    return square


def _parse_counter(counter: str, fen: str) -> int:
    if not set(counter) <= ASCII_DIGITS:
        raise InvalidFENError(FENErrorKind.INVALID_COUNTER, counter, fen)
    return int(counter)
