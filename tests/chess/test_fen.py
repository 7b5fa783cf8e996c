"""Unit tests for src/chess/fen.py"""

import pytest

from src.chess.castling import ALL_CASTLING_RIGHTS, CastlingDirection
from src.chess.fen import STARTING_FEN, is_valid_fen, parse_fen, to_fen
from src.chess.pieces import Color
from src.chess.position import Position
from src.chess.square import Square
from src.core.exceptions import FENErrorKind, InvalidFENError


def test_starting_fen() -> None:
    assert parse_fen(STARTING_FEN) == Position.starting_position()
    assert to_fen(Position.starting_position()) == STARTING_FEN


@pytest.mark.parametrize(
    "fen",
    [
        STARTING_FEN,
        "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b KQkq e3 0 1",
        "rnbqkbnr/ppppp1p1/7p/4Pp2/8/8/PPPP1PPP/RNBQKBNR w KQkq f6 0 2",
        "4k3/8/8/8/8/8/8/4K3 w - - 12 57",
        "r3k2r/8/8/8/8/8/8/R3K2R b Kq - 3 20",
    ],
)
def test_fen_round_trip(fen: str) -> None:
    assert to_fen(parse_fen(fen)) == fen
    assert is_valid_fen(fen)


def test_parse_fields() -> None:
    position = parse_fen("rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b Qk e3 4 7")
    assert position.color_to_move == Color.BLACK
    assert position.castling_rights == frozenset(
        {CastlingDirection.WHITE_QUEEN_SIDE, CastlingDirection.BLACK_KING_SIDE}
    )
    assert position.en_passant_square == Square(4, 2)
    assert position.half_move_clock == 4
    assert position.full_move_counter == 7


def test_castling_rights_in_any_order() -> None:
    """Read in any order, but written back in KQkq order"""
    position = parse_fen("8/8/8/8/8/8/8/8 w qkQK - 0 1")
    assert position.castling_rights == ALL_CASTLING_RIGHTS
    assert to_fen(position) == "8/8/8/8/8/8/8/8 w KQkq - 0 1"


@pytest.mark.parametrize(
    "fen, kind",
    [
        ("rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0", FENErrorKind.UNEXPECTED_END),
        ("rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR", FENErrorKind.UNEXPECTED_END),
        (STARTING_FEN + " extra", FENErrorKind.UNEXPECTED_CHARACTER),
        ("rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR  w KQkq - 0 1", FENErrorKind.UNEXPECTED_CHARACTER),
        ("rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR x KQkq - 0 1", FENErrorKind.UNEXPECTED_CHARACTER),
        ("rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQxq - 0 1", FENErrorKind.UNEXPECTED_CHARACTER),
        ("rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq e9 0 1", FENErrorKind.INVALID_EN_PASSANT),
        ("rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq z3 0 1", FENErrorKind.INVALID_EN_PASSANT),
        ("rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - -1 1", FENErrorKind.INVALID_COUNTER),
        ("rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 a", FENErrorKind.INVALID_COUNTER),
        ("rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNQR w KQkq - 0 1", FENErrorKind.UNEXPECTED_CHARACTER),
        ("rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNY w KQkq - 0 1", FENErrorKind.INVALID_PIECE),
    ],
)
def test_invalid_fen(fen: str, kind: FENErrorKind) -> None:
    with pytest.raises(InvalidFENError) as exc_info:
        parse_fen(fen)
    assert exc_info.value.kind == kind
    assert exc_info.value.fen == fen
    assert not is_valid_fen(fen)


def test_error_names_the_offending_field() -> None:
    with pytest.raises(InvalidFENError) as exc_info:
        parse_fen("8/8/8/8/8/8/8/8 w - - 0 1x")
    assert exc_info.value.context == "1x"
