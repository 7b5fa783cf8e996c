"""The Board is the configuration of pieces. It is an immutable value: every change produces a new Board."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Mapping, Optional

from src.chess.pieces import Color, OccupiedSquare, PieceType
from src.chess.square import BOARD_DIMENSIONS, Square
from src.core.exceptions import FENErrorKind, InvalidFENError

NUM_SQUARES = BOARD_DIMENSIONS[0] * BOARD_DIMENSIONS[1]
DIGITS = "0123456789"


@dataclass(frozen=True)
class Board:
    """
    64 squares, each either empty (None) or occupied.
    ---

    Index of a square is `(7 - rank) * 8 + file`, so the 8th rank comes first. See `Square.index`.
    """

    squares: tuple[Optional[OccupiedSquare], ...]

    def __post_init__(self) -> None:
        if len(self.squares) != NUM_SQUARES:
            raise ValueError(
                f"A board has exactly {NUM_SQUARES} squares, got {len(self.squares)}"
            )

    @classmethod
    def from_fen(cls, placement: str, fen: Optional[str] = None) -> Board:
        """Construct a board using the piece placement part of a FEN string.

        ex. standard starting position:
        rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR
        means:
        * black pieces are on the 8th rank, starting with rook on a8, knight on b8, etc.
        * pawns cover 7th rank entirely
        * ranks 6 through 3 have 8 consecutive empty squares
        * rank 2 are the white pawns (capital letters)
        * 1st rank are the white pieces.

        Ranks are read top to bottom, files left to right: the same order as the board array, so squares are simply appended.
        `fen` is only used to give errors some context.
        """
        context = fen if fen is not None else placement
        num_files, num_ranks = BOARD_DIMENSIONS
        rank_fens = placement.split("/")
        if len(rank_fens) > num_ranks:
            raise InvalidFENError(FENErrorKind.UNEXPECTED_CHARACTER, "/", context)

        squares: list[Optional[OccupiedSquare]] = []
        for rank_idx, rank_fen in enumerate(rank_fens):
            file_count = 0
            for character in rank_fen:
                if character in DIGITS:
                    # A number denotes the amount of empty squares after each other
                    number_of_empty_squares = int(character)
                    if not (1 <= number_of_empty_squares <= num_files - file_count):
                        raise InvalidFENError(
                            FENErrorKind.UNEXPECTED_CHARACTER, character, context
                        )
                    squares.extend([None] * number_of_empty_squares)
                    file_count += number_of_empty_squares
                elif character.isalpha():
                    if file_count == num_files:
                        raise InvalidFENError(
                            FENErrorKind.UNEXPECTED_CHARACTER, character, context
                        )
                    try:
                        squares.append(OccupiedSquare.from_fen(character))
                    except KeyError:
                        raise InvalidFENError(
                            FENErrorKind.INVALID_PIECE, character, context
                        ) from None
                    file_count += 1
                else:
                    raise InvalidFENError(
                        FENErrorKind.UNEXPECTED_CHARACTER, character, context
                    )

            if file_count < num_files:
                # the rank stopped early: either at a slash or at the end of the placement
                if rank_idx < len(rank_fens) - 1:
                    raise InvalidFENError(FENErrorKind.UNEXPECTED_CHARACTER, "/", context)
                raise InvalidFENError(FENErrorKind.UNEXPECTED_END, placement, context)

        if len(squares) < NUM_SQUARES:
            raise InvalidFENError(FENErrorKind.UNEXPECTED_END, placement, context)
        return cls(tuple(squares))

    def to_fen(self) -> str:
        """Ranks are separated by slashes in FEN string."""
        return "/".join(
            self._rank_to_fen(rank) for rank in range(BOARD_DIMENSIONS[1] - 1, -1, -1)
        )

    def _rank_to_fen(self, rank: int) -> str:
        """FEN string of a single rank"""
        fen_characters: list[str] = []
        empty_count = 0
        for file in range(BOARD_DIMENSIONS[0]):
            occupancy = self.piece(Square(file, rank))

            if occupancy is not None:
                if empty_count > 0:
                    fen_characters.append(str(empty_count))
                    empty_count = 0
                fen_characters.append(occupancy.to_fen())
            else:
                empty_count += 1

        # if the entire rank is empty, then we still place this number in the string
        if empty_count > 0:
            fen_characters.append(str(empty_count))
        return "".join(fen_characters)

    @classmethod
    def from_diagram(cls, diagram: str) -> Board:
        """
        Read a board drawn as eight rows of cells, 8th rank on top:

            |r|n|b|q|k|b|n|r| 8
            |p|p|p|p|p|p|p|p| 7
            | | | | | | | | | 6
            ...

        Anything after the last bar (rank labels) and lines that do not start with a bar (file labels) are ignored.
        """
        rows = [
            line.strip() for line in diagram.splitlines() if line.strip().startswith("|")
        ]
        if len(rows) != BOARD_DIMENSIONS[1]:
            raise ValueError(
                f"Board diagram needs {BOARD_DIMENSIONS[1]} rows, found {len(rows)}"
            )

        squares: list[Optional[OccupiedSquare]] = []
        for row in rows:
            cells = [cell.strip() for cell in row.split("|")[1 : BOARD_DIMENSIONS[0] + 1]]
            if len(cells) != BOARD_DIMENSIONS[0]:
                raise ValueError(f"Invalid diagram row: {row!r}")
            squares.extend(OccupiedSquare.from_fen(cell) if cell else None for cell in cells)
        return cls(tuple(squares))

    def to_diagram(self) -> str:
        rows = []
        for rank in range(BOARD_DIMENSIONS[1] - 1, -1, -1):
            cells = [self.piece(Square(file, rank)) for file in range(BOARD_DIMENSIONS[0])]
            row = "|".join(cell.to_fen() if cell else " " for cell in cells)
            rows.append(f"|{row}|")
        return "\n".join(rows)

    def piece(self, square: Square) -> Optional[OccupiedSquare]:
        return self.squares[square.index]

    def occupied(self) -> Iterator[tuple[Square, OccupiedSquare]]:
        """Occupied squares in board-array order (8th rank first, a-file first)."""
        for index, occupancy in enumerate(self.squares):
            if occupancy is not None:
                yield Square.from_index(index), occupancy

    def locate_pieces(self, piece_type: PieceType, color: Color) -> list[Square]:
        target = OccupiedSquare(piece_type, color)
        return [square for square, occupancy in self.occupied() if occupancy == target]

    def replace(self, changes: Mapping[Square, Optional[OccupiedSquare]]) -> Board:
        """Copy of the board with the given squares overwritten (None clears a square)."""
        squares = list(self.squares)
        for square, occupancy in changes.items():
            squares[square.index] = occupancy
        return Board(tuple(squares))
