"""
Tokens -> parsed game records.

<tag pair section> <move text section> <game termination marker>, repeated until the end of the text.

Only the structure is read here. Whether the moves are legal is decided when a parsed game is replayed (see Game.from_parsed).
Comments, numeric annotation glyphs and recursive annotation variations are skipped.
Castle tokens (O-O, O-O-O) are not recognised as moves: move text ends there and the token is reported as an invalid result.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Optional

from src.core.exceptions import PGNParseError, PGNParseErrorKind
from src.core.shared_types import GameResult
from src.pgn.lexer import Token, TokenKind, lex

logger = logging.getLogger(__name__)

# Looser than the notation grammar used to resolve moves: also accepts lower case piece letters.
POSSIBLE_MOVE_PATTERN = re.compile(r"(?i)^[PNBRQK]?([a-h]?[1-8]?)x?[a-h][1-8](=[NBRQK])?[#+]?$")

RESULT_MARKERS = frozenset(result.value for result in GameResult)
SETUP_TAG = "SetUp"
FEN_TAG = "FEN"

IGNORED_KINDS = frozenset({TokenKind.COMMENT, TokenKind.NUMERIC_ANNOTATION_GLYPH})


@dataclass(frozen=True)
class PGNMove:
    """One line of move text: '12. Nf3 Nc6'. Either half may be missing (e.g. a game that starts with black)."""

    number: Optional[int] = None
    white_move: Optional[str] = None
    black_move: Optional[str] = None

    def tokens(self) -> list[str]:
        return [move for move in (self.white_move, self.black_move) if move is not None]


@dataclass(frozen=True)
class ParsedGame:
    setup: Optional[str] = None
    fen: Optional[str] = None
    other_tags: list[tuple[str, str]] = field(default_factory=list)
    moves: list[PGNMove] = field(default_factory=list)
    result: GameResult = GameResult.UNKNOWN

    def move_tokens(self) -> list[tuple[Optional[int], str]]:
        """Every half move in the order it was written, together with the move number it was written under."""
        return [(move.number, token) for move in self.moves for token in move.tokens()]


def is_possibly_a_move(symbol: str) -> bool:
    return POSSIBLE_MOVE_PATTERN.match(symbol) is not None


class Parser:
    """Recursive descent over the token list. Any error aborts the whole text."""

    def __init__(self, tokens: list[Token]) -> None:
        if not tokens or tokens[-1].kind != TokenKind.END_OF_FILE:
            tokens = [*tokens, Token(TokenKind.END_OF_FILE)]
        self.tokens = tokens
        self.index = 0

    def parse(self) -> list[ParsedGame]:
        games: list[ParsedGame] = []
        self._skip_ignored()
        while self._peek().kind != TokenKind.END_OF_FILE:
            games.append(self._parse_game())
            self._skip_ignored()

        logger.debug("Parsed %d game(s)", len(games))
        return games

    # --- sections ---
    def _parse_game(self) -> ParsedGame:
        setup: Optional[str] = None
        fen: Optional[str] = None
        other_tags: list[tuple[str, str]] = []
        for name, value in self._parse_tag_pair_section():
            if name == SETUP_TAG:
                setup = value
            elif name == FEN_TAG:
                fen = value
            else:
                other_tags.append((name, value))

        moves = self._parse_move_text_section()
        result = self._parse_game_result()
        return ParsedGame(setup, fen, other_tags, moves, result)

    def _parse_tag_pair_section(self) -> list[tuple[str, str]]:
        tag_pairs: list[tuple[str, str]] = []
        self._skip_ignored()
        while self._peek().kind == TokenKind.OPEN_BRACKET:
            tag_pairs.append(self._parse_tag_pair())
            self._skip_ignored()
        return tag_pairs

    def _parse_tag_pair(self) -> tuple[str, str]:
        self._consume(TokenKind.OPEN_BRACKET)
        name = self._consume(TokenKind.SYMBOL).value
        value = self._consume(TokenKind.STRING).value
        self._consume(TokenKind.CLOSE_BRACKET)
        return str(name), str(value)

    def _parse_move_text_section(self) -> list[PGNMove]:
        moves: list[PGNMove] = []
        while True:
            self._skip_ignored()
            if self._is_game_end(self._peek()) or self._peek().kind == TokenKind.END_OF_FILE:
                break

            move = self._parse_move()
            if move is None:
                # not a move: left for the result marker to complain about
                break
            moves.append(move)
        return moves

    def _parse_move(self) -> Optional[PGNMove]:
        """
        <number>.<white move> <black move>
        ----

        Every part is optional. Move numbers can be followed by any number of periods ('12...' for a black move).
        Returns None if nothing could be read.
        """
        number: Optional[int] = None
        if self._peek().kind == TokenKind.INTEGER:
            number = int(str(self._read().value))
            self._consume(TokenKind.PERIOD)
            while self._peek().kind == TokenKind.PERIOD:
                self._read()
            self._skip_ignored()

        white_move = self._read_possible_move()
        self._skip_ignored()
        black_move = self._read_possible_move()
        self._skip_ignored()

        if number is None and white_move is None and black_move is None:
            return None
        return PGNMove(number, white_move, black_move)

    def _parse_game_result(self) -> GameResult:
        self._skip_ignored()
        token = self._peek()
        if token.kind == TokenKind.ASTERISK:
            self._read()
            return GameResult.UNKNOWN
        if token.kind == TokenKind.SYMBOL:
            self._read()
            if token.value not in RESULT_MARKERS:
                raise PGNParseError(PGNParseErrorKind.INVALID_RESULT, str(token.value))
            return GameResult(token.value)
        raise self._unexpected(token)

    # --- helpers ---
    def _read_possible_move(self) -> Optional[str]:
        token = self._peek()
        if token.kind == TokenKind.SYMBOL and is_possibly_a_move(str(token.value)):
            self._read()
            return str(token.value)
        return None

    @staticmethod
    def _is_game_end(token: Token) -> bool:
        return token.kind == TokenKind.ASTERISK or (
            token.kind == TokenKind.SYMBOL and token.value in RESULT_MARKERS
        )

    def _skip_ignored(self) -> None:
        """Comments, glyphs and whole (nested) variations."""
        while True:
            kind = self._peek().kind
            if kind in IGNORED_KINDS:
                self._read()
            elif kind == TokenKind.OPEN_PAREN:
                self._skip_variation()
            else:
                return

    def _skip_variation(self) -> None:
        self._consume(TokenKind.OPEN_PAREN)
        depth = 1
        while depth > 0:
            kind = self._read().kind
            if kind == TokenKind.OPEN_PAREN:
                depth += 1
            elif kind == TokenKind.CLOSE_PAREN:
                depth -= 1

    def _consume(self, kind: TokenKind) -> Token:
        token = self._peek()
        if token.kind != kind:
            raise self._unexpected(token)
        return self._read()

    def _unexpected(self, token: Token) -> PGNParseError:
        if token.kind == TokenKind.END_OF_FILE:
            return PGNParseError(PGNParseErrorKind.UNEXPECTED_END)
        detail = token.kind.name if token.value is None else f"{token.kind.name} {token.value!r}"
        return PGNParseError(PGNParseErrorKind.UNEXPECTED_TOKEN, detail)

    def _peek(self) -> Token:
        return self.tokens[self.index]

    def _read(self) -> Token:
        token = self.tokens[self.index]
        if token.kind == TokenKind.END_OF_FILE:
            raise PGNParseError(PGNParseErrorKind.UNEXPECTED_END)
        self.index += 1
        return token


def parse_pgn(text: str) -> list[ParsedGame]:
    """Lex and parse a PGN text containing any number of games."""
    return Parser(lex(text)).parse()
