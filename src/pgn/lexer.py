"""
PGN text -> tokens.

Token classes follow the PGN export format (http://www.saremba.de/chessgml/standards/pgn/pgn-complete.htm, section 7):
comments, strings, integers, self-terminating punctuation, numeric annotation glyphs ($n) and symbols.

Deviations from the standard:
* '/' is also accepted as symbol continuation character, so that the draw marker "1/2-1/2" is a single symbol.
* tab and carriage return count as white space as well.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional, Union

from src.core.exceptions import PGNLexerError, PGNLexerErrorKind

logger = logging.getLogger(__name__)

WHITESPACE = frozenset(" \t\r\n")
SYMBOL_CONTINUATION = frozenset("_+#=:-/")


class TokenKind(Enum):
    COMMENT = auto()
    STRING = auto()
    INTEGER = auto()
    PERIOD = auto()
    ASTERISK = auto()
    OPEN_BRACKET = auto()
    CLOSE_BRACKET = auto()
    OPEN_PAREN = auto()
    CLOSE_PAREN = auto()
    OPEN_ANGLE_BRACKET = auto()
    CLOSE_ANGLE_BRACKET = auto()
    NUMERIC_ANNOTATION_GLYPH = auto()
    SYMBOL = auto()
    END_OF_FILE = auto()


SELF_TERMINATING: dict[str, TokenKind] = {
    ".": TokenKind.PERIOD,
    "*": TokenKind.ASTERISK,
    "[": TokenKind.OPEN_BRACKET,
    "]": TokenKind.CLOSE_BRACKET,
    "(": TokenKind.OPEN_PAREN,
    ")": TokenKind.CLOSE_PAREN,
    "<": TokenKind.OPEN_ANGLE_BRACKET,
    ">": TokenKind.CLOSE_ANGLE_BRACKET,
}


@dataclass(frozen=True)
class Token:
    """Comments, strings and symbols carry text, integers and glyphs carry an int. Punctuation carries nothing."""

    kind: TokenKind
    value: Union[str, int, None] = None


class Lexer:
    """
    Single pass over the text.
    ---

    Keeps track of line (1-based) and column (characters consumed on the current line) for error reporting.
    An error reports the column of the offending character.
    """

    def __init__(self, text: str) -> None:
        self.text = text
        self.index = 0
        self.line = 1
        self.column = 0

    def lex(self) -> list[Token]:
        tokens: list[Token] = []
        while True:
            character = self._peek()

            if character is None:
                tokens.append(Token(TokenKind.END_OF_FILE))
                break

            if character == "%" and self.column == 0:
                # escape mechanism: the whole line is ignored
                self._read_until("\n")
            elif character == ";":
                self._next()
                tokens.append(Token(TokenKind.COMMENT, self._read_until("\n")))
            elif character == "{":
                self._next()
                tokens.append(Token(TokenKind.COMMENT, self._read_until("}")))
            elif character == '"':
                tokens.append(Token(TokenKind.STRING, self._read_string()))
            elif character in WHITESPACE:
                self._next()
            elif character in SELF_TERMINATING:
                self._next()
                tokens.append(Token(SELF_TERMINATING[character]))
            elif character == "$":
                self._next()
                tokens.append(
                    Token(TokenKind.NUMERIC_ANNOTATION_GLYPH, self._read_integer())
                )
            elif character.isalnum():
                tokens.append(self._read_symbol())
            else:
                raise PGNLexerError(
                    PGNLexerErrorKind.UNEXPECTED_CHARACTER, self.line, self.column + 1
                )

        logger.debug("Lexed %d tokens over %d line(s)", len(tokens), self.line)
        return tokens

    # --- readers ---
    def _read_until(self, terminator: str) -> str:
        """Everything up to the terminator (consumed, not included) or the end of the text."""
        characters: list[str] = []
        while (character := self._next()) is not None and character != terminator:
            characters.append(character)
        return "".join(characters)

    def _read_string(self) -> str:
        """Quoted string. Backslash escapes a quote or another backslash."""
        start_line, start_column = self.line, self.column + 1
        self._next()  # opening quote

        characters: list[str] = []
        in_escape_sequence = False
        while True:
            character = self._next()
            if character is None:
                raise PGNLexerError(
                    PGNLexerErrorKind.UNTERMINATED_STRING, start_line, start_column
                )

            if in_escape_sequence:
                characters.append(character)
                in_escape_sequence = False
            elif character == "\\":
                in_escape_sequence = True
            elif character == '"':
                return "".join(characters)
            else:
                characters.append(character)

    def _read_integer(self) -> int:
        line, column = self.line, self.column + 1
        digits: list[str] = []
        while (character := self._peek()) is not None and character.isdigit():
            digits.append(character)
            self._next()
        return self._to_int("".join(digits), line, column)

    def _read_symbol(self) -> Token:
        line, column = self.line, self.column + 1
        characters: list[str] = []
        while (character := self._peek()) is not None and (
            character.isalnum() or character in SYMBOL_CONTINUATION
        ):
            characters.append(character)
            self._next()

        symbol = "".join(characters)
        if symbol.isdigit():
            return Token(TokenKind.INTEGER, self._to_int(symbol, line, column))
        return Token(TokenKind.SYMBOL, symbol)

    def _to_int(self, digits: str, line: int, column: int) -> int:
        # str.isdigit() also accepts digits int() cannot read (superscripts etc.)
        try:
            return int(digits)
        except ValueError:
            raise PGNLexerError(
                PGNLexerErrorKind.INVALID_INTEGER, line, column
            ) from None

    # --- cursor ---
    def _peek(self) -> Optional[str]:
        return self.text[self.index] if self.index < len(self.text) else None

    def _next(self) -> Optional[str]:
        character = self._peek()
        if character is None:
            return None

        self.index += 1
        if character == "\n":
            self.line += 1
            self.column = 0
        else:
            self.column += 1
        return character


def lex(text: str) -> list[Token]:
    return Lexer(text).lex()
