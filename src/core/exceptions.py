"""
Exceptions raised across layers.

Everything a caller can recover from (bad FEN, bad PGN, a move that does not resolve, unknown game id...) derives from ChessError.
InvariantViolation is different: it means the domain code itself broke a precondition and should never be caught silently.
"""

from enum import Enum, auto
from typing import Optional


class ChessError(Exception):
    """Base class for all user facing errors."""


# --- POSITION FORMAT (FEN) ---
class FENErrorKind(Enum):
    UNEXPECTED_CHARACTER = auto()
    UNEXPECTED_END = auto()
    INVALID_PIECE = auto()
    INVALID_EN_PASSANT = auto()
    INVALID_COUNTER = auto()


class InvalidFENError(ChessError):
    """FEN string could not be parsed. `context` holds the offending character or field."""

    def __init__(self, kind: FENErrorKind, context: str, fen: str) -> None:
        self.kind = kind
        self.context = context
        self.fen = fen
        super().__init__(f"Invalid FEN ({kind.name.lower()}: {context!r}): {fen!r}")


# --- GAME RECORD (PGN) ---
class PGNLexerErrorKind(Enum):
    UNTERMINATED_STRING = auto()
    UNEXPECTED_CHARACTER = auto()
    INVALID_INTEGER = auto()


class PGNLexerError(ChessError):
    def __init__(self, kind: PGNLexerErrorKind, line: int, column: int) -> None:
        self.kind = kind
        self.line = line
        self.column = column
        super().__init__(
            f"{kind.name.lower().replace('_', ' ')} @ line {line}, column {column}"
        )


class PGNParseErrorKind(Enum):
    UNEXPECTED_TOKEN = auto()
    INVALID_RESULT = auto()
    UNEXPECTED_END = auto()


class PGNParseError(ChessError):
    def __init__(self, kind: PGNParseErrorKind, detail: str = "") -> None:
        self.kind = kind
        self.detail = detail
        message = kind.name.lower().replace("_", " ")
        super().__init__(f"{message}: {detail}" if detail else message)


# --- MOVES ---
class ResolutionFailure(Enum):
    """Why a notation token did not resolve into exactly one legal move."""

    NO_SYNTAX_MATCH = auto()
    NO_LEGAL_MATCH = auto()
    AMBIGUOUS = auto()


class MoveResolutionError(ChessError):
    def __init__(self, token: str, reason: ResolutionFailure, detail: str = "") -> None:
        self.token = token
        self.reason = reason
        message = f"Cannot resolve move {token!r} ({reason.name.lower()})"
        super().__init__(f"{message}: {detail}" if detail else message)


class GameReplayError(ChessError):
    """A half-move of a recorded game failed to resolve. Replay stops at the first failure."""

    def __init__(
        self, move_number: Optional[int], token: str, cause: MoveResolutionError
    ) -> None:
        self.move_number = move_number
        self.token = token
        self.cause = cause
        where = f"move {move_number}" if move_number is not None else "unnumbered move"
        super().__init__(f"Invalid {where} {token!r}: {cause}")


# --- SERVICE / API ---
class InvalidRequestError(ChessError):
    """Request data does not have the right shape. NOTE: not a ValueError, so pydantic validators re-raise it untouched."""


class RepositoryError(ChessError):
    pass


class GameStateError(ChessError):
    """Stored game data does not describe a valid game."""


# --- INTERNAL FAULTS ---
class InvariantViolation(RuntimeError):
    """The rules engine reached a state that correct move generation can never produce."""
