"""Requests and Response models"""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, field_validator

from src.core.exceptions import InvalidRequestError
from src.core.shared_types import Color, GameResult, PieceType, Status

# Notation tokens are short. Anything longer is not worth handing to the resolver.
MAX_NOTATION_LENGTH = 16


# --- REQUEST MODELS ---
class CreateGameRequest(BaseModel):
    starting_fen: Optional[str] = None

    @field_validator("starting_fen")
    @classmethod
    def validate_starting_fen(cls, value: Optional[str]) -> Optional[str]:
        """Only the shape is checked here. The content is checked by the FEN parser."""
        if value is None:
            return value

        parts = value.strip().split(" ")
        if len(parts) != 6:
            raise InvalidRequestError(
                "FEN string must contain 6 space-separated parts."
            )
        return value.strip()


class ImportPGNRequest(BaseModel):
    pgn: str

    @field_validator("pgn")
    @classmethod
    def validate_pgn(cls, value: str) -> str:
        if not value.strip():
            raise InvalidRequestError("PGN text is empty.")
        return value


class GetGameRequest(BaseModel):
    game_id: UUID


class LegalMovesRequest(BaseModel):
    game_id: UUID


class MoveRequest(BaseModel):
    game_id: UUID
    move: str

    @field_validator("move")
    @classmethod
    def validate_move(cls, value: str) -> str:
        move = value.strip()
        if not move or len(move) > MAX_NOTATION_LENGTH or " " in move:
            raise InvalidRequestError(
                f"Cannot interpret move: {value!r} as a single notation token."
            )
        return move


class DeleteGameRequest(BaseModel):
    game_id: UUID


# --- RESPONSE MODELS ---
class MoveRecord(BaseModel):
    """A legal move, written out field by field."""

    color: Color
    from_square: str
    to_square: str
    piece: PieceType
    takes: Optional[PieceType] = None
    is_en_passant: bool = False
    en_passant_target: Optional[str] = None
    notation: str
    uci: str


class GameResponse(BaseModel):
    game_id: UUID
    fen_state: str
    starting_state: str
    move_history: list[str]
    side_to_move: Color
    in_check: bool
    status: Status
    result: GameResult


class LegalMovesResponse(BaseModel):
    game_id: UUID
    color: Color
    legal_moves: list[MoveRecord]
