"""
The Game class is the entrypoint into the domain layer for the service layer.

A Game is a value: the current position, where it started from, the notation of every move played since and the
recorded result. Making a move gives a new Game, the old one stays as it was.
"""

import logging
from dataclasses import dataclass, replace
from enum import Enum, auto
from typing import Optional, Self

from src.chess.fen import STARTING_FEN, parse_fen, to_fen
from src.chess.moves import ValidMove
from src.chess.notation import resolve_move
from src.chess.pieces import Color
from src.chess.position import Position
from src.chess.rules import apply_move, in_check, in_mate, in_stalemate, legal_moves
from src.core.exceptions import GameReplayError, GameStateError, MoveResolutionError
from src.core.models import GameModel
from src.core.shared_types import GameResult
from src.pgn.parser import ParsedGame, parse_pgn

logger = logging.getLogger(__name__)


class Status(Enum):
    IN_PROGRESS = auto()
    CHECKMATE = auto()
    STALEMATE = auto()


@dataclass(frozen=True)
class Game:
    # --- DOMAIN LAYER API CALLED BY SERVICE---

    position: Position
    starting_fen: str = STARTING_FEN
    moves: tuple[str, ...] = ()
    result: GameResult = GameResult.UNKNOWN

    @classmethod
    def new(cls) -> Self:
        return cls(position=Position.starting_position())

    @classmethod
    def from_fen(cls, fen: str) -> Self:
        """Start a game from any position. Raises InvalidFENError."""
        position = parse_fen(fen)
        return cls(position=position, starting_fen=to_fen(position))

    @classmethod
    def from_pgn(cls, text: str) -> list[Self]:
        """Every game in the PGN text, replayed up to its last move."""
        return [cls.from_parsed(parsed) for parsed in parse_pgn(text)]

    @classmethod
    def from_parsed(cls, parsed: ParsedGame) -> Self:
        """
        Replay a parsed game record
        ----

        1. Start from the FEN tag if there is one, otherwise from the standard starting position.
        2. Apply the half moves in the order they were written. Which side a move was written for is not checked,
           the position decides whose turn it is.
        3. Stop at the first move that does not resolve (GameReplayError names it).
        """
        game = cls.from_fen(parsed.fen) if parsed.fen is not None else cls.new()

        for number, token in parsed.move_tokens():
            try:
                game = game.make_move(token)
            except MoveResolutionError as error:
                logger.debug("Replay stopped at move %s %r", number, token)
                raise GameReplayError(number, token, error) from error

        logger.debug("Replayed %d half move(s)", len(game.moves))
        return replace(game, result=parsed.result)

    @classmethod
    def from_model(cls, model: GameModel) -> Self:
        """Define how to construct a Game from the information the Service layer actually has"""

        # Validation
        try:
            result = GameResult(model.result)
        except ValueError:
            raise GameStateError(
                f"Invalid result: {model.result!r}. Pick one from {', '.join(result.value for result in GameResult)}"
            ) from None

        return cls(
            position=parse_fen(model.current_fen),
            starting_fen=model.starting_fen,
            moves=tuple(model.moves_san),
            result=result,
        )

    def to_model(self) -> GameModel:
        """Encode back into a format the Service layer uses"""
        return GameModel(
            starting_fen=self.starting_fen,
            current_fen=self.to_fen(),
            moves_san=list(self.moves),
            result=self.result.value,
        )

    # --- QUERIES ---
    @property
    def color_to_move(self) -> Color:
        return self.position.color_to_move

    @property
    def status(self) -> Status:
        if in_mate(self.position):
            return Status.CHECKMATE
        if in_stalemate(self.position):
            return Status.STALEMATE
        return Status.IN_PROGRESS

    def valid_moves(self) -> list[ValidMove]:
        """Legal moves of the side to move."""
        return legal_moves(self.position)

    def in_check(self, color: Optional[Color] = None) -> bool:
        """Is `color` (by default: the side to move) in check?"""
        return in_check(self.position, color or self.color_to_move)

    def in_mate(self) -> bool:
        return in_mate(self.position)

    def to_fen(self) -> str:
        return to_fen(self.position)

    # --- MOVES ---
    def make_move(self, notation: str) -> Self:
        """Play the move written in short algebraic notation. Raises MoveResolutionError."""
        move = resolve_move(self.position, notation)
        return self.make_valid_move(move, notation)

    def make_valid_move(self, move: ValidMove, notation: Optional[str] = None) -> Self:
        """
        Play a move that was generated for this position.
        The move is recorded as `notation` if given, otherwise in the notation the move writes itself.
        """
        return replace(
            self,
            position=apply_move(self.position, move),
            moves=(*self.moves, notation or move.to_san()),
        )
