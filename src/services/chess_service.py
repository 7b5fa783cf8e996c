"""Orchestration of communication from API router to business logic and persistence layers (and the reverse direction)."""

import logging
from uuid import UUID

from src.api.models import (
    CreateGameRequest,
    DeleteGameRequest,
    GameResponse,
    GetGameRequest,
    ImportPGNRequest,
    LegalMovesRequest,
    LegalMovesResponse,
    MoveRecord,
    MoveRequest,
)
from src.chess.game import Game
from src.chess.moves import ValidMove
from src.core.exceptions import ChessError, RepositoryError
from src.core.shared_types import Color, PieceType, Status
from src.db.repository import GameRepository

logger = logging.getLogger(__name__)


class ChessService:
    """Orchestration of layers for chess game."""

    def __init__(self, repository: GameRepository) -> None:
        self.repo = repository

    # -- API routes logic ---
    def create_new_game(self, request: CreateGameRequest) -> GameResponse:
        """Create a new game, from the given FEN or from the standard starting position."""

        # Create the Game, and convert into GameModel
        new_game = (
            Game.from_fen(request.starting_fen)
            if request.starting_fen
            else Game.new()
        )

        # Store the GameModel in the repository
        _, game_id = self.repo.create_game(new_game.to_model())
        logger.info("Created game %s", game_id)

        # Return a GameResponse
        return self._create_game_response(game_id, new_game)

    def import_pgn(self, request: ImportPGNRequest) -> list[GameResponse]:
        """
        Store every game of a PGN text.
        ----
        All or nothing: if one of the games fails to parse or replay, none of them gets stored.
        """
        try:
            games = Game.from_pgn(request.pgn)
        except ChessError as error:
            logger.warning("Rejected PGN import: %s", error)
            raise

        responses: list[GameResponse] = []
        for game in games:
            _, game_id = self.repo.create_game(game.to_model())
            responses.append(self._create_game_response(game_id, game))

        logger.info("Imported %d game(s) from PGN", len(responses))
        return responses

    def get_game_state(self, request: GetGameRequest) -> GameResponse:
        """Retrieve current game state."""
        game = self._fetch_game(request.game_id)
        return self._create_game_response(request.game_id, game)

    def legal_moves(self, request: LegalMovesRequest) -> LegalMovesResponse:
        """retrieve set of legal moves for the side to move."""
        game = self._fetch_game(request.game_id)
        return LegalMovesResponse(
            game_id=request.game_id,
            color=Color[game.color_to_move.name],
            legal_moves=[self._create_move_record(move) for move in game.valid_moves()],
        )

    def make_move(self, request: MoveRequest) -> GameResponse:
        """Make a move attempt."""

        # Retrieve persisted game
        game = self._fetch_game(request.game_id)

        # Attempt the move
        try:
            after_move = game.make_move(request.move)
        except ChessError as error:
            logger.warning("Rejected move %r in game %s: %s", request.move, request.game_id, error)
            raise

        # store in repository
        self.repo.update_game(request.game_id, after_move.to_model())
        logger.info("Game %s: played %r", request.game_id, request.move)

        # Return a GameResponse
        return self._create_game_response(request.game_id, after_move)

    def delete_game(self, request: DeleteGameRequest) -> None:
        """Handle a request to delete a Game record."""
        if self.repo.delete_game(request.game_id) is None:
            raise RepositoryError(f"Game with game_id={request.game_id} not found.")
        logger.info("Deleted game %s", request.game_id)

    # -- Internal helpers --
    def _create_game_response(self, game_id: UUID, game: Game) -> GameResponse:
        """Convert info in the Game to a GameResponse (for game with given ID.)"""
        return GameResponse(
            game_id=game_id,
            fen_state=game.to_fen(),
            starting_state=game.starting_fen,
            move_history=list(game.moves),
            side_to_move=Color[game.color_to_move.name],
            in_check=game.in_check(),
            status=Status[game.status.name],
            result=game.result,
        )

    def _create_move_record(self, move: ValidMove) -> MoveRecord:
        return MoveRecord(
            color=Color[move.color.name],
            from_square=move.from_square.to_algebraic(),
            to_square=move.to_square.to_algebraic(),
            piece=PieceType[move.piece.name],
            takes=PieceType[move.takes.name] if move.takes is not None else None,
            is_en_passant=move.is_en_passant,
            en_passant_target=(
                move.en_passant_target.to_algebraic()
                if move.en_passant_target is not None
                else None
            ),
            notation=move.to_san(),
            uci=move.to_uci(),
        )

    def _fetch_game(self, game_id: UUID) -> Game:
        """Attempt to find the game in the repository and raise error if it fails."""
        game_model = self.repo.get_game(game_id)
        if game_model is None:
            raise RepositoryError(f"Game with {game_id=} not found.")
        return Game.from_model(game_model)
