"""Unit tests for src/services/chess_service.py"""

import logging
from typing import Generator
from uuid import UUID, uuid4

import pytest
from sqlalchemy.orm import Session

from src.api.models import (
    CreateGameRequest,
    DeleteGameRequest,
    GameResponse,
    GetGameRequest,
    ImportPGNRequest,
    LegalMovesRequest,
    LegalMovesResponse,
    MoveRequest,
)
from src.chess.fen import STARTING_FEN
from src.core.exceptions import (
    GameReplayError,
    InvalidFENError,
    MoveResolutionError,
    PGNParseError,
    RepositoryError,
)
from src.core.models import GameModel
from src.core.shared_types import Color, GameResult, PieceType, Status
from src.db.sql_repository import SQLGameRepository
from src.services.chess_service import ChessService

# --- MOCK DEPENDENCIES ----
EN_PASSANT_FEN = "rnbqkbnr/ppppp1p1/7p/4Pp2/8/8/PPPP1PPP/RNBQKBNR w KQkq f6 0 3"
FOOLS_MATE_PGN = """
[Event "Fool's Mate"]

1. f3 e5 2. g4 Qh4# 0-1
"""


class MockRepository:
    """Mock the GameRepository using a dictionary of game models."""

    def __init__(self) -> None:
        self._games: dict[UUID, GameModel] = {}

    def create_game(self, game: GameModel) -> tuple[GameModel, UUID]:
        """Store new game and return the stored data + newly created game ID."""
        game_id = uuid4()
        self._games[game_id] = game
        return game, game_id

    def get_game(self, game_id: UUID) -> GameModel | None:
        """Get game by ID, if record exists."""
        return self._games.get(game_id)

    def update_game(self, game_id: UUID, game: GameModel) -> GameModel | None:
        """Add new info to existing record."""
        if game_id not in self._games:
            return None
        self._games[game_id] = game
        return game

    def delete_game(self, game_id: UUID) -> GameModel | None:
        """Remove a game's record."""
        return self._games.pop(game_id, None)

    def clear(self) -> None:
        """Clear the repository (useful in between tests)"""
        self._games.clear()

    def __len__(self) -> int:
        return len(self._games)


@pytest.fixture
def mock_repository() -> Generator[MockRepository, None, None]:
    """Ensures to clear the repository between tests"""
    repo = MockRepository()
    try:
        yield repo
    finally:
        repo.clear()


@pytest.fixture
def service(mock_repository: MockRepository) -> ChessService:
    return ChessService(mock_repository)


# --- SERVICE - CREATE NEW GAME ----
def test_create_a_new_game(service: ChessService, mock_repository: MockRepository) -> None:
    """Check that new game is created, persisted in repo, and return has the appropriate information."""
    response = service.create_new_game(CreateGameRequest())

    # Check response structure
    assert isinstance(response, GameResponse)
    assert isinstance(response.game_id, UUID)

    # Check response data
    assert response.fen_state == STARTING_FEN
    assert response.starting_state == STARTING_FEN
    assert response.move_history == []
    assert response.side_to_move == Color.WHITE
    assert not response.in_check
    assert response.status == Status.IN_PROGRESS
    assert response.result == GameResult.UNKNOWN

    # Check persisted data
    stored_game = mock_repository.get_game(response.game_id)
    assert stored_game == GameModel(
        starting_fen=STARTING_FEN, current_fen=STARTING_FEN, moves_san=[], result="*"
    )


def test_create_from_fen(service: ChessService) -> None:
    response = service.create_new_game(CreateGameRequest(starting_fen=EN_PASSANT_FEN))
    assert response.fen_state == EN_PASSANT_FEN
    assert response.starting_state == EN_PASSANT_FEN


def test_create_with_invalid_fen(service: ChessService, mock_repository: MockRepository) -> None:
    """Make sure service propagates the exceptions, and nothing gets stored."""
    with pytest.raises(InvalidFENError):
        service.create_new_game(
            CreateGameRequest(starting_fen="rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 one")
        )
    assert len(mock_repository) == 0


# --- SERVICE - IMPORT PGN ----
def test_import_pgn(service: ChessService, mock_repository: MockRepository) -> None:
    [response] = service.import_pgn(ImportPGNRequest(pgn=FOOLS_MATE_PGN))
    assert response.move_history == ["f3", "e5", "g4", "Qh4#"]
    assert response.in_check
    assert response.status == Status.CHECKMATE
    assert response.result == GameResult.BLACK_WINS

    stored_game = mock_repository.get_game(response.game_id)
    assert stored_game is not None
    assert stored_game.result == "0-1"


def test_import_multiple_games(service: ChessService, mock_repository: MockRepository) -> None:
    responses = service.import_pgn(ImportPGNRequest(pgn=FOOLS_MATE_PGN + "\n1. d4 *"))
    assert len(responses) == 2
    assert len(mock_repository) == 2
    assert len({response.game_id for response in responses}) == 2


@pytest.mark.parametrize(
    "pgn, error",
    [
        ("1. e4 e5 2. Ke3 *", GameReplayError),
        ("1. e4 e5 2-2", PGNParseError),
    ],
)
def test_import_is_all_or_nothing(
    service: ChessService,
    mock_repository: MockRepository,
    caplog: pytest.LogCaptureFixture,
    pgn: str,
    error: type[Exception],
) -> None:
    with caplog.at_level(logging.WARNING, logger="src.services.chess_service"):
        with pytest.raises(error):
            service.import_pgn(ImportPGNRequest(pgn=FOOLS_MATE_PGN + "\n" + pgn))
    assert len(mock_repository) == 0
    assert "Rejected PGN import" in caplog.text


# --- SERVICE - GAME STATE ----
def test_get_game_state(service: ChessService) -> None:
    created = service.create_new_game(CreateGameRequest(starting_fen=EN_PASSANT_FEN))
    response = service.get_game_state(GetGameRequest(game_id=created.game_id))
    assert response == created


def test_get_unknown_game(service: ChessService) -> None:
    with pytest.raises(RepositoryError):
        service.get_game_state(GetGameRequest(game_id=uuid4()))


# --- SERVICE - LEGAL MOVES ----
def test_legal_moves(service: ChessService) -> None:
    created = service.create_new_game(CreateGameRequest())
    response = service.legal_moves(LegalMovesRequest(game_id=created.game_id))
    assert isinstance(response, LegalMovesResponse)
    assert response.color == Color.WHITE
    assert len(response.legal_moves) == 20

    double_step = next(move for move in response.legal_moves if move.uci == "e2e4")
    assert double_step.piece == PieceType.PAWN
    assert double_step.notation == "e4"
    assert double_step.en_passant_target == "e3"
    assert double_step.takes is None


def test_legal_moves_include_en_passant(service: ChessService) -> None:
    created = service.create_new_game(CreateGameRequest(starting_fen=EN_PASSANT_FEN))
    response = service.legal_moves(LegalMovesRequest(game_id=created.game_id))
    en_passant = next(move for move in response.legal_moves if move.is_en_passant)
    assert en_passant.notation == "exf6"
    assert en_passant.takes == PieceType.PAWN
    assert en_passant.from_square == "e5"
    assert en_passant.to_square == "f6"


# --- SERVICE - MAKE MOVE ----
def test_make_move(service: ChessService, mock_repository: MockRepository) -> None:
    created = service.create_new_game(CreateGameRequest(starting_fen=EN_PASSANT_FEN))
    response = service.make_move(MoveRequest(game_id=created.game_id, move="exf6"))

    assert response.fen_state == "rnbqkbnr/ppppp1p1/5P1p/8/8/8/PPPP1PPP/RNBQKBNR b KQkq - 0 3"
    assert response.move_history == ["exf6"]
    assert response.side_to_move == Color.BLACK

    stored_game = mock_repository.get_game(created.game_id)
    assert stored_game is not None
    assert stored_game.current_fen == response.fen_state
    assert stored_game.moves_san == ["exf6"]


def test_play_until_mate(service: ChessService) -> None:
    game_id = service.create_new_game(CreateGameRequest()).game_id
    for move in ["f3", "e5", "g4", "Qh4#"]:
        response = service.make_move(MoveRequest(game_id=game_id, move=move))

    assert response.status == Status.CHECKMATE
    assert response.in_check
    assert service.legal_moves(LegalMovesRequest(game_id=game_id)).legal_moves == []


def test_illegal_move(
    service: ChessService, mock_repository: MockRepository, caplog: pytest.LogCaptureFixture
) -> None:
    """Nothing changes in the repository when the move does not resolve"""
    created = service.create_new_game(CreateGameRequest())
    with caplog.at_level(logging.WARNING, logger="src.services.chess_service"):
        with pytest.raises(MoveResolutionError):
            service.make_move(MoveRequest(game_id=created.game_id, move="e5"))

    stored_game = mock_repository.get_game(created.game_id)
    assert stored_game is not None
    assert stored_game.moves_san == []
    assert "Rejected move 'e5'" in caplog.text


def test_move_in_unknown_game(service: ChessService) -> None:
    with pytest.raises(RepositoryError):
        service.make_move(MoveRequest(game_id=uuid4(), move="e4"))


# --- SERVICE - DELETE GAME ----
def test_delete_game(service: ChessService, mock_repository: MockRepository) -> None:
    created = service.create_new_game(CreateGameRequest())
    service.delete_game(DeleteGameRequest(game_id=created.game_id))
    assert mock_repository.get_game(created.game_id) is None

    with pytest.raises(RepositoryError):
        service.delete_game(DeleteGameRequest(game_id=created.game_id))


# --- SERVICE WITH SQL REPOSITORY ----
def test_service_with_sql_repository(db_session_shared: Session) -> None:
    """Same flow as above, through the real repository"""
    service = ChessService(SQLGameRepository(db_session_shared))
    game_id = service.create_new_game(CreateGameRequest()).game_id
    service.make_move(MoveRequest(game_id=game_id, move="e4"))
    response = service.make_move(MoveRequest(game_id=game_id, move="e5"))

    assert response.move_history == ["e4", "e5"]
    assert service.get_game_state(GetGameRequest(game_id=game_id)) == response
