"""Protocol repository: what the service needs from the persistence layer."""

from typing import Protocol
from uuid import UUID

from src.core.models import GameModel


class GameRepository(Protocol):
    """Stores games as GameModel records (starting FEN, current FEN, moves played, result)."""

    def get_game(self, game_id: UUID) -> GameModel | None:
        """Get game by ID, if record exists."""
        ...

    def create_game(self, game: GameModel) -> tuple[GameModel, UUID]:
        """Store new game and return the stored data + newly created game ID."""
        ...

    def update_game(self, game_id: UUID, game: GameModel) -> GameModel | None:
        """Overwrite the record after a move. None if there is no such record."""
        ...

    def delete_game(self, game_id: UUID) -> GameModel | None:
        """Remove a game's record and return what was stored. None if there is no such record."""
        ...
