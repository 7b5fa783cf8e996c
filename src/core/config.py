"""Runtime configuration, read from environment variables."""

import os

DATABASE_URL = os.environ.get("CHESS_DATABASE_URL", "sqlite:///./chess_games.db")
SQL_ECHO = os.environ.get("CHESS_SQL_ECHO", "0").lower() in {"1", "true", "yes"}
