"""Unit tests for settings normalization."""
import os
from unittest.mock import patch

import pydantic
import pytest

from werewolf_moderator.core.config import Settings


class TestSettings:

    @patch.dict(os.environ, {}, clear=True)
    def test_defaults(self):
        settings = Settings()
        assert settings.GAME_STORE_BACKEND == "memory"
        assert settings.DEFAULT_LANGUAGE == "zh"
        assert settings.HISTORY_LIMIT == 20
        assert settings.POLICE_VOTE_WEIGHT == 1.5
        assert settings.EXPORT_FORMAT_VERSION == "1.0.0"
        assert settings.SQLITE_PATH == os.path.join("data", "werewolf_games.db")

    @patch.dict(os.environ, {
        "GAME_STORE_BACKEND": " SQLite ",
        "DATA_DIR": "/tmp/wolves",
        "POLICE_VOTE_WEIGHT": "2",
    }, clear=True)
    def test_environment_binding(self):
        settings = Settings()
        assert settings.GAME_STORE_BACKEND == "sqlite"
        assert settings.SQLITE_PATH == os.path.join("/tmp/wolves", "werewolf_games.db")
        assert settings.POLICE_VOTE_WEIGHT == 2.0

    @patch.dict(os.environ, {"SQLITE_PATH": "/var/games.db"}, clear=True)
    def test_explicit_sqlite_path_kept(self):
        assert Settings().SQLITE_PATH == "/var/games.db"

    @patch.dict(os.environ, {"GAME_STORE_BACKEND": "mongo"}, clear=True)
    def test_unknown_backend_becomes_memory(self):
        assert Settings().GAME_STORE_BACKEND == "memory"

    @patch.dict(os.environ, {"HISTORY_LIMIT": "0"}, clear=True)
    def test_history_limit_must_be_positive(self):
        with pytest.raises(pydantic.ValidationError):
            Settings()
