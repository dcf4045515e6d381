"""Game logging service - captures and filters game logs."""
import logging
from typing import List, Dict, Optional
from collections import deque

from werewolf_moderator.core.config import settings

# Store logs per game ID
game_logs: Dict[str, deque] = {}

MAX_LOGS_PER_GAME = 500

PACKAGE_LOGGER = "werewolf_moderator"

# Keywords that would reveal hidden information to players watching the log
SENSITIVE_KEYWORDS = [
    'role=',
    'seer',
    'witch',
    'guard',
    'antidote',
    'poison',
    'check_result',
    'wolf_kill',
    'password',
    'secret',
    'token',
]

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


class GameLogHandler(logging.Handler):
    """Custom logging handler that captures game-related logs."""

    def emit(self, record):
        """Process a log record and store it if it's game-related."""
        try:
            game_id = getattr(record, 'game_id', None)

            if game_id:
                if game_id not in game_logs:
                    game_logs[game_id] = deque(maxlen=MAX_LOGS_PER_GAME)

                sanitized = self._sanitize(record)
                if sanitized:
                    game_logs[game_id].append(sanitized)
        except Exception:
            self.handleError(record)

    def _sanitize(self, record) -> Optional[Dict]:
        """Drop spoilers and DEBUG records."""
        msg = record.getMessage()

        msg_lower = msg.lower()
        if any(keyword in msg_lower for keyword in SENSITIVE_KEYWORDS):
            return None

        if record.levelno < logging.INFO:
            return None

        return {
            "timestamp": record.created,
            "level": record.levelname,
            "message": msg,
            "module": record.module,
        }


def get_game_logs(game_id: str, limit: int = 100) -> List[Dict]:
    """
    Get sanitized logs for a specific game.

    Args:
        game_id: The game ID
        limit: Maximum number of logs to return (default: 100)

    Returns:
        List of log entries (most recent first)
    """
    if game_id not in game_logs:
        return []

    logs = list(game_logs[game_id])
    logs.reverse()
    return logs[:limit]


def clear_game_logs(game_id: str):
    """Clear logs for a specific game."""
    if game_id in game_logs:
        del game_logs[game_id]


_handler: Optional[GameLogHandler] = None


def init_game_logging() -> GameLogHandler:
    """Attach the game log handler to the package logger once."""
    global _handler
    if _handler is None:
        _handler = GameLogHandler()
        _handler.setLevel(logging.INFO)
        logging.getLogger(PACKAGE_LOGGER).addHandler(_handler)
    return _handler


def configure_logging(level: Optional[str] = None) -> None:
    """Apply LOG_LEVEL to the package logger and add a console handler."""
    level_name = (level or settings.LOG_LEVEL).upper()
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(getattr(logging, level_name, logging.INFO))
    if not any(isinstance(h, logging.StreamHandler) and not isinstance(h, GameLogHandler)
               for h in package_logger.handlers):
        console = logging.StreamHandler()
        console.setFormatter(logging.Formatter(LOG_FORMAT))
        package_logger.addHandler(console)
    init_game_logging()
