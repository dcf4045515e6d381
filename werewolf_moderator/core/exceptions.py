"""Custom exceptions for the library.

Provides standardized error handling across the engine and storage layers.
"""
from typing import Optional


class AppException(Exception):
    """Base exception for library errors."""

    def __init__(
        self,
        message: str,
        code: str = "UNKNOWN_ERROR",
        details: Optional[dict] = None
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict:
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details
        }


class GameException(AppException):
    """Game-related exceptions."""
    pass


class NoActiveGameError(GameException):
    """Raised when an operation needs a game but none is loaded."""

    def __init__(self, operation: Optional[str] = None):
        super().__init__(
            message="No active game",
            code="NO_ACTIVE_GAME",
            details={"operation": operation} if operation else {}
        )


class GameNotFoundError(GameException):
    """Raised when a saved game is not found."""

    def __init__(self, game_id: str):
        super().__init__(
            message=f"Game not found: {game_id}",
            code="GAME_NOT_FOUND",
            details={"game_id": game_id}
        )


class InvalidActionError(GameException):
    """Raised when an invalid action is attempted."""

    def __init__(self, message: str, action_type: Optional[str] = None):
        super().__init__(
            message=message,
            code="INVALID_ACTION",
            details={"action_type": action_type} if action_type else {}
        )


class InvalidTargetError(GameException):
    """Raised when an invalid target is selected."""

    def __init__(self, message: str, target_id: Optional[int] = None):
        super().__init__(
            message=message,
            code="INVALID_TARGET",
            details={"target_id": target_id} if target_id else {}
        )


class PlayerDeadError(GameException):
    """Raised when a dead player tries to act."""

    def __init__(self, seat_id: int, message: Optional[str] = None):
        super().__init__(
            message=message or "Player is dead and cannot perform this action",
            code="PLAYER_DEAD",
            details={"seat_id": seat_id}
        )


class ConfigException(AppException):
    """Configuration-related exceptions."""
    pass


class UnknownRoleError(ConfigException):
    """Raised for a role type that is not in the registry."""

    def __init__(self, role_type: object):
        super().__init__(
            message=f"Unknown role type: {role_type}",
            code="UNKNOWN_ROLE",
            details={"role_type": str(role_type)}
        )


class InvalidConfigError(ConfigException):
    """Raised when a game configuration is invalid."""

    def __init__(self, message: str, config_key: Optional[str] = None):
        super().__init__(
            message=message,
            code="INVALID_CONFIG",
            details={"config_key": config_key} if config_key else {}
        )


class StorageError(AppException):
    """Raised when the persistence backend fails."""

    def __init__(self, message: str, operation: Optional[str] = None):
        super().__init__(
            message=message,
            code="STORAGE_ERROR",
            details={"operation": operation} if operation else {}
        )


class ImportFormatError(StorageError):
    """Raised when an imported blob is not a valid game export."""

    def __init__(self, message: str):
        super().__init__(message=message, operation="import")
        self.code = "INVALID_IMPORT"
