"""i18n module for moderator messages."""

from .translations import SUPPORTED_LANGUAGES, normalize_language, t

__all__ = ["SUPPORTED_LANGUAGES", "normalize_language", "t"]
