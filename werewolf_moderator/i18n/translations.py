"""Message catalogs for moderator output.

Catalogs are nested JSON objects addressed with dotted keys such as
``action_result.vote_recorded``. A missing key renders as the key itself so
a gap in one catalog shows up in the log instead of raising mid-game.
"""
import json
from functools import lru_cache
from pathlib import Path
from typing import Any, Optional

CATALOG_DIR = Path(__file__).parent
SUPPORTED_LANGUAGES = ("zh", "en")
FALLBACK_LANGUAGE = "zh"


def normalize_language(language: Optional[str]) -> str:
    """Reduce a language tag ("en", "EN-us", "zh_CN") to a catalog name."""
    if not isinstance(language, str):
        return FALLBACK_LANGUAGE
    primary = language.strip().lower().replace("_", "-").split("-")[0]
    # Catalog names double as file names
    if not primary.isalnum() or primary not in SUPPORTED_LANGUAGES:
        return FALLBACK_LANGUAGE
    return primary


@lru_cache(maxsize=None)
def _catalog(language: str) -> dict:
    with open(CATALOG_DIR / f"{language}.json", encoding="utf-8") as f:
        return json.load(f)


def _lookup(catalog: dict, key: str) -> Optional[str]:
    node: Any = catalog
    for part in key.split("."):
        if not isinstance(node, dict) or part not in node:
            return None
        node = node[part]
    return node if isinstance(node, str) else None


def t(key: str, language: str = FALLBACK_LANGUAGE, **kwargs) -> str:
    """Render a catalog message, interpolating ``kwargs`` into it.

    A template whose placeholders are not all supplied is returned as is.
    """
    template = _lookup(_catalog(normalize_language(language)), key)
    if template is None:
        return key
    if not kwargs:
        return template
    try:
        return template.format(**kwargs)
    except (KeyError, IndexError, ValueError):
        return template
