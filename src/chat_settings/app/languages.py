"""Language registry — known UI languages and their string packs.

Keys use the "xx-yy" form. "xx_yy" is accepted on input and normalized.

// [LAW:one-source-of-truth] LANGUAGES is the only list of supported languages.
// [LAW:dataflow-not-control-flow] Each key maps to an explicit loader; lookups
//   are validated against the registry before any file is touched.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from dataclasses import dataclass
from functools import partial
from pathlib import Path

import chat_settings.io.settings
from chat_settings.io.settings import StorageKeys

_LOCALES_DIR = Path(__file__).resolve().parent.parent / "locales"

DEFAULT_LANGUAGE = "en-gb"


@dataclass(frozen=True)
class Language:
    name: str
    emoji: str
    contributors: tuple[str, ...]


LANGUAGES: dict[str, Language] = {
    "en-gb": Language("British English", "🇬🇧", ("https://github.com/SupertigerDev",)),
    "hu-hu": Language("Hungarian", "🇭🇺", ("https://github.com/andrasdaradici",)),
    "tr-tr": Language("Turkish", "🇹🇷", ("https://github.com/sutnax",)),
    "nl-nl": Language("Dutch", "🇳🇱", ("https://github.com/captainqdev",)),
}


def _load_pack(filename: str) -> dict:
    return json.loads((_LOCALES_DIR / filename).read_text(encoding="utf-8"))


LOADERS: dict[str, Callable[[], dict]] = {
    key: partial(_load_pack, f"{key}.json") for key in LANGUAGES
}


def normalize_key(key: str) -> str:
    return str(key or "").strip().lower().replace("_", "-")


def is_known(key: str) -> bool:
    return normalize_key(key) in LANGUAGES


def load_language(key: str) -> dict | None:
    """Load the string pack for key, or None if the language is unknown."""
    loader = LOADERS.get(normalize_key(key))
    if loader is None:
        return None
    return loader()


def get_current_language() -> str | None:
    stored = chat_settings.io.settings.get_storage_string(StorageKeys.APP_LANGUAGE)
    if stored is None or not is_known(stored):
        return None
    return normalize_key(stored)


def set_current_language(key: str) -> None:
    normalized = normalize_key(key)
    if normalized not in LANGUAGES:
        raise KeyError(key)
    chat_settings.io.settings.set_storage_string(StorageKeys.APP_LANGUAGE, normalized)


def translate(pack: dict | None, key: str, default: str) -> str:
    """Look up a dotted key ("settings.drawer.account") in a loaded pack."""
    node: object = pack or {}
    for part in key.split("."):
        if not isinstance(node, dict) or part not in node:
            return default
        node = node[part]
    return node if isinstance(node, str) else default
