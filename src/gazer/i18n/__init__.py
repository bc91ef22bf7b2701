"""Translation lookup for the CLI and banner.

Translations live in ``translations/<lang>.json`` as nested objects and are
addressed with dotted keys (``"cli.help.port"``).  Lookup falls back from the
current language to English, and finally to ``"[key]"``.

The default language comes from ``GAZER_LANG``, then the POSIX locale
variables, then English.
"""

from __future__ import annotations

import json
import os
import sys
from collections.abc import Mapping
from pathlib import Path
from typing import Any

SUPPORTED_LANGUAGES: tuple[str, ...] = ("en", "es", "ja")
DEFAULT_LANGUAGE = "en"
TRANSLATIONS_DIR = Path(__file__).parent / "translations"
LANG_ENV_VAR = "GAZER_LANG"


def detect_language(environ: Mapping[str, str] | None = None) -> str:
    """Pick a language from the environment.

    ``GAZER_LANG`` wins when it names a supported language; otherwise the
    prefix of ``LANG``, ``LANGUAGE`` or ``LC_ALL`` decides.

    """
    env = os.environ if environ is None else environ
    explicit = env.get(LANG_ENV_VAR, "")
    if explicit in SUPPORTED_LANGUAGES:
        return explicit

    system = env.get("LANG") or env.get("LANGUAGE") or env.get("LC_ALL") or ""
    for lang in SUPPORTED_LANGUAGES:
        if system.startswith(lang):
            return lang
    return DEFAULT_LANGUAGE


def lookup(tree: Mapping[str, Any], key: str) -> str | None:
    """Resolve a dotted *key* in a nested mapping; None unless it ends on a string."""
    node: Any = tree
    for part in key.split("."):
        if not isinstance(node, Mapping) or part not in node:
            return None
        node = node[part]
    return node if isinstance(node, str) and node else None


class Translator:
    """Loads translation files and resolves keys with fallback.

    Args:
        directory: Directory holding ``<lang>.json`` files.
        language: Initial language; None detects it from the environment.

    """

    __slots__ = ("_current", "_translations")

    def __init__(self, directory: Path = TRANSLATIONS_DIR, language: str | None = None) -> None:
        self._translations: dict[str, dict[str, Any]] = {}
        for lang in SUPPORTED_LANGUAGES:
            path = directory / f"{lang}.json"
            if not path.is_file():
                continue
            try:
                self._translations[lang] = json.loads(path.read_text(encoding="utf-8"))
            except (OSError, ValueError) as exc:
                print(f"  Failed to load translations for {lang}: {exc}", file=sys.stderr)

        self._current = DEFAULT_LANGUAGE
        self.set_language(language or detect_language())

    @property
    def language(self) -> str:
        return self._current

    @property
    def available(self) -> frozenset[str]:
        return frozenset(self._translations)

    def set_language(self, language: str) -> None:
        """Switch language; unknown or unloaded languages fall back to English."""
        if language in self._translations:
            self._current = language
            return
        if language != DEFAULT_LANGUAGE:
            print(
                f"  Language {language} not available, falling back to English",
                file=sys.stderr,
            )
        self._current = DEFAULT_LANGUAGE

    def translate(self, key: str) -> str:
        """Return the text for *key*, falling back to English, then ``[key]``."""
        current = self._translations.get(self._current)
        if current is not None:
            value = lookup(current, key)
            if value is not None:
                return value
        english = self._translations.get(DEFAULT_LANGUAGE)
        if english is not None:
            value = lookup(english, key)
            if value is not None:
                return value
        return f"[{key}]"


# ---------------------------------------------------------------------------
# Default translator, created on first use
# ---------------------------------------------------------------------------

_default: Translator | None = None


def _translator() -> Translator:
    global _default  # noqa: PLW0603
    if _default is None:
        _default = Translator()
    return _default


def t(key: str) -> str:
    """Translate *key* with the default translator."""
    return _translator().translate(key)


def set_language(language: str) -> None:
    """Switch the default translator's language."""
    _translator().set_language(language)


def get_current_language() -> str:
    return _translator().language


__all__ = [
    "DEFAULT_LANGUAGE",
    "SUPPORTED_LANGUAGES",
    "TRANSLATIONS_DIR",
    "Translator",
    "detect_language",
    "get_current_language",
    "lookup",
    "set_language",
    "t",
]
