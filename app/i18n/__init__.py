# -*- coding: utf-8 -*-
"""
String tables and translation lookup for the patch history client.

Language resolution:
- If language not in LANGUAGES → lookups go straight to the fallback (en)
- Otherwise → use exact language table
- If key missing in requested language → fallback to English
- If key missing in all languages → return key (never crash)

There is no process-wide active language. Callers build a TranslationContext
once (see app.services.language_service.init_locale) and pass it down.
"""

import logging
from typing import Dict, Mapping, Optional

from . import en, zh

logger = logging.getLogger(__name__)

DEFAULT_LANGUAGE = "en"
FALLBACK_LANGUAGE = "en"

LANGUAGES: Dict[str, Dict[str, str]] = {
    "en": en.LANG,
    "zh": zh.LANG,
}


def _lookup(
    tables: Mapping[str, Mapping[str, str]],
    language: str,
    key: str,
    fallback: str,
    kwargs: dict,
) -> str:
    text = tables.get(language, {}).get(key)

    if text is None:
        text = tables.get(fallback, {}).get(key)
        if text is None:
            logger.error("I18N missing key in all languages: %s", key)
            return key
        logger.warning("I18N fallback to %s for key=%s, lang=%s", fallback, key, language)

    if kwargs:
        return text.format(**kwargs)
    return text


def get_text(language: str, key: str, **kwargs) -> str:
    """
    Get localized text for key in given language.

    Args:
        language: Language code (en, zh)
        key: Dot-separated key (e.g. history.title, errors.transport)
        **kwargs: Format placeholders (e.g. project="proj_demo" for {project})

    Returns:
        Localized string, optionally formatted. Never raises on a missing key.
    """
    return _lookup(LANGUAGES, language, key, FALLBACK_LANGUAGE, kwargs)


class TranslationContext:
    """
    Active locale plus the tables it reads from.

    Immutable after construction; use with_locale() to get a context for
    another language (e.g. per request or per test).
    """

    def __init__(
        self,
        locale: str,
        messages: Optional[Mapping[str, Mapping[str, str]]] = None,
        fallback_locale: str = FALLBACK_LANGUAGE,
    ):
        self._locale = locale
        self._messages = messages if messages is not None else LANGUAGES
        self._fallback_locale = fallback_locale

    @property
    def locale(self) -> str:
        return self._locale

    @property
    def fallback_locale(self) -> str:
        return self._fallback_locale

    def t(self, key: str, **kwargs) -> str:
        """Translate key in the active locale, falling back to fallback_locale."""
        return _lookup(self._messages, self._locale, key, self._fallback_locale, kwargs)

    def with_locale(self, locale: str) -> "TranslationContext":
        return TranslationContext(locale, self._messages, self._fallback_locale)

    def __repr__(self):
        return f"TranslationContext(locale={self._locale!r})"


__all__ = [
    "get_text",
    "LANGUAGES",
    "DEFAULT_LANGUAGE",
    "FALLBACK_LANGUAGE",
    "TranslationContext",
]
