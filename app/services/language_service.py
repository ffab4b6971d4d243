# -*- coding: utf-8 -*-
"""
Central language resolution for the patch history client.
The active language must be obtained via init_locale / resolve_locale.

Selection rule:
1. Stored preference under "locale" → used verbatim
2. Runtime language tag starting with "zh" → zh
3. Anything else → en
"""
import json
import locale
import logging
import os
from typing import Mapping, Optional

import config
from app.i18n import DEFAULT_LANGUAGE, TranslationContext

LOCALE_PREFERENCE_KEY = "locale"
logger = logging.getLogger(__name__)

# Checked in order; first non-empty wins (gettext precedence for message language)
_LANGUAGE_ENV_VARS = ("LANGUAGE", "LC_ALL", "LC_MESSAGES", "LANG")


class PreferenceStore:
    """
    String key/value store persisted as a JSON object on disk.

    A missing or unreadable file reads as empty; set() rewrites the file.
    """

    def __init__(self, path: Optional[str] = None):
        self.path = path or config.get_preferences_path()

    def _load(self) -> dict:
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            return {}
        except (OSError, ValueError) as e:
            logger.warning("Preferences file unreadable, ignoring [path=%s, error=%s]", self.path, e)
            return {}
        if not isinstance(data, dict):
            logger.warning("Preferences file is not a JSON object, ignoring [path=%s]", self.path)
            return {}
        return data

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        value = self._load().get(key)
        return value if isinstance(value, str) else default

    def set(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=2)
        logger.debug("Preference saved [key=%s, path=%s]", key, self.path)


def detect_language_tag() -> str:
    """Language tag reported by the runtime (e.g. "zh_CN.UTF-8", "en_US"), or ""."""
    for var in _LANGUAGE_ENV_VARS:
        value = os.environ.get(var)
        if value:
            return value
    try:
        tag = locale.getlocale()[0]
    except ValueError:
        tag = None
    return tag or ""


def resolve_locale(
    preferences: Optional[Mapping[str, str]] = None,
    language_tag: Optional[str] = None,
) -> str:
    """
    Pick the active locale code.

    Args:
        preferences: Any mapping-like store with .get("locale")
        language_tag: Runtime language tag; detected when None
    """
    stored = preferences.get(LOCALE_PREFERENCE_KEY) if preferences is not None else None
    if stored:
        logger.debug(f"[I18N] locale resolved: {stored} (stored preference)")
        return stored

    if language_tag is None:
        language_tag = detect_language_tag()

    if language_tag.startswith("zh"):
        logger.debug(f"[I18N] locale resolved: zh (language tag {language_tag})")
        return "zh"

    logger.debug(f"[I18N] locale resolved: {DEFAULT_LANGUAGE} (language tag {language_tag!r})")
    return DEFAULT_LANGUAGE


def init_locale(
    preferences: Optional[Mapping[str, str]] = None,
    language_tag: Optional[str] = None,
) -> TranslationContext:
    """Build the TranslationContext for this process (or request) from preference and runtime language."""
    return TranslationContext(resolve_locale(preferences, language_tag))
