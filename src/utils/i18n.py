"""
Message catalogues for user-facing text.

Every message the confirmation gate shows to a user (generic identity errors,
rate limit waits, token failures) is looked up here by key. Catalogues live in
``src/locales/<lang>/LC_MESSAGES/messages.po``; compiled ``.mo`` files are
used when present, otherwise the ``.po`` file itself is parsed.

Messages that carry values use ``str.format`` placeholders, for example
``{wait_seconds}``, and are formatted by the caller.
"""

from __future__ import annotations

import gettext
import os
from typing import Dict, Optional

from fastapi import Request

from src.core.config.settings import settings
from src.core.logging import logger

LOCALES_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "locales"))

_translations: Dict[str, gettext.NullTranslations] = {}
_po_catalogs: Dict[str, Dict[str, str]] = {}


def _read_po_catalog(lang: str) -> Dict[str, str]:
    """Parse the single-line ``msgid``/``msgstr`` pairs of a ``.po`` file."""
    po_path = os.path.join(LOCALES_PATH, lang, "LC_MESSAGES", "messages.po")
    catalog: Dict[str, str] = {}
    if not os.path.exists(po_path):
        return catalog

    msgid: Optional[str] = None
    with open(po_path, "r", encoding="utf-8") as po_file:
        for raw_line in po_file:
            line = raw_line.strip()
            if line.startswith("msgid "):
                msgid = line[6:].strip().strip('"')
            elif line.startswith("msgstr ") and msgid:
                catalog[msgid] = line[7:].strip().strip('"') or msgid
                msgid = None
    return catalog


def setup_i18n() -> None:
    """
    Load catalogues for every supported language.

    Raises:
        FileNotFoundError: If the locales directory is missing.
    """
    if not os.path.exists(LOCALES_PATH):
        raise FileNotFoundError(f"Locales directory not found: {LOCALES_PATH}")

    for lang in settings.SUPPORTED_LANGUAGES:
        _translations[lang] = gettext.translation(
            domain="messages",
            localedir=LOCALES_PATH,
            languages=[lang],
            fallback=True,
        )
        _po_catalogs[lang] = _read_po_catalog(lang)
        logger.debug("i18n_catalog_loaded", language=lang, entries=len(_po_catalogs[lang]))

    logger.info("i18n_setup_complete", default_locale=settings.DEFAULT_LANGUAGE)


def get_translated_message(key: str, locale: str = settings.DEFAULT_LANGUAGE) -> str:
    """
    Look up the message for `key` in `locale`.

    Unsupported locales fall back to the default language; unknown keys are
    returned unchanged.

    Args:
        key: Message key, e.g. ``"invalid_identity_generic"``.
        locale: Language code.

    Returns:
        The translated message, or `key` if no catalogue has it.
    """
    if not _translations:
        setup_i18n()

    if locale not in _translations:
        logger.warning(
            "unsupported_locale_requested",
            requested_locale=locale,
            fallback_locale=settings.DEFAULT_LANGUAGE,
        )
        locale = settings.DEFAULT_LANGUAGE

    translation = _translations.get(locale)
    if not translation:
        logger.error("translation_missing_for_locale", locale=locale)
        return key

    message = translation.gettext(key)
    if message == key:
        message = _po_catalogs.get(locale, {}).get(key, key)
        if message == key:
            logger.warning("translation_key_not_found", key=key, locale=locale)

    return message


def get_request_language(request: Request) -> str:
    """
    Pick the response language for a request.

    A supported ``lang`` query parameter wins, then the first supported entry
    of ``Accept-Language``, then the default language.
    """
    lang = request.query_params.get("lang")
    if lang and lang in settings.SUPPORTED_LANGUAGES:
        return lang

    accept_language = request.headers.get("Accept-Language", settings.DEFAULT_LANGUAGE)
    for entry in accept_language.split(","):
        candidate = entry.split(";")[0].strip().split("-")[0]
        if candidate in settings.SUPPORTED_LANGUAGES:
            return candidate

    return settings.DEFAULT_LANGUAGE
