"""
Language utilities shared by every service
"""

from __future__ import annotations

from typing import List, Optional

from fastapi import Request


SUPPORTED_LANGUAGES = ["en", "vi"]

_SYNONYMS = {
    "english": "en",
    "eng": "en",
    "vietnamese": "vi",
    "vie": "vi",
}


def get_supported_languages() -> List[str]:
    """
    Get list of supported languages.

    Returns:
        List of supported language codes
    """
    return list(SUPPORTED_LANGUAGES)


def get_default_language() -> str:
    return "en"


def language_tag(lang: Optional[str]) -> Optional[str]:
    """
    Primary subtag of ``lang`` (``vi-VN;q=0.8`` -> ``vi``), or None when empty.

    No support check and no default substitution: error catalogs decide
    which languages they carry and fall back to their own default.
    """
    if not lang:
        return None

    raw = str(lang).strip().lower()
    # Strip quality values: "en;q=0.9"
    if ";" in raw:
        raw = raw.split(";", 1)[0].strip()
    # Take primary subtag: "en-us" -> "en"
    raw = raw.replace("_", "-").split("-", 1)[0].strip()

    return _SYNONYMS.get(raw, raw) or None


def _primary_language(lang: Optional[str]) -> Optional[str]:
    """Supported language code for ``lang``, or None when it is not supported."""
    tag = language_tag(lang)
    return tag if tag in SUPPORTED_LANGUAGES else None


def is_supported_language(lang: Optional[str]) -> bool:
    return _primary_language(lang) is not None


def normalize_language(lang: Optional[str]) -> str:
    """
    Normalize language code.

    Supports:
    - region codes (en-US -> en, vi-VN -> vi)
    - common synonyms (eng/english, vie/vietnamese)

    Unsupported or empty values normalize to the default language.
    """
    return _primary_language(lang) or get_default_language()


def _parse_accept_language_header(value: str) -> List[str]:
    """
    Parse Accept-Language into a list of language codes ordered by preference.

    Very small parser; we don't implement full RFC behavior, but we respect q=.
    Unsupported entries are dropped instead of collapsing to the default.
    """
    if not value:
        return []

    parts = [p.strip() for p in value.split(",") if p.strip()]
    weighted: List[tuple[float, str]] = []
    for part in parts:
        lang = part
        q = 1.0
        if ";" in part:
            lang, params = part.split(";", 1)
            params = params.strip()
            if params.startswith("q="):
                try:
                    q = float(params[2:])
                except ValueError:
                    q = 1.0
        primary = _primary_language(lang)
        if primary:
            weighted.append((q, primary))

    # Sort by q desc, stable otherwise
    weighted.sort(key=lambda item: item[0], reverse=True)
    return [lang for _, lang in weighted]


def get_accept_language(request: Request) -> Optional[str]:
    """
    Get the language the caller asked for, or None when it expressed no
    supported preference.

    An explicit ``?lang=`` query parameter beats the Accept-Language header.
    """
    query_lang = request.query_params.get("lang") or request.query_params.get("language")
    if is_supported_language(query_lang):
        return normalize_language(query_lang)

    accept_language = request.headers.get("Accept-Language", "")
    for candidate in _parse_accept_language_header(accept_language):
        return candidate

    return None
