from __future__ import annotations

from contextvars import ContextVar
from typing import Optional

from shared.utils.language import language_tag

_LANGUAGE: ContextVar[Optional[str]] = ContextVar("request_language", default=None)


def set_language(lang: Optional[str]) -> object:
    return _LANGUAGE.set(language_tag(lang))


def reset_language(token: object) -> None:
    _LANGUAGE.reset(token)


def get_language() -> Optional[str]:
    """Language picked by the current request, or None outside a request."""
    return _LANGUAGE.get()
