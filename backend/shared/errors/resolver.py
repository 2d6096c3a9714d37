"""
Catalog-driven error resolution.

``ErrorResolver`` is the single way handlers turn a symbolic code into a
``DomainException``. It is built over an explicit ``ErrorCatalog`` so each
service (and each test) owns its own table.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, NoReturn, Optional

from shared.errors.catalog import ErrorCatalog
from shared.exceptions.base import DomainException
from shared.i18n.context import get_language
from shared.utils.language import language_tag

UNKNOWN_CODE_STATUS = 500
UNKNOWN_CODE_CATEGORY = "unknown"


@dataclass(frozen=True)
class ResolvedError:
    code: str
    description: str
    status_code: int
    category: str


class ErrorResolver:
    def __init__(self, catalog: ErrorCatalog):
        self.catalog = catalog

    def _language(self, language: Optional[str]) -> Optional[str]:
        return language_tag(language or get_language())

    def resolve(self, code: str, language: Optional[str] = None) -> ResolvedError:
        """Look ``code`` up; unknown codes resolve to ``Error <code>`` / 500."""
        entry = self.catalog.entry(code)
        if entry is None:
            return ResolvedError(
                code=code,
                description=f"Error {code}",
                status_code=UNKNOWN_CODE_STATUS,
                category=UNKNOWN_CODE_CATEGORY,
            )
        return ResolvedError(
            code=code,
            description=entry.message(self._language(language), self.catalog.default_language),
            status_code=entry.status_code,
            category=entry.category,
        )

    def describe(self, code: str, language: Optional[str] = None) -> ResolvedError:
        return self.resolve(code, language)

    def knows(self, code: Optional[str]) -> bool:
        return bool(code) and code in self.catalog

    def create_exception(
        self,
        code: str,
        metadata: Optional[Mapping[str, Any]] = None,
        language: Optional[str] = None,
    ) -> DomainException:
        resolved = self.resolve(code, language)
        return DomainException(
            code=resolved.code,
            description=resolved.description,
            status_code=resolved.status_code,
            metadata=metadata,
        )

    def raise_error(
        self,
        code: str,
        metadata: Optional[Mapping[str, Any]] = None,
        language: Optional[str] = None,
    ) -> NoReturn:
        raise self.create_exception(code, metadata=metadata, language=language)
