"""
Error catalog

One versioned catalog per service maps symbolic error codes
(``SERVICE.NNNN``) to localized messages, an HTTP status and a category.
Catalogs are loaded once at startup from ``<service>.errors.json`` and are
read-only afterwards.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from shared.utils.app_logger import get_logger

logger = get_logger(__name__)

CATALOG_DIR = Path(__file__).resolve().parent / "catalogs"
CATALOG_SUFFIX = ".errors.json"
ERROR_CODE_PATTERN = re.compile(r"^[A-Z][A-Z0-9_]*\.\d{4}$")


class CatalogLoadError(RuntimeError):
    """Raised when a service's error catalog is missing, malformed or incomplete."""


class _EntryDocument(BaseModel):
    model_config = ConfigDict(extra="allow")

    status_code: int = Field(alias="statusCode")
    category: str = "general"

    @field_validator("status_code")
    @classmethod
    def _error_status(cls, v: int) -> int:
        if not 400 <= v <= 599:
            raise ValueError(f"statusCode must be an HTTP error status, got {v}")
        return v

    def messages(self) -> Dict[str, str]:
        extra = self.model_extra or {}
        return {lang: text for lang, text in extra.items() if isinstance(text, str)}


class CatalogDocument(BaseModel):
    """Schema of one ``<service>.errors.json`` file."""

    version: str
    languages: List[str]
    default_language: str = Field(alias="defaultLanguage")
    errors: Dict[str, _EntryDocument]

    @model_validator(mode="after")
    def _check_entries(self) -> "CatalogDocument":
        if self.default_language not in self.languages:
            raise ValueError(f"defaultLanguage {self.default_language!r} is not listed in languages")
        for code, entry in self.errors.items():
            if not ERROR_CODE_PATTERN.match(code):
                raise ValueError(f"invalid error code {code!r}")
            if self.default_language not in entry.messages():
                raise ValueError(f"{code} has no {self.default_language!r} message")
        return self


@dataclass(frozen=True)
class ErrorCatalogEntry:
    code: str
    messages: Mapping[str, str]
    status_code: int
    category: str = "general"

    def message(self, language: Optional[str], default_language: str) -> str:
        if language and language in self.messages:
            return self.messages[language]
        return self.messages[default_language]


@dataclass(frozen=True)
class ErrorCatalog:
    """Read-only code table of one service (or the union of several)."""

    service_name: str
    version: str
    languages: tuple
    default_language: str
    _entries: Mapping[str, ErrorCatalogEntry] = field(repr=False)

    def entry(self, code: Optional[str]) -> Optional[ErrorCatalogEntry]:
        if not code:
            return None
        return self._entries.get(code)

    def codes(self) -> List[str]:
        return sorted(self._entries)

    def __contains__(self, code: object) -> bool:
        return code in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    @classmethod
    def from_document(cls, service_name: str, document: CatalogDocument) -> "ErrorCatalog":
        entries = {
            code: ErrorCatalogEntry(
                code=code,
                messages=MappingProxyType(entry.messages()),
                status_code=entry.status_code,
                category=entry.category,
            )
            for code, entry in document.errors.items()
        }
        return cls(
            service_name=service_name,
            version=document.version,
            languages=tuple(document.languages),
            default_language=document.default_language,
            _entries=MappingProxyType(entries),
        )

    @classmethod
    def from_dict(cls, service_name: str, data: Mapping[str, Any]) -> "ErrorCatalog":
        try:
            document = CatalogDocument.model_validate(data)
        except ValidationError as e:
            raise CatalogLoadError(f"Malformed error catalog for {service_name}: {e}") from e
        return cls.from_document(service_name, document)

    @classmethod
    def combine(cls, catalogs: Iterable["ErrorCatalog"], service_name: str = "edge") -> "ErrorCatalog":
        """Merge namespaced catalogs; the first catalog supplies the defaults."""
        catalogs = list(catalogs)
        if not catalogs:
            raise CatalogLoadError("Cannot combine an empty list of catalogs")

        entries: Dict[str, ErrorCatalogEntry] = {}
        languages: List[str] = []
        for catalog in catalogs:
            for code in catalog.codes():
                if code in entries:
                    raise CatalogLoadError(
                        f"Error code {code} is defined by more than one catalog ({catalog.service_name})"
                    )
                entries[code] = catalog._entries[code]
            languages.extend(lang for lang in catalog.languages if lang not in languages)

        first = catalogs[0]
        return cls(
            service_name=service_name,
            version="+".join(c.version for c in catalogs),
            languages=tuple(languages),
            default_language=first.default_language,
            _entries=MappingProxyType(entries),
        )


def catalog_path(service_name: str, catalog_dir: Optional[Union[str, Path]] = None) -> Path:
    base = Path(catalog_dir) if catalog_dir else CATALOG_DIR
    return base / f"{service_name}{CATALOG_SUFFIX}"


def load_error_catalog(
    service_name: str,
    catalog_dir: Optional[Union[str, Path]] = None,
) -> ErrorCatalog:
    """
    Load ``<service_name>.errors.json``.

    Args:
        service_name: Service identifier, e.g. ``iam-service``
        catalog_dir: Directory override; defaults to the bundled catalogs

    Raises:
        CatalogLoadError: the file is missing or unreadable, is not JSON, or fails validation
    """
    path = catalog_path(service_name, catalog_dir)
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise CatalogLoadError(f"Error catalog not found for {service_name}: {path}") from e
    except json.JSONDecodeError as e:
        raise CatalogLoadError(f"Error catalog for {service_name} is not valid JSON: {e}") from e
    except (OSError, UnicodeDecodeError, ValueError) as e:
        raise CatalogLoadError(f"Error catalog for {service_name} could not be read from {path}: {e}") from e

    if not isinstance(raw, dict):
        raise CatalogLoadError(f"Error catalog for {service_name} must be a JSON object")

    catalog = ErrorCatalog.from_dict(service_name, raw)
    logger.info(f"Loaded error catalog {service_name} v{catalog.version} ({len(catalog)} codes)")
    return catalog


def verify_catalog_codes(catalog: ErrorCatalog, codes: Iterable[str]) -> None:
    """Fail fast when a code referenced by a service has no catalog entry."""
    missing = [code for code in codes if code not in catalog]
    if missing:
        raise CatalogLoadError(
            f"Error catalog {catalog.service_name} is missing codes: {', '.join(sorted(missing))}"
        )
