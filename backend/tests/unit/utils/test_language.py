"""
Unit tests for language negotiation
"""

import pytest
from starlette.requests import Request

from shared.utils.language import (
    get_accept_language,
    get_supported_languages,
    is_supported_language,
    language_tag,
    normalize_language,
)


def _request(query: str = "", accept_language: str = None) -> Request:
    headers = []
    if accept_language is not None:
        headers.append((b"accept-language", accept_language.encode("latin-1")))
    return Request({"type": "http", "method": "GET", "path": "/", "query_string": query.encode(), "headers": headers})


class TestNormalizeLanguage:
    @pytest.mark.parametrize("raw,expected", [
        ("en", "en"),
        ("EN-us", "en"),
        ("vi", "vi"),
        ("vi-VN", "vi"),
        ("vi_VN", "vi"),
        ("vietnamese", "vi"),
        ("en;q=0.8", "en"),
        ("fr", "en"),
        ("", "en"),
        (None, "en"),
    ])
    def test_normalize(self, raw, expected):
        assert normalize_language(raw) == expected

    @pytest.mark.parametrize("raw,expected", [
        ("ja-JP", "ja"),
        ("fr;q=0.5", "fr"),
        ("VI_vn", "vi"),
        ("english", "en"),
        ("", None),
        (None, None),
    ])
    def test_language_tag_keeps_unsupported_languages(self, raw, expected):
        assert language_tag(raw) == expected

    def test_supported_languages(self):
        assert get_supported_languages() == ["en", "vi"]
        assert is_supported_language("vi-VN")
        assert not is_supported_language(None)


class TestGetAcceptLanguage:
    def test_query_parameter_wins(self):
        assert get_accept_language(_request("lang=vi", "en")) == "vi"

    def test_header_quality_values(self):
        assert get_accept_language(_request(accept_language="en;q=0.3, vi-VN;q=0.9")) == "vi"

    def test_unsupported_entries_are_skipped(self):
        assert get_accept_language(_request(accept_language="fr-FR, de;q=0.9, vi;q=0.1")) == "vi"

    def test_no_preference(self):
        assert get_accept_language(_request()) is None
        assert get_accept_language(_request(accept_language="fr, *")) is None

    def test_unsupported_query_falls_through_to_header(self):
        assert get_accept_language(_request("lang=fr", "vi")) == "vi"
