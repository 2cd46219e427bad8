"""
Unit tests for origin normalization and lookup keys.
"""

import pytest

from app.core.tenant import build_preview_url, candidate_domains, normalize_origin, url_variants


@pytest.mark.unit
class TestNormalizeOrigin:

    @pytest.mark.parametrize(
        "origin, expected",
        [
            ("acme.example.com", "acme.example.com"),
            ("https://Acme.Example.com:8443/path", "acme.example.com"),
            ("ACME.example.com.", "acme.example.com"),
            ("localhost:8000", "localhost"),
            ("  acme  ", "acme"),
        ],
    )
    def test_normalizes(self, origin, expected):
        assert normalize_origin(origin) == expected

    @pytest.mark.parametrize("origin", [None, "", "   ", "https://"])
    def test_empty_is_none(self, origin):
        assert normalize_origin(origin) is None


@pytest.mark.unit
class TestLookupKeys:

    def test_full_hostname_before_first_label(self):
        assert candidate_domains("acme.portal.example.com") == ["acme.portal.example.com", "acme"]

    def test_single_label(self):
        assert candidate_domains("localhost") == ["localhost"]

    def test_url_variants(self):
        assert url_variants("acme.example.com") == [
            "acme.example.com",
            "https://acme.example.com",
            "http://acme.example.com",
        ]


@pytest.mark.unit
class TestPreviewUrl:

    def test_fqdn_used_as_is(self):
        assert build_preview_url("portal.acme.com", "admin.example.com") == "https://portal.acme.com"

    def test_label_under_parent_domain(self):
        assert build_preview_url("acme", "admin.example.com") == "https://acme.example.com"

    def test_label_under_local_host(self):
        assert build_preview_url("acme", "localhost:8080") == "http://acme.localhost:8080"
