"""Tests for domain helpers."""

from lib.owner_discovery.domains import extract_domain, clean_domain


class TestExtractDomain:

    def test_url_with_scheme(self):
        assert extract_domain("https://www.example.com/about") == "example.com"

    def test_url_without_scheme(self):
        assert extract_domain("www.example.com") == "example.com"

    def test_bare_domain(self):
        assert extract_domain("example.com") == "example.com"

    def test_empty(self):
        assert extract_domain("") is None

    def test_none(self):
        assert extract_domain(None) is None

    def test_subdomain_preserved(self):
        assert extract_domain("https://order.cafe.com") == "order.cafe.com"

    def test_uppercase_lowered(self):
        assert extract_domain("HTTP://WWW.BlueDoorCafe.COM") == "bluedoorcafe.com"

    def test_mixed_case_scheme(self):
        assert extract_domain("Https://BlueDoorCafe.com/menu") == "bluedoorcafe.com"

    def test_surrounding_whitespace(self):
        assert extract_domain("  bluedoorcafe.com/menu ") == "bluedoorcafe.com"


class TestCleanDomain:

    def test_strips_scheme_and_path(self):
        assert clean_domain("https://www.cafe.com/contact") == "cafe.com"

    def test_plain_domain_unchanged(self):
        assert clean_domain("cafe.com") == "cafe.com"
