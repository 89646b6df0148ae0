"""Tests for URL helpers."""

import pytest

from orgwatch.url import domain_matches, extract_domain


@pytest.mark.parametrize(
    ("url", "expected"),
    [
        ("https://www.Reuters.com/world/x", "reuters.com"),
        ("http://media.defense.gov/file.pdf", "media.defense.gov"),
        ("https://example.com:8443/a?b=c", "example.com"),
        ("not a url", "Unknown"),
        ("", "Unknown"),
    ],
)
def test_extract_domain(url: str, expected: str) -> None:
    assert extract_domain(url) == expected


def test_domain_matches_subdomains_only() -> None:
    domains = frozenset({"defense.gov", "reuters.com"})
    assert domain_matches("https://www.defense.gov/News", domains)
    assert domain_matches("https://media.defense.gov/x", domains)
    assert not domain_matches("https://notdefense.gov/x", domains)
    assert not domain_matches("garbage", domains)
