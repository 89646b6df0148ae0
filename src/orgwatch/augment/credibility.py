"""Source credibility allow-list for web results."""

from orgwatch.url import domain_matches

CREDIBLE_DOMAINS: frozenset[str] = frozenset(
    {
        "defensenews.com",
        "janes.com",
        "aviationweek.com",
        "flightglobal.com",
        "breakingdefense.com",
        "reuters.com",
        "apnews.com",
        "bloomberg.com",
        "wsj.com",
        "ft.com",
        "cnn.com",
        "bbc.com",
        "bbc.co.uk",
        "npr.org",
        "politico.com",
        "thehill.com",
        "defense.gov",
        "war.gov",
        "navy.mil",
        "af.mil",
        "army.mil",
        "marines.mil",
        "sec.gov",
    }
)


def is_credible_source(url: str, domains: frozenset[str] = CREDIBLE_DOMAINS) -> bool:
    """Return True if the URL is served from an allow-listed outlet."""
    return domain_matches(url, domains)
