"""URL handling utilities."""

import logging
from urllib.parse import urlparse

logger = logging.getLogger(__name__)


def extract_domain(url: str) -> str:
    """Extract domain name from URL.

    Args:
        url: The URL to extract the domain from.

    Returns:
        The lowercase host (without 'www.' prefix), or "Unknown" if extraction fails.
    """
    try:
        domain = (urlparse(url).hostname or "").lower()
    except ValueError:
        return "Unknown"
    if not domain:
        logger.debug("Could not get domain from url %s", url)
        return "Unknown"
    if domain.startswith("www."):
        domain = domain[4:]
    return domain


def domain_matches(url: str, domains: frozenset[str] | set[str]) -> bool:
    """Return True if the URL's host is one of ``domains`` or a subdomain of one."""
    host = extract_domain(url)
    if host == "Unknown":
        return False
    return any(host == d or host.endswith("." + d) for d in domains)
