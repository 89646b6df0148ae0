"""The curated set of tracked organizations and alias resolution."""

import re
from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True)
class Organization:
    """A tracked organization."""

    name: str
    aliases: tuple[str, ...] = ()
    ticker: str = ""
    industry: str = ""
    website: str = ""

    @property
    def variants(self) -> tuple[str, ...]:
        """Canonical name, ticker and aliases, lowercased and deduplicated."""
        seen: list[str] = []
        for value in (self.name, self.ticker, *self.aliases):
            v = value.strip().lower()
            if v and v not in seen:
                seen.append(v)
        return tuple(seen)


class OrganizationDirectory(Protocol):
    """Lookup of tracked organizations by name."""

    def get_by_name(self, name: str) -> Organization | None:
        """Return the organization known by ``name`` (canonical or alias), if any."""
        ...


DEFAULT_ORGANIZATIONS: tuple[Organization, ...] = (
    Organization(
        name="Raytheon Technologies",
        aliases=("RTX", "Raytheon", "RTX Corporation", "Raytheon Technologies"),
        ticker="RTX",
        industry="Aerospace",
        website="https://www.rtx.com",
    ),
    Organization(
        name="US War Department",
        aliases=(
            "War Department",
            "US War Department",
            "War Dept",
            "Department of War",
            "US Department of Defense",
            "Department of Defense",
            "Pentagon",
        ),
        industry="Government",
        website="https://www.war.gov",
    ),
    Organization(
        name="Lockheed Martin",
        aliases=("Lockheed", "Lockheed Martin", "LMT"),
        ticker="LMT",
        industry="Defense",
        website="https://www.lockheedmartin.com",
    ),
)


def contains_term(text: str, term: str) -> bool:
    """Case-insensitive whole-word containment test."""
    pattern = r"(?<![\w])" + re.escape(term.lower()) + r"(?![\w])"
    return re.search(pattern, text.lower()) is not None


class Roster:
    """The fixed set of organizations this deployment answers questions about.

    Doubles as the organization directory: names and aliases resolve
    case-insensitively to the canonical ``Organization``.

    Args:
        organizations: Tracked organizations, in display order.
    """

    def __init__(self, organizations: list[Organization] | tuple[Organization, ...]) -> None:
        self._organizations = tuple(organizations)
        self._by_variant: dict[str, Organization] = {}
        for org in self._organizations:
            for variant in org.variants:
                self._by_variant.setdefault(variant, org)

    @classmethod
    def default(cls) -> "Roster":
        return cls(DEFAULT_ORGANIZATIONS)

    @property
    def organizations(self) -> tuple[Organization, ...]:
        return self._organizations

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(org.name for org in self._organizations)

    def get_by_name(self, name: str) -> Organization | None:
        return self._by_variant.get(name.strip().lower())

    def canonicalize(self, name: str) -> str | None:
        org = self.get_by_name(name)
        return org.name if org else None

    def match(self, text: str) -> list[str]:
        """Return canonical names of organizations mentioned in ``text``.

        Matching is whole-word, so "rtx" does not match inside "artxyz".
        Each organization appears at most once, in roster order.
        """
        found: list[str] = []
        for org in self._organizations:
            if any(contains_term(text, variant) for variant in org.variants):
                found.append(org.name)
        return found
