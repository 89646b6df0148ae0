"""Topical eligibility check: may this question be answered at all?

The allow-list is deliberately broad. Wrongly refusing an in-scope question
is worse than attempting one the generation step will hedge on.
"""

import logging

from orgwatch.roster import OrganizationDirectory, Roster, contains_term

logger = logging.getLogger(__name__)

DEFAULT_DOMAIN_TERMS: tuple[str, ...] = (
    "defense",
    "defence",
    "aerospace",
    "aeronautics",
    "aviation",
    "military",
    "missile",
    "missiles",
    "aircraft",
    "fighter jet",
    "satellite",
    "radar",
    "pentagon",
    "contract",
    "contracts",
    "procurement",
    "earnings",
    "revenue",
    "quarterly results",
    "stock",
    "shares",
    "acquisition",
    "merger",
    "weapons",
    "munitions",
    "navy",
    "air force",
    "army",
)

DEFAULT_ROLE_TERMS: tuple[str, ...] = (
    "founder",
    "founded",
    "ceo",
    "cfo",
    "coo",
    "chief executive",
    "executive",
    "executives",
    "chairman",
    "president",
    "board of directors",
    "leadership",
    "headquarters",
    "employees",
)


class ScopeChecker:
    """Decide whether a question concerns the tracked organizations or their domain.

    Args:
        directory: Organization lookup used to confirm analyzed names.
        roster: Tracked organizations, used for alias matching on raw text.
        domain_terms: Industry vocabulary that makes a question in-scope.
        role_terms: Corporate-role vocabulary (founder, CEO, ...).
    """

    def __init__(
        self,
        directory: OrganizationDirectory,
        roster: Roster,
        *,
        domain_terms: tuple[str, ...] = DEFAULT_DOMAIN_TERMS,
        role_terms: tuple[str, ...] = DEFAULT_ROLE_TERMS,
    ) -> None:
        self._directory = directory
        self._roster = roster
        self._terms = tuple(t.lower() for t in (*domain_terms, *role_terms) if t.strip())

    def is_in_scope(self, question: str, organizations: list[str] | tuple[str, ...] = ()) -> bool:
        for name in organizations:
            if name.strip() and self._directory.get_by_name(name) is not None:
                return True

        if self._roster.match(question):
            return True

        for term in self._terms:
            if contains_term(question, term):
                return True

        logger.info("Question judged out of scope: %r", question[:100])
        return False
