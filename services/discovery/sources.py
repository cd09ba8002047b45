"""Data sources used by the discovery orchestrator.

IOwnerSources is the seam between the pipeline and the outside world.
OwnerSources binds the real adapters in lib/owner_discovery to a shared
httpx client and API keys; MockSources returns canned records for tests.
"""

from typing import Optional, Protocol, runtime_checkable

import httpx
from loguru import logger

from lib.owner_discovery import apollo_client, hunter_client
from lib.owner_discovery.google_places import find_place_owner
from lib.owner_discovery.models import (
    ContactSearchResult,
    DomainScrapeRecord,
    FinderResult,
    MapsRecord,
    ReviewSiteRecord,
    VerificationResult,
)
from lib.owner_discovery.website_scraper import scrape_owner_names
from lib.owner_discovery.yelp_scraper import find_business_owner
from services.discovery.config import DiscoverySettings


async def guarded(awaitable, tag: str, label: str):
    """Await an adapter call. Any exception is logged and becomes None."""
    try:
        return await awaitable
    except Exception as e:
        logger.warning(f"{tag} {label} error: {e}")
        return None


@runtime_checkable
class IOwnerSources(Protocol):
    """Protocol for the lookups discovery depends on.

    Every method returns None for "not found" and for any failure it can
    handle itself. Implementations hold no per-business state.
    """

    async def find_review_site(
        self, business_name: str, city: str, state: Optional[str] = None,
    ) -> Optional[ReviewSiteRecord]:
        """Business page on the review site, with the owner if listed."""
        ...

    async def find_maps(
        self, business_name: str, city: str, state: Optional[str] = None,
    ) -> Optional[MapsRecord]:
        """Map listing with review responder names."""
        ...

    async def search_contacts(
        self,
        domain: str,
        titles: Optional[list[str]] = None,
        seniorities: Optional[list[str]] = None,
        departments: Optional[list[str]] = None,
        limit: int = 10,
    ) -> Optional[ContactSearchResult]:
        """Contact database people search at a domain."""
        ...

    async def search_domain(
        self,
        domain: str,
        seniorities: Optional[list[str]] = None,
        departments: Optional[list[str]] = None,
        limit: int = 10,
    ) -> Optional[ContactSearchResult]:
        """Domain-wide search for personal emails."""
        ...

    async def scrape_domain(self, domain: str) -> Optional[DomainScrapeRecord]:
        """Owners and emails from the business website."""
        ...

    async def email_pattern(self, domain: str) -> Optional[str]:
        """Detected email template for the domain, e.g. ``{first}.{last}``."""
        ...

    async def find_email(
        self, first_name: str, last_name: str, domain: str,
    ) -> Optional[FinderResult]:
        """A specific person's email at the domain."""
        ...

    async def verify_email(self, email: str) -> Optional[VerificationResult]:
        """Deliverability of a single address."""
        ...


class OwnerSources(IOwnerSources):
    """Live adapters sharing one httpx client."""

    def __init__(self, client: httpx.AsyncClient, settings: DiscoverySettings):
        self._client = client
        self._settings = settings

    async def find_review_site(self, business_name, city, state=None):
        return await find_business_owner(
            self._client, business_name, city, state,
            timeout=self._settings.http_timeout,
        )

    async def find_maps(self, business_name, city, state=None):
        if not self._settings.places_configured:
            return None
        return await find_place_owner(
            self._client, business_name, city, state,
            api_key=self._settings.google_places_api_key,
            timeout=self._settings.http_timeout,
        )

    async def search_contacts(self, domain, titles=None, seniorities=None, departments=None, limit=10):
        if not self._settings.apollo_configured:
            return None
        return await apollo_client.search_contacts(
            self._client, domain,
            titles=titles, seniorities=seniorities, departments=departments, limit=limit,
            api_key=self._settings.apollo_api_key,
            timeout=self._settings.http_timeout,
        )

    async def search_domain(self, domain, seniorities=None, departments=None, limit=10):
        if not self._settings.hunter_configured:
            return None
        return await hunter_client.search_domain(
            self._client, domain,
            seniorities=seniorities, departments=departments, limit=limit,
            api_key=self._settings.hunter_api_key,
            timeout=self._settings.http_timeout,
        )

    async def scrape_domain(self, domain):
        return await scrape_owner_names(
            self._client, domain,
            delay=self._settings.scrape_delay,
            timeout=self._settings.scrape_timeout,
        )

    async def email_pattern(self, domain):
        if not self._settings.hunter_configured:
            return None
        return await hunter_client.get_email_pattern(
            self._client, domain,
            api_key=self._settings.hunter_api_key,
            timeout=self._settings.http_timeout,
        )

    async def find_email(self, first_name, last_name, domain):
        if not self._settings.hunter_configured:
            return None
        return await hunter_client.find_email(
            self._client, first_name, last_name, domain,
            api_key=self._settings.hunter_api_key,
            timeout=self._settings.http_timeout,
        )

    async def verify_email(self, email):
        if not self._settings.hunter_configured:
            return None
        return await hunter_client.verify_email(
            self._client, email,
            api_key=self._settings.hunter_api_key,
            timeout=self._settings.http_timeout,
        )


class MockSources(IOwnerSources):
    """Canned sources for unit testing.

    Any configured value may be an exception instance, which is raised
    instead of returned. Every call is recorded in ``calls`` as
    ``(method, args)``.
    """

    def __init__(
        self,
        review_site=None,
        maps=None,
        contacts=None,
        domain_search=None,
        domain_scrape=None,
        pattern=None,
        finder: Optional[dict] = None,
        deliverable: Optional[set[str]] = None,
    ):
        self._review_site = review_site
        self._maps = maps
        self._contacts = contacts
        self._domain_search = domain_search
        self._domain_scrape = domain_scrape
        self._pattern = pattern
        self._finder = finder or {}  # (first, last) -> FinderResult
        self._deliverable = deliverable or set()
        self.calls: list[tuple[str, tuple]] = []

    def count(self, method: str) -> int:
        return sum(1 for name, _ in self.calls if name == method)

    def _answer(self, method: str, value, *args):
        self.calls.append((method, args))
        if isinstance(value, Exception):
            raise value
        return value

    async def find_review_site(self, business_name, city, state=None):
        return self._answer("find_review_site", self._review_site, business_name, city, state)

    async def find_maps(self, business_name, city, state=None):
        return self._answer("find_maps", self._maps, business_name, city, state)

    async def search_contacts(self, domain, titles=None, seniorities=None, departments=None, limit=10):
        return self._answer("search_contacts", self._contacts, domain)

    async def search_domain(self, domain, seniorities=None, departments=None, limit=10):
        return self._answer("search_domain", self._domain_search, domain, tuple(seniorities or ()))

    async def scrape_domain(self, domain):
        return self._answer("scrape_domain", self._domain_scrape, domain)

    async def email_pattern(self, domain):
        return self._answer("email_pattern", self._pattern, domain)

    async def find_email(self, first_name, last_name, domain):
        return self._answer("find_email", self._finder.get((first_name, last_name)), first_name, last_name, domain)

    async def verify_email(self, email):
        deliverable = email in self._deliverable
        result = VerificationResult(email=email, deliverable=deliverable, status="valid" if deliverable else "invalid")
        return self._answer("verify_email", result, email)
