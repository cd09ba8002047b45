"""Apollo.io people search.

LinkedIn-derived contact database. Strong for companies with a LinkedIn
footprint, thin for single-location restaurants, so discovery treats an
empty result as normal.
"""

import os
from typing import Optional

import httpx
from loguru import logger

from lib.owner_discovery.domains import clean_domain
from lib.owner_discovery.models import ContactRecord, ContactSearchResult

APOLLO_BASE_URL = "https://api.apollo.io/v1"
APOLLO_TIMEOUT = 15.0

# Apollo does not score emails; revealed database emails are treated as
# fairly reliable.
APOLLO_EMAIL_CONFIDENCE = 85


async def search_contacts(
    client: httpx.AsyncClient,
    domain: str,
    titles: Optional[list[str]] = None,
    seniorities: Optional[list[str]] = None,
    departments: Optional[list[str]] = None,
    limit: int = 10,
    api_key: Optional[str] = None,
    timeout: float = APOLLO_TIMEOUT,
) -> Optional[ContactSearchResult]:
    """Search Apollo for people at ``domain`` matching titles or seniorities."""
    key = api_key or os.getenv("APOLLO_API_KEY")
    if not key:
        logger.debug("Apollo search skipped: APOLLO_API_KEY not configured")
        return None

    domain = clean_domain(domain)
    payload = {
        "page": 1,
        "per_page": limit,
        "organization_domains": [domain],
    }
    if titles:
        payload["person_titles"] = titles
    if seniorities:
        payload["person_seniorities"] = seniorities
    if departments:
        payload["person_department_or_subdepartments"] = departments

    try:
        resp = await client.post(
            f"{APOLLO_BASE_URL}/mixed_people/search",
            headers={
                "X-Api-Key": key,
                "Content-Type": "application/json",
                "Cache-Control": "no-cache",
            },
            json=payload,
            timeout=timeout,
        )
    except httpx.HTTPError as e:
        logger.debug(f"Apollo search {domain}: request failed: {e}")
        return None

    if resp.status_code != 200:
        logger.debug(f"Apollo search {domain}: HTTP {resp.status_code}")
        return None

    try:
        data = resp.json()
    except ValueError:
        return None

    contacts = []
    for person in data.get("people") or []:
        email = person.get("email")
        # Apollo masks unrevealed emails as email_not_unlocked@domain.com
        if email and "not_unlocked" in email:
            email = None
        contacts.append(ContactRecord(
            first_name=person.get("first_name"),
            last_name=person.get("last_name"),
            title=person.get("title"),
            email=email,
            confidence=APOLLO_EMAIL_CONFIDENCE if email else None,
            seniority=person.get("seniority"),
            linkedin_url=person.get("linkedin_url"),
        ))

    logger.debug(f"Apollo search {domain}: {len(contacts)} people")
    return ContactSearchResult(domain=domain, contacts=contacts)
