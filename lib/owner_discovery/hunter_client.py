"""Hunter.io client: domain search, email finder, email verifier.

Hunter indexes emails found on the public web, so it covers small local
businesses that never show up in LinkedIn-based databases.

All calls degrade to None on a missing API key, a non-200 response or a
network error. Nothing here raises.
"""

import os
from typing import Optional

import httpx
from loguru import logger

from lib.owner_discovery.domains import clean_domain
from lib.owner_discovery.models import (
    ContactRecord,
    ContactSearchResult,
    FinderResult,
    VerificationResult,
)

HUNTER_BASE_URL = "https://api.hunter.io/v2"
HUNTER_TIMEOUT = 15.0

# Values the domain-search seniority filter accepts
HUNTER_SENIORITIES = ("junior", "senior", "executive")


def _api_key(api_key: Optional[str]) -> Optional[str]:
    return api_key or os.getenv("HUNTER_API_KEY")


async def _get(
    client: httpx.AsyncClient,
    path: str,
    params: dict,
    timeout: float,
) -> Optional[httpx.Response]:
    try:
        return await client.get(f"{HUNTER_BASE_URL}/{path}", params=params, timeout=timeout)
    except httpx.HTTPError as e:
        logger.debug(f"Hunter {path}: request failed: {e}")
        return None


async def search_domain(
    client: httpx.AsyncClient,
    domain: str,
    titles: Optional[list[str]] = None,
    seniorities: Optional[list[str]] = None,
    departments: Optional[list[str]] = None,
    limit: int = 10,
    email_type: Optional[str] = "personal",
    api_key: Optional[str] = None,
    timeout: float = HUNTER_TIMEOUT,
) -> Optional[ContactSearchResult]:
    """Search for all emails Hunter knows at a domain.

    ``titles`` is accepted for interface parity with the contact database
    search; Hunter has no title filter, so matching is done on ``position``
    after the fact.
    """
    key = _api_key(api_key)
    if not key:
        logger.debug("Hunter domain search skipped: HUNTER_API_KEY not configured")
        return None

    domain = clean_domain(domain)
    params = {"api_key": key, "domain": domain, "limit": str(limit)}
    if email_type:
        params["type"] = email_type
    seniorities = [s for s in seniorities or [] if s in HUNTER_SENIORITIES]
    if seniorities:
        params["seniority"] = ",".join(seniorities)
    if departments:
        params["department"] = ",".join(departments)

    resp = await _get(client, "domain-search", params, timeout)
    if resp is None:
        return None
    if resp.status_code != 200:
        logger.debug(f"Hunter domain search {domain}: HTTP {resp.status_code}")
        return None

    try:
        data = resp.json().get("data") or {}
    except ValueError:
        return None

    contacts = []
    for item in data.get("emails") or []:
        position = item.get("position")
        if titles and not (position and any(t.lower() in position.lower() for t in titles)):
            continue
        contacts.append(ContactRecord(
            first_name=item.get("first_name"),
            last_name=item.get("last_name"),
            title=position,
            email=item.get("value"),
            confidence=item.get("confidence"),
            phone=item.get("phone_number"),
            seniority=item.get("seniority"),
            linkedin_url=item.get("linkedin"),
        ))

    pattern = data.get("pattern")
    logger.debug(
        f"Hunter domain search {domain}: {len(contacts)} emails | pattern={pattern}"
    )
    return ContactSearchResult(domain=domain, contacts=contacts, pattern=pattern)


async def get_email_pattern(
    client: httpx.AsyncClient,
    domain: str,
    api_key: Optional[str] = None,
    timeout: float = HUNTER_TIMEOUT,
) -> Optional[str]:
    """Return the domain's detected email template, e.g. ``{first}.{last}``."""
    result = await search_domain(
        client, domain, limit=1, email_type=None, api_key=api_key, timeout=timeout,
    )
    if result is None:
        return None
    return result.pattern or None


async def find_email(
    client: httpx.AsyncClient,
    first_name: str,
    last_name: str,
    domain: str,
    api_key: Optional[str] = None,
    timeout: float = HUNTER_TIMEOUT,
) -> Optional[FinderResult]:
    """Find a specific person's email at a domain."""
    key = _api_key(api_key)
    if not key:
        logger.debug("Hunter email finder skipped: HUNTER_API_KEY not configured")
        return None

    domain = clean_domain(domain)
    params = {
        "api_key": key,
        "domain": domain,
        "first_name": first_name,
        "last_name": last_name,
    }
    resp = await _get(client, "email-finder", params, timeout)
    if resp is None:
        return None
    if resp.status_code == 404:
        logger.debug(f"Hunter finder: no email for {first_name} {last_name} at {domain}")
        return None
    if resp.status_code != 200:
        logger.debug(f"Hunter finder {domain}: HTTP {resp.status_code}")
        return None

    try:
        data = resp.json().get("data") or {}
    except ValueError:
        return None

    email = data.get("email")
    if not email:
        return None
    return FinderResult(
        email=email,
        score=data.get("score") or 0,
        position=data.get("position"),
    )


async def verify_email(
    client: httpx.AsyncClient,
    email: str,
    api_key: Optional[str] = None,
    timeout: float = HUNTER_TIMEOUT,
) -> Optional[VerificationResult]:
    """Check deliverability of a single address."""
    key = _api_key(api_key)
    if not key:
        logger.debug("Hunter verifier skipped: HUNTER_API_KEY not configured")
        return None

    resp = await _get(client, "email-verifier", {"api_key": key, "email": email}, timeout)
    if resp is None:
        return None
    if resp.status_code != 200:
        logger.debug(f"Hunter verifier {email}: HTTP {resp.status_code}")
        return None

    try:
        data = resp.json().get("data") or {}
    except ValueError:
        return None

    return VerificationResult(
        email=email,
        deliverable=data.get("result") == "deliverable",
        status=data.get("status"),
        score=data.get("score"),
    )
