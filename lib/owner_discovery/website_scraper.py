"""Website scraping for restaurant owner discovery.

Crawls the business website's /about, /team, /contact pages and extracts
owner names via: 1) JSON-LD Person schema, 2) regex name+title patterns
("Owner: Maria Lopez", "Founded by ...", "Maria Lopez, Chef").

Also collects same-domain email addresses, personal ones first.

Pages are fetched sequentially with a short pause between requests;
each request has its own 10s timeout.
"""

import asyncio
import json
import re
from typing import Optional

import httpx
from loguru import logger

from lib.owner_discovery.domains import clean_domain
from lib.owner_discovery.models import DomainScrapeRecord, ScrapedEmail, ScrapedOwner

PAGE_TIMEOUT = 10.0
PAGE_DELAY = 0.3

# Pages likely to contain owner/team info, most productive first
OWNER_PAGE_PATHS = [
    "/about", "/about-us", "/our-story",
    "/team", "/our-team", "/leadership", "/staff", "/management",
    "/",
    "/contact", "/contact-us",
]

# Title keywords that indicate decision makers at hospitality businesses
DECISION_MAKER_TITLES = [
    "owner", "co-owner", "founder", "co-founder", "proprietor",
    "chef", "executive chef", "head chef", "chef/owner", "chef-owner",
    "general manager", "gm", "managing partner", "partner",
    "director", "president", "ceo",
]

_NAME = r"([A-Z][a-z]+(?:\s+[A-Z][a-z]+)+)"

# (pattern, name group, title group or fixed title). Keywords match in any
# case, names must be capitalized.
OWNER_PATTERNS = [
    # "Owner: Maria Lopez"
    (re.compile(r"\b((?i:co-owner|owner|proprietor|co-founder|founder))[:;,]?\s*" + _NAME), 2, 1),
    # "Executive Chef Maria Lopez"
    (re.compile(r"\b((?i:executive\s+chef|head\s+chef|chef[/\-]owner|chef))[:;,]?\s*" + _NAME), 2, 1),
    # "Founded by Maria Lopez"
    (re.compile(r"\b(?i:founded\s+by)\s+" + _NAME), 1, "Founder"),
    # "Owned by Maria Lopez"
    (re.compile(r"\b(?i:owned\s+by)\s+" + _NAME), 1, "Owner"),
    # "Meet Maria Lopez, Owner"
    (re.compile(r"\b(?i:meet)\s+" + _NAME + r",?\s+((?i:owner|founder|chef|proprietor))\b"), 1, 2),
    # "Maria Lopez, Owner" / "Maria Lopez - Chef"
    (re.compile(_NAME + r"[,\s\-–]+((?i:co-owner|owner|founder|proprietor|chef|general\s+manager))\b"), 1, 2),
    # "General Manager: Dan Cho"
    (re.compile(r"\b((?i:general\s+manager|gm|managing\s+partner))[:;,]?\s*" + _NAME), 2, 1),
]

# Capitalized words that regex patterns pick up but are not names
NON_NAME_WORDS = frozenset({
    "the", "our", "and", "about", "contact", "menu", "home", "team",
    "restaurant", "cafe", "bar", "kitchen", "grill", "hours", "reservations",
    "owner", "chef", "founder", "manager", "general", "executive", "head",
    "meet", "by", "welcome",
})

EMAIL_REGEX = re.compile(r"[a-zA-Z0-9._%+\-]+@[a-zA-Z0-9.\-]+\.[a-zA-Z]{2,}")

# Filter out common false positives
EMAIL_BLACKLIST = (
    "example.com", "email.com", "domain.com", "yourdomain",
    "sentry.io", "wixpress.com", "wordpress.com",
    ".png", ".jpg", ".gif", ".svg", ".webp",
)

GENERIC_EMAIL_PREFIXES = frozenset({
    "info", "contact", "hello", "events", "catering", "reservations",
    "booking", "bookings", "office", "admin", "support", "help", "sales",
    "marketing", "pr", "media", "press", "careers", "jobs", "hr",
    "noreply", "no-reply", "webmaster", "postmaster", "orders",
})

HEADERS = {
    "User-Agent": "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.5",
}


def _html_to_text(html: str) -> str:
    """Strip HTML tags and collapse whitespace."""
    text = re.sub(r"<script[^>]*>.*?</script>", " ", html, flags=re.DOTALL | re.IGNORECASE)
    text = re.sub(r"<style[^>]*>.*?</style>", " ", text, flags=re.DOTALL | re.IGNORECASE)
    text = re.sub(r"<[^>]+>", " ", text)
    text = re.sub(r"\s+", " ", text)
    return text.strip()


def _clean_title(title: str) -> str:
    title = " ".join(title.split())
    if title.lower() == "gm":
        return "General Manager"
    return title.title()


def _looks_like_name(name: str) -> bool:
    parts = name.split()
    if not 2 <= len(parts) <= 4:
        return False
    return not any(p.lower() in NON_NAME_WORDS for p in parts)


def is_generic_email(email: str) -> bool:
    return email.split("@")[0].lower() in GENERIC_EMAIL_PREFIXES


def extract_json_ld_persons(html: str, source_url: Optional[str] = None) -> list[ScrapedOwner]:
    """Extract Person entities with a decision-maker jobTitle from JSON-LD."""
    results = []
    for match in re.finditer(
        r'<script[^>]*type="application/ld\+json"[^>]*>(.*?)</script>', html, re.DOTALL | re.IGNORECASE,
    ):
        try:
            data = json.loads(match.group(1))
        except json.JSONDecodeError:
            continue
        items = data if isinstance(data, list) else [data]
        for item in items:
            _extract_persons_from_jsonld(item, results, source_url)
    return results


def _extract_persons_from_jsonld(data, results: list[ScrapedOwner], source_url: Optional[str]):
    """Recursively extract Person types from JSON-LD data."""
    if not isinstance(data, dict):
        return

    schema_type = data.get("@type", "")
    types = schema_type if isinstance(schema_type, list) else [schema_type]

    if "Person" in types:
        name = data.get("name")
        title = data.get("jobTitle")
        if name and title and any(t in title.lower() for t in DECISION_MAKER_TITLES):
            results.append(ScrapedOwner(name=name.strip(), title=title, source_url=source_url))

    for key in ("employee", "employees", "member", "members", "founder", "author", "@graph"):
        nested = data.get(key)
        if isinstance(nested, list):
            for item in nested:
                _extract_persons_from_jsonld(item, results, source_url)
        elif isinstance(nested, dict):
            _extract_persons_from_jsonld(nested, results, source_url)


def extract_owner_names(text: str, source_url: Optional[str] = None) -> list[ScrapedOwner]:
    """Extract name+title combinations from page text using regex patterns."""
    results = []
    for pattern, name_group, title in OWNER_PATTERNS:
        for match in pattern.finditer(text):
            name = " ".join(match.group(name_group).split())
            if not _looks_like_name(name):
                continue
            matched_title = match.group(title) if isinstance(title, int) else title
            results.append(ScrapedOwner(
                name=name,
                title=_clean_title(matched_title),
                source_url=source_url,
            ))
    return results


def extract_emails(html: str, domain: str, found_on: Optional[str] = None) -> list[ScrapedEmail]:
    """Emails on the page that belong to ``domain``, blacklist applied."""
    results = []
    seen = set()
    for email in EMAIL_REGEX.findall(html):
        lower = email.lower()
        if lower in seen:
            continue
        if not lower.endswith("@" + domain) and not lower.endswith("." + domain):
            continue
        if any(blocked in lower for blocked in EMAIL_BLACKLIST):
            continue
        seen.add(lower)
        results.append(ScrapedEmail(email=lower, found_on=found_on, is_generic=is_generic_email(lower)))
    return results


async def _fetch_page(
    client: httpx.AsyncClient,
    url: str,
    timeout: float = PAGE_TIMEOUT,
) -> Optional[str]:
    """Fetch a page with standard browser headers."""
    try:
        resp = await client.get(url, headers=HEADERS, timeout=timeout, follow_redirects=True)
        if resp.status_code == 200:
            return resp.text
    except httpx.HTTPError as e:
        logger.debug(f"Website fetch failed for {url}: {e}")
    return None


async def scrape_owner_names(
    client: httpx.AsyncClient,
    domain: str,
    delay: float = PAGE_DELAY,
    timeout: float = PAGE_TIMEOUT,
) -> Optional[DomainScrapeRecord]:
    """Scrape a business website for owner names and emails.

    Args:
        client: httpx async client
        domain: Business domain (bare or URL)
        delay: Pause between page requests, in seconds
        timeout: Per-page timeout, in seconds

    Returns:
        DomainScrapeRecord, or None when no page could be fetched
    """
    domain = clean_domain(domain)
    base_url = f"https://{domain}"

    owners: list[ScrapedOwner] = []
    emails: list[ScrapedEmail] = []
    seen_owners = set()
    seen_emails = set()
    pages_fetched = 0

    for i, path in enumerate(OWNER_PAGE_PATHS):
        if i and delay:
            await asyncio.sleep(delay)

        url = f"{base_url}{path}"
        html = await _fetch_page(client, url, timeout=timeout)
        if not html:
            continue
        pages_fetched += 1

        text = _html_to_text(html)
        for owner in extract_owner_names(text, url) + extract_json_ld_persons(html, url):
            key = owner.name.lower()
            if key not in seen_owners:
                seen_owners.add(key)
                owners.append(owner)
                logger.debug(f"Website {domain}{path}: owner {owner.name} ({owner.title})")

        for email in extract_emails(html, domain, url):
            if email.email not in seen_emails:
                seen_emails.add(email.email)
                emails.append(email)

    logger.debug(
        f"Website {domain}: fetched {pages_fetched}/{len(OWNER_PAGE_PATHS)} pages | "
        f"{len(owners)} owners | {len(emails)} emails"
    )

    if not pages_fetched:
        return None

    # Personal emails first
    emails.sort(key=lambda e: e.is_generic)
    return DomainScrapeRecord(
        domain=domain,
        owners=owners,
        emails=emails,
        pages_fetched=pages_fetched,
    )
