"""Yelp business page scraper.

Yelp's "Meet the Business Owner" block is the single best public source of
an owner's name for local restaurants. Finds the business via the search
page, then reads the business page: JSON-LD for listing data, regex for the
owner block and the "claimed by" line.
"""

import json
import re
from typing import Optional
from urllib.parse import unquote

import httpx
from loguru import logger

from lib.owner_discovery.models import AddressRecord, ReviewSiteRecord

YELP_BASE_URL = "https://www.yelp.com"
YELP_TIMEOUT = 15.0

HEADERS = {
    "User-Agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.5",
}

BIZ_LINK_RE = re.compile(r'href="(/biz/[^"?]+)[^"]*"', re.IGNORECASE)
JSON_LD_RE = re.compile(
    r'<script type="application/ld\+json"[^>]*>(.*?)</script>', re.DOTALL | re.IGNORECASE,
)

_NAME = r"([A-Z][a-z]+(?:\s+[A-Z](?:\.|\b))?(?:\s+[A-Z][a-z]+)?)"

MEET_OWNER_RE = re.compile(r"Meet the (?:Business )?Owner.*?<p[^>]*>([^<]+)</p>", re.DOTALL | re.IGNORECASE)
OWNER_LABEL_RE = re.compile(r"(?:Business Owner|Owner|Proprietor|Manager)[\s:]+" + _NAME)
FROM_BUSINESS_RE = re.compile(r'From the [Bb]usiness.*?"' + _NAME + '"', re.DOTALL)
CLAIMED_BY_RE = re.compile(r"[Cc]laimed by[\s:]+" + _NAME)
WEBSITE_LINK_RE = re.compile(r'href="([^"]*)"[^>]*>[^<]*(?:[Ww]ebsite|Visit Site)')
PHONE_RE = re.compile(r"\(?\d{3}\)?[-.\s]?\d{3}[-.\s]?\d{4}")
PRICE_RE = re.compile(r"(\${1,4})(?:\s|<)")


def _json_ld_blocks(html: str) -> list[dict]:
    blocks = []
    for match in JSON_LD_RE.finditer(html):
        try:
            data = json.loads(match.group(1))
        except json.JSONDecodeError:
            continue
        items = data if isinstance(data, list) else [data]
        blocks.extend(item for item in items if isinstance(item, dict))
    return blocks


def _business_block(blocks: list[dict]) -> dict:
    """First JSON-LD block that looks like the business itself."""
    for block in blocks:
        if block.get("aggregateRating") or block.get("address") or block.get("telephone"):
            return block
    return blocks[0] if blocks else {}


def _valid_name(name: Optional[str]) -> Optional[str]:
    if not name:
        return None
    name = " ".join(name.split())
    if 2 < len(name) < 50:
        return name
    return None


def extract_owner(html: str, blocks: Optional[list[dict]] = None) -> Optional[tuple[str, str]]:
    """Return (name, title) for the business owner, or None."""
    match = MEET_OWNER_RE.search(html)
    if match and _valid_name(match.group(1)):
        return _valid_name(match.group(1)), "Business Owner"

    match = OWNER_LABEL_RE.search(html)
    if match and _valid_name(match.group(1)):
        return _valid_name(match.group(1)), "Business Owner"

    for block in blocks if blocks is not None else _json_ld_blocks(html):
        founder = block.get("founder")
        if isinstance(founder, dict) and _valid_name(founder.get("name")):
            return _valid_name(founder["name"]), "Founder"
        employees = block.get("employee")
        if isinstance(employees, list) and employees and isinstance(employees[0], dict):
            name = _valid_name(employees[0].get("name"))
            if name:
                return name, employees[0].get("jobTitle") or "Owner"

    match = FROM_BUSINESS_RE.search(html)
    if match and _valid_name(match.group(1)):
        return _valid_name(match.group(1)), "Business Owner"

    return None


def extract_claimed_by(html: str) -> Optional[str]:
    match = CLAIMED_BY_RE.search(html)
    return _valid_name(match.group(1)) if match else None


def extract_website(html: str, business: dict) -> Optional[str]:
    match = WEBSITE_LINK_RE.search(html)
    if match:
        url = match.group(1)
        if "biz_redir" in url:
            redirect = re.search(r"url=([^&]+)", url)
            if redirect:
                return unquote(redirect.group(1))
        if url.startswith("http") and "yelp.com" not in url:
            return url

    url = business.get("url")
    if url and "yelp.com" not in url:
        return url
    return None


def parse_business_page(html: str, yelp_url: str) -> ReviewSiteRecord:
    """Parse a Yelp business page into a record."""
    blocks = _json_ld_blocks(html)
    business = _business_block(blocks)

    address = None
    raw_address = business.get("address")
    if isinstance(raw_address, dict):
        address = AddressRecord(
            street=raw_address.get("streetAddress"),
            city=raw_address.get("addressLocality"),
            state=raw_address.get("addressRegion"),
            zip=raw_address.get("postalCode"),
        )

    rating = None
    review_count = None
    aggregate = business.get("aggregateRating")
    if isinstance(aggregate, dict):
        try:
            if aggregate.get("ratingValue") is not None:
                rating = float(aggregate["ratingValue"])
            if aggregate.get("reviewCount") is not None:
                review_count = int(aggregate["reviewCount"])
        except (TypeError, ValueError):
            pass

    phone = business.get("telephone")
    if not phone:
        match = PHONE_RE.search(html)
        phone = match.group(0) if match else None

    price = business.get("priceRange")
    if not price:
        match = PRICE_RE.search(html)
        price = match.group(1) if match else None

    cuisine = business.get("servesCuisine") or []
    categories = cuisine if isinstance(cuisine, list) else [cuisine]

    owner_name, owner_title = None, None
    owner = extract_owner(html, blocks)
    if owner:
        owner_name, owner_title = owner
    else:
        claimed_by = extract_claimed_by(html)
        if claimed_by:
            owner_name, owner_title = claimed_by, "Business Owner"

    return ReviewSiteRecord(
        url=yelp_url,
        name=business.get("name"),
        owner_name=owner_name,
        owner_title=owner_title,
        phone=phone,
        website=extract_website(html, business),
        rating=rating,
        review_count=review_count,
        price_range=price,
        address=address,
        categories=[str(c) for c in categories],
    )


async def _fetch(client: httpx.AsyncClient, url: str, timeout: float, **kwargs) -> Optional[str]:
    try:
        resp = await client.get(url, headers=HEADERS, timeout=timeout, follow_redirects=True, **kwargs)
    except httpx.HTTPError as e:
        logger.debug(f"Yelp fetch failed for {url}: {e}")
        return None
    if resp.status_code != 200:
        logger.debug(f"Yelp HTTP {resp.status_code} for {url}")
        return None
    return resp.text


async def find_business_url(
    client: httpx.AsyncClient,
    business_name: str,
    city: str,
    state: Optional[str] = None,
    timeout: float = YELP_TIMEOUT,
) -> Optional[str]:
    location = f"{city}, {state}" if state else city
    html = await _fetch(
        client, f"{YELP_BASE_URL}/search", timeout,
        params={"find_desc": business_name, "find_loc": location},
    )
    if not html:
        return None
    match = BIZ_LINK_RE.search(html)
    if not match:
        logger.debug(f"Yelp {business_name!r}: no business in search results")
        return None
    return f"{YELP_BASE_URL}{match.group(1)}"


async def find_business_owner(
    client: httpx.AsyncClient,
    business_name: str,
    city: str,
    state: Optional[str] = None,
    timeout: float = YELP_TIMEOUT,
) -> Optional[ReviewSiteRecord]:
    """Find the business on Yelp and extract owner and listing info."""
    yelp_url = await find_business_url(client, business_name, city, state, timeout=timeout)
    if not yelp_url:
        return None

    html = await _fetch(client, yelp_url, timeout)
    if not html:
        return None

    record = parse_business_page(html, yelp_url)
    if record.owner_name:
        logger.debug(f"Yelp {business_name!r}: owner {record.owner_name} ({record.owner_title})")
    return record
