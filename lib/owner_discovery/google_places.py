"""Google Places lookup for business info and review responders.

Owners of local businesses answer their Google reviews and usually sign
the response ("Thanks! - Maria", "Best, Maria Lopez"). The most frequent
signature is taken as the likely owner; every signature is kept as a
candidate manager.
"""

import os
import re
from collections import Counter
from typing import Optional

import httpx
from loguru import logger

from lib.owner_discovery.models import AddressRecord, MapsRecord

PLACES_BASE_URL = "https://maps.googleapis.com/maps/api/place"
PLACES_TIMEOUT = 15.0

DETAILS_FIELDS = ",".join([
    "place_id", "name", "formatted_phone_number", "website",
    "formatted_address", "address_components", "rating",
    "user_ratings_total", "price_level", "reviews",
])

_NAME = r"([A-Z][a-z]+(?:\s+[A-Z][a-z]+)?)"

# Signature patterns, tried in order per response
SIGNATURE_PATTERNS = [
    # "- Maria" / "— Maria Lopez" at end of a line
    re.compile(r"[-—]\s*" + _NAME + r"\s*$", re.MULTILINE),
    # "Best, Maria" / "Thanks, Maria Lopez"
    re.compile(r"(?:Best|Thanks|Regards|Sincerely|Cheers),?\s+" + _NAME),
    # "Maria Lopez, Owner"
    re.compile(_NAME + r",?\s+(?:Owner|Manager|GM|General Manager|Proprietor)\b"),
]


def extract_responder_names(reviews: Optional[list[dict]]) -> tuple[Optional[str], list[str]]:
    """Return (likely owner, unique responder names) from place reviews."""
    if not reviews:
        return None, []

    names = []
    for review in reviews:
        text = (review.get("owner_response") or {}).get("text")
        if not text:
            continue
        for pattern in SIGNATURE_PATTERNS:
            match = pattern.search(text)
            if match:
                names.append(match.group(1).strip())
                break

    if not names:
        return None, []

    counts = Counter(names)
    # Ties resolve to the first name seen
    likely_owner = max(counts, key=lambda n: (counts[n], -names.index(n)))
    return likely_owner, list(dict.fromkeys(names))


def parse_address_components(components: Optional[list[dict]]) -> AddressRecord:
    address = AddressRecord()
    for component in components or []:
        types = component.get("types", [])
        if "street_number" in types:
            address.street = component.get("long_name")
        if "route" in types:
            route = component.get("long_name")
            address.street = f"{address.street} {route}" if address.street else route
        if "locality" in types:
            address.city = component.get("long_name")
        if "administrative_area_level_1" in types:
            address.state = component.get("short_name")
        if "postal_code" in types:
            address.zip = component.get("long_name")
    return address


async def _get_json(
    client: httpx.AsyncClient, url: str, params: dict, timeout: float,
) -> Optional[dict]:
    try:
        resp = await client.get(url, params=params, timeout=timeout)
    except httpx.HTTPError as e:
        logger.debug(f"Places request failed: {e}")
        return None
    if resp.status_code != 200:
        logger.debug(f"Places HTTP {resp.status_code} for {url}")
        return None
    try:
        return resp.json()
    except ValueError:
        return None


async def find_place_owner(
    client: httpx.AsyncClient,
    business_name: str,
    city: str,
    state: Optional[str] = None,
    api_key: Optional[str] = None,
    timeout: float = PLACES_TIMEOUT,
) -> Optional[MapsRecord]:
    """Text-search the business, then read details and review responses."""
    key = api_key or os.getenv("GOOGLE_PLACES_API_KEY")
    if not key:
        logger.debug("Places lookup skipped: GOOGLE_PLACES_API_KEY not configured")
        return None

    query = " ".join(filter(None, [business_name, city, state]))
    search = await _get_json(
        client, f"{PLACES_BASE_URL}/textsearch/json",
        {"query": query, "key": key}, timeout,
    )
    if not search or search.get("status") != "OK" or not search.get("results"):
        logger.debug(f"Places {query!r}: no results (status={search and search.get('status')})")
        return None

    place = search["results"][0]
    place_id = place.get("place_id")
    details_data = await _get_json(
        client, f"{PLACES_BASE_URL}/details/json",
        {"place_id": place_id, "fields": DETAILS_FIELDS, "key": key}, timeout,
    )
    details = (details_data or {}).get("result") or {}

    owner, responders = extract_responder_names(details.get("reviews"))
    if owner:
        logger.debug(f"Places {query!r}: likely owner from review responses: {owner}")

    return MapsRecord(
        maps_url=f"https://www.google.com/maps/place/?q=place_id:{place_id}",
        name=place.get("name"),
        place_id=place_id,
        owner_name=owner,
        review_responder_names=responders,
        phone=details.get("formatted_phone_number"),
        website=details.get("website"),
        rating=place.get("rating") or details.get("rating"),
        review_count=place.get("user_ratings_total") or details.get("user_ratings_total"),
        price_level=place.get("price_level", details.get("price_level")),
        address=parse_address_components(details.get("address_components")) if details else None,
    )
