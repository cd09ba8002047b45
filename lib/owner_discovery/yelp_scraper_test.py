"""Tests for the Yelp scraper."""

import json

import httpx
import pytest
from unittest.mock import AsyncMock, MagicMock

from lib.owner_discovery.yelp_scraper import (
    extract_owner,
    extract_claimed_by,
    parse_business_page,
    find_business_owner,
)

JSON_LD = {
    "@type": "Restaurant",
    "name": "Blue Door Cafe",
    "telephone": "(512) 555-0100",
    "priceRange": "$$",
    "servesCuisine": "Breakfast & Brunch",
    "address": {
        "streetAddress": "1200 S Lamar Blvd",
        "addressLocality": "Austin",
        "addressRegion": "TX",
        "postalCode": "78704",
    },
    "aggregateRating": {"ratingValue": "4.5", "reviewCount": "312"},
}


def _page(body: str, json_ld: dict = JSON_LD) -> str:
    return (
        "<html><head>"
        f'<script type="application/ld+json">{json.dumps(json_ld)}</script>'
        f"</head><body>{body}</body></html>"
    )


class TestExtractOwner:

    def test_meet_the_owner_block(self):
        html = _page('<h4>Meet the Business Owner</h4><div><p class="x">Maria Lopez</p></div>')
        assert extract_owner(html) == ("Maria Lopez", "Business Owner")

    def test_owner_label(self):
        html = _page("<span>Owner: Maria Lopez</span>")
        assert extract_owner(html) == ("Maria Lopez", "Business Owner")

    def test_middle_initial_not_truncated(self):
        html = _page("<span>Proprietor: John D. Smith</span>")
        assert extract_owner(html) == ("John D. Smith", "Business Owner")

    def test_json_ld_founder(self):
        ld = dict(JSON_LD, founder={"@type": "Person", "name": "Ana Ruiz"})
        html = _page("<p>nothing here</p>", ld)
        assert extract_owner(html) == ("Ana Ruiz", "Founder")

    def test_json_ld_employee_title(self):
        ld = dict(JSON_LD, employee=[{"name": "Ana Ruiz", "jobTitle": "Chef"}])
        html = _page("<p>nothing here</p>", ld)
        assert extract_owner(html) == ("Ana Ruiz", "Chef")

    def test_none(self):
        assert extract_owner(_page("<p>Great tacos.</p>")) is None


class TestExtractClaimedBy:

    def test_claimed(self):
        assert extract_claimed_by("<p>Claimed by Maria Lopez</p>") == "Maria Lopez"

    def test_not_claimed(self):
        assert extract_claimed_by("<p>Unclaimed</p>") is None


class TestParseBusinessPage:

    def test_listing_fields(self):
        html = _page(
            '<a href="/biz_redir?url=https%3A%2F%2Fbluedoorcafe.com%2F&amp;x=1">Business website</a>'
            "<span>Owner: Maria Lopez</span>"
        )
        record = parse_business_page(html, "https://www.yelp.com/biz/blue-door-cafe-austin")
        assert record.url == "https://www.yelp.com/biz/blue-door-cafe-austin"
        assert record.name == "Blue Door Cafe"
        assert record.owner_name == "Maria Lopez"
        assert record.owner_title == "Business Owner"
        assert record.phone == "(512) 555-0100"
        assert record.website == "https://bluedoorcafe.com/"
        assert record.rating == 4.5
        assert record.review_count == 312
        assert record.price_range == "$$"
        assert record.address.city == "Austin"
        assert record.address.zip == "78704"
        assert record.categories == ["Breakfast & Brunch"]

    def test_claimed_by_fallback(self):
        html = _page("<p>Claimed by Dan Cho</p>")
        record = parse_business_page(html, "https://www.yelp.com/biz/x")
        assert record.owner_name == "Dan Cho"
        assert record.owner_title == "Business Owner"

    def test_website_from_json_ld_url(self):
        ld = dict(JSON_LD, url="https://bluedoorcafe.com")
        record = parse_business_page(_page("", ld), "https://www.yelp.com/biz/x")
        assert record.website == "https://bluedoorcafe.com"

    def test_yelp_url_is_not_website(self):
        ld = dict(JSON_LD, url="https://www.yelp.com/biz/x")
        record = parse_business_page(_page("", ld), "https://www.yelp.com/biz/x")
        assert record.website is None


class TestFindBusinessOwner:

    @pytest.mark.asyncio
    async def test_search_then_page(self):
        search = MagicMock(status_code=200, text='<a href="/biz/blue-door-cafe-austin?osq=x">Blue Door</a>')
        page = MagicMock(status_code=200, text=_page("<span>Owner: Maria Lopez</span>"))
        client = MagicMock()
        client.get = AsyncMock(side_effect=[search, page])

        record = await find_business_owner(client, "Blue Door Cafe", "Austin", "TX")

        assert record.url == "https://www.yelp.com/biz/blue-door-cafe-austin"
        assert record.owner_name == "Maria Lopez"
        assert client.get.call_args_list[0].kwargs["params"]["find_loc"] == "Austin, TX"

    @pytest.mark.asyncio
    async def test_no_search_result(self):
        client = MagicMock()
        client.get = AsyncMock(return_value=MagicMock(status_code=200, text="<p>No results</p>"))
        assert await find_business_owner(client, "Blue Door Cafe", "Austin") is None

    @pytest.mark.asyncio
    async def test_blocked(self):
        client = MagicMock()
        client.get = AsyncMock(return_value=MagicMock(status_code=403, text=""))
        assert await find_business_owner(client, "Blue Door Cafe", "Austin") is None


@pytest.mark.online
class TestFindBusinessOwnerOnline:

    @pytest.mark.asyncio
    async def test_live_search(self):
        async with httpx.AsyncClient() as client:
            record = await find_business_owner(client, "Franklin Barbecue", "Austin", "TX")
        # Yelp blocks scrapers intermittently; only the shape is checked
        if record is not None:
            assert record.url.startswith("https://www.yelp.com/biz/")
