"""Records returned by the owner discovery adapters.

Every adapter returns one of these (or None). They carry what the source
said, untouched: no merging or scoring happens at this layer.
"""

from typing import Optional
from pydantic import BaseModel


class AddressRecord(BaseModel):
    """Structured postal address as reported by a listing."""

    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip: Optional[str] = None


class ReviewSiteRecord(BaseModel):
    """Business page from the review site (Yelp)."""

    url: str
    name: Optional[str] = None
    owner_name: Optional[str] = None
    owner_title: Optional[str] = None
    phone: Optional[str] = None
    website: Optional[str] = None
    rating: Optional[float] = None
    review_count: Optional[int] = None
    price_range: Optional[str] = None  # "$$"
    address: Optional[AddressRecord] = None
    categories: list[str] = []


class MapsRecord(BaseModel):
    """Place from the map service (Google Places)."""

    maps_url: str
    name: Optional[str] = None
    place_id: Optional[str] = None
    owner_name: Optional[str] = None  # most frequent review responder
    review_responder_names: list[str] = []
    phone: Optional[str] = None
    website: Optional[str] = None
    rating: Optional[float] = None
    review_count: Optional[int] = None
    price_level: Optional[int] = None  # 0-4
    address: Optional[AddressRecord] = None


class ContactRecord(BaseModel):
    """A person returned by a contact database search."""

    first_name: Optional[str] = None
    last_name: Optional[str] = None
    title: Optional[str] = None
    email: Optional[str] = None
    confidence: Optional[int] = None  # 0-100
    phone: Optional[str] = None
    seniority: Optional[str] = None
    linkedin_url: Optional[str] = None


class ContactSearchResult(BaseModel):
    """Contacts found for a domain."""

    domain: str
    contacts: list[ContactRecord] = []
    pattern: Optional[str] = None


class ScrapedOwner(BaseModel):
    """Owner name found on the business website."""

    name: str
    title: Optional[str] = None
    source_url: Optional[str] = None


class ScrapedEmail(BaseModel):
    """Email address found on the business website."""

    email: str
    found_on: Optional[str] = None
    is_generic: bool = False


class DomainScrapeRecord(BaseModel):
    """Owners and emails extracted from the business website."""

    domain: str
    owners: list[ScrapedOwner] = []
    emails: list[ScrapedEmail] = []
    pages_fetched: int = 0


class FinderResult(BaseModel):
    """Single person email lookup result."""

    email: str
    score: int = 0
    position: Optional[str] = None


class VerificationResult(BaseModel):
    """Deliverability check for a single address."""

    email: str
    deliverable: bool = False
    status: Optional[str] = None  # valid, invalid, accept_all, unknown...
    score: Optional[int] = None
