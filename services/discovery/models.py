"""Data models for the owner discovery pipeline.

Output models serialize with camelCase keys (``model_dump(by_alias=True)``)
for the API layer; Python code uses the snake_case field names.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class OwnerSource(str, Enum):
    """Adapter that first produced an owner."""

    REVIEW_SITE = "review-site"
    MAP_SERVICE = "map-service"
    DOMAIN_SCRAPE = "domain-scrape"
    CONTACT_DATABASE = "contact-database"
    DOMAIN_SEARCH = "domain-search"


class EmailSource(str, Enum):
    """Cascade stage that produced an owner's email."""

    CONTACT_DATABASE = "contact-database"
    DOMAIN_PATTERN = "domain-pattern"
    DOMAIN_SEARCH = "domain-search"
    FINDER = "finder"


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Owner(_CamelModel):
    """A named person believed to be a decision-maker at the business."""

    name: str
    first_name: str
    last_name: str
    title: Optional[str] = None
    email: Optional[str] = None
    email_confidence: int = 0  # 0-100
    email_source: Optional[EmailSource] = None
    phone: Optional[str] = None
    source: OwnerSource
    # Title is a default or was guessed from a review signature
    title_inferred: bool = Field(default=False, exclude=True, repr=False)


class Address(_CamelModel):
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip: Optional[str] = None


class BusinessInfo(_CamelModel):
    """Listing details, first non-null value from any source wins."""

    phone: Optional[str] = None
    website: Optional[str] = None
    address: Address = Address()
    rating: Optional[float] = None
    review_count: Optional[int] = None
    price_level: Optional[str] = None  # "$$"
    review_site_url: Optional[str] = None
    maps_url: Optional[str] = None


class HospitalityEmail(_CamelModel):
    """Guessed role mailbox, not attached to a person."""

    email: str
    role: str
    confidence: int


class DiscoveryMeta(_CamelModel):
    """What fired and what was seen during one discovery run."""

    review_site_found: bool = False
    maps_found: bool = False
    contact_database_found: bool = False
    domain_scrape_found: bool = False
    domain_search_found: bool = False
    finder_found: bool = False
    pattern_verified: bool = False
    owner_names_found: list[str] = []
    emails_found: list[str] = []
    stages_ran: list[str] = []
    owner_count: int = 0
    email_count: int = 0


class DiscoveryResult(_CamelModel):
    """Result of running owner discovery for a single business."""

    business_name: str
    domain: Optional[str] = None
    owners: list[Owner] = []
    business_info: BusinessInfo = BusinessInfo()
    hospitality_emails: list[HospitalityEmail] = []
    meta: DiscoveryMeta = DiscoveryMeta()

    @property
    def found_any(self) -> bool:
        return len(self.owners) > 0


class Contact(_CamelModel):
    """Flattened contact-list row for a discovered owner."""

    first_name: str
    last_name: str
    full_name: str
    email: Optional[str] = None
    email_confidence: int = 0
    position: Optional[str] = None
    domain: Optional[str] = None
    source: OwnerSource
    notes: Optional[str] = None


# Stage names recorded in DiscoveryMeta.stages_ran
STAGE_REVIEW_SITE = "review-site"
STAGE_MAPS = "maps"
STAGE_CONTACT_DATABASE = "contact-database"
STAGE_DOMAIN_SCRAPE = "domain-scrape"
STAGE_EMAIL_CASCADE = "email-cascade"
STAGE_DOMAIN_SEARCH = "domain-search"
STAGE_PATTERN_VERIFY = "pattern-verify"
STAGE_SUGGESTIONS = "suggestions"
