"""Stage reducers: fold adapter records into the discovery state.

Every function here is pure, ``(state, record) -> state``. The state is a
frozen model; reducers return updated copies and never touch their input.
The orchestrator decides what runs and when, reducers decide what a result
means.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict

from lib.owner_discovery.domains import extract_domain
from lib.owner_discovery.models import (
    AddressRecord,
    ContactSearchResult,
    DomainScrapeRecord,
    MapsRecord,
    ReviewSiteRecord,
)
from services.discovery.models import (
    Address,
    BusinessInfo,
    DiscoveryMeta,
    EmailSource,
    HospitalityEmail,
    OwnerSource,
)
from services.discovery.owner_store import OwnerStore, build_owner

# Default titles by where the name came from
REVIEW_SITE_TITLE = "Business Owner"
MAPS_OWNER_TITLE = "Business Owner"
RESPONDER_TITLE = "Manager"
CONTACT_TITLE = "Contact"
SCRAPED_TITLE = "Owner"


class DiscoveryState(BaseModel):
    """Everything known about one business mid-discovery."""

    model_config = ConfigDict(frozen=True)

    business_name: str
    city: str
    state: Optional[str] = None
    domain: Optional[str] = None
    owners: OwnerStore = OwnerStore()
    business_info: BusinessInfo = BusinessInfo()
    hospitality_emails: tuple[HospitalityEmail, ...] = ()
    meta: DiscoveryMeta = DiscoveryMeta()

    @property
    def tag(self) -> str:
        return f"[{self.business_name}|{self.domain or 'no-domain'}]"

    def ran(self, stage: str) -> bool:
        return stage in self.meta.stages_ran


def initial_state(
    business_name: str,
    city: str,
    state: Optional[str] = None,
    website: Optional[str] = None,
) -> DiscoveryState:
    """Seed the state from caller input."""
    return DiscoveryState(
        business_name=business_name,
        city=city,
        state=state,
        domain=extract_domain(website),
        business_info=BusinessInfo(
            website=website or None,
            address=Address(city=city, state=state),
        ),
    )


# ── Helpers ─────────────────────────────────────────────────────────


def _first_non_null(current, *candidates):
    if current is not None:
        return current
    for value in candidates:
        if value is not None:
            return value
    return None


def _fill_address(address: Address, record: Optional[AddressRecord]) -> Address:
    if record is None:
        return address
    return address.model_copy(update={
        field: _first_non_null(getattr(address, field), getattr(record, field))
        for field in ("street", "city", "state", "zip")
    })


def _fill_info(info: BusinessInfo, address: Optional[AddressRecord] = None, **values) -> BusinessInfo:
    update = {
        field: _first_non_null(getattr(info, field), value)
        for field, value in values.items()
    }
    update["address"] = _fill_address(info.address, address)
    return info.model_copy(update=update)


def _append_unique(items: list[str], *values: Optional[str]) -> list[str]:
    result = list(items)
    for value in values:
        if value and value not in result:
            result.append(value)
    return result


def _with_meta(state: DiscoveryState, **update) -> DiscoveryState:
    return state.model_copy(update={"meta": state.meta.model_copy(update=update)})


def _adopt_domain(state: DiscoveryState, website: Optional[str]) -> Optional[str]:
    return state.domain or extract_domain(website)


def price_from_level(level: Optional[int]) -> Optional[str]:
    """Map a 0-4 price level to "$".."$$$$$"."""
    if level is None:
        return None
    return "$" * (level + 1)


# ── Reducers ────────────────────────────────────────────────────────


def mark_stage(state: DiscoveryState, stage: str) -> DiscoveryState:
    """Record that ``stage`` ran with a domain to work with."""
    return _with_meta(state, stages_ran=_append_unique(state.meta.stages_ran, stage))


def absorb_review_site(state: DiscoveryState, record: Optional[ReviewSiteRecord]) -> DiscoveryState:
    if record is None:
        return state

    info = _fill_info(
        state.business_info,
        address=record.address,
        phone=record.phone,
        website=record.website,
        rating=record.rating,
        review_count=record.review_count,
        price_level=record.price_range,
        review_site_url=record.url,
    )
    owners = state.owners
    names = state.meta.owner_names_found
    owner = build_owner(
        record.owner_name,
        record.owner_title or REVIEW_SITE_TITLE,
        OwnerSource.REVIEW_SITE,
        phone=record.phone,
    )
    if owner:
        owners = owners.put(owner)
        names = _append_unique(names, owner.name)

    return state.model_copy(update={
        "domain": _adopt_domain(state, record.website),
        "business_info": info,
        "owners": owners,
        "meta": state.meta.model_copy(update={
            "review_site_found": True,
            "owner_names_found": names,
        }),
    })


def absorb_maps(state: DiscoveryState, record: Optional[MapsRecord]) -> DiscoveryState:
    if record is None:
        return state

    info = _fill_info(
        state.business_info,
        address=record.address,
        phone=record.phone,
        website=record.website,
        rating=record.rating,
        review_count=record.review_count,
        price_level=price_from_level(record.price_level),
        maps_url=record.maps_url,
    )
    owners = state.owners
    names = state.meta.owner_names_found

    candidates = []
    if record.owner_name:
        candidates.append((record.owner_name, MAPS_OWNER_TITLE, record.phone))
    for responder in record.review_responder_names:
        if responder != record.owner_name:
            candidates.append((responder, RESPONDER_TITLE, None))

    for name, title, phone in candidates:
        owner = build_owner(name, title, OwnerSource.MAP_SERVICE, phone=phone, title_inferred=True)
        if owner:
            owners = owners.put(owner)
            names = _append_unique(names, owner.name)

    return state.model_copy(update={
        "domain": _adopt_domain(state, record.website),
        "business_info": info,
        "owners": owners,
        "meta": state.meta.model_copy(update={
            "maps_found": True,
            "owner_names_found": names,
        }),
    })


def absorb_contacts(
    state: DiscoveryState,
    result: Optional[ContactSearchResult],
    source: OwnerSource = OwnerSource.CONTACT_DATABASE,
    email_source: EmailSource = EmailSource.CONTACT_DATABASE,
) -> DiscoveryState:
    """Fold named contacts into the store.

    Contacts matching an existing owner only fill that owner's empty
    fields, so a contact database email lands on a review-site owner.
    """
    if result is None:
        return state

    owners = state.owners
    names = state.meta.owner_names_found
    emails = state.meta.emails_found
    for contact in result.contacts:
        if not contact.first_name or not contact.last_name:
            continue
        owner = build_owner(
            f"{contact.first_name} {contact.last_name}",
            contact.title or CONTACT_TITLE,
            source,
            email=contact.email,
            email_confidence=contact.confidence or 0,
            email_source=email_source,
            phone=contact.phone,
            title_inferred=not contact.title,
        )
        if not owner:
            continue
        owners = owners.merge(owner)
        names = _append_unique(names, owner.name)
        emails = _append_unique(emails, contact.email)

    found_flag = (
        "domain_search_found" if source == OwnerSource.DOMAIN_SEARCH
        else "contact_database_found"
    )
    return state.model_copy(update={
        "owners": owners,
        "meta": state.meta.model_copy(update={
            found_flag: True,
            "owner_names_found": names,
            "emails_found": emails,
        }),
    })


def absorb_domain_scrape(state: DiscoveryState, record: Optional[DomainScrapeRecord]) -> DiscoveryState:
    if record is None:
        return state

    owners = state.owners
    names = state.meta.owner_names_found
    for scraped in record.owners:
        owner = build_owner(scraped.name, scraped.title or SCRAPED_TITLE, OwnerSource.DOMAIN_SCRAPE)
        if owner:
            owners = owners.merge(owner)
            names = _append_unique(names, owner.name)

    return state.model_copy(update={
        "owners": owners,
        "meta": state.meta.model_copy(update={
            "domain_scrape_found": True,
            "owner_names_found": names,
            "emails_found": _append_unique(state.meta.emails_found, *(e.email for e in record.emails)),
        }),
    })


def absorb_email(
    state: DiscoveryState, key: str, email: str, confidence: int, source: EmailSource,
) -> DiscoveryState:
    """Attach a cascade result to one owner."""
    owners = state.owners.with_email(key, email, confidence, source)
    if owners is state.owners:
        return state
    update = {"emails_found": _append_unique(state.meta.emails_found, email)}
    if source == EmailSource.FINDER:
        update["finder_found"] = True
    return state.model_copy(update={
        "owners": owners,
        "meta": state.meta.model_copy(update=update),
    })


def absorb_verified_mailbox(state: DiscoveryState, suggestion: HospitalityEmail) -> DiscoveryState:
    return state.model_copy(update={
        "hospitality_emails": state.hospitality_emails + (suggestion,),
        "meta": state.meta.model_copy(update={
            "pattern_verified": True,
            "emails_found": _append_unique(state.meta.emails_found, suggestion.email),
        }),
    })


def with_suggestions(state: DiscoveryState, suggestions: list[HospitalityEmail]) -> DiscoveryState:
    return state.model_copy(update={"hospitality_emails": tuple(suggestions)})
