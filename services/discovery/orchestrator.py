"""Owner discovery orchestrator.

Finds the decision-makers of a local business and an email for each:
  1. Domain seeding → from the caller's website, if any
  2. Round 1 (parallel) → review site, maps, contact database, website scrape
  3. Absorb round 1 → business info first-non-null-wins, owners dedup by name
  4. Domain back-fill → contact database + website scrape once a domain appears
  5. Email cascade → finder, then domain pattern, one owner at a time
  6. Zero-owner fallback → domain-wide search for senior people
  7. Zero-owner fallback → verify owner@/gm@/chef@/info@/contact@ in order
  8. Suggestions → top role mailboxes by confidence
  9. Assemble the result

Adapter failures never propagate: each call is guarded and a failure is
the same as "not found". Only missing input raises.
"""

import asyncio
import time
from typing import Optional

import httpx
from loguru import logger

from services.discovery.assembler import build_result
from services.discovery.cascade import resolve_emails
from services.discovery.config import DiscoverySettings, get_settings
from services.discovery.email_patterns import (
    VERIFIED_MAILBOX_CONFIDENCE,
    VERIFY_LOCAL_PARTS,
    merge_suggestions,
    role_label,
)
from services.discovery.models import (
    DiscoveryResult,
    EmailSource,
    HospitalityEmail,
    OwnerSource,
    STAGE_CONTACT_DATABASE,
    STAGE_DOMAIN_SCRAPE,
    STAGE_DOMAIN_SEARCH,
    STAGE_MAPS,
    STAGE_PATTERN_VERIFY,
    STAGE_REVIEW_SITE,
    STAGE_SUGGESTIONS,
)
from services.discovery.reducers import (
    DiscoveryState,
    absorb_contacts,
    absorb_domain_scrape,
    absorb_maps,
    absorb_review_site,
    absorb_verified_mailbox,
    initial_state,
    mark_stage,
    with_suggestions,
)
from services.discovery.sources import IOwnerSources, OwnerSources, guarded

# Contact database title filter for the first pass at a known domain
DECISION_MAKER_TITLES = [
    "owner", "co-owner", "founder", "general manager", "gm",
    "managing partner", "partner", "president", "ceo", "chef", "director",
]

# Domain-wide fallback filters
FALLBACK_SENIORITIES = ["executive", "senior"]
FALLBACK_DEPARTMENTS = ["executive", "management"]

CONTACT_SEARCH_LIMIT = 10


class InvalidDiscoveryInput(ValueError):
    """Raised when a required discovery argument is missing or blank."""


async def _skipped():
    return None


# ── Stages ──────────────────────────────────────────────────────────


def _contact_search(state: DiscoveryState, sources: IOwnerSources):
    if not state.domain:
        return _skipped()
    return guarded(
        sources.search_contacts(state.domain, titles=DECISION_MAKER_TITLES, limit=CONTACT_SEARCH_LIMIT),
        state.tag, "[Contacts]",
    )


def _domain_scrape(state: DiscoveryState, sources: IOwnerSources):
    if not state.domain:
        return _skipped()
    return guarded(sources.scrape_domain(state.domain), state.tag, "[Website]")


def _log_round(state: DiscoveryState, label: str, results: dict, elapsed: float) -> None:
    hits = [name for name, res in results.items() if res is not None]
    logger.info(
        f"{state.tag} [{label}] {len(hits)}/{len(results)} sources answered "
        f"({', '.join(hits) or 'none'}) | {len(state.owners)} owners [{elapsed:.1f}s]"
    )


async def _run_round_one(state: DiscoveryState, sources: IOwnerSources) -> DiscoveryState:
    """Stages 2-3: four lookups in parallel, absorbed in a fixed order."""
    t0 = time.monotonic()
    had_domain = state.domain is not None
    tag = state.tag

    review, maps, contacts, scrape = await asyncio.gather(
        guarded(sources.find_review_site(state.business_name, state.city, state.state), tag, "[Review site]"),
        guarded(sources.find_maps(state.business_name, state.city, state.state), tag, "[Maps]"),
        _contact_search(state, sources),
        _domain_scrape(state, sources),
    )

    state = mark_stage(state, STAGE_REVIEW_SITE)
    state = mark_stage(state, STAGE_MAPS)
    if had_domain:
        state = mark_stage(state, STAGE_CONTACT_DATABASE)
        state = mark_stage(state, STAGE_DOMAIN_SCRAPE)

    state = absorb_review_site(state, review)
    state = absorb_maps(state, maps)
    state = absorb_contacts(state, contacts)
    state = absorb_domain_scrape(state, scrape)

    _log_round(state, "Round 1", {
        "review-site": review, "maps": maps, "contacts": contacts, "website": scrape,
    }, time.monotonic() - t0)
    return state


async def _run_backfill(state: DiscoveryState, sources: IOwnerSources) -> DiscoveryState:
    """Stage 4: domain-gated lookups that round 1 had to skip."""
    run_contacts = not state.ran(STAGE_CONTACT_DATABASE)
    run_scrape = not state.ran(STAGE_DOMAIN_SCRAPE)
    if not (run_contacts or run_scrape):
        return state

    t0 = time.monotonic()
    logger.info(f"{state.tag} [Back-fill] Domain found in round 1, running domain lookups")
    contacts, scrape = await asyncio.gather(
        _contact_search(state, sources) if run_contacts else _skipped(),
        _domain_scrape(state, sources) if run_scrape else _skipped(),
    )

    if run_contacts:
        state = absorb_contacts(mark_stage(state, STAGE_CONTACT_DATABASE), contacts)
    if run_scrape:
        state = absorb_domain_scrape(mark_stage(state, STAGE_DOMAIN_SCRAPE), scrape)

    _log_round(state, "Back-fill", {"contacts": contacts, "website": scrape}, time.monotonic() - t0)
    return state


async def _run_domain_search(state: DiscoveryState, sources: IOwnerSources) -> DiscoveryState:
    """Stage 6: domain-wide search for senior people when nobody was found."""
    t0 = time.monotonic()
    result = await guarded(
        sources.search_domain(
            state.domain,
            seniorities=FALLBACK_SENIORITIES,
            departments=FALLBACK_DEPARTMENTS,
            limit=CONTACT_SEARCH_LIMIT,
        ),
        state.tag, "[Domain search]",
    )
    state = mark_stage(state, STAGE_DOMAIN_SEARCH)
    if result is not None:
        # Only personal, named addresses become owners
        personal = result.model_copy(update={
            "contacts": [c for c in result.contacts if c.email and c.first_name and c.last_name],
        })
        state = absorb_contacts(
            state, personal,
            source=OwnerSource.DOMAIN_SEARCH,
            email_source=EmailSource.DOMAIN_SEARCH,
        )

    elapsed = time.monotonic() - t0
    logger.info(f"{state.tag} [Domain search] {len(state.owners)} owners [{elapsed:.1f}s]")
    return state


async def _run_pattern_verify(state: DiscoveryState, sources: IOwnerSources) -> DiscoveryState:
    """Stage 7: probe role mailboxes one at a time, keep the first deliverable."""
    t0 = time.monotonic()
    state = mark_stage(state, STAGE_PATTERN_VERIFY)
    for local in VERIFY_LOCAL_PARTS:
        address = f"{local}@{state.domain}"
        verdict = await guarded(sources.verify_email(address), state.tag, f"[Verify] {address}")
        if verdict and verdict.deliverable:
            logger.info(f"{state.tag} [Verify] Deliverable: {address} [{time.monotonic() - t0:.1f}s]")
            return absorb_verified_mailbox(state, HospitalityEmail(
                email=address,
                role=role_label(local),
                confidence=VERIFIED_MAILBOX_CONFIDENCE,
            ))
    logger.info(f"{state.tag} [Verify] No deliverable role mailbox [{time.monotonic() - t0:.1f}s]")
    return state


def _add_suggestions(state: DiscoveryState, limit: int) -> DiscoveryState:
    """Stage 8: fill the suggestion list from the role mailbox table."""
    suggestions = merge_suggestions(state.hospitality_emails, state.domain, limit=limit)
    logger.debug(f"{state.tag} [Suggestions] {', '.join(s.email for s in suggestions)}")
    return mark_stage(with_suggestions(state, suggestions), STAGE_SUGGESTIONS)


# ── Orchestrator ────────────────────────────────────────────────────


async def discover(
    business_name: str,
    city: str,
    state: Optional[str] = None,
    website: Optional[str] = None,
    include_fallback_patterns: bool = True,
    *,
    sources: Optional[IOwnerSources] = None,
    settings: Optional[DiscoverySettings] = None,
) -> DiscoveryResult:
    """Discover the owners of a business and an email for each.

    Args:
        business_name: Business name as listed, e.g. "Blue Door Cafe"
        city: City the business is in
        state: State / region, optional
        website: Known website or bare domain, optional
        include_fallback_patterns: Add role mailbox suggestions (info@, gm@...)
        sources: Lookups to use; live adapters on a fresh client when omitted
        settings: Settings for live adapters; read from the environment when omitted

    Returns:
        DiscoveryResult, possibly with no owners

    Raises:
        InvalidDiscoveryInput: business_name or city is missing or blank
    """
    if not business_name or not business_name.strip():
        raise InvalidDiscoveryInput("business_name is required")
    if not city or not city.strip():
        raise InvalidDiscoveryInput("city is required")

    settings = settings or get_settings()
    if sources is None:
        async with httpx.AsyncClient() as client:
            return await discover(
                business_name, city, state, website, include_fallback_patterns,
                sources=OwnerSources(client, settings), settings=settings,
            )

    business_name = business_name.strip()
    city = city.strip()
    state = (state or "").strip() or None
    website = (website or "").strip() or None
    st = initial_state(business_name, city, state, website)
    t_start = time.monotonic()
    logger.info(f"{st.tag} Starting owner discovery | city={city!r} state={state!r}")

    st = await _run_round_one(st, sources)

    if st.domain:
        st = await _run_backfill(st, sources)
    else:
        logger.info(f"{st.tag} No domain from any source, skipping domain lookups")

    st = await resolve_emails(st, sources)

    if len(st.owners) == 0 and st.domain:
        st = await _run_domain_search(st, sources)
    if len(st.owners) == 0 and st.domain:
        st = await _run_pattern_verify(st, sources)

    if include_fallback_patterns and st.domain:
        st = _add_suggestions(st, settings.max_suggestions)

    result = build_result(st)
    logger.info(
        f"{st.tag} Done: {result.meta.owner_count} owners | "
        f"{result.meta.email_count} emails | "
        f"{len(result.hospitality_emails)} suggestions | "
        f"{time.monotonic() - t_start:.1f}s"
    )
    return result
