"""Per-owner email resolution cascade.

For each owner still lacking an email, in insertion order:
  1. Finder: look the person up by (first, last, domain)
  2. Domain pattern: substitute the name into the domain's email template

Owners are processed one at a time. The domain's template is fetched at
most once per discovery, on first need, and reused for every owner even
when the lookup found nothing.
"""

import time
from typing import Optional

from loguru import logger

from services.discovery.email_patterns import PATTERN_EMAIL_CONFIDENCE, generate_from_pattern
from services.discovery.models import EmailSource, STAGE_EMAIL_CASCADE
from services.discovery.reducers import DiscoveryState, absorb_email, mark_stage
from services.discovery.sources import IOwnerSources, guarded


class DomainPattern:
    """Lazily fetched email template for one domain."""

    def __init__(self, sources: IOwnerSources, domain: str, tag: str):
        self._sources = sources
        self._domain = domain
        self._tag = tag
        self._fetched = False
        self._pattern: Optional[str] = None

    async def get(self) -> Optional[str]:
        if not self._fetched:
            self._fetched = True
            self._pattern = await guarded(
                self._sources.email_pattern(self._domain), self._tag, "[Cascade] Email pattern",
            )
            logger.debug(f"{self._tag} [Cascade] Email pattern for {self._domain}: {self._pattern}")
        return self._pattern


async def resolve_owner_email(
    state: DiscoveryState,
    key: str,
    sources: IOwnerSources,
    pattern: DomainPattern,
) -> DiscoveryState:
    """Run the cascade for one owner. Returns the state unchanged on a miss."""
    owner = state.owners.get(key)
    if owner is None or owner.email or not state.domain:
        return state
    tag = state.tag

    found = await guarded(
        sources.find_email(owner.first_name, owner.last_name, state.domain),
        tag, f"[Cascade] Finder for {owner.name}",
    )
    if found and found.email:
        logger.info(f"{tag} [Cascade] Finder: {owner.name} → {found.email} (score={found.score})")
        return absorb_email(state, key, found.email, found.score, EmailSource.FINDER)

    template = await pattern.get()
    generated = generate_from_pattern(template, owner.first_name, owner.last_name, state.domain)
    if generated:
        logger.info(f"{tag} [Cascade] Pattern: {owner.name} → {generated} ({template})")
        return absorb_email(state, key, generated, PATTERN_EMAIL_CONFIDENCE, EmailSource.DOMAIN_PATTERN)

    logger.debug(f"{tag} [Cascade] No email found for {owner.name}")
    return state


async def resolve_emails(
    state: DiscoveryState,
    sources: IOwnerSources,
    pattern: Optional[DomainPattern] = None,
) -> DiscoveryState:
    """Run the cascade for every owner without an email."""
    pending = state.owners.missing_email()
    if not state.domain:
        if pending:
            logger.info(f"{state.tag} [Cascade] Skipped: no domain for {len(pending)} owners")
        return state
    if not pending:
        logger.info(f"{state.tag} [Cascade] Skipped: no owners need an email")
        return state

    t0 = time.monotonic()
    pattern = pattern or DomainPattern(sources, state.domain, state.tag)
    state = mark_stage(state, STAGE_EMAIL_CASCADE)
    for key in pending:
        state = await resolve_owner_email(state, key, sources, pattern)

    resolved = sum(1 for key in pending if state.owners.get(key).email)
    elapsed = time.monotonic() - t0
    logger.info(
        f"{state.tag} [Cascade] Resolved {resolved}/{len(pending)} owners [{elapsed:.1f}s]"
    )
    return state
