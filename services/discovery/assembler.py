"""Result assembly: the full DiscoveryResult and the flat contact list."""

from services.discovery.models import Contact, DiscoveryResult
from services.discovery.reducers import DiscoveryState


def build_result(state: DiscoveryState) -> DiscoveryResult:
    """Freeze the state into a result and finalize the meta counts."""
    owners = state.owners.owners()
    meta = state.meta.model_copy(update={
        "owner_count": len(owners),
        "email_count": sum(1 for o in owners if o.email),
    })
    return DiscoveryResult(
        business_name=state.business_name,
        domain=state.domain,
        owners=owners,
        business_info=state.business_info,
        hospitality_emails=list(state.hospitality_emails),
        meta=meta,
    )


def to_contacts(result: DiscoveryResult) -> list[Contact]:
    """Owners as contact rows: with email first, then without.

    Role mailbox suggestions are left out; they are guesses, not people.
    """
    with_email = [o for o in result.owners if o.email]
    without_email = [o for o in result.owners if not o.email]

    contacts = []
    for owner in with_email + without_email:
        if owner.email and owner.email_source:
            notes = f"Found via {owner.source.value}, email from {owner.email_source.value}"
        elif owner.email:
            notes = f"Found via {owner.source.value}"
        else:
            notes = f"Owner found via {owner.source.value}, email not found"
        contacts.append(Contact(
            first_name=owner.first_name,
            last_name=owner.last_name,
            full_name=owner.name,
            email=owner.email,
            email_confidence=owner.email_confidence,
            position=owner.title,
            domain=result.domain,
            source=owner.source,
            notes=notes,
        ))
    return contacts
