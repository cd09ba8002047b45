"""Email template substitution and role-based hospitality mailboxes.

Restaurants and bars rarely publish personal addresses, but almost all of
them answer a handful of role mailboxes (info@, events@, gm@). The table
below ranks those by how often they reach someone who can say yes.
"""

import re
from typing import Iterable, Optional

from services.discovery.models import HospitalityEmail

# Confidence for an email built from the domain's detected template
PATTERN_EMAIL_CONFIDENCE = 60

# Confidence for a role mailbox confirmed deliverable by the verifier
VERIFIED_MAILBOX_CONFIDENCE = 90

MAX_SUGGESTIONS = 5

# (local part, role label, confidence)
HOSPITALITY_PATTERNS = [
    ("gm", "General Manager", 70),
    ("manager", "Manager", 65),
    ("owner", "Owner", 60),
    ("director", "Director", 55),
    ("events", "Events", 75),
    ("catering", "Catering", 70),
    ("privateevents", "Private Events", 65),
    ("groupsales", "Group Sales", 60),
    ("info", "General Info", 85),
    ("contact", "Contact", 80),
    ("hello", "Hello", 70),
    ("reservations", "Reservations", 65),
    ("front", "Front Desk", 50),
    ("office", "Office", 55),
    ("marketing", "Marketing", 60),
    ("pr", "PR", 50),
    ("media", "Media", 50),
    ("partnerships", "Partnerships", 55),
    ("hr", "HR", 45),
    ("careers", "Careers", 40),
    ("jobs", "Jobs", 40),
]

# Local parts probed with the verifier when no person was found, in order
VERIFY_LOCAL_PARTS = ["owner", "gm", "chef", "info", "contact"]

_ROLE_LABELS = {local: role for local, role, _ in HOSPITALITY_PATTERNS}
_ROLE_LABELS["chef"] = "Chef"


def role_label(local_part: str) -> str:
    return _ROLE_LABELS.get(local_part.lower(), local_part.title())


def _clean_name_part(value: str) -> str:
    return re.sub(r"[^a-z]", "", value.lower())


def generate_from_pattern(
    pattern: Optional[str], first_name: str, last_name: str, domain: str,
) -> Optional[str]:
    """Substitute a person into an email template.

    Supports ``{first}``, ``{last}``, ``{f}`` and ``{l}``. Templates may
    include the domain (``{first}.{last}@example.com``) or not
    (``{first}.{last}``). Returns None when a placeholder cannot be filled.
    """
    if not pattern:
        return None
    first = _clean_name_part(first_name)
    last = _clean_name_part(last_name)
    if not first or not last:
        return None

    local = (
        pattern.strip().lower()
        .replace("{first}", first)
        .replace("{last}", last)
        .replace("{f}", first[0])
        .replace("{l}", last[0])
    )
    if "{" in local or "}" in local:
        return None
    if "@" in local:
        return local
    return f"{local}@{domain}"


def hospitality_emails(domain: str) -> list[HospitalityEmail]:
    """The full role mailbox table for ``domain``, in table order."""
    return [
        HospitalityEmail(email=f"{local}@{domain}", role=role, confidence=confidence)
        for local, role, confidence in HOSPITALITY_PATTERNS
    ]


def merge_suggestions(
    existing: Iterable[HospitalityEmail],
    domain: str,
    limit: int = MAX_SUGGESTIONS,
) -> list[HospitalityEmail]:
    """Add table mailboxes to ``existing``, best ``limit`` by confidence.

    Addresses already present are kept and not repeated. The sort is stable,
    so ties keep their existing-then-table order.
    """
    seen = set()
    combined = []
    for suggestion in list(existing) + hospitality_emails(domain):
        address = suggestion.email.lower()
        if address in seen:
            continue
        seen.add(address)
        combined.append(suggestion)
    combined.sort(key=lambda s: -s.confidence)
    return combined[:limit]
