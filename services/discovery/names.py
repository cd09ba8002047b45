"""Person name splitting and the owner dedup key."""

from typing import NamedTuple, Optional


class SplitName(NamedTuple):
    first_name: str
    last_name: str


def split_name(full_name: Optional[str]) -> Optional[SplitName]:
    """Split "Maria de la Cruz" into ("Maria", "de la Cruz").

    Returns None when the name has no surname: single-word names are not
    enough to key an owner or generate an email.
    """
    if not full_name:
        return None
    parts = full_name.split()
    if len(parts) < 2:
        return None
    return SplitName(parts[0], " ".join(parts[1:]))


def owner_key(first_name: str, last_name: str) -> str:
    return f"{first_name.lower()}-{last_name.lower()}"
