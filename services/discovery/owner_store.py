"""Owner merge store.

Owners are keyed by normalized (first, last) name. The store is immutable:
every write returns a new store. A populated field is never replaced, with
one exception: a stated title wins over an inferred one. An owner's
information can only grow.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict

from services.discovery.models import EmailSource, Owner, OwnerSource
from services.discovery.names import owner_key, split_name


def build_owner(
    name: Optional[str],
    title: Optional[str],
    source: OwnerSource,
    email: Optional[str] = None,
    email_confidence: int = 0,
    email_source: Optional[EmailSource] = None,
    phone: Optional[str] = None,
    title_inferred: bool = False,
) -> Optional[Owner]:
    """Build an Owner from a full name, or None if the name has no surname."""
    split = split_name(name)
    if not split:
        return None
    return Owner(
        name=" ".join(name.split()),
        first_name=split.first_name,
        last_name=split.last_name,
        title=title,
        email=email or None,
        email_confidence=email_confidence if email else 0,
        email_source=email_source if email else None,
        phone=phone,
        source=source,
        title_inferred=title_inferred,
    )


def key_of(owner: Owner) -> str:
    return owner_key(owner.first_name, owner.last_name)


class OwnerStore(BaseModel):
    """Insertion-ordered, deduplicated owners."""

    model_config = ConfigDict(frozen=True)

    entries: dict[str, Owner] = {}

    def __len__(self) -> int:
        return len(self.entries)

    def __contains__(self, key: str) -> bool:
        return key in self.entries

    def get(self, key: str) -> Optional[Owner]:
        return self.entries.get(key)

    def owners(self) -> list[Owner]:
        return list(self.entries.values())

    def keys(self) -> list[str]:
        return list(self.entries)

    def put(self, owner: Owner) -> "OwnerStore":
        """Insert ``owner`` unless its key is already present."""
        key = key_of(owner)
        if key in self.entries:
            return self
        return OwnerStore(entries={**self.entries, key: owner})

    def merge(self, owner: Owner) -> "OwnerStore":
        """Insert ``owner``, or fill the empty fields of the existing entry.

        The existing entry keeps its name, title and source, except that a
        stated title replaces an inferred one, and the
        entry then takes that title's source. Email (with its confidence and
        source) and phone are taken from ``owner`` only where the existing
        entry has none.
        """
        key = key_of(owner)
        existing = self.entries.get(key)
        if existing is None:
            return self.put(owner)

        update = {}
        if owner.title and not owner.title_inferred and existing.title_inferred:
            update["title"] = owner.title
            update["title_inferred"] = False
            update["source"] = owner.source
        elif not existing.title and owner.title:
            update["title"] = owner.title
            update["title_inferred"] = owner.title_inferred
        if not existing.phone and owner.phone:
            update["phone"] = owner.phone
        if not existing.email and owner.email:
            update["email"] = owner.email
            update["email_confidence"] = owner.email_confidence
            update["email_source"] = owner.email_source
        if not update:
            return self
        return OwnerStore(entries={**self.entries, key: existing.model_copy(update=update)})

    def with_email(
        self, key: str, email: str, confidence: int, source: EmailSource,
    ) -> "OwnerStore":
        """Attach an email to the owner at ``key`` if it has none yet."""
        existing = self.entries.get(key)
        if existing is None or existing.email:
            return self
        updated = existing.model_copy(update={
            "email": email,
            "email_confidence": confidence,
            "email_source": source,
        })
        return OwnerStore(entries={**self.entries, key: updated})

    def missing_email(self) -> list[str]:
        """Keys of owners without an email, in insertion order."""
        return [key for key, owner in self.entries.items() if not owner.email]
