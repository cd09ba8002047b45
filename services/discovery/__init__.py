"""Owner discovery service.

Finds the decision-makers of a local business (restaurant, bar, cafe) and a
confidence-scored email for each.

Components:
- Sources: Adapter seam over lib/owner_discovery (sources.py)
- Store: Deduplicated, immutable owner store (owner_store.py)
- Reducers: Fold adapter records into state (reducers.py)
- Cascade: Per-owner email resolution (cascade.py)
- Orchestrator: Runs the staged pipeline (orchestrator.py)
- Assembler: Result and contact list (assembler.py)
"""

from services.discovery.orchestrator import (
    discover,
    InvalidDiscoveryInput,
)
from services.discovery.assembler import (
    build_result,
    to_contacts,
)
from services.discovery.sources import (
    IOwnerSources,
    OwnerSources,
    MockSources,
)
from services.discovery.config import (
    DiscoverySettings,
    get_settings,
)
from services.discovery.models import (
    Owner,
    OwnerSource,
    EmailSource,
    BusinessInfo,
    HospitalityEmail,
    DiscoveryMeta,
    DiscoveryResult,
    Contact,
)

__all__ = [
    # Orchestrator
    "discover",
    "InvalidDiscoveryInput",
    # Assembler
    "build_result",
    "to_contacts",
    # Sources
    "IOwnerSources",
    "OwnerSources",
    "MockSources",
    # Config
    "DiscoverySettings",
    "get_settings",
    # Models
    "Owner",
    "OwnerSource",
    "EmailSource",
    "BusinessInfo",
    "HospitalityEmail",
    "DiscoveryMeta",
    "DiscoveryResult",
    "Contact",
]
