"""Configuration for owner discovery.

Read from the environment (and .env) once per process:
    HUNTER_API_KEY           Hunter.io (domain search, finder, verifier)
    APOLLO_API_KEY           Apollo.io people search
    GOOGLE_PLACES_API_KEY    Google Places text search + details
    DISCOVERY_HTTP_TIMEOUT   Per-request timeout for API adapters (seconds)
    DISCOVERY_SCRAPE_DELAY   Pause between website pages (seconds)
    DISCOVERY_MAX_SUGGESTIONS  Role mailboxes kept in the result

A missing API key disables that adapter; it then reports "not found".
"""

import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict

load_dotenv()


class DiscoverySettings(BaseModel):
    """Settings for one discovery process."""
    model_config = ConfigDict(frozen=True)

    hunter_api_key: Optional[str] = None
    apollo_api_key: Optional[str] = None
    google_places_api_key: Optional[str] = None
    http_timeout: float = 15.0
    scrape_timeout: float = 10.0
    scrape_delay: float = 0.3
    max_suggestions: int = 5

    @property
    def hunter_configured(self) -> bool:
        return bool(self.hunter_api_key)

    @property
    def apollo_configured(self) -> bool:
        return bool(self.apollo_api_key)

    @property
    def places_configured(self) -> bool:
        return bool(self.google_places_api_key)


def get_settings() -> DiscoverySettings:
    """Build settings from the current environment."""
    return DiscoverySettings(
        hunter_api_key=os.getenv("HUNTER_API_KEY") or None,
        apollo_api_key=os.getenv("APOLLO_API_KEY") or None,
        google_places_api_key=os.getenv("GOOGLE_PLACES_API_KEY") or None,
        http_timeout=float(os.getenv("DISCOVERY_HTTP_TIMEOUT", "15.0")),
        scrape_delay=float(os.getenv("DISCOVERY_SCRAPE_DELAY", "0.3")),
        max_suggestions=int(os.getenv("DISCOVERY_MAX_SUGGESTIONS", "5")),
    )
