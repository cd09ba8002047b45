"""URL and domain helpers shared by the discovery adapters."""

from typing import Optional
from urllib.parse import urlparse


def extract_domain(url: Optional[str]) -> Optional[str]:
    """Return the registrable host of a URL, lowercased, without ``www.``."""
    if not url:
        return None
    url = url.strip()
    if "://" not in url:
        url = "https://" + url
    try:
        parsed = urlparse(url)
        host = parsed.hostname or ""
        if host.startswith("www."):
            host = host[4:]
        return host.lower() if host else None
    except ValueError:
        return None


def clean_domain(domain: str) -> str:
    """Normalize a bare domain or URL fragment to ``host`` form."""
    return extract_domain(domain) or domain.strip().lower()
