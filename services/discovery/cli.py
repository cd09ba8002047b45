#!/usr/bin/env python3
"""
Owner Discovery CLI
===================
Find the owners of a local business from the command line.

Usage:
    uv run python -m services.discovery.cli discover "Blue Door Cafe" --city Austin --state TX
    uv run python -m services.discovery.cli discover "Blue Door Cafe" --city Austin --website bluedoorcafe.com --contacts
    uv run python -m services.discovery.cli status
"""

import argparse
import asyncio
import json
import sys
from typing import Optional

from loguru import logger

from services.discovery.assembler import to_contacts
from services.discovery.config import get_settings
from services.discovery.orchestrator import InvalidDiscoveryInput, discover


async def run_discover(
    business_name: str,
    city: str,
    state: Optional[str],
    website: Optional[str],
    include_patterns: bool,
    contacts: bool,
) -> int:
    """Run discovery and print the result as JSON."""
    try:
        result = await discover(
            business_name, city, state, website,
            include_fallback_patterns=include_patterns,
        )
    except InvalidDiscoveryInput as e:
        logger.error(f"Invalid input: {e}")
        return 2

    if contacts:
        payload = [c.model_dump(by_alias=True, mode="json") for c in to_contacts(result)]
    else:
        payload = result.model_dump(by_alias=True, mode="json")
    print(json.dumps(payload, indent=2))
    return 0


def show_status() -> None:
    """Show which providers are configured."""
    settings = get_settings()
    print("\n=== Owner Discovery Providers ===")
    print("Review site (Yelp):        always on")
    print("Website scrape:            always on")
    print(f"Maps (Google Places):      {'configured' if settings.places_configured else 'missing GOOGLE_PLACES_API_KEY'}")
    print(f"Contact database (Apollo): {'configured' if settings.apollo_configured else 'missing APOLLO_API_KEY'}")
    print(f"Email lookups (Hunter):    {'configured' if settings.hunter_configured else 'missing HUNTER_API_KEY'}")
    print()


def main():
    parser = argparse.ArgumentParser(description="Owner Discovery CLI")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Discover command
    discover_parser = subparsers.add_parser("discover", help="Discover owners of a business")
    discover_parser.add_argument("business_name", help="Business name as listed")
    discover_parser.add_argument("--city", required=True, help="City the business is in")
    discover_parser.add_argument("--state", help="State / region")
    discover_parser.add_argument("--website", help="Known website or domain")
    discover_parser.add_argument("--no-patterns", action="store_true", help="Skip role mailbox suggestions")
    discover_parser.add_argument("--contacts", action="store_true", help="Print the flat contact list instead")
    discover_parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    # Status command
    subparsers.add_parser("status", help="Show configured providers")

    args = parser.parse_args()

    logger.remove()
    logger.add(
        sys.stderr,
        level="DEBUG" if getattr(args, "verbose", False) else "INFO",
        format="<level>{level: <8}</level> | {message}",
    )

    if args.command == "discover":
        sys.exit(asyncio.run(run_discover(
            business_name=args.business_name,
            city=args.city,
            state=args.state,
            website=args.website,
            include_patterns=not args.no_patterns,
            contacts=args.contacts,
        )))
    elif args.command == "status":
        show_status()
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
