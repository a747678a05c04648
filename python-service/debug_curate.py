#!/usr/bin/env python3
"""
Manual script to run the curation pipeline against the real Gemini API.
Prints the directive and the sanitized suggestions.
"""

import asyncio
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables
env_path = Path(__file__).parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

from curation_utils.curation_helpers import (  # noqa: E402
    build_curation_directive,
    get_curation_settings,
    get_gemini_config,
)
from models.gift import GiftRequest  # noqa: E402
from services.affiliate_resolver import load_affiliate_partners  # noqa: E402
from services.curation_service import curate_gifts  # noqa: E402
from services.generation_client import GeminiGenerationClient  # noqa: E402


async def main():
    """Run one curation request"""
    # Usage: debug_curate.py [recipient] [occasion] [budget]
    defaults = ["my dad", "birthday", "under $100"]
    args = sys.argv[1:4]
    recipient, occasion, budget = args + defaults[len(args) :]
    request = GiftRequest(recipient=recipient, occasion=occasion, budget_text=budget)

    settings = get_curation_settings()
    partners = load_affiliate_partners(os.getenv("AFFILIATE_PARTNERS_FILE"))
    api_key, model_name = get_gemini_config()
    client = GeminiGenerationClient(api_key=api_key, model_name=model_name)

    directive = build_curation_directive(request, partners)
    print(f"Budget: {directive.budget}")
    print(f"Band: {directive.band.value} ({directive.idea_count} ideas)")
    print("\nDirective:\n")
    print(directive.text)
    print("\nCalling curate_gifts()...\n")

    result = await curate_gifts(request, client, partners, settings)

    print(f"Products: {len(result.products)}")
    for idx, product in enumerate(result.products, start=1):
        print(f"\n{idx}. {product.title} [{product.price_note}]")
        print(f"   {product.why}")
        for link in product.links:
            print(f"   - {link.label}: {link.url}")


if __name__ == "__main__":
    asyncio.run(main())
