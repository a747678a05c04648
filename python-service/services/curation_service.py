"""
Gift curation service.
Runs the request-to-suggestion pipeline: budget parsing, directive building,
generation, sanitization and affiliate override.
"""

import logging
from typing import Sequence

from curation_utils.curation_helpers import build_curation_directive
from curation_utils.sanitize_helpers import sanitize_generation_output
from errors import GenerationFailure, SanitizeError
from models.curation import CurationSettings
from models.gift import AffiliatePartner, CurationResult, GiftRequest
from services.affiliate_resolver import resolve_affiliate_links
from services.generation_client import GenerationClient

logger = logging.getLogger(__name__)


async def curate_gifts(
    request: GiftRequest,
    generation_client: GenerationClient,
    partners: Sequence[AffiliatePartner],
    settings: CurationSettings,
) -> CurationResult:
    """
    Produce sanitized product suggestions for one gift request.

    Orchestrates the complete curation workflow:
    1. Parses the budget and builds the directive
    2. Calls the generation backend (single call, no retry)
    3. Sanitizes the raw output
    4. Applies affiliate link overrides if enabled

    Args:
        request: Validated gift request
        generation_client: Shared generation backend handle
        partners: Immutable affiliate partner table
        settings: Pipeline settings

    Returns:
        CurationResult with suggestions in generated order

    Raises:
        GenerationFailure: If the generation backend fails
        NotJSONError: If the output is not JSON
        MissingProductsArrayError: If the output has no products array
    """
    # 1. Build directive
    directive = build_curation_directive(request, partners)
    logger.info(
        '{"event": "curation_directive_built", "band": "%s", "idea_count": %d}',
        directive.band.value,
        directive.idea_count,
    )

    # 2. Generate
    try:
        raw_output = await generation_client.generate(directive.text, settings.max_output_tokens)
    except GenerationFailure:
        raise
    except Exception as e:
        logger.error(
            '{"event": "generation_unexpected_error", "error": "%s"}',
            str(e).replace('"', '\\"'),
        )
        raise GenerationFailure(f"Generation backend error: {e}") from e

    # 3. Sanitize
    try:
        result = sanitize_generation_output(raw_output, max_links=settings.max_links)
    except SanitizeError as e:
        logger.error(
            '{"event": "generation_output_rejected", "type": "%s", "detail": "%s", "raw_excerpt": "%s"}',
            type(e).__name__,
            e.detail.replace('"', '\\"'),
            e.raw_excerpt.replace('"', '\\"'),
        )
        raise

    # 4. Affiliate override
    products = result.products
    if settings.affiliate_override:
        products = resolve_affiliate_links(products, partners)

    logger.info(
        '{"event": "curation_completed", "requested": %d, "returned": %d}',
        directive.idea_count,
        len(products),
    )
    return CurationResult(products=products)
