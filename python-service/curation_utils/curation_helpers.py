"""
Curation directive builder and configuration helpers.

This module renders the instruction sent to the generation model.
The actual prompt strings are defined in curation_prompts.py.
Also reads Gemini and pipeline configuration from environment variables.
"""

import logging
import os
from typing import Sequence

from curation_utils.budget_helpers import (
    classify_budget_band,
    compute_central_value,
    get_idea_count,
    parse_budget,
)
from curation_utils.curation_prompts import CURATION_DIRECTIVE_TEMPLATE, NO_PARTNERS_LINE
from models.curation import CurationDirective, CurationSettings, LinkMode
from models.gift import AffiliatePartner, GiftRequest

logger = logging.getLogger(__name__)

DEFAULT_GEMINI_MODEL = "gemini-2.5-flash"
DEFAULT_MAX_OUTPUT_TOKENS = 900


def format_partner_lines(partners: Sequence[AffiliatePartner]) -> str:
    """
    Render the approved partner list for the directive.

    Args:
        partners: Partner table in registration order

    Returns:
        One indented bullet per partner, e.g. "  - YCZ Fragrance (luxury fragrances, Australia)"
    """
    if not partners:
        return NO_PARTNERS_LINE
    lines = []
    for partner in partners:
        if partner.description:
            lines.append(f"  - {partner.brand} ({partner.description})")
        else:
            lines.append(f"  - {partner.brand}")
    return "\n".join(lines)


def build_curation_directive(
    request: GiftRequest,
    partners: Sequence[AffiliatePartner] = (),
) -> CurationDirective:
    """
    Build the full curation directive for a gift request.

    Parses the budget, maps its central value to a band and idea count, and
    renders the instruction text with the JSON output contract.

    Args:
        request: Validated gift request
        partners: Approved affiliate partners to mention in the directive

    Returns:
        CurationDirective with the rendered text and the values it was built from
    """
    budget = parse_budget(request.budget_text)
    band = classify_budget_band(compute_central_value(budget))
    idea_count = get_idea_count(band)

    text = CURATION_DIRECTIVE_TEMPLATE.format(
        recipient=request.recipient,
        occasion=request.occasion,
        budget=budget.raw or request.budget_text,
        idea_count=idea_count,
        partner_lines=format_partner_lines(partners),
    )
    return CurationDirective(budget=budget, band=band, idea_count=idea_count, text=text)


def build_curation_prompt(
    request: GiftRequest,
    partners: Sequence[AffiliatePartner] = (),
) -> str:
    return build_curation_directive(request, partners).text


def get_gemini_config() -> tuple[str, str]:
    """
    Get Gemini API configuration from environment variables.

    Returns:
        Tuple of (api_key, model_name)

    Raises:
        ValueError: If GEMINI_API_KEY is not set
    """
    gemini_api_key = os.getenv("GEMINI_API_KEY")
    if not gemini_api_key:
        raise ValueError("GEMINI_API_KEY environment variable is not set")

    gemini_model_name = os.getenv("GEMINI_MODEL", DEFAULT_GEMINI_MODEL)

    return gemini_api_key, gemini_model_name


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def get_curation_settings() -> CurationSettings:
    """
    Read pipeline settings from environment variables.

    Invalid CURATE_LINK_MODE or CURATE_MAX_OUTPUT_TOKENS values fall back to
    their defaults with a warning.
    """
    link_mode_str = os.getenv("CURATE_LINK_MODE", LinkMode.STRICT.value).strip().lower()
    try:
        link_mode = LinkMode(link_mode_str)
    except ValueError:
        logger.warning(
            '{"event": "invalid_link_mode", "value": "%s", "fallback": "%s"}',
            link_mode_str.replace('"', '\\"'),
            LinkMode.STRICT.value,
        )
        link_mode = LinkMode.STRICT

    tokens_str = os.getenv("CURATE_MAX_OUTPUT_TOKENS", str(DEFAULT_MAX_OUTPUT_TOKENS))
    try:
        max_output_tokens = int(tokens_str)
        if max_output_tokens < 1:
            raise ValueError(tokens_str)
    except ValueError:
        logger.warning(
            '{"event": "invalid_max_output_tokens", "value": "%s", "fallback": %d}',
            tokens_str.replace('"', '\\"'),
            DEFAULT_MAX_OUTPUT_TOKENS,
        )
        max_output_tokens = DEFAULT_MAX_OUTPUT_TOKENS

    return CurationSettings(
        model_name=os.getenv("GEMINI_MODEL", DEFAULT_GEMINI_MODEL),
        max_output_tokens=max_output_tokens,
        link_mode=link_mode,
        affiliate_override=_env_flag("AFFILIATE_OVERRIDE", True),
    )
