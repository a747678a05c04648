"""
Affiliate partner table and link override.

Suggestions that mention an approved partner brand get their links replaced
with the partner's affiliate link. Detection is plain substring containment on
lower-cased title + why text, checked in table order; the first partner wins.
Short keywords can match inside unrelated words, which is accepted.
"""

import json
import logging
from pathlib import Path
from typing import Optional, Sequence

from pydantic import TypeAdapter

from models.gift import AffiliatePartner, LinkRef, ProductSuggestion

logger = logging.getLogger(__name__)

DEFAULT_AFFILIATE_PARTNERS: tuple[AffiliatePartner, ...] = (
    AffiliatePartner(
        brand_key="will_and_bear",
        brand="Will & Bear",
        homepage="https://willandbear.com.au",
        affiliate_url=(
            "https://www.awin1.com/cread.php?awinmid=119813&awinaffid=2689862"
            "&ued=https%3A%2F%2Fwillandbear.com.au"
        ),
        description="premium sustainable hats & accessories, Australia",
        detection_keywords=("will & bear", "will and bear"),
        categories=("fashion", "accessories", "gifts"),
        vibes=("premium", "sustainable", "travel"),
    ),
    AffiliatePartner(
        brand_key="ycz_fragrance",
        brand="YCZ Fragrance",
        homepage="https://yczfragrance.com",
        affiliate_url=(
            "https://www.awin1.com/cread.php?awinmid=121156&awinaffid=2689862"
            "&ued=https%3A%2F%2Fyczfragrance.com"
        ),
        description="luxury fragrances, Australia",
        detection_keywords=("ycz",),
        categories=("beauty", "fragrance", "gifts"),
        vibes=("luxury", "sensual", "modern"),
    ),
)

_partner_list_adapter = TypeAdapter(list[AffiliatePartner])


def load_affiliate_partners(path: Optional[str] = None) -> tuple[AffiliatePartner, ...]:
    """
    Load the partner table.

    Args:
        path: Optional JSON file holding a list of partner objects; replaces the defaults

    Returns:
        Immutable tuple of partners in registration (precedence) order

    Raises:
        ValueError: If the file cannot be read or fails validation
    """
    if not path:
        return DEFAULT_AFFILIATE_PARTNERS

    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
        partners = tuple(_partner_list_adapter.validate_python(data))
    except (OSError, ValueError) as e:
        logger.error(
            '{"event": "affiliate_partners_load_failed", "path": "%s", "error": "%s"}',
            path,
            str(e).replace('"', '\\"'),
        )
        raise ValueError(f"Invalid affiliate partner file {path}: {e}") from e

    logger.info(
        '{"event": "affiliate_partners_loaded", "path": "%s", "count": %d}',
        path,
        len(partners),
    )
    return partners


def detect_affiliate_partner(
    product: ProductSuggestion,
    partners: Sequence[AffiliatePartner],
) -> Optional[AffiliatePartner]:
    text = f"{product.title} {product.why}".lower()
    for partner in partners:
        if any(keyword in text for keyword in partner.detection_keywords):
            return partner
    return None


def affiliate_links_for(partner: AffiliatePartner) -> list[LinkRef]:
    return [LinkRef(label=partner.brand, url=partner.affiliate_url)]


def resolve_affiliate_links(
    products: Sequence[ProductSuggestion],
    partners: Sequence[AffiliatePartner],
) -> list[ProductSuggestion]:
    """
    Replace links on partner-matching suggestions with the partner's affiliate link.

    Returns a new list; matched suggestions are copied, never mutated, and
    their generated links are discarded entirely.
    """
    resolved = []
    for product in products:
        partner = detect_affiliate_partner(product, partners)
        if partner is None:
            resolved.append(product)
            continue
        logger.debug(
            '{"event": "affiliate_override", "brand_key": "%s"}',
            partner.brand_key,
        )
        resolved.append(product.model_copy(update={"links": affiliate_links_for(partner)}))
    return resolved
