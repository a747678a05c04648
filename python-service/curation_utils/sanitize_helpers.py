"""
Sanitization of raw generation output.

The generation model is untrusted: its text may be wrapped in markdown fences,
may not be JSON at all, and may contain oversized fields or unsafe links.
These helpers turn it into a bounded CurationResult or raise a SanitizeError.
"""

import json
import logging
import re
from typing import Any

from errors import MissingProductsArrayError, NotJSONError
from models.gift import CurationResult, LinkRef, ProductSuggestion

logger = logging.getLogger(__name__)

TITLE_MAX_LENGTH = 120
WHY_MAX_LENGTH = 300
PRICE_NOTE_MAX_LENGTH = 60
LABEL_MAX_LENGTH = 30
URL_MAX_LENGTH = 400

DEFAULT_LINK_LABEL = "Shop now"
ALLOWED_URL_PREFIX = "https://"
MAX_INT_DIGITS = 4300

LEADING_FENCE_PATTERN = re.compile(r"^```(?:json)?", re.IGNORECASE)
TRAILING_FENCE_PATTERN = re.compile(r"```$")


def remove_markdown_code_blocks(text: str) -> str:
    """
    Strip a leading ``` / ```json fence, a trailing ``` fence and surrounding whitespace.

    Text without fences is only whitespace-trimmed, so applying this twice is a no-op.
    """
    cleaned = text.strip()
    cleaned = LEADING_FENCE_PATTERN.sub("", cleaned, count=1).strip()
    cleaned = TRAILING_FENCE_PATTERN.sub("", cleaned, count=1).strip()
    return cleaned


def coerce_text(value: Any, limit: int, default: str = "") -> str:
    """Coerce an untrusted field to a string of at most `limit` characters."""
    # Every falsy value (None, False, 0, "", [], {}) falls back to the default
    if not value:
        text = default
    elif isinstance(value, str):
        text = value
    else:
        text = str(value)
    return text[:limit]


def normalize_links(raw_links: Any, max_links: int) -> list[LinkRef]:
    """
    Keep only https:// links, clamp label/url lengths and cap the count.

    Args:
        raw_links: Untrusted "links" value from one generated item
        max_links: Maximum number of links to keep

    Returns:
        List of LinkRef, order-preserving, at most max_links long
    """
    if not isinstance(raw_links, list):
        return []

    links = []
    for entry in raw_links:
        if not isinstance(entry, dict):
            continue
        url = entry.get("url")
        if not isinstance(url, str) or not url.startswith(ALLOWED_URL_PREFIX):
            continue
        links.append(
            LinkRef(
                label=coerce_text(entry.get("label"), LABEL_MAX_LENGTH, DEFAULT_LINK_LABEL),
                url=url[:URL_MAX_LENGTH],
            )
        )
    return links[:max_links]


def normalize_product(raw_item: Any, max_links: int) -> ProductSuggestion:
    """
    Normalize one generated item. Never raises.

    Malformed items become suggestions with empty fields so the caller's
    numbering stays aligned with the generated list.
    """
    if not isinstance(raw_item, dict):
        raw_item = {}

    return ProductSuggestion(
        title=coerce_text(raw_item.get("title"), TITLE_MAX_LENGTH),
        why=coerce_text(raw_item.get("why"), WHY_MAX_LENGTH),
        price_note=coerce_text(raw_item.get("price_note"), PRICE_NOTE_MAX_LENGTH),
        links=normalize_links(raw_item.get("links"), max_links),
    )


def _parse_json_int(digits: str) -> Any:
    # CPython refuses int conversion above its digit limit; oversized integers become float
    if len(digits) <= MAX_INT_DIGITS:
        return int(digits)
    return float(digits)


def parse_generation_json(text: str) -> Any:
    """
    Decode unwrapped generation output.

    Raises:
        NotJSONError: If the text is not valid JSON or is nested too deeply to decode
    """
    try:
        return json.loads(text, parse_int=_parse_json_int)
    except (ValueError, RecursionError) as e:
        raise NotJSONError(f"Generation output is not valid JSON: {e}", raw_text=text) from e


def sanitize_generation_output(raw_output: str, max_links: int = 1) -> CurationResult:
    """
    Unwrap, parse, shape-check and normalize raw generation output.

    Args:
        raw_output: Text returned by the generation backend
        max_links: Link cap per suggestion (1 in strict mode)

    Returns:
        CurationResult with one suggestion per generated item, in order

    Raises:
        NotJSONError: If the unwrapped text is not JSON
        MissingProductsArrayError: If the JSON has no "products" list
    """
    text = remove_markdown_code_blocks(raw_output or "")
    parsed = parse_generation_json(text)

    if not isinstance(parsed, dict) or not isinstance(parsed.get("products"), list):
        raise MissingProductsArrayError(
            "Generation JSON has no products array", raw_text=text
        )

    products = [normalize_product(item, max_links) for item in parsed["products"]]
    logger.debug('{"event": "sanitize_success", "product_count": %d}', len(products))
    return CurationResult(products=products)
