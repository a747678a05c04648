"""
Budget interpretation helpers.

Turns a free-form budget string ("$80-$120", "under 150", "around 200") into a
BudgetRange, derives its central value and maps that to a BudgetBand.
"""

import re
from typing import Any, Optional

from models.gift import BudgetBand, BudgetRange

NUMERAL_PATTERN = re.compile(r"\d+(?:\.\d+)?")
UPPER_BOUND_PATTERN = re.compile(r"under|below|less than|up to|upto", re.IGNORECASE)
LOWER_BOUND_PATTERN = re.compile(r"over|more than|at least|from", re.IGNORECASE)

LOW_BAND_CEILING = 150
HIGH_BAND_FLOOR = 400

IDEA_COUNTS = {
    BudgetBand.LOW: 3,
    BudgetBand.MID: 5,
    BudgetBand.HIGH: 8,
    BudgetBand.UNKNOWN: 5,
}


def parse_budget(raw: Optional[Any]) -> BudgetRange:
    """
    Parse free-form budget text into a BudgetRange.

    Two or more numerals are read as an explicit min/max range. A single numeral
    is an upper bound ("under 100"), a lower bound ("over 400") or a point
    estimate ("around 200"), with upper-bound phrasing taking precedence.

    Args:
        raw: Budget text as typed by the user (None and "" are accepted)

    Returns:
        BudgetRange; min and max are both None when no numeral was found
    """
    if not raw:
        return BudgetRange()

    text = str(raw)
    numerals = [float(n) for n in NUMERAL_PATTERN.findall(text.replace(",", ""))]

    if not numerals:
        return BudgetRange(raw=text)

    if len(numerals) >= 2:
        return BudgetRange(min=numerals[0], max=numerals[1], raw=text)

    value = numerals[0]
    if UPPER_BOUND_PATTERN.search(text):
        return BudgetRange(max=value, raw=text)
    if LOWER_BOUND_PATTERN.search(text):
        return BudgetRange(min=value, raw=text)
    return BudgetRange(min=value, max=value, raw=text)


def compute_central_value(budget: BudgetRange) -> Optional[float]:
    """Midpoint of the range, the single bound if only one is set, else None."""
    if budget.min is not None and budget.max is not None:
        return (budget.min + budget.max) / 2
    if budget.min is not None:
        return budget.min
    return budget.max


def classify_budget_band(central: Optional[float]) -> BudgetBand:
    if central is None:
        return BudgetBand.UNKNOWN
    if central < LOW_BAND_CEILING:
        return BudgetBand.LOW
    if central <= HIGH_BAND_FLOOR:
        return BudgetBand.MID
    return BudgetBand.HIGH


def get_idea_count(band: BudgetBand) -> int:
    return IDEA_COUNTS[band]
