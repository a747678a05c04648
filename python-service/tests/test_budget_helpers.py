import pytest

from curation_utils.budget_helpers import (
    classify_budget_band,
    compute_central_value,
    get_idea_count,
    parse_budget,
)
from models.gift import BudgetBand, BudgetRange


class TestParseBudget:
    def test_explicit_range(self):
        assert parse_budget("$80-$120") == BudgetRange(min=80, max=120, raw="$80-$120")

    def test_upper_bound(self):
        budget = parse_budget("under 150")
        assert budget.min is None
        assert budget.max == 150

    def test_lower_bound(self):
        budget = parse_budget("over 400")
        assert budget.min == 400
        assert budget.max is None

    def test_point_estimate(self):
        budget = parse_budget("around 200")
        assert (budget.min, budget.max) == (200, 200)

    @pytest.mark.parametrize("raw", ["", None])
    def test_empty_input(self, raw):
        assert parse_budget(raw) == BudgetRange(min=None, max=None, raw=None)

    def test_no_numeral_keeps_raw(self):
        assert parse_budget("banana") == BudgetRange(min=None, max=None, raw="banana")

    def test_thousands_separator_removed(self):
        budget = parse_budget("$1,000 - $2,500")
        assert (budget.min, budget.max) == (1000, 2500)

    def test_decimals(self):
        budget = parse_budget("up to 49.95")
        assert budget.max == 49.95
        assert budget.min is None

    def test_extra_numerals_ignored(self):
        budget = parse_budget("50 to 100, maybe 300")
        assert (budget.min, budget.max) == (50, 100)

    def test_keywords_case_insensitive(self):
        assert parse_budget("UNDER $100").max == 100
        assert parse_budget("At Least 60").min == 60

    def test_upper_bound_takes_precedence(self):
        # "from" and "up to" both present with one numeral
        budget = parse_budget("anything from the shop up to 90")
        assert budget.min is None
        assert budget.max == 90

    def test_upto_without_space(self):
        assert parse_budget("upto 75").max == 75

    def test_non_string_input_does_not_raise(self):
        assert parse_budget(120) == BudgetRange(min=120, max=120, raw="120")


class TestCentralValue:
    def test_average_of_both_bounds(self):
        assert compute_central_value(BudgetRange(min=80, max=120)) == 100

    def test_single_bound(self):
        assert compute_central_value(BudgetRange(max=150)) == 150
        assert compute_central_value(BudgetRange(min=400)) == 400

    def test_no_bounds(self):
        assert compute_central_value(BudgetRange(raw="banana")) is None


class TestBudgetBand:
    @pytest.mark.parametrize(
        "central,band",
        [
            (None, BudgetBand.UNKNOWN),
            (0, BudgetBand.LOW),
            (149.99, BudgetBand.LOW),
            (150, BudgetBand.MID),
            (275, BudgetBand.MID),
            (400, BudgetBand.MID),
            (400.01, BudgetBand.HIGH),
            (5000, BudgetBand.HIGH),
        ],
    )
    def test_thresholds(self, central, band):
        assert classify_budget_band(central) == band

    def test_idea_counts_grow_with_band(self):
        assert get_idea_count(BudgetBand.LOW) < get_idea_count(BudgetBand.MID)
        assert get_idea_count(BudgetBand.MID) < get_idea_count(BudgetBand.HIGH)
        assert get_idea_count(BudgetBand.UNKNOWN) == 5
