"""Tests for night rate resolution.

Covers:
- Weekday/weekend base rate selection and day_of_week numbering.
- Discount, surcharge and fixed override arithmetic.
- Zero floor on effective_rate.
- First-match selection across overlapping adjustments.
- applies_to all / specific / specific with no ids / inactive.
- Empty range.
- Parsing the applies_to columns.
- Pre-filtering adjustments for a stay.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from budabook.domain.rates import (
    AdjustmentType,
    AppliesToAll,
    AppliesToSpecific,
    adjustments_for_stay,
    calculate_night_breakdowns,
    find_adjustment,
    parse_applies_to,
)
from helpers import (
    FRIDAY,
    MONDAY,
    NEXT_MONDAY,
    SATURDAY,
    SUNDAY,
    WEDNESDAY,
    make_adjustment,
)


class TestBaseRates:
    def test_one_entry_per_night(self, villa):
        nights = calculate_night_breakdowns(MONDAY, NEXT_MONDAY, villa, [])
        assert len(nights) == 7
        assert nights[0].date == MONDAY
        assert nights[-1].date == SUNDAY

    def test_weekday_and_weekend_rates(self, villa):
        nights = calculate_night_breakdowns(FRIDAY, NEXT_MONDAY, villa, [])
        assert [n.is_weekend for n in nights] == [False, True, True]
        assert [n.base_rate for n in nights] == [2000, 2500, 2500]
        assert [n.effective_rate for n in nights] == [2000, 2500, 2500]

    def test_day_of_week_counts_from_sunday(self, villa):
        nights = calculate_night_breakdowns(SATURDAY, date(2026, 3, 10), villa, [])
        # Saturday, Sunday, Monday
        assert [n.day_of_week for n in nights] == [6, 0, 1]

    def test_no_adjustment_fields(self, villa):
        (night,) = calculate_night_breakdowns(MONDAY, date(2026, 3, 3), villa, [])
        assert night.adjustment_name is None
        assert night.adjustment_amount == 0
        assert night.effective_rate == night.base_rate

    def test_same_day_is_empty(self, villa):
        assert calculate_night_breakdowns(MONDAY, MONDAY, villa, []) == []

    def test_reversed_range_is_empty(self, villa):
        assert calculate_night_breakdowns(WEDNESDAY, MONDAY, villa, []) == []

    def test_dst_transition_is_ordinary(self, villa):
        # 2026-03-08 is a US DST switch; dates are plain calendar dates
        nights = calculate_night_breakdowns(date(2026, 3, 7), date(2026, 3, 10), villa, [])
        assert [n.date for n in nights] == [
            date(2026, 3, 7),
            date(2026, 3, 8),
            date(2026, 3, 9),
        ]


class TestAdjustmentArithmetic:
    def test_percentage_discount(self, villa):
        adj = make_adjustment("Low season", MONDAY, WEDNESDAY, value=20)
        nights = calculate_night_breakdowns(MONDAY, WEDNESDAY, villa, [adj])
        for n in nights:
            assert n.adjustment_name == "Low season"
            assert n.adjustment_amount == Decimal(-400)
            assert n.effective_rate == Decimal(1600)

    def test_percentage_surcharge(self, villa):
        adj = make_adjustment(
            "Holy Week", SATURDAY, SATURDAY, AdjustmentType.PERCENTAGE_SURCHARGE, value=10
        )
        (night,) = calculate_night_breakdowns(SATURDAY, SUNDAY, villa, [adj])
        assert night.adjustment_amount == Decimal(250)
        assert night.effective_rate == Decimal(2750)

    def test_fractional_percentage_is_exact(self, villa):
        adj = make_adjustment("Promo", MONDAY, MONDAY, value="12.5")
        (night,) = calculate_night_breakdowns(MONDAY, date(2026, 3, 3), villa, [adj])
        assert night.effective_rate == Decimal("1750")

    @pytest.mark.parametrize("start,end", [(MONDAY, date(2026, 3, 3)), (SATURDAY, SUNDAY)])
    def test_fixed_override_replaces_rate(self, villa, start, end):
        adj = make_adjustment("Flat", start, start, AdjustmentType.FIXED_OVERRIDE, value=1800)
        (night,) = calculate_night_breakdowns(start, end, villa, [adj])
        assert night.effective_rate == Decimal(1800)
        assert night.adjustment_amount == Decimal(1800) - night.base_rate

    @pytest.mark.parametrize("value", [100, 150, 1000])
    def test_large_discount_clamps_to_zero(self, villa, value):
        adj = make_adjustment("Comp", MONDAY, MONDAY, value=value)
        (night,) = calculate_night_breakdowns(MONDAY, date(2026, 3, 3), villa, [adj])
        assert night.effective_rate == 0
        # the delta is reported as computed
        assert night.adjustment_amount == -Decimal(2000) * value / 100

    def test_negative_override_clamps_to_zero(self, villa):
        adj = make_adjustment("Bad", MONDAY, MONDAY, AdjustmentType.FIXED_OVERRIDE, value=-50)
        (night,) = calculate_night_breakdowns(MONDAY, date(2026, 3, 3), villa, [adj])
        assert night.effective_rate == 0


class TestAdjustmentSelection:
    def test_range_is_inclusive(self, villa):
        adj = make_adjustment("Midweek", date(2026, 3, 3), date(2026, 3, 4))
        nights = calculate_night_breakdowns(MONDAY, FRIDAY, villa, [adj])
        assert [n.adjustment_name for n in nights] == [None, "Midweek", "Midweek", None]

    def test_first_match_wins(self, villa):
        first = make_adjustment("First", MONDAY, FRIDAY, value=10)
        second = make_adjustment("Second", MONDAY, FRIDAY, value=50)
        (night,) = calculate_night_breakdowns(MONDAY, date(2026, 3, 3), villa, [first, second])
        assert night.adjustment_name == "First"
        assert night.effective_rate == Decimal(1800)

        (night,) = calculate_night_breakdowns(MONDAY, date(2026, 3, 3), villa, [second, first])
        assert night.adjustment_name == "Second"

    def test_inactive_is_skipped(self, villa):
        off = make_adjustment("Off", MONDAY, FRIDAY, value=50, is_active=False)
        on = make_adjustment("On", MONDAY, FRIDAY, value=10)
        assert find_adjustment(MONDAY, villa.id, [off, on]) is on

    def test_specific_matches_listed_type(self, villa, family_room):
        adj = make_adjustment(
            "Villa only", MONDAY, FRIDAY, applies_to=AppliesToSpecific(frozenset({villa.id}))
        )
        assert find_adjustment(MONDAY, villa.id, [adj]) is adj
        assert find_adjustment(MONDAY, family_room.id, [adj]) is None

    def test_specific_with_no_ids_matches_nothing(self, villa):
        adj = make_adjustment("Nobody", MONDAY, FRIDAY, applies_to=AppliesToSpecific())
        nights = calculate_night_breakdowns(MONDAY, WEDNESDAY, villa, [adj])
        assert all(n.adjustment_name is None for n in nights)

    def test_non_matching_specific_falls_through_to_later(self, villa):
        other = make_adjustment(
            "Other type", MONDAY, FRIDAY, value=50,
            applies_to=AppliesToSpecific(frozenset({"type-other"})),
        )
        general = make_adjustment("Everyone", MONDAY, FRIDAY, value=10)
        assert find_adjustment(MONDAY, villa.id, [other, general]) is general


class TestParseAppliesTo:
    def test_specific_builds_id_set(self):
        assert parse_applies_to("specific", ["t1", "t2", "t1"]) == AppliesToSpecific(
            frozenset({"t1", "t2"})
        )

    def test_specific_without_ids(self):
        assert parse_applies_to("specific", None) == AppliesToSpecific()

    def test_applies_to_all_ignores_ids(self):
        assert parse_applies_to("all", ["t1"]) == AppliesToAll()

    def test_unknown_applies_to_raises(self):
        with pytest.raises(ValueError, match="applies_to"):
            parse_applies_to("some", [])


class TestAdjustmentsForStay:
    def test_keeps_overlapping_in_order(self):
        before = make_adjustment("Before", date(2026, 2, 1), date(2026, 2, 28))
        touching = make_adjustment("Touching", date(2026, 2, 20), MONDAY)
        inside = make_adjustment("Inside", WEDNESDAY, WEDNESDAY)
        after = make_adjustment("After", date(2026, 4, 1), date(2026, 4, 30))
        inactive = make_adjustment("Inactive", MONDAY, FRIDAY, is_active=False)

        kept = adjustments_for_stay([inside, before, touching, after, inactive], MONDAY, FRIDAY)
        assert [a.name for a in kept] == ["Inside", "Touching"]

    def test_filtering_does_not_change_prices(self, villa):
        adjustments = [
            make_adjustment("Old", date(2025, 1, 1), date(2025, 12, 31), value=90),
            make_adjustment("Now", MONDAY, FRIDAY, value=20),
        ]
        assert calculate_night_breakdowns(MONDAY, FRIDAY, villa, adjustments) == (
            calculate_night_breakdowns(
                MONDAY, FRIDAY, villa, adjustments_for_stay(adjustments, MONDAY, FRIDAY)
            )
        )
