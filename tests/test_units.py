"""Tests for quantity normalization."""

import pytest

from pantry.models import Category, Quantity, Unit
from pantry.units import normalize


class TestWeightsAndVolumes:
    def test_kilograms_with_trailing_name(self):
        assert normalize("2kg 牛肉") == Quantity(2000, Unit.GRAM)

    def test_liters_with_space(self):
        assert normalize("3 L 牛奶") == Quantity(3000, Unit.MILLILITER)

    @pytest.mark.parametrize(
        "text, expected",
        [
            ("500g", Quantity(500, Unit.GRAM)),
            ("0.5kg", Quantity(500, Unit.GRAM)),
            ("1.5 lb", Quantity(680, Unit.GRAM)),
            ("500毫升", Quantity(500, Unit.MILLILITER)),
            ("1/2 cup", Quantity(120, Unit.MILLILITER)),
            ("1 gallon", Quantity(3785, Unit.MILLILITER)),
            ("1,000g", Quantity(1000, Unit.GRAM)),
        ],
    )
    def test_conversions(self, text, expected):
        assert normalize(text) == expected

    def test_chinese_market_units(self):
        assert normalize("两斤") == Quantity(1000, Unit.GRAM)
        assert normalize("一两") == Quantity(50, Unit.GRAM)
        assert normalize("半斤") == Quantity(250, Unit.GRAM)


class TestCounts:
    def test_multiplier_prefix(self):
        assert normalize("x2") == Quantity(2, Unit.ITEM)

    def test_cjk_numerals(self):
        assert normalize("十二个") == Quantity(12, Unit.ITEM)
        assert normalize("三个") == Quantity(3, Unit.ITEM)

    def test_dozen(self):
        assert normalize("half dozen") == Quantity(6, Unit.ITEM)
        assert normalize("半打") == Quantity(6, Unit.ITEM)
        assert normalize("a dozen") == Quantity(12, Unit.ITEM)

    def test_adjective_is_not_a_unit(self):
        assert normalize("2 large eggs") == Quantity(2, Unit.ITEM)

    def test_rounds_half_up(self):
        assert normalize("2.5") == Quantity(3, Unit.ITEM)
        assert normalize("0.4") == Quantity(0, Unit.ITEM)


class TestContainers:
    def test_bottle_of_liquid_is_volume(self):
        assert normalize("2 bottles", Category.DAIRY) == Quantity(1000, Unit.MILLILITER)
        assert normalize("2瓶", "牛奶") == Quantity(1000, Unit.MILLILITER)

    def test_can_of_solid_is_count(self):
        assert normalize("3 cans", Category.CANNED) == Quantity(3, Unit.ITEM)

    def test_no_hint_is_count(self):
        assert normalize("2瓶") == Quantity(2, Unit.ITEM)


class TestFallback:
    @pytest.mark.parametrize("text", ["", None, "   ", "garbage", "some"])
    def test_unrecognized_is_one_item(self, text):
        assert normalize(text) == Quantity(1, Unit.ITEM)

    def test_never_negative(self):
        assert normalize("-3").value >= 0

    def test_overflowing_number_is_one_item(self):
        assert normalize("9" * 310 + "kg") == Quantity(1, Unit.ITEM)

    def test_huge_amount_is_clamped(self):
        quantity = normalize("1" + "0" * 305 + " kg")
        assert quantity == Quantity(2**63 - 1, Unit.GRAM)
