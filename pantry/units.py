"""Quantity text to canonical (value, unit) conversion.

Weights become grams, volumes become milliliters, everything else is a
count of items.  All conversions go through the single ``_UNIT_TABLE``.
"""

from __future__ import annotations

import math
import re
from decimal import ROUND_HALF_UP, Decimal

from .categories import classify
from .models import Category, Quantity, Unit

# unit token → (canonical unit, multiplier)
_UNIT_TABLE: dict[str, tuple[Unit, float]] = {
    # weight
    "g": (Unit.GRAM, 1.0),
    "gram": (Unit.GRAM, 1.0),
    "grams": (Unit.GRAM, 1.0),
    "克": (Unit.GRAM, 1.0),
    "mg": (Unit.GRAM, 0.001),
    "毫克": (Unit.GRAM, 0.001),
    "kg": (Unit.GRAM, 1000.0),
    "kgs": (Unit.GRAM, 1000.0),
    "kilogram": (Unit.GRAM, 1000.0),
    "kilograms": (Unit.GRAM, 1000.0),
    "公斤": (Unit.GRAM, 1000.0),
    "千克": (Unit.GRAM, 1000.0),
    "斤": (Unit.GRAM, 500.0),
    "两": (Unit.GRAM, 50.0),
    "lb": (Unit.GRAM, 453.592),
    "lbs": (Unit.GRAM, 453.592),
    "pound": (Unit.GRAM, 453.592),
    "pounds": (Unit.GRAM, 453.592),
    "磅": (Unit.GRAM, 453.592),
    "oz": (Unit.GRAM, 28.3495),
    "ounce": (Unit.GRAM, 28.3495),
    "ounces": (Unit.GRAM, 28.3495),
    "盎司": (Unit.GRAM, 28.3495),
    # volume
    "ml": (Unit.MILLILITER, 1.0),
    "milliliter": (Unit.MILLILITER, 1.0),
    "milliliters": (Unit.MILLILITER, 1.0),
    "cc": (Unit.MILLILITER, 1.0),
    "毫升": (Unit.MILLILITER, 1.0),
    "l": (Unit.MILLILITER, 1000.0),
    "liter": (Unit.MILLILITER, 1000.0),
    "liters": (Unit.MILLILITER, 1000.0),
    "litre": (Unit.MILLILITER, 1000.0),
    "litres": (Unit.MILLILITER, 1000.0),
    "升": (Unit.MILLILITER, 1000.0),
    "公升": (Unit.MILLILITER, 1000.0),
    "gal": (Unit.MILLILITER, 3785.0),
    "gallon": (Unit.MILLILITER, 3785.0),
    "gallons": (Unit.MILLILITER, 3785.0),
    "加仑": (Unit.MILLILITER, 3785.0),
    "cup": (Unit.MILLILITER, 240.0),
    "cups": (Unit.MILLILITER, 240.0),
    "杯": (Unit.MILLILITER, 240.0),
    "tbsp": (Unit.MILLILITER, 15.0),
    "tablespoon": (Unit.MILLILITER, 15.0),
    "tablespoons": (Unit.MILLILITER, 15.0),
    "大勺": (Unit.MILLILITER, 15.0),
    "汤匙": (Unit.MILLILITER, 15.0),
    "tsp": (Unit.MILLILITER, 5.0),
    "teaspoon": (Unit.MILLILITER, 5.0),
    "teaspoons": (Unit.MILLILITER, 5.0),
    "小勺": (Unit.MILLILITER, 5.0),
    "茶匙": (Unit.MILLILITER, 5.0),
    "fl oz": (Unit.MILLILITER, 29.5735),
    "floz": (Unit.MILLILITER, 29.5735),
    # counts
    "dozen": (Unit.ITEM, 12.0),
    "打": (Unit.ITEM, 12.0),
}

# Containers hold a known volume only when the food is a liquid
_CONTAINER_ML: dict[str, float] = {
    "瓶": 500.0,
    "bottle": 500.0,
    "bottles": 500.0,
    "罐": 330.0,
    "听": 330.0,
    "can": 330.0,
    "cans": 330.0,
    "jar": 400.0,
    "jars": 400.0,
    "carton": 1000.0,
    "cartons": 1000.0,
}

_LIQUID_CATEGORIES = (Category.DAIRY, Category.BEVERAGES)

# Largest value an SQLite INTEGER column holds
_MAX_QUANTITY = 2**63 - 1

_CJK_DIGITS: dict[str, int] = {
    "零": 0, "一": 1, "二": 2, "两": 2, "俩": 2, "三": 3, "四": 4,
    "五": 5, "六": 6, "七": 7, "八": 8, "九": 9, "十": 10,
}

_WORD_NUMBERS: dict[str, float] = {
    "half": 0.5, "a": 1, "an": 1, "one": 1, "two": 2, "three": 3,
    "four": 4, "five": 5, "six": 6, "seven": 7, "eight": 8, "nine": 9,
    "ten": 10, "twelve": 12,
}

# Longest tokens first so "kg" wins over "g" and "毫升" over "升"
_UNIT_TOKENS = sorted({*_UNIT_TABLE, *_CONTAINER_ML}, key=len, reverse=True)

_LEADING_NOISE = re.compile(r"^[\s×xX*＊:：\-\u2013+@]+")
_ARABIC = re.compile(r"(\d+(?:\.\d+)?)\s*/\s*(\d+(?:\.\d+)?)|\d+(?:\.\d+)?")
_CJK_NUMBER = re.compile(r"[零一二两俩三四五六七八九十]+")
_WORD_NUMBER = re.compile(r"([a-z]+)\b", re.IGNORECASE)


def normalize(quantity_text: str | None, category_hint: str | Category | None = None) -> Quantity:
    """Convert free-form quantity text to a canonical quantity.

    Never raises: text with no recognizable number or unit becomes
    ``Quantity(1, Unit.ITEM)``.

    Args:
        quantity_text: e.g. "2kg", "3 L", "x2", "两斤", "half dozen"
        category_hint: The item's category (or free-text hint).  Containers
            such as 瓶 or "can" resolve to milliliters only for liquids.
    """
    text = (quantity_text or "").strip()
    if not text:
        return Quantity(1, Unit.ITEM)

    text = _LEADING_NOISE.sub("", text.replace("，", ",")).replace(",", "")
    amount, rest = _read_number(text)
    if amount is None:
        amount = 1.0

    # "半打" / "half a dozen"
    rest = re.sub(r"^\s*(?:a|an)\b", "", rest, flags=re.IGNORECASE)

    if not math.isfinite(amount):
        return Quantity(1, Unit.ITEM)

    token = _read_unit(rest)
    if token is None:
        return Quantity(_round_half_up(amount), Unit.ITEM)

    if token in _CONTAINER_ML:
        if _is_liquid(category_hint):
            return Quantity(_round_half_up(amount * _CONTAINER_ML[token]), Unit.MILLILITER)
        return Quantity(_round_half_up(amount), Unit.ITEM)

    unit, multiplier = _UNIT_TABLE[token]
    return Quantity(_round_half_up(amount * multiplier), unit)


def _read_number(text: str) -> tuple[float | None, str]:
    """Read a leading numeric token.  Returns (amount, remaining text)."""
    m = _ARABIC.match(text)
    if m:
        if m.group(1) is not None:
            denominator = float(m.group(2))
            amount = float(m.group(1)) / denominator if denominator else None
        else:
            amount = float(m.group(0))
        return amount, text[m.end():]

    if text.startswith("半"):
        return 0.5, text[1:]

    m = _CJK_NUMBER.match(text)
    if m:
        digits = m.group(0)
        # "两" alone is the number two; after another numeral it is the unit (一两 = 50 g)
        if len(digits) > 1 and digits.endswith("两"):
            return float(_cjk_to_int(digits[:-1])), text[m.end() - 1:]
        return float(_cjk_to_int(digits)), text[m.end():]

    m = _WORD_NUMBER.match(text)
    if m and m.group(1).lower() in _WORD_NUMBERS:
        return float(_WORD_NUMBERS[m.group(1).lower()]), text[m.end():]

    return None, text


def _cjk_to_int(digits: str) -> int:
    """Convert CJK numerals up to 99 (一, 十二, 二十, 三十五)."""
    if "十" not in digits:
        value = 0
        for ch in digits:
            value = value * 10 + _CJK_DIGITS[ch]
        return value
    tens, _, ones = digits.partition("十")
    return (_CJK_DIGITS.get(tens, 1) if tens else 1) * 10 + (
        _CJK_DIGITS.get(ones, 0) if ones else 0
    )


def _read_unit(rest: str) -> str | None:
    """Match a unit token at the start of ``rest`` (after whitespace)."""
    rest = rest.lstrip()
    lowered = rest.lower()
    for token in _UNIT_TOKENS:
        if not lowered.startswith(token):
            continue
        following = lowered[len(token):len(token) + 1]
        # Latin tokens need a word boundary: "2 large eggs" is not 2 liters
        if token.isascii() and following.isascii() and following.isalpha():
            continue
        return token
    return None


def _is_liquid(category_hint: str | Category | None) -> bool:
    if category_hint is None:
        return False
    if isinstance(category_hint, Category):
        return category_hint in _LIQUID_CATEGORIES
    return classify(category_hint) in _LIQUID_CATEGORIES


def _round_half_up(value: float) -> int:
    if not math.isfinite(value):
        return _MAX_QUANTITY
    rounded = Decimal(str(value)).quantize(Decimal(1), rounding=ROUND_HALF_UP)
    return min(max(int(rounded), 0), _MAX_QUANTITY)
