"""Offline line-based item extraction, used when AI parsing is unavailable."""

from __future__ import annotations

import re
import unicodedata

from ..categories import classify
from ..models import Category, ParsedItem, ParseMethod, SourceKind

# Lines containing any of these are receipt bookkeeping, not items
_NOISE_KEYWORDS: list[str] = [
    "小计", "合计", "总计", "找零", "应收", "实收", "优惠", "折扣", "税", "发票", "收据",
    "谢谢", "欢迎", "店", "地址", "电话", "收银", "时间", "日期", "单号", "流水", "会员",
    "积分", "支付", "微信", "支付宝", "现金", "银行卡", "余额", "件数", "数量",
    "subtotal", "total", "tax", "taxes", "discount", "savings", "change", "receipt",
    "thank", "thanks", "welcome", "store", "address", "tel", "phone", "cashier",
    "time", "date", "member", "points", "balance", "cash", "card", "visa",
    "mastercard", "amex", "payment", "paid", "tender", "approved", "auth", "ref",
    "items sold", "www", "http",
]

# Non-food purchases
_EXCLUDED_ITEMS: list[str] = [
    "袋子", "购物袋", "塑料袋", "垃圾袋", "纸巾", "卫生纸", "洗衣", "洗洁精", "洗发",
    "沐浴", "牙膏", "牙刷", "电池",
    "bag", "bags", "detergent", "shampoo", "conditioner", "tissue", "tissues",
    "toilet paper", "paper towel", "paper towels", "toothpaste", "soap", "battery",
    "batteries",
]

_FILLER_PREFIXES = re.compile(
    r"^(?:我今天买了|今天买了|我刚买了|我买了|买了|还买了|添加|加入|再加)\s*"
    r"|^(?:i just bought|i bought|bought|i got|we got|got|please add|add)\b\s*",
    re.IGNORECASE,
)

_CJK_NUM = "一二两俩三四五六七八九十半"
_CJK_UNITS = "公斤|千克|毫升|大勺|小勺|个|只|条|根|袋|包|盒|瓶|罐|听|斤|两|克|升|打|杯|块|片|颗|把|束|箱"
_LATIN_UNITS = (
    r"kgs?|g|grams?|mg|lbs?|pounds?|oz|ounces?|fl\s?oz|ml|l|liters?|litres?|gal|gallons?|"
    r"cups?|tbsp|tsp|dozen|pcs|pieces?|packs?|packets?|bags?|boxe?s?|bottles?|cans?|jars?|cartons?|ct"
)
_WORD_NUMS = r"a|an|half(?:\s+a)?|one|two|three|four|five|six|seven|eight|nine|ten|twelve"

_QTY_RE = re.compile(
    rf"(?:(?<![a-z])[x×*＊]\s*\d+(?:\.\d+)?(?![\d.])"
    rf"|\d+\s*@"
    rf"|\d+(?:\.\d+)?(?:/\d+)?\s*(?:{_CJK_UNITS})"
    rf"|\d+(?:\.\d+)?(?:/\d+)?\s*(?:{_LATIN_UNITS})(?![a-z])"
    rf"|[{_CJK_NUM}]+\s*(?:{_CJK_UNITS})"
    rf"|(?<![a-z])(?:{_WORD_NUMS})\s+(?:{_LATIN_UNITS})(?![a-z]))",
    re.IGNORECASE,
)
_LEADING_COUNT_RE = re.compile(rf"^(?:\d+(?:\.\d+)?|{_WORD_NUMS})\s+(?=\S)", re.IGNORECASE)

_PRICE_RE = re.compile(r"[¥￥$€£]\s*\d+(?:[.,]\d{1,2})?|(?<![\d.])\d+[.,]\d{2}(?![\d.])")
_BARE_NUMBER_RE = re.compile(r"(?<![\w.])\d+(?![\w.%])")
_DATE_RE = re.compile(
    r"\d{4}[-/.年]\d{1,2}[-/.月]\d{1,2}|\b\d{1,2}/\d{1,2}/\d{2,4}\b|\b\d{1,2}:\d{2}\b"
)
_PHONE_RE = re.compile(r"\d{3,4}[- ]\d{3,4}(?:[- ]\d{3,4})?")
_SKU_RE = re.compile(r"(?:#\s*)?\b\d{5,}\b")
_SPEECH_SPLIT_RE = re.compile(
    r"[，,、;；。!！?？\n]+|\.(?!\d)|\s+and\s+|还有|以及|和(?=[\d" + _CJK_NUM + r"])",
    re.IGNORECASE,
)


def _keyword_pattern(words: list[str]) -> re.Pattern[str]:
    parts = [
        rf"(?<![a-z]){re.escape(w)}(?![a-z])" if w.isascii() else re.escape(w)
        for w in sorted(words, key=len, reverse=True)
    ]
    return re.compile("|".join(parts), re.IGNORECASE)


_NOISE_RE = _keyword_pattern(_NOISE_KEYWORDS)
_EXCLUDED_RE = _keyword_pattern(_EXCLUDED_ITEMS)


class HeuristicParser:
    """Split raw text into items without any network access.

    Scanned text is read line by line; a line is kept only when it carries a
    price, a quantity with a unit, or a recognizable food name, so store
    headers and footers drop out.  Speech is split into phrases on commas and
    conjunctions and every phrase with a name is kept.
    """

    def parse(self, text: str, source: SourceKind = SourceKind.SCAN) -> list[ParsedItem]:
        match source:
            case SourceKind.SCAN:
                segments = text.splitlines()
                require_evidence = True
            case SourceKind.SPEECH:
                segments = _SPEECH_SPLIT_RE.split(text)
                require_evidence = False

        items: list[ParsedItem] = []
        for segment in segments:
            item = self._parse_segment(segment, source, require_evidence)
            if item is not None:
                items.append(item)
        return items

    def _parse_segment(
        self, segment: str, source: SourceKind, require_evidence: bool
    ) -> ParsedItem | None:
        line = unicodedata.normalize("NFKC", segment).strip()
        if source is SourceKind.SPEECH:
            line = _FILLER_PREFIXES.sub("", line).strip()
        if is_noise_line(line):
            return None

        line, had_price = _strip_prices(line, source)

        quantity = ""
        m = _QTY_RE.search(line)
        if m:
            quantity = m.group(0).strip()
            line = line[: m.start()] + " " + line[m.end():]
        elif source is SourceKind.SPEECH:
            m = _LEADING_COUNT_RE.match(line)
            if m:
                quantity = m.group(0).strip()
                line = line[m.end():]

        name = _clean_name(line)
        if len(name) < 2 or _EXCLUDED_RE.search(name):
            return None

        category = classify(name)
        if require_evidence and not (had_price or quantity or category is not Category.OTHER):
            return None

        return ParsedItem(
            name=name,
            quantity_text=quantity,
            category_hint=category.value,
            parse_method=ParseMethod.HEURISTIC,
        )


def is_noise_line(line: str) -> bool:
    """True for totals, taxes, store metadata, payment lines and number-only lines."""
    if len(line) < 2:
        return True
    if all(
        ch.isspace() or ch.isdigit() or unicodedata.category(ch).startswith(("P", "S"))
        for ch in line
    ):
        return True
    if _NOISE_RE.search(line):
        return True
    return bool(_DATE_RE.search(line) or _PHONE_RE.search(line))


def _strip_prices(line: str, source: SourceKind) -> tuple[str, bool]:
    """Remove price columns.  Returns the remaining text and whether a price was seen."""
    stripped, count = _PRICE_RE.subn(" ", line)
    had_price = count > 0
    if source is SourceKind.SCAN:
        # "牛奶 2瓶 12": a bare integer closing a scanned line is the price column
        bare = list(_BARE_NUMBER_RE.finditer(stripped))
        if bare and stripped[bare[-1].end():].strip() == "":
            stripped = stripped[: bare[-1].start()]
            had_price = True
    return stripped, had_price


def _clean_name(text: str) -> str:
    text = _SKU_RE.sub(" ", text)
    text = re.sub(r"^\s*of\s+", "", text, flags=re.IGNORECASE)
    text = re.sub(r"\s+", " ", text).strip(" \t-\u2013\u2014:：*#@,，.。")
    return text.strip()
