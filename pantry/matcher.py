"""Fuzzy equivalence between food names, used to group inventory records."""

from __future__ import annotations

import re
import unicodedata
from collections import Counter
from dataclasses import dataclass, field

from rapidfuzz.distance import Levenshtein

# Base food → variants that should be stocked together
DEFAULT_SYNONYMS: dict[str, list[str]] = {
    "牛奶": ["牛奶", "纯牛奶", "全脂牛奶", "脱脂牛奶", "低脂牛奶", "鲜牛奶", "鲜奶", "纯奶"],
    "鸡蛋": ["鸡蛋", "土鸡蛋", "柴鸡蛋", "草鸡蛋", "笨鸡蛋", "红皮鸡蛋", "白皮鸡蛋"],
    "鸡肉": ["鸡肉", "鸡胸肉", "鸡腿", "鸡翅", "鸡爪", "整鸡"],
    "牛肉": ["牛肉", "牛排", "牛腩", "牛腱", "牛里脊", "牛尾"],
    "猪肉": ["猪肉", "猪排", "五花肉", "里脊肉", "猪蹄"],
    "羊肉": ["羊肉", "羊腿", "羊排"],
    "西红柿": ["西红柿", "番茄", "小番茄", "樱桃番茄", "圣女果"],
    "土豆": ["土豆", "马铃薯", "洋芋"],
    "白菜": ["白菜", "大白菜", "小白菜", "娃娃菜"],
    "大蒜": ["大蒜", "蒜", "蒜头"],
    "生姜": ["生姜", "姜", "老姜", "嫩姜"],
    "葱": ["葱", "大葱", "小葱", "香葱"],
    "酱油": ["酱油", "生抽", "老抽"],
    "食用油": ["食用油", "花生油", "菜籽油", "大豆油", "玉米油", "橄榄油"],
    "大米": ["大米", "东北大米", "泰国香米"],
    "面条": ["面条", "拉面", "挂面"],
    "面包": ["面包", "吐司"],
    "奶酪": ["奶酪", "芝士"],
    "酸奶": ["酸奶", "老酸奶"],
    "虾": ["虾", "大虾", "虾仁", "基围虾"],
    "三文鱼": ["三文鱼", "鲑鱼"],
    "橘子": ["橘子", "桔子", "砂糖橘", "沃柑", "蜜橘"],
    "苹果": ["苹果", "红富士", "富士苹果", "青苹果", "蛇果"],
    "milk": ["milk", "whole milk", "skim milk", "low fat milk", "fresh milk", "2% milk"],
    "egg": ["egg", "eggs", "free range eggs", "brown eggs", "white eggs"],
    "chicken": ["chicken", "chicken breast", "chicken thigh", "chicken wings", "chicken drumstick"],
    "beef": ["beef", "ground beef", "beef steak", "beef brisket", "beef ribs"],
    "pork": ["pork", "pork chop", "pork tenderloin", "ground pork", "pork ribs"],
    "tomato": ["tomato", "tomatoes", "cherry tomato", "cherry tomatoes"],
    "potato": ["potato", "potatoes", "russet potato", "red potato"],
    "onion": ["onion", "onions", "white onion", "red onion", "yellow onion"],
    "carrot": ["carrot", "carrots", "baby carrot", "baby carrots"],
    "cheese": ["cheese", "cheddar", "mozzarella"],
    "bread": ["bread", "toast", "sliced bread"],
    "butter": ["butter", "salted butter", "unsalted butter", "黄油"],
    "yogurt": ["yogurt", "yoghurt", "greek yogurt", "plain yogurt"],
    "apple": ["apple", "apples", "gala apple", "fuji apple"],
    "banana": ["banana", "bananas"],
    "rice": ["rice", "jasmine rice", "basmati rice"],
    "lettuce": ["lettuce", "romaine lettuce", "iceberg lettuce"],
}

# Descriptive words that do not change what the food is
DEFAULT_MODIFIERS: list[str] = [
    "fresh", "organic", "imported", "local", "large", "small", "big", "medium",
    "whole", "ripe", "premium", "value", "family size", "pack", "bag", "box",
    "bottle", "can", "piece", "pieces",
    "新鲜", "有机", "进口", "国产", "散装", "精品", "特级", "优质", "精选", "冷鲜",
    "袋装", "盒装", "瓶装", "家庭装",
]

# Single-character CJK prefixes, stripped only when two or more characters remain
_CJK_PREFIXES = ("大", "小", "鲜", "嫩", "红", "绿", "白", "黄")

_PUNCT = re.compile(r"[^\w\s%]+")
_SPACES = re.compile(r"\s+")
_HAN = re.compile(r"[぀-ヿ㐀-鿿]")


@dataclass
class MatchRules:
    """Tunable tables for :class:`IngredientMatcher`."""

    synonyms: dict[str, list[str]] = field(default_factory=lambda: dict(DEFAULT_SYNONYMS))
    modifiers: list[str] = field(default_factory=lambda: list(DEFAULT_MODIFIERS))
    similarity_threshold: float = 0.8
    cjk_charset_match: bool = True


class IngredientMatcher:
    """Decide whether two food names refer to the same stockable food.

    The relation is symmetric but not transitive: "A ~ B" and "B ~ C" does
    not imply "A ~ C".
    """

    def __init__(self, rules: MatchRules | None = None) -> None:
        self._rules = rules or MatchRules()
        self._family: dict[str, str] = {}
        for base, variants in self._rules.synonyms.items():
            for variant in (base, *variants):
                self._family.setdefault(_clean(variant), _clean(base))
        self._modifier_re = _modifier_pattern(self._rules.modifiers)

    def base_name(self, name: str) -> str:
        """Return the canonical family name for ``name``.

        Falls back to the modifier-stripped name when no family matches.
        """
        cleaned = _clean(name)
        if cleaned in self._family:
            return self._family[cleaned]
        stripped = self._strip_modifiers(cleaned)
        return self._family.get(stripped, stripped)

    def display_name(self, names: list[str]) -> str:
        """Pick the most common base name among ``names``."""
        if not names:
            return ""
        counts = Counter(self.base_name(n) for n in names)
        return counts.most_common(1)[0][0]

    def should_group(self, a: str, b: str) -> bool:
        base_a, base_b = self.base_name(a), self.base_name(b)
        if not base_a or not base_b:
            return False
        if base_a == base_b:
            return True

        if _contains(base_a, base_b) or _contains(base_b, base_a):
            return True

        if self._rules.cjk_charset_match and _charset_contains(base_a, base_b):
            return True

        similarity = Levenshtein.normalized_similarity(base_a, base_b)
        return similarity >= self._rules.similarity_threshold

    def _strip_modifiers(self, cleaned: str) -> str:
        stripped = _SPACES.sub(" ", self._modifier_re.sub(" ", cleaned)).strip()
        if _HAN.search(stripped):
            stripped = stripped.replace(" ", "")
            while len(stripped) > 2 and stripped.startswith(_CJK_PREFIXES):
                stripped = stripped[1:]
        return stripped or cleaned


def _clean(name: str) -> str:
    """Lowercase, fold width, drop punctuation and collapse whitespace."""
    text = unicodedata.normalize("NFKC", name).lower()
    text = _SPACES.sub(" ", _PUNCT.sub(" ", text)).strip()
    if _HAN.search(text):
        text = text.replace(" ", "")
    return text


def _modifier_pattern(modifiers: list[str]) -> re.Pattern[str]:
    parts = []
    for word in sorted({_clean(m) for m in modifiers if m.strip()}, key=len, reverse=True):
        if word.isascii():
            parts.append(rf"\b{re.escape(word)}\b")
        else:
            parts.append(re.escape(word))
    return re.compile("|".join(parts) or r"(?!)")


def _contains(longer: str, shorter: str) -> bool:
    """Containment on word boundaries for Latin text, on characters for CJK."""
    if len(shorter) >= len(longer):
        return False
    if _HAN.search(shorter):
        return len(shorter) >= 2 and shorter in longer
    return re.search(rf"\b{re.escape(shorter)}\b", longer) is not None


def _charset_contains(a: str, b: str) -> bool:
    """CJK names whose characters are a subset of the other's (鸡肉 / 鸡胸肉)."""
    if not (_HAN.search(a) and _HAN.search(b)):
        return False
    sa, sb = set(a), set(b)
    if min(len(sa), len(sb)) < 2:
        return False
    return sa <= sb or sb <= sa
