"""Keyword-based food category classification."""

from __future__ import annotations

import re
import unicodedata

from .models import Category

# Ordered (category, keywords) rules.  The first rule with a keyword found in
# the lowercased "name hint" text wins, so compound names that contain a
# keyword of another category are listed before the generic rules.
# Latin keywords match at the start of a word ("egg" matches "eggs" but
# "cola" does not match "chocolate"); CJK keywords match anywhere.
_CATEGORY_RULES: tuple[tuple[Category, tuple[str, ...]], ...] = (
    (Category.VEGETABLES, (
        "eggplant", "aubergine", "butternut", "茄子", "油菜", "牛蒡", "鸡毛菜",
        "鸡腿菇", "なす",
    )),
    (Category.FRUITS, ("牛油果", "avocado", "奶油果", "鸡蛋果")),
    (Category.BEVERAGES, ("juice", "smoothie", "milk tea", "果汁", "奶茶", "果茶", "ジュース")),
    (Category.CONDIMENTS, (
        "peanut butter", "soy sauce", "fish sauce", "oyster sauce", "stock cube",
        "bouillon", "jam", "鸡精", "鸡粉", "蚝油", "鱼露", "酱油", "料酒", "果酱",
        "醤油", "めんつゆ",
    )),
    (Category.SNACKS, ("蛋糕", "蛋挞", "糖果", "奶糖", "瓜子", "cake", "ケーキ")),
    (Category.FROZEN, (
        "frozen", "ice cream", "popsicle", "冷冻", "速冻", "冰淇淋", "冰激凌",
        "雪糕", "冻品", "水饺", "汤圆", "冷凍", "アイス",
    )),
    (Category.CANNED, ("canned", "tinned", "罐头", "缶詰")),
    (Category.EGGS, ("egg", "鸡蛋", "鸭蛋", "鹌鹑蛋", "皮蛋", "咸蛋", "蛋", "卵", "たまご")),
    (Category.DAIRY, (
        "dairy", "milk", "cheese", "yogurt", "yoghurt", "butter", "cream",
        "乳制品", "牛奶", "奶", "乳", "酸奶", "芝士", "奶酪", "黄油", "奶油",
        "牛乳", "チーズ", "ヨーグルト", "バター",
    )),
    (Category.SEAFOOD, (
        "seafood", "fish", "salmon", "tuna", "cod", "shrimp", "prawn", "crab",
        "lobster", "oyster", "clam", "mussel", "squid", "scallop",
        "海鲜", "水产", "鱼", "虾", "蟹", "贝", "蛤", "蚝", "鱿鱼", "海带", "紫菜",
        "魚", "鮭", "サーモン", "えび", "海老", "いか", "たこ",
    )),
    (Category.MEAT, (
        "meat", "beef", "pork", "chicken", "lamb", "mutton", "turkey", "duck",
        "goat", "bacon", "ham", "sausage", "steak", "mince",
        "肉类", "肉", "牛", "猪", "鸡", "鸭", "羊", "火腿", "香肠", "培根", "排骨",
        "鶏", "豚", "ハム", "ベーコン", "ソーセージ",
    )),
    (Category.VEGETABLES, (
        "vegetable", "veggie", "tomato", "potato", "carrot", "onion", "garlic",
        "ginger", "cabbage", "lettuce", "spinach", "broccoli", "cucumber",
        "pepper", "celery", "mushroom", "corn", "bean sprout", "pumpkin", "zucchini",
        "蔬菜", "菜", "番茄", "西红柿", "土豆", "马铃薯", "胡萝卜", "萝卜", "洋葱",
        "葱", "蒜", "姜", "白菜", "生菜", "菠菜", "西兰花", "黄瓜", "辣椒", "青椒",
        "芹菜", "蘑菇", "菇", "玉米", "豆芽", "南瓜", "冬瓜", "豆腐",
        "野菜", "トマト", "キャベツ", "にんじん", "玉ねぎ", "じゃがいも",
    )),
    (Category.FRUITS, (
        "fruit", "apple", "banana", "orange", "grape", "strawberr", "blueberr",
        "lemon", "lime", "mango", "peach", "pear", "watermelon", "melon", "kiwi",
        "pineapple", "cherr",
        "水果", "果", "苹果", "香蕉", "橙", "橘", "葡萄", "草莓", "蓝莓", "柠檬",
        "芒果", "桃", "梨", "西瓜", "瓜", "猕猴桃", "菠萝", "樱桃", "荔枝", "龙眼",
        "りんご", "バナナ", "みかん", "いちご",
    )),
    (Category.GRAINS, (
        "grain", "rice", "bread", "flour", "noodle", "pasta", "spaghetti", "oat",
        "cereal", "bagel", "tortilla",
        "谷物", "米", "面", "麵", "粉", "面包", "馒头", "包子", "饺子皮", "燕麦", "麦片",
        "穀物", "パン", "うどん", "そば",
    )),
    (Category.BEVERAGES, (
        "beverage", "drink", "juice", "water", "soda", "cola", "coffee", "tea",
        "beer", "wine",
        "饮料", "饮品", "果汁", "水", "汽水", "可乐", "咖啡", "茶", "啤酒", "酒",
        "飲料", "ジュース", "お茶",
    )),
    (Category.CONDIMENTS, (
        "condiment", "seasoning", "sauce", "salt", "sugar", "vinegar", "oil",
        "ketchup", "mayonnaise", "mustard", "spice", "honey",
        "调料", "调味", "酱", "盐", "糖", "醋", "油", "味精", "胡椒", "花椒", "八角",
        "調味料", "塩", "砂糖", "味噌", "マヨネーズ",
    )),
    (Category.SNACKS, (
        "snack", "chip", "crisp", "cookie", "biscuit", "cracker", "candy",
        "chocolate", "popcorn", "nut",
        "零食", "薯片", "饼干", "糖果", "巧克力", "坚果", "瓜子", "爆米花",
        "お菓子", "スナック", "チョコ",
    )),
)


def _compile(keywords: tuple[str, ...]) -> re.Pattern[str]:
    parts = [
        rf"(?<![a-z]){re.escape(kw)}" if kw.isascii() else re.escape(kw)
        for kw in keywords
    ]
    return re.compile("|".join(parts))


_COMPILED_RULES = tuple((category, _compile(kws)) for category, kws in _CATEGORY_RULES)


def classify(name: str, category_hint: str | None = None) -> Category:
    """Map a free-text item name (and optional hint) to a category.

    Total: anything unmatched is ``Category.OTHER``.
    """
    text = _fold(f"{name} {category_hint or ''}")
    for category, pattern in _COMPILED_RULES:
        if pattern.search(text):
            return category
    return Category.OTHER


def _fold(text: str) -> str:
    return unicodedata.normalize("NFKC", text).lower()
