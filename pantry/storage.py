"""Storage location recommendation and shelf-life estimates."""

from __future__ import annotations

import re
import unicodedata

from .models import Category, StorageLocation

_F, _R, _P = StorageLocation.FREEZER, StorageLocation.REFRIGERATOR, StorageLocation.PANTRY

# Specific foods, checked in this order before falling back to the category
_FREEZER_FOODS: list[str] = [
    "牛肉", "猪肉", "羊肉", "牛排", "猪排", "排骨", "鸡肉", "鸭肉", "鸡腿", "鸡翅", "鸡胸肉",
    "肉馅", "肉丸", "香肠", "培根", "三文鱼", "金枪鱼", "鳕鱼", "鲈鱼", "带鱼", "虾", "蟹",
    "扇贝", "鱿鱼", "冰淇淋", "雪糕", "汤圆", "饺子", "馄饨",
    "beef", "pork", "lamb", "steak", "ribs", "chicken", "duck", "turkey", "sausage",
    "bacon", "ground meat", "salmon", "tuna", "cod", "shrimp", "prawn", "crab", "scallop",
    "squid", "ice cream", "popsicle", "dumpling",
]

_REFRIGERATOR_FOODS: list[str] = [
    "牛奶", "酸奶", "奶酪", "芝士", "黄油", "奶油", "鸡蛋", "鸭蛋", "鹌鹑蛋",
    "白菜", "菠菜", "韭菜", "芹菜", "生菜", "油菜", "胡萝卜", "茄子", "黄瓜", "西兰花",
    "青椒", "蘑菇", "香菇", "金针菇", "草莓", "蓝莓", "樱桃", "葡萄", "豆腐", "豆芽",
    "蚝油", "鱼露", "沙拉酱", "味噌", "火腿",
    "milk", "yogurt", "cheese", "butter", "cream", "egg", "cabbage", "spinach", "lettuce",
    "celery", "carrot", "cucumber", "broccoli", "mushroom", "strawberr", "blueberr",
    "cherr", "grape", "tofu", "mayonnaise", "ham",
]

_PANTRY_FOODS: list[str] = [
    "花生酱", "大米", "面粉", "面条", "挂面", "燕麦", "花生", "核桃", "杏仁", "盐", "糖", "醋", "酱油",
    "生抽", "老抽", "料酒", "香油", "食用油", "花生油", "橄榄油", "苹果", "梨", "橘子", "橙子",
    "柠檬", "香蕉", "芒果", "西瓜", "牛油果", "土豆", "洋葱", "大蒜", "饼干", "薯片", "巧克力",
    "茶叶", "咖啡",
    "peanut butter", "rice", "flour", "pasta", "noodle", "oats", "peanut", "walnut", "almond", "salt",
    "sugar", "vinegar", "soy sauce", "oil", "apple", "pear", "orange", "lemon", "banana",
    "mango", "watermelon", "avocado", "potato", "onion", "garlic", "cookie", "chips",
    "chocolate", "coffee", "tea",
]

_CATEGORY_LOCATIONS: dict[Category, StorageLocation] = {
    Category.MEAT: _F,
    Category.SEAFOOD: _F,
    Category.FROZEN: _F,
    Category.DAIRY: _R,
    Category.EGGS: _R,
    Category.VEGETABLES: _R,
    Category.FRUITS: _R,
    Category.BEVERAGES: _R,
    Category.GRAINS: _P,
    Category.CONDIMENTS: _P,
    Category.CANNED: _P,
    Category.SNACKS: _P,
    Category.OTHER: _P,
}

# Shelf life in days per location: (freezer, refrigerator, pantry)
_FOOD_SHELF_LIFE: dict[str, tuple[int, int, int]] = {
    "牛肉": (315, 4, 1), "beef": (315, 4, 1),
    "猪肉": (270, 4, 1), "pork": (270, 4, 1),
    "羊肉": (315, 4, 1), "lamb": (315, 4, 1),
    "牛排": (315, 4, 1), "steak": (315, 4, 1),
    "鸡肉": (365, 2, 1), "chicken": (365, 2, 1),
    "鸡胸肉": (270, 2, 1), "鸡腿": (270, 2, 1), "鸡翅": (270, 2, 1),
    "鸭肉": (180, 2, 1), "duck": (180, 2, 1), "turkey": (365, 2, 1),
    "香肠": (45, 7, 1), "sausage": (45, 7, 1),
    "培根": (30, 7, 1), "bacon": (30, 7, 1),
    "火腿": (45, 21, 7), "ham": (45, 21, 7),
    "三文鱼": (75, 2, 1), "salmon": (75, 2, 1),
    "金枪鱼": (210, 2, 1), "tuna": (210, 2, 1),
    "鳕鱼": (210, 2, 1), "cod": (210, 2, 1),
    "虾": (150, 2, 1), "shrimp": (150, 2, 1),
    "蟹": (90, 2, 1), "crab": (90, 2, 1),
    "牛奶": (90, 6, 0), "milk": (90, 6, 0),
    "酸奶": (45, 10, 0), "yogurt": (45, 10, 0),
    "奶酪": (180, 25, 0), "芝士": (180, 25, 0), "cheese": (180, 25, 0),
    "黄油": (225, 60, 1), "butter": (225, 60, 1),
    "花生酱": (0, 90, 180), "peanut butter": (0, 90, 180),
    "鸡蛋": (0, 28, 7), "鸭蛋": (0, 28, 7), "egg": (0, 28, 7),
    "白菜": (180, 7, 2), "cabbage": (180, 7, 2),
    "菠菜": (180, 5, 1), "spinach": (180, 5, 1),
    "生菜": (180, 5, 1), "lettuce": (180, 5, 1),
    "胡萝卜": (365, 21, 7), "carrot": (365, 21, 7),
    "土豆": (365, 30, 60), "potato": (365, 30, 60),
    "洋葱": (365, 30, 90), "onion": (365, 30, 90),
    "大蒜": (365, 30, 180), "garlic": (365, 30, 180),
    "黄瓜": (365, 7, 3), "cucumber": (365, 7, 3),
    "茄子": (365, 7, 3), "eggplant": (365, 7, 3),
    "西红柿": (180, 7, 5), "番茄": (180, 7, 5), "tomato": (180, 7, 5),
    "蘑菇": (0, 7, 0), "mushroom": (0, 7, 0),
    "草莓": (300, 3, 1), "strawberr": (300, 3, 1),
    "葡萄": (300, 7, 2), "grape": (300, 7, 2),
    "苹果": (365, 30, 14), "apple": (365, 30, 14),
    "香蕉": (0, 7, 5), "banana": (0, 7, 5),
}

_CATEGORY_SHELF_LIFE: dict[Category, tuple[int, int, int]] = {
    Category.MEAT: (270, 3, 1),
    Category.SEAFOOD: (150, 2, 1),
    Category.DAIRY: (120, 7, 0),
    Category.EGGS: (0, 28, 7),
    Category.VEGETABLES: (0, 5, 2),
    Category.FRUITS: (240, 7, 3),
    Category.GRAINS: (0, 0, 365),
    Category.BEVERAGES: (90, 7, 14),
    Category.CONDIMENTS: (0, 180, 730),
    Category.FROZEN: (180, 1, 1),
    Category.CANNED: (0, 0, 1095),
    Category.SNACKS: (0, 0, 120),
    Category.OTHER: (180, 7, 30),
}


def _pattern(food: str) -> re.Pattern[str]:
    # Latin names match at a word start: "ham" is not found in "graham"
    return re.compile(rf"(?<![a-z]){re.escape(food)}" if food.isascii() else re.escape(food))


# Longest names first so "peanut butter" is not read as "butter", "eggplant" not as "egg".
# The sort is stable, so equal lengths keep the freezer, refrigerator, pantry order.
_LOCATION_FOODS: list[tuple[str, re.Pattern[str], StorageLocation]] = sorted(
    (
        (food, _pattern(food), location)
        for foods, location in (
            (_FREEZER_FOODS, _F),
            (_REFRIGERATOR_FOODS, _R),
            (_PANTRY_FOODS, _P),
        )
        for food in foods
    ),
    key=lambda entry: len(entry[0]),
    reverse=True,
)
_FOOD_SHELF_KEYS: list[tuple[str, re.Pattern[str]]] = [
    (food, _pattern(food)) for food in sorted(_FOOD_SHELF_LIFE, key=len, reverse=True)
]


class StorageAdvisor:
    """Recommend where to keep a food and for how long.

    Specific food tables are consulted first; the category tables are the
    fallback.  ``category_locations`` overrides the category defaults.
    """

    def __init__(self, category_locations: dict[Category, StorageLocation] | None = None) -> None:
        self._category_locations = {**_CATEGORY_LOCATIONS, **(category_locations or {})}

    def recommend(self, name: str, category: Category) -> StorageLocation:
        key = _fold(name)
        for _, pattern, location in _LOCATION_FOODS:
            if pattern.search(key):
                return location
        return self._category_locations[category]

    def shelf_life_days(self, name: str, category: Category, location: StorageLocation) -> int:
        key = _fold(name)
        for food, pattern in _FOOD_SHELF_KEYS:
            if pattern.search(key):
                return _pick(_FOOD_SHELF_LIFE[food], location)
        return _pick(_CATEGORY_SHELF_LIFE[category], location)


def _pick(days: tuple[int, int, int], location: StorageLocation) -> int:
    freezer, refrigerator, pantry = days
    match location:
        case StorageLocation.FREEZER:
            return freezer
        case StorageLocation.REFRIGERATOR:
            return refrigerator
        case StorageLocation.PANTRY:
            return pantry


def _fold(name: str) -> str:
    return unicodedata.normalize("NFKC", name).lower().strip()
