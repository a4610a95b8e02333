"""Prompt construction and reply parsing for the <receipt> markup contract.

The AI is asked to answer with exactly one ``<receipt>`` block holding zero
or more ``<item>`` blocks::

    <receipt>
      <item>
        <name>鸡胸肉</name>
        <quantity>500g</quantity>
        <category>肉类</category>
      </item>
    </receipt>

Replies are read with regular expressions rather than an XML parser so that
stray text around the block, unescaped ampersands and missing optional tags
do not fail the whole reply.
"""

from __future__ import annotations

import html
import re

from ..errors import MalformedResponseError
from ..models import ParsedItem, ParseMethod, SourceKind

_SYSTEM_ZH = (
    "你是一个收据与购物清单解析助手。只输出一个完整的XML文档，"
    "以<receipt>开头，以</receipt>结尾，不要输出任何解释或其他字符。"
)

_SYSTEM_EN = (
    "You extract grocery items from receipts and shopping notes. Reply with a "
    "single XML document that starts with <receipt> and ends with </receipt>. "
    "Never add explanations or any text outside the XML."
)

_PROMPT_ZH = """\
请从下面的{source}中找出所有食品和饮品，忽略价格、合计、税、店铺信息、支付信息以及购物袋等非食品。

规则:
- 每个食品放在一个 <item> 中，包含 <name>、<quantity>、<category>。
- name: 简洁的标准中文名称（例如 "鸡胸肉"，而不是 "有机散养鸡胸肉 1磅装"）。
- quantity: 能识别时填写数量和单位（例如 "500g"、"2瓶"），否则留空 <quantity></quantity>。
- category: 必须是以下之一: 肉类|海鲜|蔬菜|水果|蛋类|乳制品|谷物|饮料|调料|冷冻|罐头|零食|其他
- 没有任何食品时输出 <receipt></receipt>。

<TEXT>
{text}
</TEXT>
"""

_PROMPT_EN = """\
Find every food and drink item in the {source} below. Ignore prices, totals, \
taxes, store details, payment lines and non-food items such as bags.

Rules:
- Put each item in one <item> with <name>, <quantity> and <category>.
- name: a short standard English name (e.g. "Chicken Breast", not "Organic Chicken Breast 1lb").
- quantity: amount and unit when present (e.g. "500g", "2 bottles"), otherwise <quantity></quantity>.
- category: one of Meat|Seafood|Vegetables|Fruits|Eggs|Dairy|Grains|Beverages|Seasonings|Frozen|Canned|Snacks|Other
- If there are no items, output <receipt></receipt>.

<TEXT>
{text}
</TEXT>
"""

_SOURCE_NAMES = {
    ("zh", SourceKind.SCAN): "收据OCR文本",
    ("zh", SourceKind.SPEECH): "语音转写文本",
    ("en", SourceKind.SCAN): "receipt OCR text",
    ("en", SourceKind.SPEECH): "spoken shopping note",
}

_RECEIPT_RE = re.compile(r"<receipt\s*>(.*?)</receipt\s*>", re.DOTALL | re.IGNORECASE)
_EMPTY_RECEIPT_RE = re.compile(r"<receipt\s*/>", re.IGNORECASE)
_ITEM_RE = re.compile(r"<item\s*>(.*?)</item\s*>", re.DOTALL | re.IGNORECASE)
_FENCE_RE = re.compile(r"```[a-zA-Z]*")


def build_prompt(text: str, locale: str | None, source: SourceKind) -> tuple[str, str]:
    """Return ``(system, prompt)`` in the language of ``locale``."""
    lang = "zh" if prompt_language(locale, text) == "zh" else "en"
    template = _PROMPT_ZH if lang == "zh" else _PROMPT_EN
    system = _SYSTEM_ZH if lang == "zh" else _SYSTEM_EN
    return system, template.format(source=_SOURCE_NAMES[(lang, source)], text=text.strip())


def prompt_language(locale: str | None, text: str = "") -> str:
    """"zh" for Chinese locales, "en" for other locales.

    Without a locale, Chinese is chosen when the text contains Han characters.
    """
    if locale:
        return "zh" if locale.lower().startswith("zh") else "en"
    return "zh" if re.search(r"[一-鿿]", text) else "en"


def parse_markup(reply: str) -> list[ParsedItem]:
    """Extract items from an AI reply.

    Raises:
        MalformedResponseError: The reply has no complete <receipt> block.
    """
    cleaned = _FENCE_RE.sub("", reply or "").strip()
    if _EMPTY_RECEIPT_RE.search(cleaned):
        return []

    m = _RECEIPT_RE.search(cleaned)
    if m is None:
        raise MalformedResponseError(
            f"no <receipt>...</receipt> block in reply: {cleaned[:200]!r}"
        )

    items: list[ParsedItem] = []
    for block in _ITEM_RE.findall(m.group(1)):
        name = _tag(block, "name")
        if not name:
            continue
        items.append(
            ParsedItem(
                name=name,
                quantity_text=_tag(block, "quantity"),
                category_hint=_tag(block, "category"),
                parse_method=ParseMethod.AI,
            )
        )
    return items


def _tag(block: str, tag: str) -> str:
    m = re.search(rf"<{tag}\s*>(.*?)</{tag}\s*>", block, re.DOTALL | re.IGNORECASE)
    if m is None:
        return ""
    value = m.group(1).strip()
    if value.startswith("<![CDATA[") and value.endswith("]]>"):
        value = value[9:-3].strip()
    return html.unescape(value)
