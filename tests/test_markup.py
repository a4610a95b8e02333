"""Tests for the <receipt> markup contract."""

import pytest

from pantry.errors import MalformedResponseError
from pantry.models import ParseMethod, SourceKind
from pantry.parsing.markup import build_prompt, parse_markup, prompt_language


class TestParseMarkup:
    def test_parse_items(self):
        reply = """<receipt>
  <item><name>牛奶</name><quantity>1L</quantity><category>乳制品</category></item>
  <item><name>鸡蛋</name><quantity>12个</quantity><category>蛋类</category></item>
</receipt>"""
        items = parse_markup(reply)
        assert [i.name for i in items] == ["牛奶", "鸡蛋"]
        assert items[0].quantity_text == "1L"
        assert items[1].category_hint == "蛋类"
        assert all(i.parse_method == ParseMethod.AI for i in items)

    def test_parse_with_markdown_fences_and_chatter(self):
        reply = """Here you go:
```xml
<receipt><item><name>Milk</name><quantity>2 bottles</quantity></item></receipt>
```"""
        items = parse_markup(reply)
        assert len(items) == 1
        assert items[0].quantity_text == "2 bottles"
        assert items[0].category_hint == ""

    def test_empty_receipt(self):
        assert parse_markup("<receipt></receipt>") == []
        assert parse_markup("<receipt/>") == []

    def test_entities_and_cdata(self):
        reply = (
            "<receipt><item><name>Mac &amp; Cheese</name></item>"
            "<item><name><![CDATA[Salt & Pepper]]></name></item></receipt>"
        )
        assert [i.name for i in parse_markup(reply)] == ["Mac & Cheese", "Salt & Pepper"]

    def test_item_without_name_is_skipped(self):
        reply = "<receipt><item><quantity>1</quantity></item></receipt>"
        assert parse_markup(reply) == []

    @pytest.mark.parametrize(
        "reply",
        [
            "<receipt><item><name>牛奶</name></item>",
            "I could not find any items.",
            "",
        ],
    )
    def test_malformed(self, reply):
        with pytest.raises(MalformedResponseError):
            parse_markup(reply)


class TestBuildPrompt:
    def test_chinese_prompt(self):
        system, prompt = build_prompt("牛奶 2瓶", None, SourceKind.SCAN)
        assert "<receipt>" in system
        assert "收据OCR文本" in prompt
        assert "牛奶 2瓶" in prompt

    def test_english_speech_prompt(self):
        system, prompt = build_prompt("two apples", "en-US", SourceKind.SPEECH)
        assert "spoken shopping note" in prompt
        assert "Seasonings" in prompt

    def test_language(self):
        assert prompt_language("zh-CN") == "zh"
        assert prompt_language("en-US", "牛奶") == "en"
        assert prompt_language(None, "牛奶") == "zh"
        assert prompt_language(None, "milk") == "en"
