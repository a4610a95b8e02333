"""Tests for StructuredItemParser (mocked AI generator)."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from pantry.errors import GenerationError, QuotaExceededError
from pantry.models import ParseMethod, SourceKind
from pantry.parsing import StructuredItemParser

RECEIPT_TEXT = "牛奶 2瓶 ¥12.50\n鸡蛋 x10 15.00\n合计 27.50"

AI_REPLY = """<receipt>
<item><name>牛奶</name><quantity>2瓶</quantity><category>乳制品</category></item>
</receipt>"""


def _generator(**kwargs):
    generator = MagicMock()
    generator.generate = AsyncMock(**kwargs)
    return generator


class TestAIPath:
    @pytest.mark.asyncio
    async def test_ai_result(self):
        generator = _generator(return_value=AI_REPLY)
        parser = StructuredItemParser(generator)

        result = await parser.parse(RECEIPT_TEXT, "zh")

        assert result.method == ParseMethod.AI
        assert [i.name for i in result.items] == ["牛奶"]
        prompt, system = generator.generate.await_args.args
        assert RECEIPT_TEXT in prompt
        assert "<receipt>" in system

    @pytest.mark.asyncio
    async def test_ai_empty_receipt_is_not_a_fallback(self):
        parser = StructuredItemParser(_generator(return_value="<receipt></receipt>"))
        result = await parser.parse(RECEIPT_TEXT)
        assert result.method == ParseMethod.AI
        assert result.items == []

    @pytest.mark.asyncio
    async def test_quota_propagates(self):
        parser = StructuredItemParser(_generator(side_effect=QuotaExceededError("limit")))
        with pytest.raises(QuotaExceededError):
            await parser.parse(RECEIPT_TEXT)


class TestFallback:
    @pytest.mark.asyncio
    async def test_generation_error_falls_back(self):
        parser = StructuredItemParser(_generator(side_effect=GenerationError("503")))
        result = await parser.parse(RECEIPT_TEXT)
        assert result.method == ParseMethod.HEURISTIC
        assert [i.name for i in result.items] == ["牛奶", "鸡蛋"]

    @pytest.mark.asyncio
    async def test_unexpected_error_falls_back(self):
        parser = StructuredItemParser(_generator(side_effect=KeyError("content")))
        result = await parser.parse(RECEIPT_TEXT)
        assert result.method == ParseMethod.HEURISTIC
        assert [i.name for i in result.items] == ["牛奶", "鸡蛋"]

    @pytest.mark.asyncio
    async def test_missing_closing_marker_falls_back(self):
        parser = StructuredItemParser(
            _generator(return_value="<receipt><item><name>牛奶</name></item>")
        )
        result = await parser.parse(RECEIPT_TEXT)
        assert result.method == ParseMethod.HEURISTIC
        assert len(result.items) == 2

    @pytest.mark.asyncio
    async def test_no_generator(self):
        result = await StructuredItemParser().parse("3 apples", source=SourceKind.SPEECH)
        assert result.method == ParseMethod.HEURISTIC
        assert result.items[0].name == "apples"


class TestEmptyText:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("text", ["", "   \n "])
    async def test_no_ai_call(self, text):
        generator = _generator(return_value=AI_REPLY)
        result = await StructuredItemParser(generator).parse(text)
        assert result.items == []
        generator.generate.assert_not_awaited()
