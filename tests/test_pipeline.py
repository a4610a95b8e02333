"""Tests for BatchOrchestrator."""

import asyncio
from datetime import date
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

from pantry.db import InventoryDB, ShoppingListDB
from pantry.errors import GenerationError, PersistenceError, QuotaExceededError
from pantry.extract import PassthroughExtractor, TextExtractor
from pantry.llm.claude import ClaudeGenerator
from pantry.merge import InventoryMergeEngine
from pantry.models import (
    BatchStatus,
    Category,
    ParsedItem,
    RawInput,
    SummaryTier,
    Unit,
)
from pantry.parsing import StructuredItemParser
from pantry.pipeline import BatchOrchestrator, normalize_item

TODAY = date(2025, 1, 10)
RECEIPT = "牛奶 2瓶 ¥12.50\n鸡蛋 x10 15.00\n合计 27.50"
AI_REPLY = "<receipt><item><name>牛奶</name><quantity>1L</quantity></item></receipt>"


@pytest.fixture
def inventory(tmp_path):
    inventory = InventoryDB(tmp_path / "test.db")
    yield inventory
    inventory.close()


def _generator(**kwargs):
    generator = MagicMock()
    generator.generate = AsyncMock(**kwargs)
    return generator


def _orchestrator(inventory, generator=None, extractor=None, shopping=None):
    return BatchOrchestrator(
        extractor=extractor or PassthroughExtractor(),
        parser=StructuredItemParser(generator),
        merge_engine=InventoryMergeEngine(inventory),
        shopping=shopping,
        today=lambda: TODAY,
    )


class _BlockingExtractor(TextExtractor):
    """Hangs on the second input until cancelled."""

    def __init__(self):
        self.calls = 0
        self.blocked = asyncio.Event()

    async def extract(self, raw):
        self.calls += 1
        if self.calls == 2:
            self.blocked.set()
            await asyncio.Event().wait()
        return raw.text


def test_normalize_item():
    item = normalize_item(ParsedItem(name="Milk", quantity_text="2 bottles", category_hint="Dairy"))
    assert (item.quantity, item.unit, item.category) == (1000, Unit.MILLILITER, Category.DAIRY)


class TestRun:
    @pytest.mark.asyncio
    async def test_heuristic_batch(self, inventory):
        result = await _orchestrator(inventory).run([RawInput(text=RECEIPT)])

        assert result.success_count == 1
        assert result.heuristic_count == 1
        assert [(i.name, i.quantity, i.unit) for i in result.items] == [
            ("牛奶", 1000, Unit.MILLILITER),
            ("鸡蛋", 10, Unit.ITEM),
        ]
        assert all(r.purchase_date == TODAY for r in result.records)
        assert result.summary().tier == SummaryTier.FULL_SUCCESS

    @pytest.mark.asyncio
    async def test_quota_stops_the_batch(self, inventory):
        generator = _generator(side_effect=[AI_REPLY, QuotaExceededError("limit"), AI_REPLY])
        inputs = [RawInput(text=RECEIPT, label=f"receipt {n}") for n in range(3)]

        result = await _orchestrator(inventory, generator).run(inputs)

        assert result.success_count == 1
        assert result.failure_count == 0
        assert result.status == BatchStatus.STOPPED_BY_QUOTA
        assert (result.attempted_inputs, result.total_inputs) == (2, 3)
        assert generator.generate.await_count == 2
        assert len(inventory.get_active_records()) == 1
        summary = result.summary()
        assert summary.stopped_by_quota
        assert "Stopped early" in summary.message

    @pytest.mark.asyncio
    async def test_extraction_failure_continues(self, inventory):
        inputs = [RawInput(media_path=Path("receipt.jpg")), RawInput(text=RECEIPT)]
        result = await _orchestrator(inventory).run(inputs)

        assert (result.failure_count, result.success_count) == (1, 1)
        assert result.summary().tier == SummaryTier.PARTIAL

    @pytest.mark.asyncio
    async def test_all_failed(self, inventory):
        inputs = [RawInput(media_path=Path("a.jpg")), RawInput(media_path=Path("b.jpg"))]
        result = await _orchestrator(inventory).run(inputs)
        assert result.summary().tier == SummaryTier.ALL_FAILED

    @pytest.mark.asyncio
    async def test_no_items(self, inventory):
        header_only = "沃尔玛超市\n地址: 北京市朝阳区\n谢谢惠顾"
        result = await _orchestrator(inventory).run([RawInput(text=header_only)])
        assert result.success_count == 1
        assert result.summary().tier == SummaryTier.NO_ITEMS

    @pytest.mark.asyncio
    async def test_empty_batch(self, inventory):
        result = await _orchestrator(inventory).run([])
        assert result.total_inputs == 0
        assert result.summary().tier == SummaryTier.NO_ITEMS

    @pytest.mark.asyncio
    async def test_mixed_methods_is_partial(self, inventory):
        generator = _generator(side_effect=[AI_REPLY, GenerationError("503")])
        result = await _orchestrator(inventory, generator).run(
            [RawInput(text=RECEIPT), RawInput(text=RECEIPT)]
        )
        assert (result.ai_count, result.heuristic_count) == (1, 1)
        summary = result.summary()
        assert summary.tier == SummaryTier.PARTIAL
        assert "basic parsing" in summary.message

    @pytest.mark.asyncio
    async def test_item_failure_is_recorded(self):
        merge_engine = MagicMock()
        merge_engine.merge = AsyncMock(side_effect=PersistenceError("牛奶"))
        orchestrator = BatchOrchestrator(
            extractor=PassthroughExtractor(),
            parser=StructuredItemParser(),
            merge_engine=merge_engine,
        )

        result = await orchestrator.run([RawInput(text="牛奶 2瓶 ¥12.50")])

        assert result.failed_items == ["牛奶"]
        assert result.success_count == 1
        assert result.summary().tier == SummaryTier.PARTIAL


    @pytest.mark.asyncio
    async def test_missing_api_key_falls_back(self, inventory):
        orchestrator = _orchestrator(inventory, ClaudeGenerator(api_key=""))
        result = await orchestrator.run([RawInput(text="牛奶 2瓶 12.50")])

        assert result.status == BatchStatus.COMPLETED
        assert (result.success_count, result.heuristic_count, result.ai_count) == (1, 1, 0)
        assert [r.name for r in result.records] == ["牛奶"]

    @pytest.mark.asyncio
    async def test_unexpected_generator_error_falls_back(self, inventory):
        generator = _generator(side_effect=RuntimeError("connection reset"))
        result = await _orchestrator(inventory, generator).run([RawInput(text=RECEIPT)])

        assert result.status == BatchStatus.COMPLETED
        assert (result.success_count, result.failure_count) == (1, 0)
        assert result.heuristic_count == 1
        assert len(result.records) == 2

    @pytest.mark.asyncio
    async def test_unexpected_extractor_error_is_an_input_failure(self, inventory):
        extractor = MagicMock()
        extractor.extract = AsyncMock(side_effect=[IndexError("list index out of range"), RECEIPT])
        result = await _orchestrator(inventory, extractor=extractor).run(
            [RawInput(text="x"), RawInput(text=RECEIPT)]
        )

        assert result.status == BatchStatus.COMPLETED
        assert (result.failure_count, result.success_count) == (1, 1)

    @pytest.mark.asyncio
    async def test_oversized_quantity_does_not_abort(self, inventory):
        reply = (
            "<receipt><item><name>flour</name>"
            f"<quantity>{'9' * 310}kg</quantity></item></receipt>"
        )
        generator = _generator(return_value=reply)
        result = await _orchestrator(inventory, generator).run([RawInput(text="flour")])

        assert result.success_count == 1
        assert [(r.quantity, r.unit) for r in result.records] == [(1, Unit.ITEM)]

    @pytest.mark.asyncio
    async def test_restock_alerts(self, inventory):
        shopping = ShoppingListDB(inventory.database)
        shopping.add_item("牛奶", 2000, unit=Unit.MILLILITER)

        result = await _orchestrator(inventory, shopping=shopping).run([RawInput(text=RECEIPT)])

        assert [(a.item.name, a.current_stock) for a in result.restock] == [("牛奶", 1000)]


class TestCancellation:
    @pytest.mark.asyncio
    async def test_cancel_keeps_committed_records(self, inventory):
        extractor = _BlockingExtractor()
        orchestrator = _orchestrator(inventory, extractor=extractor)
        inputs = [RawInput(text="牛奶 2瓶 ¥12.50") for _ in range(3)]

        task = asyncio.create_task(orchestrator.run(inputs))
        await extractor.blocked.wait()
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        assert len(inventory.get_active_records()) == 1
        assert extractor.calls == 2
