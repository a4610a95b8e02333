"""Tests for InventoryDB groups and records."""

import sqlite3
from datetime import date

import pytest

from pantry.db import InventoryDB
from pantry.matcher import IngredientMatcher
from pantry.models import Category, StorageLocation, Unit


@pytest.fixture
def db(tmp_path):
    """Create a temporary InventoryDB."""
    inventory = InventoryDB(tmp_path / "test.db")
    yield inventory
    inventory.close()


@pytest.fixture
def milk_group(db):
    return db.create_group("milk", "milk", Category.DAIRY)


def _add(db, group, name="milk", quantity=1000, unit=Unit.MILLILITER, expires=date(2025, 1, 16)):
    return db.add_record(
        name=name,
        quantity=quantity,
        unit=unit,
        category=group.category,
        purchase_date=date(2025, 1, 10),
        storage_location=StorageLocation.REFRIGERATOR,
        group_id=group.id,
        expiration_date=expires,
    )


class TestGroups:
    def test_create_and_get(self, db, milk_group):
        assert db.get_group(milk_group.id) == milk_group
        assert db.get_group(999) is None

    def test_find_group(self, db, milk_group):
        matcher = IngredientMatcher()
        assert db.find_group("Whole Milk", matcher) == milk_group
        assert db.find_group("beef", matcher) is None

    def test_find_group_prefers_oldest(self, db, milk_group):
        db.create_group("milk", "milk", Category.DAIRY)
        assert db.find_group("milk", IngredientMatcher()).id == milk_group.id


class TestRecords:
    def test_add_record(self, db, milk_group):
        record = _add(db, milk_group)
        assert record.id is not None
        assert db.get_record(record.id) == record

    def test_negative_quantity(self, db, milk_group):
        with pytest.raises(ValueError):
            _add(db, milk_group, quantity=-1)

    def test_unknown_group(self, db, milk_group):
        with pytest.raises(sqlite3.IntegrityError):
            db.add_record(
                name="milk",
                quantity=1,
                unit=Unit.ITEM,
                category=Category.DAIRY,
                purchase_date=date(2025, 1, 10),
                storage_location=StorageLocation.REFRIGERATOR,
                group_id=999,
            )

    def test_active_records_soonest_first(self, db, milk_group):
        later = _add(db, milk_group, expires=date(2025, 1, 20))
        sooner = _add(db, milk_group, expires=date(2025, 1, 12))
        assert [r.id for r in db.get_active_records()] == [sooner.id, later.id]
        assert len(db.get_group_records(milk_group.id)) == 2

    def test_expiring_soon(self, db, milk_group):
        _add(db, milk_group, expires=date(2025, 1, 12))
        _add(db, milk_group, expires=date(2025, 1, 30))
        soon = db.get_expiring_soon(days=3, today=date(2025, 1, 10))
        assert [r.expiration_date for r in soon] == [date(2025, 1, 12)]

    def test_consume_record(self, db, milk_group):
        record = _add(db, milk_group, quantity=1000)
        assert db.consume_record(record.id, 400).quantity == 600
        assert db.consume_record(record.id, 1000).quantity == 0
        assert db.get_active_records() == []

    @pytest.mark.parametrize("amount", [0, -5])
    def test_consume_rejects_non_positive(self, db, milk_group, amount):
        record = _add(db, milk_group, quantity=1000)
        with pytest.raises(ValueError, match="positive"):
            db.consume_record(record.id, amount)
        assert db.get_record(record.id).quantity == 1000

    def test_consume_unknown(self, db):
        with pytest.raises(ValueError):
            db.consume_record(999, 1)

    def test_mark_expired(self, db, milk_group):
        old = _add(db, milk_group, expires=date(2025, 1, 9))
        _add(db, milk_group, expires=date(2025, 1, 20))
        expired = db.mark_expired(today=date(2025, 1, 10))
        assert [r.id for r in expired] == [old.id]
        assert len(db.get_active_records()) == 1

    def test_regroup(self, db, milk_group):
        record = _add(db, milk_group)
        other = db.create_group("yogurt", "yogurt", Category.DAIRY)
        db.regroup(record.id, other.id)
        assert db.get_record(record.id).group_id == other.id
        with pytest.raises(ValueError):
            db.regroup(999, other.id)

    def test_current_stock(self, db, milk_group):
        _add(db, milk_group, name="Whole Milk", quantity=1000)
        _add(db, milk_group, name="milk", quantity=500)
        _add(db, milk_group, name="milk", quantity=2, unit=Unit.ITEM)
        matcher = IngredientMatcher()
        assert db.current_stock("milk", Unit.MILLILITER, matcher) == 1500
        assert db.current_stock("milk", Unit.ITEM, matcher) == 2
