"""Tests for the pantry CLI."""

import json

import pytest

from pantry.cli import main
from pantry.db import HistoryDB, InventoryDB
from pantry.models import HistoryEventType


@pytest.fixture
def config_path(tmp_path):
    path = tmp_path / "config.toml"
    path.write_text(
        f"""\
[ai]
backend = "none"

[database]
path = "{(tmp_path / "pantry.db").as_posix()}"
""",
        encoding="utf-8",
    )
    return path


@pytest.fixture
def receipt(tmp_path):
    path = tmp_path / "receipt.txt"
    path.write_text("牛奶 2瓶 ¥12.50\n鸡蛋 x10 15.00\n合计 27.50\n", encoding="utf-8")
    return path


def _run(config_path, *args):
    main(["--config", str(config_path), *args])


def test_no_command_prints_help():
    with pytest.raises(SystemExit):
        main([])


def test_ingest(config_path, receipt, capsys):
    _run(config_path, "ingest", str(receipt), "--date", "2025-01-10")
    out = capsys.readouterr().out
    assert "牛奶" in out
    assert "Added 2 item(s) from 1 input(s)." in out


def test_ingest_json(config_path, receipt, capsys):
    _run(config_path, "ingest", str(receipt), "--json")
    data = json.loads(capsys.readouterr().out)
    assert data["tier"] == "full_success"
    assert [r["name"] for r in data["records"]] == ["牛奶", "鸡蛋"]
    assert data["records"][0]["unit"] == "milliliter"


def test_ingest_all_failed_exits_nonzero(config_path, tmp_path):
    image = tmp_path / "receipt.jpg"
    image.write_bytes(b"\xff\xd8")
    with pytest.raises(SystemExit) as exc_info:
        _run(config_path, "ingest", "--image", str(image))
    assert exc_info.value.code == 1


def test_inventory_and_groups(config_path, receipt, capsys):
    _run(config_path, "ingest", str(receipt))
    capsys.readouterr()

    _run(config_path, "inventory")
    assert "Active records: 2" in capsys.readouterr().out

    _run(config_path, "inventory", "--groups")
    out = capsys.readouterr().out
    assert "1000 milliliter" in out
    assert "10 item" in out


def test_consume_and_history(config_path, receipt, tmp_path, capsys):
    _run(config_path, "ingest", str(receipt))
    _run(config_path, "consume", "1", "400")
    assert "600 milliliter left" in capsys.readouterr().out

    history = HistoryDB(tmp_path / "pantry.db")
    events = history.get_events(event_type=HistoryEventType.CONSUMPTION)
    history.close()
    assert [(e.item_name, e.quantity) for e in events] == [("牛奶", 400)]


def test_consume_unknown_record(config_path):
    with pytest.raises(SystemExit):
        _run(config_path, "consume", "99", "1")


def test_consume_rejects_negative_amount(config_path, receipt, tmp_path, capsys):
    _run(config_path, "ingest", str(receipt))
    with pytest.raises(SystemExit):
        _run(config_path, "consume", "1", "-400")
    assert "positive" in capsys.readouterr().err

    history = HistoryDB(tmp_path / "pantry.db")
    events = history.get_events(event_type=HistoryEventType.CONSUMPTION)
    history.close()
    assert events == []


def test_expire(config_path, receipt, tmp_path, capsys):
    _run(config_path, "ingest", str(receipt), "--date", "2000-01-01")
    _run(config_path, "expire")
    assert "Marked 2 record(s) as expired." in capsys.readouterr().out

    inventory = InventoryDB(tmp_path / "pantry.db")
    assert inventory.get_active_records() == []
    inventory.close()


def test_shopping(config_path, receipt, capsys):
    _run(config_path, "shopping", "add", "牛奶", "2000", "--unit", "milliliter")
    _run(config_path, "shopping", "add", "鸡蛋", "6")
    _run(config_path, "ingest", str(receipt))
    capsys.readouterr()

    _run(config_path, "shopping", "list")
    assert "min 2000 milliliter" in capsys.readouterr().out

    _run(config_path, "shopping", "check")
    out = capsys.readouterr().out
    assert "牛奶: 1000/2000 milliliter" in out
    assert "鸡蛋" not in out
