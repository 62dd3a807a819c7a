import json
from unittest.mock import AsyncMock, MagicMock

import pytest

from common.errors import StorageConnectionError
from dal import cli
from schema import ColumnDef, TableDef


@pytest.fixture
def fake_storage(monkeypatch):
    storage = MagicMock()
    storage.close = AsyncMock()
    monkeypatch.setattr(cli, "load_dotenv", lambda: None)
    monkeypatch.setattr(cli, "create_storage", AsyncMock(return_value=storage))
    return storage


@pytest.fixture
def fake_inspector(monkeypatch, fake_storage):
    inspector = MagicMock()
    inspector.get_tables = AsyncMock(return_value=["articles", "tags"])
    inspector.get_table = AsyncMock(
        return_value=TableDef(name="tags", columns=[ColumnDef(name="id", type="integer")])
    )
    monkeypatch.setattr(cli, "get_schema_inspector", lambda storage: inspector)
    return inspector


def test_tables_command_prints_json(fake_inspector, fake_storage, capsys):
    cli.main(["--indent", "0", "tables"])

    assert json.loads(capsys.readouterr().out) == ["articles", "tags"]
    fake_storage.close.assert_awaited_once()


def test_inspect_command(fake_inspector, capsys):
    cli.main(["inspect", "tags"])

    payload = json.loads(capsys.readouterr().out)
    assert payload["name"] == "tags"
    assert payload["columns"][0]["type"] == "integer"
    fake_inspector.get_table.assert_awaited_once_with("tags")


def test_unreachable_store_exits_with_code_2(monkeypatch):
    monkeypatch.setattr(cli, "load_dotenv", lambda: None)
    monkeypatch.setattr(
        cli, "create_storage", AsyncMock(side_effect=StorageConnectionError("refused"))
    )

    with pytest.raises(SystemExit) as exc_info:
        cli.main(["dump"])
    assert exc_info.value.code == 2


def test_storage_is_closed_when_inspection_fails(fake_inspector, fake_storage):
    fake_inspector.get_tables.side_effect = RuntimeError("catalog unavailable")

    with pytest.raises(SystemExit) as exc_info:
        cli.main(["tables"])
    assert exc_info.value.code == 1
    fake_storage.close.assert_awaited_once()
