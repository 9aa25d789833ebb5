from datetime import date, datetime

import pytest

from table_browser.core.exceptions import InvalidRequestError, TableBrowserError
from table_browser.modules.schema.catalog import (
    BLOB_STRING_REPRESENTATION,
    TableDao,
    header_from_row,
)
from table_browser.schemas.table import DefaultKind, Sort, TableDataType, TableTier
from tests.conftest import FakeDatabase, column_row, run


class TestHeaderFromRow:

    def test_unsigned_integer(self):
        header = header_from_row(column_row("orders", "id", "int(10) unsigned", 1, extra="auto_increment"))
        assert header.type == TableDataType.INTEGER
        assert header.is_numerical and not header.is_textual
        assert not header.signed
        assert header.auto_increment
        assert header.enum_values is None

    def test_signed_float(self):
        header = header_from_row(column_row("orders", "amount", "decimal(10,2)", 2, default="0.00"))
        assert header.signed
        assert header.default_value.kind == DefaultKind.LITERAL
        assert header.default_value.value == 0.0

    def test_enum(self):
        header = header_from_row(column_row("orders", "status", "enum('open','closed')", 3, nullable=True))
        assert header.type == TableDataType.ENUM
        assert header.enum_values == ["open", "closed"]
        assert header.nullable
        assert not header.signed
        assert header.is_textual

    def test_string(self):
        header = header_from_row(column_row("orders", "note", "varchar(255)", 4, max_characters=255, comment="Free text"))
        assert header.max_characters == 255
        assert header.charset == "utf8mb4"
        assert header.comment == "Free text"
        assert header.table_name == "orders"
        assert header.ordinal_position == 4


def test_schemas():
    db = FakeDatabase(results=[[{"Database": "information_schema"}, {"Database": "lab"}]])
    assert run(TableDao(db).schemas()) == ["information_schema", "lab"]
    assert db.raw == ["SHOW SCHEMAS"]


def test_tables_escapes_schema():
    db = FakeDatabase(results=[[{"Tables_in_lab": "_scan"}, {"Tables_in_lab": "_scan__channel"}]])
    tables = run(TableDao(db).tables("la`b"))

    assert db.raw == ["SHOW TABLES FROM `la``b`"]
    assert [t.raw_name for t in tables] == ["_scan", "_scan__channel"]
    assert tables[0].tier == TableTier.IMPORTED
    assert tables[1].is_part


def test_headers():
    db = FakeDatabase(results=[[
        column_row("orders", "id", "int(11)", 1),
        column_row("orders", "customer", "varchar(8)", 2, max_characters=8),
    ]])
    headers = run(TableDao(db).headers("lab", "orders"))

    assert [h.name for h in headers] == ["id", "customer"]
    sql = str(db.executed[0])
    assert "INFORMATION_SCHEMA" in sql
    assert "LIKE" not in sql


def test_count():
    db = FakeDatabase(results=[[{"total": 42}]])
    assert run(TableDao(db).count("lab", "orders")) == 42


def test_comment():
    db = FakeDatabase(results=[[{"TABLE_COMMENT": "Customer orders"}]])
    assert run(TableDao(db).comment("lab", "orders")) == "Customer orders"


def test_comment_without_row():
    assert run(TableDao(FakeDatabase()).comment("lab", "missing")) == ""


class TestContent:

    @pytest.fixture
    def header_rows(self):
        return [
            column_row("scans", "id", "int(11)", 1),
            column_row("scans", "taken", "date", 2),
            column_row("scans", "stored", "datetime", 3),
            column_row("scans", "raw", "longblob", 4, nullable=True),
        ]

    def test_formats_dates_and_masks_blobs(self, header_rows):
        content = [{
            "id": 1,
            "taken": date(2021, 3, 4),
            "stored": datetime(2021, 3, 4, 5, 6, 7),
            "raw": b"\x00\x01",
        }]
        db = FakeDatabase(results=[content, header_rows])

        rows = run(TableDao(db).content("lab", "scans"))

        assert rows == [{
            "id": 1,
            "taken": "2021-03-04",
            "stored": "2021-03-04 05:06:07",
            "raw": BLOB_STRING_REPRESENTATION,
        }]

    def test_paging_and_sort(self, header_rows):
        db = FakeDatabase(results=[[], header_rows])
        run(TableDao(db).content("lab", "scans", page=3, limit=10, sort=Sort(by="taken", direction="desc")))

        query = db.executed[0]
        compiled = query.compile()
        sql = str(compiled)
        assert "ORDER BY" in sql and "DESC" in sql
        assert 10 in compiled.params.values()
        assert 20 in compiled.params.values()

    def test_date_in_non_date_column(self, header_rows):
        db = FakeDatabase(results=[[{"id": date(2021, 1, 1)}], header_rows])
        with pytest.raises(TableBrowserError):
            run(TableDao(db).content("lab", "scans"))

    @pytest.mark.parametrize("page, limit", [(0, 25), (1, 0), (-1, 10)])
    def test_rejects_bad_paging(self, page, limit):
        with pytest.raises(InvalidRequestError):
            run(TableDao(FakeDatabase()).content("lab", "scans", page=page, limit=limit))


def test_column_content():
    db = FakeDatabase(results=[[{"status": "closed"}, {"status": "open"}]])
    values = run(TableDao(db).column_content("lab", "orders", "status"))

    assert values == ["closed", "open"]
    sql = str(db.executed[0])
    assert "DISTINCT" in sql
    assert "ORDER BY" in sql
