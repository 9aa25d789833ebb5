import pytest

from table_browser.core.exceptions import BrokenForeignKeyError, UnrecognizedTypeError
from table_browser.modules.schema.assembler import MetadataAssembler
from table_browser.modules.schema.constraints import ConstraintResolver
from table_browser.schemas.table import Constraint, ConstraintType
from tests.conftest import FakeDatabase, column_row, run


def make_assembler(dao, catalog):
    resolver = ConstraintResolver(FakeDatabase())

    async def list_raw(schema, table_name):
        return catalog.get(table_name, [])

    resolver.list_raw = list_raw
    return MetadataAssembler(dao, resolver)


@pytest.fixture
def key_catalog():
    return {
        "orders": [Constraint(type=ConstraintType.PRIMARY, local_column="id")],
        "orders__detail": [
            Constraint(type=ConstraintType.FOREIGN, local_column="order_id", foreign_table="orders", foreign_column="id"),
        ],
    }


def test_assemble_master(fake_dao, key_catalog):
    meta = run(make_assembler(fake_dao, key_catalog).assemble("lab", "orders"))

    assert meta.name == "orders"
    assert [h.name for h in meta.headers] == ["id", "customer", "status", "paid", "note"]
    assert meta.total_rows == 42
    assert meta.comment == "Customer orders"
    assert meta.constraints == key_catalog["orders"]
    assert [p.raw_name for p in meta.parts] == ["orders__detail"]


def test_assemble_part_has_no_parts(fake_dao, key_catalog):
    meta = run(make_assembler(fake_dao, key_catalog).assemble("lab", "orders__detail"))

    assert meta.parts == []
    assert meta.total_rows == 7
    assert meta.comment == ""
    assert meta.constraints == key_catalog["orders__detail"]


def test_assemble_is_frozen(fake_dao, key_catalog):
    meta = run(make_assembler(fake_dao, key_catalog).assemble("lab", "customers"))
    with pytest.raises(Exception):
        meta.total_rows = 1


def test_assemble_propagates_header_failure(fake_dao, key_catalog):
    fake_dao.columns["orders"].append(column_row("orders", "shape", "geometry", 6))
    with pytest.raises(UnrecognizedTypeError):
        run(make_assembler(fake_dao, key_catalog).assemble("lab", "orders"))


def test_assemble_propagates_constraint_failure(fake_dao):
    broken = {
        "orders__detail": [
            Constraint(type=ConstraintType.FOREIGN, local_column="order_id", foreign_table="orders", foreign_column="id"),
        ],
    }
    with pytest.raises(BrokenForeignKeyError):
        run(make_assembler(fake_dao, broken).assemble("lab", "orders__detail"))
