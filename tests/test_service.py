import pytest

from table_browser.core.config import get_settings
from table_browser.core.exceptions import InvalidRequestError
from table_browser.schemas.table import TableTier
from table_browser.services.table_service import TableService
from tests.conftest import FakeDatabase, run


def show_tables(*raw_names):
    return [{"Tables_in_lab": raw} for raw in raw_names]


def test_tables_returns_masters_with_parts():
    db = FakeDatabase(results=[show_tables("orders", "orders__detail", "#country", "orders__line")])
    masters = run(TableService(db).tables("lab"))

    assert [m.raw_name for m in masters] == ["orders", "#country"]
    assert [p.raw_name for p in masters[0].parts] == ["orders__detail", "orders__line"]


def test_tables_by_tier():
    db = FakeDatabase(results=[show_tables("~log", "orders", "#country")])
    groups = run(TableService(db).tables_by_tier("lab"))

    assert [g.tier for g in groups] == [TableTier.MANUAL, TableTier.LOOKUP, TableTier.HIDDEN]


def test_content_uses_default_limit():
    db = FakeDatabase()
    run(TableService(db).content("lab", "orders"))

    params = db.executed[0].compile().params
    assert get_settings().CONTENT_DEFAULT_LIMIT in params.values()


def test_content_rejects_limit_above_maximum():
    limit = get_settings().CONTENT_MAX_LIMIT + 1
    with pytest.raises(InvalidRequestError):
        run(TableService(FakeDatabase()).content("lab", "orders", limit=limit))
