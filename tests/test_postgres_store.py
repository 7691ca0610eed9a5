"""PostgresCatalogStore against a mocked psycopg2 connection."""

from unittest.mock import MagicMock

import psycopg2
import pytest

from catalog import store as store_module
from catalog.models import SearchFilter
from catalog.store import CatalogStoreError, PostgresCatalogStore


@pytest.fixture
def connection(monkeypatch):
    conn = MagicMock()
    conn.__enter__.return_value = conn
    conn.cursor.return_value.__enter__.return_value = MagicMock()
    monkeypatch.setattr(store_module.psycopg2, "connect", MagicMock(return_value=conn))
    return conn


@pytest.fixture
def cursor(connection):
    return connection.cursor.return_value.__enter__.return_value


def test_search_builds_anded_conditions(cursor):
    cursor.fetchall.return_value = []
    PostgresCatalogStore("postgresql://localhost/cp").search_organizations(
        SearchFilter(district="Gasabo", name_contains="50%_off"), limit=5
    )
    sql, params = cursor.execute.call_args.args
    assert "LOWER(di.name) = LOWER(%(district)s)" in sql
    assert " AND d.name_of_organization ILIKE %(name_pattern)s" in sql
    assert "service_types" not in sql
    assert params == {"limit": 5, "district": "Gasabo", "name_pattern": "%50\\%\\_off%"}


def test_hydrates_relations(cursor):
    cursor.fetchall.side_effect = [
        [(7, "Legal Aid Forum", "+250 1", None, None, None, False)],
        [(7, 4, "Legal Aid")],
        [(7, 6, "IN_CONFLICT_WITH_LAW")],
        [(7, "Gasabo", "Kimihurura", None, None)],
    ]
    orgs = PostgresCatalogStore("postgresql://localhost/cp").list_organizations()
    assert len(orgs) == 1
    org = orgs[0]
    assert org.service_names() == ["Legal Aid"]
    assert org.beneficiary_names() == ["IN_CONFLICT_WITH_LAW"]
    assert org.locations[0].describe() == "Gasabo - Kimihurura"


def test_no_rows_skips_relation_queries(cursor):
    cursor.fetchall.return_value = []
    assert PostgresCatalogStore("postgresql://localhost/cp").list_organizations() == []
    assert cursor.execute.call_count == 1


def test_count(cursor):
    cursor.fetchall.return_value = [(12,)]
    assert PostgresCatalogStore("postgresql://localhost/cp").count_districts() == 12


def test_driver_errors_are_wrapped(monkeypatch):
    monkeypatch.setattr(
        store_module.psycopg2,
        "connect",
        MagicMock(side_effect=psycopg2.OperationalError("could not connect")),
    )
    with pytest.raises(CatalogStoreError, match="could not connect"):
        PostgresCatalogStore("postgresql://localhost/cp").list_districts()


def test_every_read_closes_its_connection(connection, cursor):
    cursor.fetchall.side_effect = [
        [(7, "Legal Aid Forum", None, None, None, None, False)],
        [],
        [],
        [],
    ]
    PostgresCatalogStore("postgresql://localhost/cp").list_organizations()
    assert store_module.psycopg2.connect.call_count == 4
    assert connection.close.call_count == 4


def test_filter_passed_by_keyword(cursor):
    cursor.fetchall.return_value = []
    PostgresCatalogStore("postgresql://localhost/cp").search_organizations(
        search_filter=SearchFilter(service_type="Legal Aid")
    )
    _, params = cursor.execute.call_args.args
    assert params == {"limit": 20, "service_type": "Legal Aid"}
