"""Catalog store interface and its PostgreSQL implementation.

The chat engine only ever reads. Every method returns fresh rows; nothing is
cached between calls, so catalog edits made through the directory admin are
visible on the next query.

Tables are created by scripts/db_migrate.py.
"""

from abc import ABC, abstractmethod
from contextlib import closing
from typing import Optional

import psycopg2
from loguru import logger

from catalog.models import Location, NamedRef, Organization, SearchFilter

DEFAULT_SEARCH_LIMIT = 20


class CatalogStoreError(Exception):
    """Raised when the underlying data store cannot be read."""


class CatalogStore(ABC):
    @abstractmethod
    def list_organizations(self) -> list[Organization]: ...

    @abstractmethod
    def list_districts(self) -> list[NamedRef]: ...

    @abstractmethod
    def list_service_types(self) -> list[NamedRef]: ...

    @abstractmethod
    def list_beneficiary_types(self) -> list[NamedRef]: ...

    @abstractmethod
    def search_organizations(
        self,
        search_filter: SearchFilter,
        limit: int = DEFAULT_SEARCH_LIMIT,
    ) -> list[Organization]:
        """Return organizations matching ALL set filter fields, in store order."""

    @abstractmethod
    def count_organizations(self) -> int: ...

    @abstractmethod
    def count_service_types(self) -> int: ...

    @abstractmethod
    def count_districts(self) -> int: ...

    def find_organization(self, name: str) -> Optional[Organization]:
        """First organization whose name contains `name`, case-insensitively."""
        found = self.search_organizations(SearchFilter(name_contains=name), limit=1)
        return found[0] if found else None


# ── PostgreSQL ────────────────────────────────────────────────────────────────

_SEARCH_CONDITIONS = {
    "district": """
        EXISTS (
            SELECT 1 FROM directory_locations dl
            JOIN districts di ON di.id = dl.district_id
            WHERE dl.directory_id = d.id AND LOWER(di.name) = LOWER(%(district)s)
        )""",
    "service_type": """
        EXISTS (
            SELECT 1 FROM directory_services ds
            JOIN service_types st ON st.id = ds.service_id
            WHERE ds.directory_id = d.id AND LOWER(st.name) = LOWER(%(service_type)s)
        )""",
    "beneficiary_type": """
        EXISTS (
            SELECT 1 FROM directory_beneficiaries db
            JOIN beneficiary_types bt ON bt.id = db.beneficiary_id
            WHERE db.directory_id = d.id AND LOWER(bt.name) = LOWER(%(beneficiary_type)s)
        )""",
    "name_contains": "d.name_of_organization ILIKE %(name_pattern)s",
}

_DIRECTORY_COLUMNS = (
    "d.id, d.name_of_organization, d.phone, d.email, d.website, d.other_services, d.paid"
)


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class PostgresCatalogStore(CatalogStore):
    def __init__(self, db_url: str) -> None:
        self._db_url = db_url

    def _fetchall(self, sql: str, params: Optional[dict] = None) -> list[tuple]:
        try:
            # the connection context only ends the transaction; closing() releases it
            with closing(psycopg2.connect(self._db_url)) as conn, conn:
                with conn.cursor() as cur:
                    cur.execute(sql, params or {})
                    return cur.fetchall()
        except psycopg2.Error as e:
            logger.error(f"Catalog query failed: {e}")
            raise CatalogStoreError(str(e)) from e

    def _count(self, table: str) -> int:
        rows = self._fetchall(f"SELECT COUNT(*) FROM {table}")
        return int(rows[0][0])

    def _named(self, table: str) -> list[NamedRef]:
        rows = self._fetchall(f"SELECT id, name FROM {table} ORDER BY id")
        return [NamedRef(id=r[0], name=r[1]) for r in rows]

    # ── Catalogs ──────────────────────────────────────────────────────────────

    def list_districts(self) -> list[NamedRef]:
        return self._named("districts")

    def list_service_types(self) -> list[NamedRef]:
        return self._named("service_types")

    def list_beneficiary_types(self) -> list[NamedRef]:
        return self._named("beneficiary_types")

    def list_organizations(self) -> list[Organization]:
        rows = self._fetchall(f"SELECT {_DIRECTORY_COLUMNS} FROM directories d ORDER BY d.id")
        return self._hydrate(rows)

    # ── Search ────────────────────────────────────────────────────────────────

    def search_organizations(
        self,
        search_filter: SearchFilter,
        limit: int = DEFAULT_SEARCH_LIMIT,
    ) -> list[Organization]:
        clauses = []
        params: dict = {"limit": limit}
        for key in ("district", "service_type", "beneficiary_type", "name_contains"):
            value = getattr(search_filter, key)
            if not value:
                continue
            clauses.append(_SEARCH_CONDITIONS[key])
            if key == "name_contains":
                params["name_pattern"] = f"%{_escape_like(value)}%"
            else:
                params[key] = value

        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        rows = self._fetchall(
            f"SELECT {_DIRECTORY_COLUMNS} FROM directories d {where} "
            f"ORDER BY d.id LIMIT %(limit)s",
            params,
        )
        return self._hydrate(rows)

    # ── Counts ────────────────────────────────────────────────────────────────

    def count_organizations(self) -> int:
        return self._count("directories")

    def count_service_types(self) -> int:
        return self._count("service_types")

    def count_districts(self) -> int:
        return self._count("districts")

    # ── Relations ─────────────────────────────────────────────────────────────

    def _hydrate(self, rows: list[tuple]) -> list[Organization]:
        """Attach services, beneficiaries and locations to directory rows."""
        if not rows:
            return []
        orgs = {
            r[0]: Organization(
                id=r[0],
                name=r[1],
                phone=r[2],
                email=r[3],
                website=r[4],
                other_services=r[5],
                paid=bool(r[6]),
            )
            for r in rows
        }
        ids = list(orgs)

        for directory_id, service_id, name in self._fetchall(
            """
            SELECT ds.directory_id, st.id, st.name
            FROM directory_services ds
            JOIN service_types st ON st.id = ds.service_id
            WHERE ds.directory_id = ANY(%(ids)s)
            ORDER BY ds.id
            """,
            {"ids": ids},
        ):
            orgs[directory_id].services.append(NamedRef(id=service_id, name=name))

        for directory_id, beneficiary_id, name in self._fetchall(
            """
            SELECT db.directory_id, bt.id, bt.name
            FROM directory_beneficiaries db
            JOIN beneficiary_types bt ON bt.id = db.beneficiary_id
            WHERE db.directory_id = ANY(%(ids)s)
            ORDER BY db.id
            """,
            {"ids": ids},
        ):
            orgs[directory_id].beneficiaries.append(NamedRef(id=beneficiary_id, name=name))

        for directory_id, district, sector, cell, village in self._fetchall(
            """
            SELECT dl.directory_id, di.name, se.name, ce.name, vi.name
            FROM directory_locations dl
            JOIN districts di ON di.id = dl.district_id
            JOIN sectors se ON se.id = dl.sector_id
            LEFT JOIN cells ce ON ce.id = dl.cell_id
            LEFT JOIN villages vi ON vi.id = dl.village_id
            WHERE dl.directory_id = ANY(%(ids)s)
            ORDER BY dl.id
            """,
            {"ids": ids},
        ):
            orgs[directory_id].locations.append(
                Location(
                    district_name=district,
                    sector_name=sector,
                    cell_name=cell,
                    village_name=village,
                )
            )

        return [orgs[i] for i in ids]
