"""Load a catalog fixture into PostgreSQL.

Usage:
    python scripts/seed_catalog.py [data/catalog.json] [--clear]

Reads the same JSON format InMemoryCatalogStore uses. Districts, service
types and beneficiary types are upserted by name; organizations are always
inserted, so pass --clear to replace an existing directory.

Run scripts/db_migrate.py first.
"""

import argparse
import json
import sys
from pathlib import Path

ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(ROOT))

import psycopg2
from dotenv import load_dotenv
from loguru import logger

load_dotenv()

from config import get_config, get_database_url

CLEAR_SQL = """
TRUNCATE directory_locations, directory_beneficiaries, directory_services,
         directories, villages, cells, sectors
RESTART IDENTITY CASCADE;
"""


def _upsert_named(cur, table: str, name: str) -> int:
    cur.execute(
        f"INSERT INTO {table} (name) VALUES (%s) "
        f"ON CONFLICT (name) DO UPDATE SET name = EXCLUDED.name RETURNING id",
        (name,),
    )
    return cur.fetchone()[0]


def _child_id(cur, table: str, parent_column: str, parent_id: int, name: str) -> int:
    cur.execute(
        f"SELECT id FROM {table} WHERE {parent_column} = %s AND name = %s",
        (parent_id, name),
    )
    row = cur.fetchone()
    if row:
        return row[0]
    cur.execute(
        f"INSERT INTO {table} (name, {parent_column}) VALUES (%s, %s) RETURNING id",
        (name, parent_id),
    )
    return cur.fetchone()[0]


def seed(cur, data: dict) -> int:
    districts = {n: _upsert_named(cur, "districts", n) for n in data.get("districts", [])}
    services = {n: _upsert_named(cur, "service_types", n) for n in data.get("service_types", [])}
    beneficiaries = {
        n: _upsert_named(cur, "beneficiary_types", n) for n in data.get("beneficiary_types", [])
    }

    count = 0
    for org in data.get("organizations", []):
        cur.execute(
            """
            INSERT INTO directories
                (name_of_organization, phone, email, website, other_services, paid)
            VALUES (%s, %s, %s, %s, %s, %s)
            RETURNING id
            """,
            (
                org["name"],
                org.get("phone"),
                org.get("email"),
                org.get("website"),
                org.get("other_services"),
                bool(org.get("paid", False)),
            ),
        )
        directory_id = cur.fetchone()[0]

        for name in org.get("services", []):
            cur.execute(
                "INSERT INTO directory_services (directory_id, service_id) VALUES (%s, %s)",
                (directory_id, services[name]),
            )
        for name in org.get("beneficiaries", []):
            cur.execute(
                "INSERT INTO directory_beneficiaries (directory_id, beneficiary_id) "
                "VALUES (%s, %s)",
                (directory_id, beneficiaries[name]),
            )
        for loc in org.get("locations", []):
            district_id = districts[loc["district"]]
            sector_id = _child_id(cur, "sectors", "district_id", district_id, loc["sector"])
            cell_id = village_id = None
            if loc.get("cell"):
                cell_id = _child_id(cur, "cells", "sector_id", sector_id, loc["cell"])
                if loc.get("village"):
                    village_id = _child_id(cur, "villages", "cell_id", cell_id, loc["village"])
            cur.execute(
                """
                INSERT INTO directory_locations
                    (directory_id, district_id, sector_id, cell_id, village_id)
                VALUES (%s, %s, %s, %s, %s)
                """,
                (directory_id, district_id, sector_id, cell_id, village_id),
            )
        count += 1
    return count


def main(path: Path, clear: bool = False) -> None:
    with open(path, encoding="utf-8") as f:
        data = json.load(f)

    logger.info(f"Seeding catalog from {path}...")
    try:
        with psycopg2.connect(get_database_url()) as conn:
            with conn.cursor() as cur:
                if clear:
                    logger.info("Clearing existing directory data.")
                    cur.execute(CLEAR_SQL)
                count = seed(cur, data)
        logger.info(f"Seeded {count} organizations.")
    except (psycopg2.Error, KeyError) as e:
        logger.error(f"Seeding failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Load a catalog fixture into PostgreSQL")
    parser.add_argument("path", nargs="?", default=None, help="Fixture JSON path")
    parser.add_argument("--clear", action="store_true", help="Remove existing directories first")
    args = parser.parse_args()
    main(Path(args.path or get_config().store.fixture_path), clear=args.clear)
