"""Database migration, run as the release phase command.

Creates all required tables if they don't exist:
  - location hierarchy: districts / sectors / cells / villages
  - catalogs: service_types / beneficiary_types
  - directories and their link tables
  - query_logs

Safe to run repeatedly (uses CREATE TABLE IF NOT EXISTS).
"""

import sys
from pathlib import Path

ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(ROOT))

import psycopg2
from dotenv import load_dotenv
from loguru import logger

load_dotenv()

from config import get_database_url


SQL = """
-- Location hierarchy
CREATE TABLE IF NOT EXISTS districts (
    id    SERIAL PRIMARY KEY,
    name  TEXT NOT NULL UNIQUE
);
CREATE TABLE IF NOT EXISTS sectors (
    id           SERIAL PRIMARY KEY,
    name         TEXT    NOT NULL,
    district_id  INTEGER NOT NULL REFERENCES districts (id) ON DELETE CASCADE
);
CREATE TABLE IF NOT EXISTS cells (
    id         SERIAL PRIMARY KEY,
    name       TEXT    NOT NULL,
    sector_id  INTEGER NOT NULL REFERENCES sectors (id) ON DELETE CASCADE
);
CREATE TABLE IF NOT EXISTS villages (
    id       SERIAL PRIMARY KEY,
    name     TEXT    NOT NULL,
    cell_id  INTEGER NOT NULL REFERENCES cells (id) ON DELETE CASCADE
);

-- Catalogs
CREATE TABLE IF NOT EXISTS service_types (
    id    SERIAL PRIMARY KEY,
    name  TEXT NOT NULL UNIQUE
);
CREATE TABLE IF NOT EXISTS beneficiary_types (
    id           SERIAL PRIMARY KEY,
    name         TEXT NOT NULL UNIQUE,
    description  TEXT
);

-- Service provider directory
CREATE TABLE IF NOT EXISTS directories (
    id                    SERIAL PRIMARY KEY,
    name_of_organization  TEXT        NOT NULL,
    phone                 TEXT,
    email                 TEXT,
    website               TEXT,
    other_services        TEXT,
    paid                  BOOLEAN     NOT NULL DEFAULT FALSE,
    created_at            TIMESTAMPTZ NOT NULL DEFAULT NOW()
);
CREATE TABLE IF NOT EXISTS directory_services (
    id            SERIAL PRIMARY KEY,
    directory_id  INTEGER NOT NULL REFERENCES directories (id) ON DELETE CASCADE,
    service_id    INTEGER NOT NULL REFERENCES service_types (id) ON DELETE CASCADE
);
CREATE TABLE IF NOT EXISTS directory_beneficiaries (
    id              SERIAL PRIMARY KEY,
    directory_id    INTEGER NOT NULL REFERENCES directories (id) ON DELETE CASCADE,
    beneficiary_id  INTEGER NOT NULL REFERENCES beneficiary_types (id) ON DELETE CASCADE
);
CREATE TABLE IF NOT EXISTS directory_locations (
    id            SERIAL PRIMARY KEY,
    directory_id  INTEGER NOT NULL REFERENCES directories (id) ON DELETE CASCADE,
    district_id   INTEGER NOT NULL REFERENCES districts (id),
    sector_id     INTEGER NOT NULL REFERENCES sectors (id),
    cell_id       INTEGER REFERENCES cells (id),
    village_id    INTEGER REFERENCES villages (id)
);
CREATE INDEX IF NOT EXISTS idx_directory_services_directory
    ON directory_services (directory_id);
CREATE INDEX IF NOT EXISTS idx_directory_beneficiaries_directory
    ON directory_beneficiaries (directory_id);
CREATE INDEX IF NOT EXISTS idx_directory_locations_directory
    ON directory_locations (directory_id);

-- Chat query audit log
CREATE TABLE IF NOT EXISTS query_logs (
    id               BIGSERIAL PRIMARY KEY,
    conversation_id  TEXT,
    query            TEXT        NOT NULL,
    intent           TEXT,
    entities         JSONB       NOT NULL DEFAULT '{}',
    response         TEXT        NOT NULL,
    result_count     INTEGER     NOT NULL DEFAULT 0,
    created_at       TIMESTAMPTZ NOT NULL DEFAULT NOW()
);
CREATE INDEX IF NOT EXISTS idx_query_logs_created
    ON query_logs (created_at);
"""


def main() -> None:
    logger.info("Running database migration...")
    try:
        with psycopg2.connect(get_database_url()) as conn:
            with conn.cursor() as cur:
                cur.execute(SQL)
        logger.info("Migration complete.")
    except Exception as e:
        logger.error(f"Migration failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
