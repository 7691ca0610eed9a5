"""Chat query logging.

Writes newline-delimited JSON to logs/queries.jsonl and, when
logging.log_to_database is set, to the query_logs table.

Log record schema:
  {
    "ts": "ISO timestamp",
    "conversation_id": "client supplied id or null",
    "query": "user question",
    "intent": "search",
    "entities": {...},
    "response": "reply text",
    "result_count": 3
  }
"""

import json
from contextlib import closing
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

import psycopg2
from loguru import logger

from config import get_config, get_database_url


def log_query(
    conversation_id: Optional[str],
    query: str,
    intent: Optional[str],
    entities: dict,
    response: str,
    result_count: int,
) -> None:
    """Write a query log entry to file and database. Never raises."""
    cfg = get_config()

    record = {
        "ts": datetime.now(timezone.utc).isoformat(),
        "conversation_id": conversation_id,
        "query": query,
        "intent": intent,
        "entities": entities,
        "response": response,
        "result_count": result_count,
    }

    # ── File log ──────────────────────────────────────────────────────────────
    if cfg.logging.log_queries:
        log_path = Path(cfg.logging.log_file)
        try:
            log_path.parent.mkdir(parents=True, exist_ok=True)
            with open(log_path, "a", encoding="utf-8") as f:
                f.write(json.dumps(record) + "\n")
        except OSError as e:
            logger.warning(f"Could not write to log file: {e}")

    # ── Database log ──────────────────────────────────────────────────────────
    if not cfg.logging.log_to_database:
        return
    try:
        with closing(psycopg2.connect(get_database_url())) as conn, conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    INSERT INTO query_logs
                        (conversation_id, query, intent, entities, response, result_count)
                    VALUES (%s, %s, %s, %s, %s, %s)
                    """,
                    (
                        conversation_id,
                        query,
                        intent,
                        json.dumps(entities),
                        response,
                        result_count,
                    ),
                )
    except (psycopg2.Error, RuntimeError) as e:
        logger.warning(f"Could not write query log to DB: {e}")
