"""Import or update agencies and contacts from the directory CSV exports."""

from __future__ import annotations

import argparse
import csv
import logging
import os
from pathlib import Path
from typing import Any, Iterable

from dotenv import load_dotenv
from sqlalchemy import Table, create_engine, select
from sqlalchemy.engine import Connection, Engine

from dashboard.models import Agency, Contact

logger = logging.getLogger("import_directory")
logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO"))

agencies_table: Table = Agency.__table__
contacts_table: Table = Contact.__table__

# timestamps come from column defaults
_SKIP_COLUMNS = {"created_at", "updated_at"}

AGENCY_COLUMNS = tuple(c.name for c in agencies_table.columns if c.name not in _SKIP_COLUMNS)
CONTACT_COLUMNS = tuple(c.name for c in contacts_table.columns if c.name not in _SKIP_COLUMNS)


def load_rows(path: Path) -> list[dict[str, Any]]:
    if not path.exists():
        raise FileNotFoundError(path)
    if path.suffix.lower() != ".csv":
        raise ValueError(f"Unsupported directory format for file {path}")
    with path.open("r", encoding="utf-8-sig", newline="") as fp:
        reader = csv.DictReader(fp)
        return [dict(row) for row in reader]


def normalize_row(raw: dict[str, Any], columns: Iterable[str]) -> dict[str, Any]:
    """Keep known columns only; strip values and turn blanks into ``None``."""
    lowered = {str(key).strip().lower(): value for key, value in raw.items() if key}

    def clean(value: Any) -> str | None:
        if value is None:
            return None
        trimmed = str(value).strip()
        return trimmed or None

    return {name: clean(lowered.get(name)) for name in columns}


def _upsert(conn: Connection, table: Table, values: dict[str, Any]) -> str:
    row = conn.execute(select(table.c.id).where(table.c.id == values["id"])).first()
    if row:
        conn.execute(table.update().where(table.c.id == values["id"]).values(**values))
        return "updated"
    conn.execute(table.insert().values(**values))
    return "inserted"


def sync_directory(
    agencies: Iterable[dict[str, Any]],
    contacts: Iterable[dict[str, Any]],
    engine: Engine,
) -> dict[str, int]:
    stats = {
        "agencies_inserted": 0,
        "agencies_updated": 0,
        "contacts_inserted": 0,
        "contacts_updated": 0,
        "skipped": 0,
    }
    with engine.begin() as conn:
        for entry in agencies:
            if not entry.get("id") or not entry.get("name"):
                stats["skipped"] += 1
                logger.warning("Skipping agency without id or name: %s", entry)
                continue
            action = _upsert(conn, agencies_table, entry)
            stats[f"agencies_{action}"] += 1

        known_agencies = set(conn.execute(select(agencies_table.c.id)).scalars())
        for entry in contacts:
            if not entry.get("id"):
                stats["skipped"] += 1
                logger.warning("Skipping contact without id: %s", entry)
                continue
            if entry.get("agency_id") not in known_agencies:
                stats["skipped"] += 1
                logger.warning(
                    "Skipping contact %s with unknown agency %s",
                    entry["id"],
                    entry.get("agency_id"),
                )
                continue
            action = _upsert(conn, contacts_table, entry)
            stats[f"contacts_{action}"] += 1
    return stats


def main() -> None:
    load_dotenv()
    parser = argparse.ArgumentParser(description="Import agencies and contacts into the database")
    parser.add_argument("agencies", type=Path, help="Path to agencies CSV export")
    parser.add_argument("contacts", type=Path, help="Path to contacts CSV export")
    parser.add_argument("--database-url", default=os.getenv("DATABASE_URL"), help="Override DATABASE_URL env value")
    args = parser.parse_args()

    if not args.database_url:
        parser.error("DATABASE_URL is not set. Use --database-url or export the variable.")

    agencies = [normalize_row(row, AGENCY_COLUMNS) for row in load_rows(args.agencies)]
    contacts = [normalize_row(row, CONTACT_COLUMNS) for row in load_rows(args.contacts)]
    engine = create_engine(args.database_url)
    stats = sync_directory(agencies, contacts, engine)
    logger.info(
        "Import complete: %s (agencies=%s, contacts=%s)",
        stats,
        args.agencies,
        args.contacts,
    )


if __name__ == "__main__":
    main()
