"""
Schema migrations

Checked on every startup so databases created by older releases keep working.

Strategy:
1. Every start checks all columns listed in REQUIRED_COLUMNS, independent of the version
2. The version number is recorded for tracing only
"""

import logging
from typing import Optional

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger(__name__)

CURRENT_DB_VERSION = "1.3.0"


async def ensure_system_config_table(db: AsyncSession) -> None:
    """Create the system_config key/value table"""
    await db.execute(text("""
        CREATE TABLE IF NOT EXISTS system_config (
            key TEXT PRIMARY KEY,
            value TEXT,
            updated_at DATETIME DEFAULT CURRENT_TIMESTAMP
        )
    """))
    await db.commit()


async def get_db_version(db: AsyncSession) -> Optional[str]:
    """Stored schema version, None on a fresh database"""
    result = await db.execute(text(
        "SELECT value FROM system_config WHERE key = 'db_version'"
    ))
    row = result.fetchone()
    return row[0] if row else None


async def set_db_version(db: AsyncSession, version: str) -> None:
    await db.execute(text(
        "INSERT OR REPLACE INTO system_config (key, value) VALUES ('db_version', :version)"
    ), {"version": version})
    await db.commit()


async def check_table_exists(db: AsyncSession, table: str) -> bool:
    result = await db.execute(
        text("SELECT name FROM sqlite_master WHERE type='table' AND name=:table"),
        {"table": table}
    )
    return result.fetchone() is not None


async def check_column_exists(db: AsyncSession, table: str, column: str) -> bool:
    result = await db.execute(text(f"PRAGMA table_info({table})"))
    columns = [row[1] for row in result.fetchall()]
    return column in columns


async def add_column_if_not_exists(
    db: AsyncSession,
    table: str,
    column: str,
    column_type: str,
    default: str = None
) -> bool:
    """
    Add a column when it is missing

    Returns:
        True: the column was added
        False: the table is missing, the column exists, or the ALTER failed
    """
    if not await check_table_exists(db, table):
        logger.debug(f"Table {table} does not exist, skipping column {column}")
        return False

    if await check_column_exists(db, table, column):
        return False

    try:
        sql = f"ALTER TABLE {table} ADD COLUMN {column} {column_type}"
        if default is not None:
            sql += f" DEFAULT {default}"
        await db.execute(text(sql))
        await db.commit()
        logger.info(f"[+] Added column: {table}.{column}")
        return True
    except SQLAlchemyError as e:
        # one failing column must not stop the others
        logger.warning(f"Adding column {table}.{column} failed: {e}")
        await db.rollback()
        return False


# ========== Columns introduced after the first release ==========
# (table, column, type, default)
REQUIRED_COLUMNS = [
    # ========== invoices ==========
    ("invoices", "vehicle_id", "INTEGER", None),
    ("invoices", "halal_rate_per_kg", "DECIMAL(10,2)", "2"),
    ("invoices", "halal_paid_by_cash", "BOOLEAN", "0"),
    ("invoices", "total_kg_weight", "DECIMAL(12,2)", "0"),
    ("invoices", "notes", "TEXT", None),

    # ========== halal_cash_payments ==========
    ("halal_cash_payments", "invoice_id", "INTEGER", None),
    ("halal_cash_payments", "invoice_number", "VARCHAR(50)", None),
    ("halal_cash_payments", "total_bill_amount", "DECIMAL(12,2)", None),

    # ========== vehicle_inventory_movements ==========
    ("vehicle_inventory_movements", "notes", "TEXT", None),
]


async def ensure_all_columns(db: AsyncSession) -> list:
    """Add every missing column, returns the ones added"""
    added = []
    for table, column, column_type, default in REQUIRED_COLUMNS:
        if await add_column_if_not_exists(db, table, column, column_type, default):
            added.append(f"{table}.{column}")
    return added


async def run_migrations(db: AsyncSession) -> dict:
    """
    Run all migrations

    Returns:
        {"old_version", "new_version", "columns_added"}
    """
    await ensure_system_config_table(db)
    old_version = await get_db_version(db)

    columns_added = await ensure_all_columns(db)

    if old_version != CURRENT_DB_VERSION:
        await set_db_version(db, CURRENT_DB_VERSION)

    return {
        "old_version": old_version,
        "new_version": CURRENT_DB_VERSION,
        "columns_added": columns_added,
    }
