"""
SQL dump of a SQLite database.

Writes each table's CREATE statement followed by one INSERT per row, in a
form that can be replayed with the sqlite3 shell.
"""

from datetime import datetime
from pathlib import Path
from typing import Optional, TextIO, Union

from loguru import logger
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine


def format_value(value) -> str:
    """Render one column value as an SQL literal."""
    if value is None:
        return "NULL"
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    if isinstance(value, (bytes, bytearray)):
        value = bytes(value).decode("utf-8", errors="replace")
    return "'" + str(value).replace("'", "''") + "'"


def get_tables(engine: Engine) -> list[str]:
    """User tables, skipping SQLite's internal ones."""
    with engine.connect() as conn:
        rows = conn.execute(text(
            "SELECT name FROM sqlite_master "
            "WHERE type='table' AND name NOT LIKE 'sqlite_%'"
        )).all()
    return [row[0] for row in rows]


def dump_table(engine: Engine, stream: TextIO, table: str) -> int:
    """
    Write schema and rows of one table.

    Returns:
        Number of rows written
    """
    with engine.connect() as conn:
        schema = conn.execute(
            text("SELECT sql FROM sqlite_master WHERE type='table' AND name=:name"),
            {"name": table},
        ).scalar_one()

        stream.write(f"{schema};\n\n")

        result = conn.execute(text(f'SELECT * FROM "{table}"'))
        columns = list(result.keys())

        count = 0
        for row in result:
            values = ", ".join(format_value(v) for v in row)
            stream.write(
                f"INSERT INTO {table} ({', '.join(columns)}) VALUES ({values});\n"
            )
            count += 1

    stream.write("\n")
    return count


def dump_database(engine: Engine, stream: TextIO) -> dict[str, int]:
    """
    Dump every user table to ``stream``.

    Returns:
        Dict of table name -> row count
    """
    counts = {}
    for table in get_tables(engine):
        counts[table] = dump_table(engine, stream, table)
    return counts


def dump_to_file(
    database_url: str,
    dump_dir: Union[str, Path] = "dump",
    now: Optional[datetime] = None,
) -> Path:
    """
    Dump a database into ``dump_dir/dump_YYYYmmdd_HHMMSS.sql``.

    Returns:
        Path of the written file
    """
    timestamp = (now or datetime.now()).strftime("%Y%m%d_%H%M%S")
    dump_dir = Path(dump_dir)
    dump_dir.mkdir(parents=True, exist_ok=True)
    dump_file = dump_dir / f"dump_{timestamp}.sql"

    engine = create_engine(database_url)
    try:
        with open(dump_file, "w", encoding="utf-8") as f:
            counts = dump_database(engine, f)
    finally:
        engine.dispose()

    logger.info(f"Dump complete: {dump_file} ({sum(counts.values())} rows)")
    return dump_file
