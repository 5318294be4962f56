#!/usr/bin/env python3
"""
TalentLedger - Database dump script

Writes dump/dump_YYYYmmdd_HHMMSS.sql with the schema and rows of every table.
"""

import argparse
import sys
from pathlib import Path

from dotenv import load_dotenv
from loguru import logger

# Load env vars
load_dotenv()

sys.path.insert(0, str(Path(__file__).parent.parent))

from talentledger.config import Settings
from talentledger.storage.dump import dump_to_file


def main() -> int:
    settings = Settings.from_env()

    parser = argparse.ArgumentParser(description="Dump the TalentLedger database as SQL")
    parser.add_argument("--database-url", default=settings.database_url)
    parser.add_argument("--dump-dir", default=settings.dump_dir)
    args = parser.parse_args()

    if not args.database_url.startswith("sqlite"):
        logger.error(f"Only SQLite databases can be dumped: {args.database_url}")
        return 1

    try:
        dump_file = dump_to_file(args.database_url, args.dump_dir)
    except Exception as e:
        logger.error(f"Dump failed: {e}")
        return 1

    print(dump_file)
    return 0


if __name__ == "__main__":
    sys.exit(main())
