from __future__ import annotations

import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from src.timeclock.timeclock.database.bootstrap import apply_schema, list_tables
from src.timeclock.timeclock.main import SCHEMA_PATH, load_settings


def main() -> None:
    db_config = dict(load_settings()["DB_CONFIG"])

    apply_schema(db_config, schema_path=SCHEMA_PATH)
    tables = list_tables(db_config)
    print(
        "OK: Applied schema.sql -> "
        f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')} "
        f"(tables={len(tables)})"
    )


if __name__ == "__main__":
    main()
