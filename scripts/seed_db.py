from __future__ import annotations

import importlib

from dotenv import load_dotenv

from staffhub.config import get_settings_module
from staffhub.database.bootstrap import ensure_demo_data, ensure_indexes
from staffhub.database.connection import DatabaseConnection, DBConfig


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    conn = DatabaseConnection.get_instance(DBConfig(uri=db_config["uri"], database=db_config["database"]))
    ensure_indexes(conn.db)
    ensure_demo_data(conn.db)
    print(f"OK: Seeded database -> {db_config['database']}")


if __name__ == "__main__":
    main()
