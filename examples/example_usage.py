"""Example: use the service layer directly, without Flask.

Controllers stay thin; the roster query and staff rules live in services.
"""

import importlib

from dotenv import load_dotenv

from staffhub.config import get_settings_module
from staffhub.container import build_container
from staffhub.roster.filters import RosterFilters


def main():
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG)

    page = container.roster_service.list_staffs(RosterFilters(limit=5, exclude_admins=True))
    print(page.meta.to_dict())
    for row in page.staffs:
        shift = row.get("currentShift") or {}
        print(row.get("staffId"), (row.get("user") or {}).get("name"), shift.get("name", "-"))


if __name__ == "__main__":
    main()
