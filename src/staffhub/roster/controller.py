from __future__ import annotations

from flask import Flask, request

from ..common.web import login_required, ok
from ..container import Container
from .filters import RosterFilters


def register(app: Flask, container: Container) -> None:
    @app.route("/api/staffs", methods=["GET"], endpoint="list_staffs")
    @login_required
    def list_staffs():
        filters = RosterFilters.from_query_args(
            request.args,
            default_limit=int(app.config.get("ROSTER_DEFAULT_LIMIT", 10)),
            max_limit=int(app.config.get("ROSTER_MAX_LIMIT", 100)),
        )
        page = container.roster_service.list_staffs(filters)
        return ok(staffs=page.staffs, meta=page.meta.to_dict())
