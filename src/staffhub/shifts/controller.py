from __future__ import annotations

from flask import Flask, jsonify

from ..common.datetime_utils import coerce_datetime
from ..common.web import current_actor, json_body, login_required, ok
from ..core.exceptions import ValidationError
from ..container import Container
from ..database.mongo_base import to_object_id


def register(app: Flask, container: Container) -> None:
    @app.route("/api/shift-assignments", methods=["POST"], endpoint="assign_shift")
    @login_required
    def assign_shift():
        actor = current_actor()
        body = json_body()

        staff_ids = body.get("staffIds")
        if not isinstance(staff_ids, list):
            raise ValidationError("staffIds must be a list")
        start_date = coerce_datetime(body.get("startDate"), "startDate")
        if start_date is None:
            raise ValidationError("startDate is required")

        summary = container.shift_assignment_service.assign_shift(
            current_role=actor.role,
            staff_pks=[to_object_id(s, "staffIds") for s in staff_ids],
            shift_id=to_object_id(body.get("shiftId"), "shiftId"),
            start_date=start_date,
            assigned_by=actor.user_id,
        )
        if summary["failureCount"]:
            message = summary["errors"][0]["error"] if summary["errors"] else "Transaction aborted"
            return jsonify({"success": False, "message": message, **summary}), 400
        return ok(**summary)
