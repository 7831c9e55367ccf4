from __future__ import annotations

from flask import Flask

from ..common.web import current_actor, json_body, login_required, ok
from ..container import Container
from ..database.mongo_base import to_object_id
from .serializers import salary_entry_to_dict, staff_to_dict


def register(app: Flask, container: Container) -> None:
    staff_service = container.staff_service

    @app.route("/api/staffs/me", methods=["GET"], endpoint="get_my_staff")
    @login_required
    def get_my_staff():
        staff = staff_service.get_my_staff(current_actor().user_id)
        return ok(staff=staff_to_dict(staff))

    @app.route("/api/staffs/create", methods=["POST"], endpoint="create_staff")
    @login_required
    def create_staff():
        staff = staff_service.create_staff(current_role=current_actor().role, payload=json_body())
        return ok(201, staff=staff_to_dict(staff))

    @app.route("/api/staffs/complete-profile", methods=["PUT"], endpoint="complete_profile")
    @login_required
    def complete_profile():
        staff = staff_service.complete_profile(user_id=current_actor().user_id, payload=json_body())
        return ok(staff=staff_to_dict(staff))

    @app.route("/api/staffs/update-profile", methods=["PUT"], endpoint="update_profile")
    @login_required
    def update_profile():
        staff = staff_service.update_profile(user_id=current_actor().user_id, payload=json_body())
        return ok(staff=staff_to_dict(staff))

    @app.route("/api/staffs/<staff_id>", methods=["PUT"], endpoint="update_staff")
    @login_required
    def update_staff(staff_id: str):
        actor = current_actor()
        body = dict(json_body())
        role = body.pop("role", None)
        reason = body.pop("reason", None)
        staff = staff_service.update_staff(
            current_role=actor.role,
            actor_user_id=actor.user_id,
            staff_pk=to_object_id(staff_id, "staffId"),
            payload=body,
            role=role,
            reason=reason,
        )
        return ok(staff=staff_to_dict(staff))

    @app.route("/api/staffs/<staff_id>/salary", methods=["PUT"], endpoint="update_salary")
    @login_required
    def update_salary(staff_id: str):
        actor = current_actor()
        body = json_body()
        staff = staff_service.update_salary(
            current_role=actor.role,
            actor_user_id=actor.user_id,
            staff_pk=to_object_id(staff_id, "staffId"),
            new_salary=body.get("salary"),
            reason=body.get("reason"),
        )
        return ok(staff=staff_to_dict(staff), salary=staff.salary)

    @app.route("/api/staffs/<staff_id>/salary-history", methods=["GET"], endpoint="salary_history")
    @login_required
    def salary_history(staff_id: str):
        entries = staff_service.get_salary_history(
            current_role=current_actor().role,
            staff_pk=to_object_id(staff_id, "staffId"),
        )
        return ok(data=[salary_entry_to_dict(e) for e in entries])

    @app.route("/api/staffs/<staff_id>/salary-pin", methods=["PUT"], endpoint="set_salary_pin")
    @login_required
    def set_salary_pin(staff_id: str):
        staff_service.set_salary_pin(
            user_id=current_actor().user_id,
            staff_pk=to_object_id(staff_id, "staffId"),
            pin=json_body().get("pin"),
        )
        return ok(message="PIN set successfully")

    @app.route("/api/staffs/<staff_id>/salary-pin/verify", methods=["POST"], endpoint="verify_salary_pin")
    @login_required
    def verify_salary_pin(staff_id: str):
        data = staff_service.view_salary(
            user_id=current_actor().user_id,
            staff_pk=to_object_id(staff_id, "staffId"),
            pin=json_body().get("pin"),
        )
        return ok(data=data)

    @app.route("/api/staffs/<staff_id>/salary-pin/forgot", methods=["POST"], endpoint="forgot_salary_pin")
    @login_required
    def forgot_salary_pin(staff_id: str):
        # Delivering the token (email) belongs to the notification provider.
        token = staff_service.request_pin_reset(
            user_id=current_actor().user_id,
            staff_pk=to_object_id(staff_id, "staffId"),
        )
        return ok(resetToken=token)

    @app.route("/api/staffs/salary-pin/reset", methods=["POST"], endpoint="reset_salary_pin")
    def reset_salary_pin():
        body = json_body()
        staff_service.reset_salary_pin(token=body.get("token") or "", new_pin=body.get("pin"))
        return ok(message="PIN reset successfully")
