from datetime import datetime

import pytest
from bson import ObjectId

from fakes import (
    FakeRosterRepo,
    FakeUnitOfWork,
    InMemoryAssignments,
    InMemoryBranches,
    InMemoryCounters,
    InMemorySalaryHistory,
    InMemoryShifts,
    InMemoryStaffs,
    InMemoryUsers,
)
from staffhub.container import Container
from staffhub.core.enums import Role
from staffhub.main import create_app
from staffhub.roster.service import RosterService
from staffhub.shifts.service import ShiftAssignmentService
from staffhub.staff.service import StaffService

NOW = datetime(2026, 3, 10, 9, 0)


class Backend:
    def __init__(self):
        self.staffs = InMemoryStaffs()
        self.history = InMemorySalaryHistory()
        self.users = InMemoryUsers()
        self.branches = InMemoryBranches()
        self.counters = InMemoryCounters()
        self.shifts = InMemoryShifts()
        self.assignments = InMemoryAssignments()
        self.roster = FakeRosterRepo(
            [{"_id": ObjectId(), "staffId": f"STF-{i:04d}", "createdAt": NOW} for i in range(12)]
        )
        uow = FakeUnitOfWork(self.staffs, self.history, self.users, self.counters, self.assignments)
        self.container = Container(
            roster_service=RosterService(self.roster, clock=lambda: NOW),
            staff_service=StaffService(
                self.staffs, self.history, self.users, self.branches, self.counters, uow, clock=lambda: NOW
            ),
            shift_assignment_service=ShiftAssignmentService(self.shifts, self.assignments, self.staffs, uow),
        )


@pytest.fixture()
def backend():
    return Backend()


@pytest.fixture()
def client(monkeypatch, backend):
    monkeypatch.setenv("APP_ENV", "testing")
    app = create_app(container=backend.container)
    return app.test_client()


def login(client, role=Role.ADMIN, user_id=None):
    user_id = user_id or ObjectId()
    with client.session_transaction() as sess:
        sess["user_id"] = str(user_id)
        sess["role"] = role.value
    return user_id


def _create_body(**over):
    body = {"staffId": "STF-0100", "phone": "+8801700000100", "designation": "Engineer", "joinDate": "2026-01-05"}
    body.update(over)
    return body


def test_roster_requires_login(client):
    resp = client.get("/api/staffs")
    assert resp.status_code == 401
    assert resp.get_json() == {"success": False, "message": "Unauthorized"}


def test_roster_returns_page_and_meta(client, backend):
    login(client, Role.STAFF)

    resp = client.get("/api/staffs?page=2&limit=5&excludeAdmins=true")

    body = resp.get_json()
    assert resp.status_code == 200
    assert body["success"] is True
    assert body["meta"] == {"total": 12, "page": 2, "limit": 5, "totalPage": 3}
    assert len(body["staffs"]) == 5
    assert backend.roster.calls[0]["filters"].exclude_admins is True


def test_roster_clamps_limit(client, backend):
    login(client)
    resp = client.get("/api/staffs?limit=1000")
    assert resp.get_json()["meta"]["limit"] == 100


def test_roster_rejects_malformed_branch_id(client):
    login(client)
    resp = client.get("/api/staffs?branchId=nope")
    assert resp.status_code == 400
    assert "branchId" in resp.get_json()["message"]


def test_create_staff_then_duplicate_conflicts(client, backend):
    login(client, Role.HR_MANAGER)

    first = client.post("/api/staffs/create", json=_create_body())
    second = client.post("/api/staffs/create", json=_create_body(phone="+8801700000101"))

    assert first.status_code == 201
    staff = first.get_json()["staff"]
    assert staff["staffId"] == "STF-0100"
    assert "salary" not in staff
    assert second.status_code == 409
    assert len(backend.staffs.docs) == 1


def test_create_staff_with_unknown_user_is_not_found(client, backend):
    login(client, Role.ADMIN)

    resp = client.post("/api/staffs/create", json=_create_body(userId=str(ObjectId())))

    assert resp.status_code == 404
    assert resp.get_json() == {"success": False, "message": "User not found."}
    assert backend.staffs.docs == {}


def test_create_staff_forbidden_for_staff_role(client):
    login(client, Role.STAFF)
    resp = client.post("/api/staffs/create", json=_create_body())
    assert resp.status_code == 403


def test_complete_profile_twice_conflicts(client, backend):
    user_id = backend.users.add(name="Rina", email="rina@example.com", role=Role.STAFF)
    login(client, Role.STAFF, user_id)
    body = {"phone": "+8801700000200", "designation": "Clerk", "joinDate": "2026-02-01"}

    first = client.put("/api/staffs/complete-profile", json=body)
    second = client.put("/api/staffs/complete-profile", json=body)

    assert first.status_code == 200
    assert first.get_json()["staff"]["staffId"] == "STF-0001"
    assert second.status_code == 409
    assert second.get_json()["message"] == "Profile already completed."


def test_update_profile_before_completion_is_not_found(client):
    login(client, Role.STAFF)
    resp = client.put("/api/staffs/update-profile", json={"address": "Road 2"})
    assert resp.status_code == 404


def test_me_without_profile_is_not_found(client):
    login(client, Role.STAFF)
    assert client.get("/api/staffs/me").status_code == 404


def test_salary_update_and_history(client, backend):
    pk = backend.staffs.insert({"staffId": "STF-0300", "phone": "+8801700000300", "salary": 1000})
    login(client, Role.ADMIN)

    resp = client.put(f"/api/staffs/{pk}/salary", json={"salary": 1200, "reason": "Review"})
    history = client.get(f"/api/staffs/{pk}/salary-history")

    assert resp.status_code == 200
    assert resp.get_json()["salary"] == 1200
    [entry] = history.get_json()["data"]
    assert entry["previousSalary"] == 1000
    assert entry["newSalary"] == 1200
    assert entry["staffId"] == str(pk)


def test_malformed_staff_id_in_path_is_bad_request(client):
    login(client)
    resp = client.put("/api/staffs/not-an-id/salary", json={"salary": 10})
    assert resp.status_code == 400


def test_salary_pin_flow(client, backend):
    user_id = backend.users.add(name="Rina", email="rina@example.com", role=Role.STAFF)
    pk = backend.staffs.insert({"staffId": "STF-0400", "phone": "+8801700000400", "userId": user_id, "salary": 900})
    login(client, Role.STAFF, user_id)

    assert client.put(f"/api/staffs/{pk}/salary-pin", json={"pin": "2468"}).status_code == 200
    wrong = client.post(f"/api/staffs/{pk}/salary-pin/verify", json={"pin": "0000"})
    right = client.post(f"/api/staffs/{pk}/salary-pin/verify", json={"pin": "2468"})

    assert wrong.status_code == 401
    assert right.get_json()["data"] == {"salary": 900, "salaryVisibleToEmployee": True}


def test_pin_reset_needs_no_session(client, backend):
    user_id = backend.users.add(name="Rina", email="rina@example.com", role=Role.STAFF)
    pk = backend.staffs.insert({"staffId": "STF-0500", "phone": "+8801700000500", "userId": user_id})
    login(client, Role.STAFF, user_id)
    token = client.post(f"/api/staffs/{pk}/salary-pin/forgot").get_json()["resetToken"]

    with client.session_transaction() as sess:
        sess.clear()
    resp = client.post("/api/staffs/salary-pin/reset", json={"token": token, "pin": "1357"})

    assert resp.status_code == 200
    assert backend.staffs.get_by_pk(pk).is_salary_pin_set


def test_shift_assignment_endpoint(client, backend):
    pk = backend.staffs.insert({"staffId": "STF-0600", "phone": "+8801700000600"})
    shift_id = backend.shifts.add()
    login(client, Role.HR_MANAGER)

    resp = client.post(
        "/api/shift-assignments",
        json={"staffIds": [str(pk)], "shiftId": str(shift_id), "startDate": "2026-04-01"},
    )

    assert resp.status_code == 200
    assert resp.get_json()["successCount"] == 1


def test_shift_assignment_failure_reports_summary(client, backend):
    shift_id = backend.shifts.add()
    login(client, Role.HR_MANAGER)

    resp = client.post(
        "/api/shift-assignments",
        json={"staffIds": [str(ObjectId())], "shiftId": str(shift_id), "startDate": "2026-04-01"},
    )

    body = resp.get_json()
    assert resp.status_code == 400
    assert body["success"] is False
    assert body["failureCount"] == 1
    assert body["message"] == "One or more staff IDs are invalid"


def test_unknown_route_keeps_json_envelope(client):
    resp = client.get("/api/nothing-here")
    assert resp.status_code == 404
    assert resp.get_json()["success"] is False
