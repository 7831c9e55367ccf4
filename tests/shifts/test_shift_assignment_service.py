from datetime import datetime

import pytest
from bson import ObjectId

from fakes import FakeUnitOfWork, InMemoryAssignments, InMemoryShifts, InMemoryStaffs
from staffhub.core.enums import Role
from staffhub.core.exceptions import AuthorizationError, ValidationError
from staffhub.shifts.service import ShiftAssignmentService

START = datetime(2026, 4, 1)


@pytest.fixture()
def env():
    staffs = InMemoryStaffs()
    shifts = InMemoryShifts()
    assignments = InMemoryAssignments()
    uow = FakeUnitOfWork(staffs, assignments)
    service = ShiftAssignmentService(shifts, assignments, staffs, uow)

    pks = [
        staffs.insert({"staffId": f"STF-{i:04d}", "phone": f"+88017000000{i}", "designation": "Clerk"})
        for i in range(1, 3)
    ]
    return service, staffs, shifts, assignments, uow, pks


def _assign(service, pks, shift_id, role=Role.HR_MANAGER):
    return service.assign_shift(
        current_role=role, staff_pks=pks, shift_id=shift_id, start_date=START, assigned_by=ObjectId()
    )


def test_assigns_every_staff(env):
    service, _, shifts, assignments, uow, pks = env
    shift_id = shifts.add(name="Day")

    summary = _assign(service, pks, shift_id)

    assert summary["successCount"] == 2
    assert summary["failureCount"] == 0
    assert [r["staffId"] for r in summary["results"]] == [str(pk) for pk in pks]
    assert all(a.is_active and a.shift_id == shift_id for a in assignments.docs.values())
    assert uow.committed == 1


def test_reassignment_closes_previous_the_day_before(env):
    service, _, shifts, assignments, _, pks = env
    day = shifts.add(name="Day")
    night = shifts.add(name="Night")
    old_id = assignments.create(staff_pk=pks[0], shift_id=day, start_date=datetime(2026, 1, 1), assigned_by=None)

    _assign(service, pks[:1], night)

    old = assignments.docs[old_id]
    assert old.is_active is False
    assert old.end_date == datetime(2026, 3, 31)
    active = assignments.get_active_for_staff(pks[0])
    assert active.shift_id == night
    assert active.start_date == START


def test_unknown_staff_aborts_whole_batch(env):
    service, _, shifts, assignments, uow, pks = env
    shift_id = shifts.add()

    summary = _assign(service, [pks[0], ObjectId()], shift_id)

    assert summary["successCount"] == 0
    assert summary["failureCount"] == 2
    assert summary["errors"][0]["error"] == "One or more staff IDs are invalid"
    assert assignments.docs == {}
    assert uow.aborted == 1


def test_inactive_shift_is_rejected(env):
    service, _, shifts, assignments, _, pks = env
    shift_id = shifts.add(is_active=False)

    summary = _assign(service, pks, shift_id)

    assert summary["failureCount"] == 2
    assert summary["errors"][0]["error"] == "Invalid or inactive Shift"
    assert assignments.docs == {}


def test_duplicate_staff_ids_are_assigned_once(env):
    service, _, shifts, assignments, _, pks = env
    shift_id = shifts.add()

    summary = _assign(service, [pks[0], pks[0]], shift_id)

    assert summary["successCount"] == 1
    assert len(assignments.docs) == 1


def test_requires_manager_role(env):
    service, _, shifts, _, _, pks = env
    with pytest.raises(AuthorizationError):
        _assign(service, pks, shifts.add(), role=Role.TEAM_LEADER)


def test_requires_at_least_one_staff(env):
    service, _, shifts, _, _, _ = env
    with pytest.raises(ValidationError):
        _assign(service, [], shifts.add())
