from __future__ import annotations

from dataclasses import dataclass

from .branches.mongo_branch_repository import MongoBranchRepository
from .counters.mongo_counter_repository import MongoCounterRepository
from .database.connection import DatabaseConnection, DBConfig
from .database.unit_of_work import MongoUnitOfWork
from .roster.mongo_roster_repository import MongoRosterRepository
from .roster.service import RosterService
from .shifts.mongo_shift_repository import MongoShiftAssignmentRepository, MongoShiftRepository
from .shifts.service import ShiftAssignmentService
from .staff.mongo_staff_repository import MongoSalaryHistoryRepository, MongoStaffRepository
from .staff.service import StaffService
from .users.mongo_user_repository import MongoUserRepository


@dataclass(frozen=True)
class Container:
    roster_service: RosterService
    staff_service: StaffService
    shift_assignment_service: ShiftAssignmentService


def build_container(*, db_config: dict, pin_reset_ttl_minutes: int = 30) -> Container:
    config = DBConfig(uri=str(db_config["uri"]), database=str(db_config["database"]))
    conn = DatabaseConnection.get_instance(config)
    uow = MongoUnitOfWork(conn)

    staffs_repo = MongoStaffRepository(conn)
    salary_history_repo = MongoSalaryHistoryRepository(conn)
    users_repo = MongoUserRepository(conn)
    branches_repo = MongoBranchRepository(conn)
    counters_repo = MongoCounterRepository(conn)
    shifts_repo = MongoShiftRepository(conn)
    assignments_repo = MongoShiftAssignmentRepository(conn)
    roster_repo = MongoRosterRepository(conn)

    return Container(
        roster_service=RosterService(roster_repo),
        staff_service=StaffService(
            staffs_repo,
            salary_history_repo,
            users_repo,
            branches_repo,
            counters_repo,
            uow,
            pin_reset_ttl_minutes=pin_reset_ttl_minutes,
        ),
        shift_assignment_service=ShiftAssignmentService(shifts_repo, assignments_repo, staffs_repo, uow),
    )
