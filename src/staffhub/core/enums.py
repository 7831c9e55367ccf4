from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User role used for authorization checks."""

    STAFF = "staff"
    TEAM_LEADER = "team_leader"
    HR_MANAGER = "hr_manager"
    ADMIN = "admin"
    SUPER_ADMIN = "super_admin"


PRIVILEGED_ROLES = frozenset({Role.ADMIN, Role.SUPER_ADMIN})
STAFF_MANAGER_ROLES = frozenset({Role.HR_MANAGER, Role.ADMIN, Role.SUPER_ADMIN})


class StaffStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    TERMINATED = "terminated"


class BloodGroup(str, Enum):
    A_POS = "A+"
    A_NEG = "A-"
    B_POS = "B+"
    B_NEG = "B-"
    AB_POS = "AB+"
    AB_NEG = "AB-"
    O_POS = "O+"
    O_NEG = "O-"
