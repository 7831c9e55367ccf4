"""Roster aggregation built from named stages.

Each stage is a pure function ``(RosterQuery, RosterFilters) -> RosterQuery``
that may append aggregation stages. ``ROSTER_STAGES`` fixes the order:

1. staff-only filters, cheapest, narrowing the working set first
2. join the linked user (staff without a user are kept)
3. drop privileged roles (needs the user join)
4. free-text search (needs staff and user fields)
5. join the branch
6. join today's attendance
7. join the currently active shift
8. filter by current shift (needs the shift join)

``build_pipeline`` then forks into a count branch and a page branch that
share the exact same filter prefix, so ``total`` always agrees with what
paging through the result would return.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from datetime import datetime
from functools import reduce
from typing import Any, Callable, Dict, List, Tuple

from ..common.datetime_utils import day_bounds
from ..core.constants import ATTENDANCE_DAYS, BRANCHES, SHIFT_ASSIGNMENTS, SHIFTS, USERS
from ..core.enums import PRIVILEGED_ROLES
from .filters import RosterFilters

Stage = Dict[str, Any]

USER_FIELDS = {"name": 1, "email": 1, "image": 1, "role": 1}
BRANCH_FIELDS = {"name": 1, "code": 1}
ATTENDANCE_FIELDS = {
    "date": 1,
    "status": 1,
    "checkInAt": 1,
    "checkOutAt": 1,
    "lateMinutes": 1,
    "totalMinutes": 1,
}
SENSITIVE_FIELDS = ("salary", "salaryPin", "salaryPinResetToken", "salaryPinResetExpires")
SEARCH_FIELDS = ("staffId", "user.name", "user.email", "department", "designation")


@dataclass(frozen=True)
class RosterQuery:
    """Accumulated filter/join stages plus the instant they are evaluated at."""

    now: datetime
    stages: Tuple[Stage, ...] = ()

    def then(self, *stages: Stage) -> "RosterQuery":
        return replace(self, stages=self.stages + tuple(stages))


RosterStage = Callable[[RosterQuery, RosterFilters], RosterQuery]


def _join_one(collection: str, local_field: str, alias: str, pipeline: List[Stage]) -> List[Stage]:
    """Left join at most one document; the alias is absent when nothing matches."""

    return [
        {
            "$lookup": {
                "from": collection,
                "let": {"ref": f"${local_field}"},
                "pipeline": [{"$match": {"$expr": {"$eq": ["$_id", "$$ref"]}}}, *pipeline, {"$limit": 1}],
                "as": alias,
            }
        },
        {"$unwind": {"path": f"${alias}", "preserveNullAndEmptyArrays": True}},
    ]


def match_staff_fields(q: RosterQuery, f: RosterFilters) -> RosterQuery:
    cond: Dict[str, Any] = {}
    if f.department:
        cond["department"] = f.department
    if f.designation:
        cond["designation"] = f.designation
    if f.status:
        cond["status"] = f.status.value
    if f.branch_id:
        cond["branchId"] = f.branch_id
    return q.then({"$match": cond}) if cond else q


def join_user(q: RosterQuery, f: RosterFilters) -> RosterQuery:
    return q.then(*_join_one(USERS, "userId", "user", [{"$project": USER_FIELDS}]))


def exclude_privileged(q: RosterQuery, f: RosterFilters) -> RosterQuery:
    if not f.exclude_admins:
        return q
    # $nin also matches a missing user.role, so unlinked staff stay listed.
    roles = sorted(r.value for r in PRIVILEGED_ROLES)
    return q.then({"$match": {"user.role": {"$nin": roles}}})


def match_search(q: RosterQuery, f: RosterFilters) -> RosterQuery:
    if not f.search:
        return q
    pattern = re.escape(f.search)
    return q.then(
        {"$match": {"$or": [{field: {"$regex": pattern, "$options": "i"}} for field in SEARCH_FIELDS]}}
    )


def join_branch(q: RosterQuery, f: RosterFilters) -> RosterQuery:
    return q.then(*_join_one(BRANCHES, "branchId", "branch", [{"$project": BRANCH_FIELDS}]))


def join_today_attendance(q: RosterQuery, f: RosterFilters) -> RosterQuery:
    start, end = day_bounds(q.now)
    return q.then(
        {
            "$lookup": {
                "from": ATTENDANCE_DAYS,
                "let": {"staffPk": "$_id"},
                "pipeline": [
                    {
                        "$match": {
                            "$expr": {
                                "$and": [
                                    {"$eq": ["$staffId", "$$staffPk"]},
                                    {"$gte": ["$date", start]},
                                    {"$lte": ["$date", end]},
                                ]
                            }
                        }
                    },
                    # duplicate rows for one day must not multiply the staff row
                    {"$sort": {"date": -1, "_id": -1}},
                    {"$limit": 1},
                    {"$project": ATTENDANCE_FIELDS},
                ],
                "as": "todayAttendance",
            }
        },
        {"$unwind": {"path": "$todayAttendance", "preserveNullAndEmptyArrays": True}},
    )


def join_current_shift(q: RosterQuery, f: RosterFilters) -> RosterQuery:
    now = q.now
    return q.then(
        {
            "$lookup": {
                "from": SHIFT_ASSIGNMENTS,
                "let": {"staffPk": "$_id"},
                "pipeline": [
                    {
                        "$match": {
                            "$expr": {
                                "$and": [
                                    {"$eq": ["$staffId", "$$staffPk"]},
                                    {"$eq": ["$isActive", True]},
                                    {"$lte": ["$startDate", now]},
                                    {
                                        "$or": [
                                            {"$eq": [{"$ifNull": ["$endDate", None]}, None]},
                                            {"$gte": ["$endDate", now]},
                                        ]
                                    },
                                ]
                            }
                        }
                    },
                    # overlapping active rows are a data anomaly; newest wins
                    {"$sort": {"startDate": -1, "createdAt": -1, "_id": -1}},
                    {"$limit": 1},
                    {
                        "$lookup": {
                            "from": SHIFTS,
                            "localField": "shiftId",
                            "foreignField": "_id",
                            "as": "shift",
                        }
                    },
                    {"$unwind": "$shift"},
                    {
                        "$project": {
                            "_id": "$shift._id",
                            "name": "$shift.name",
                            "startTime": "$shift.startTime",
                            "endTime": "$shift.endTime",
                        }
                    },
                ],
                "as": "currentShift",
            }
        },
        {"$unwind": {"path": "$currentShift", "preserveNullAndEmptyArrays": True}},
    )


def match_current_shift(q: RosterQuery, f: RosterFilters) -> RosterQuery:
    if not f.shift_id:
        return q
    # absent currentShift never equals an id
    return q.then({"$match": {"currentShift._id": f.shift_id}})


ROSTER_STAGES: Tuple[RosterStage, ...] = (
    match_staff_fields,
    join_user,
    exclude_privileged,
    match_search,
    join_branch,
    join_today_attendance,
    join_current_shift,
    match_current_shift,
)

SORT_NEWEST_FIRST: Stage = {"$sort": {"createdAt": -1, "_id": -1}}
HIDE_SENSITIVE: Stage = {"$project": {field: 0 for field in SENSITIVE_FIELDS}}


def build_filter_stages(filters: RosterFilters, now: datetime) -> List[Stage]:
    query = reduce(lambda q, stage: stage(q, filters), ROSTER_STAGES, RosterQuery(now=now))
    return list(query.stages)


def build_pipeline(filters: RosterFilters, now: datetime) -> List[Stage]:
    """Full aggregation: shared filter prefix, then ``$facet`` into page + count."""

    return build_filter_stages(filters, now) + [
        {
            "$facet": {
                "staffs": [
                    SORT_NEWEST_FIRST,
                    {"$skip": filters.skip},
                    {"$limit": filters.limit},
                    HIDE_SENSITIVE,
                ],
                "total": [{"$count": "total"}],
            }
        }
    ]
