from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from bson import ObjectId

from ..common.validators import coerce_bool, coerce_positive_int, optional_str
from ..core.constants import DEFAULT_PAGE, DEFAULT_ROSTER_LIMIT, MAX_ROSTER_LIMIT
from ..core.enums import StaffStatus
from ..core.exceptions import ValidationError
from ..database.mongo_base import optional_object_id

# Query-string key -> RosterFilters attribute
QUERY_KEYS = {
    "page": "page",
    "limit": "limit",
    "search": "search",
    "department": "department",
    "designation": "designation",
    "status": "status",
    "branchId": "branch_id",
    "shiftId": "shift_id",
    "excludeAdmins": "exclude_admins",
}


@dataclass(frozen=True)
class RosterFilters:
    """Every filter the roster query recognizes, already validated."""

    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_ROSTER_LIMIT
    search: Optional[str] = None
    department: Optional[str] = None
    designation: Optional[str] = None
    status: Optional[StaffStatus] = None
    branch_id: Optional[ObjectId] = None
    shift_id: Optional[ObjectId] = None
    exclude_admins: bool = False

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit

    @classmethod
    def from_query_args(
        cls,
        args: Mapping[str, Any],
        *,
        default_limit: int = DEFAULT_ROSTER_LIMIT,
        max_limit: int = MAX_ROSTER_LIMIT,
    ) -> "RosterFilters":
        """Lower an HTTP query-parameter bag into filters.

        Non-numeric or non-positive page/limit fall back to defaults and limit
        is clamped to ``max_limit``. Malformed ``branchId``/``shiftId`` or an
        unknown ``status`` raise ValidationError instead of matching nothing.
        """

        status_s = optional_str(args.get("status"))
        status: Optional[StaffStatus] = None
        if status_s:
            try:
                status = StaffStatus(status_s.lower())
            except ValueError:
                raise ValidationError("status must be one of: active, inactive, terminated")

        limit = min(coerce_positive_int(args.get("limit"), default_limit), int(max_limit))

        return cls(
            page=coerce_positive_int(args.get("page"), DEFAULT_PAGE),
            limit=limit,
            search=optional_str(args.get("search")),
            department=optional_str(args.get("department")),
            designation=optional_str(args.get("designation")),
            status=status,
            branch_id=optional_object_id(args.get("branchId"), "branchId"),
            shift_id=optional_object_id(args.get("shiftId"), "shiftId"),
            exclude_admins=coerce_bool(args.get("excludeAdmins")),
        )

    def cache_key(self) -> dict:
        """Serialized parameter bag, in query-string key names."""

        out = {}
        for key, attr in QUERY_KEYS.items():
            value = getattr(self, attr)
            if value is None or value is False:
                continue
            if isinstance(value, StaffStatus):
                value = value.value
            elif isinstance(value, ObjectId):
                value = str(value)
            out[key] = value
        return out
