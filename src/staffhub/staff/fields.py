"""Whitelists and coercion for staff payloads.

Payload keys are the camelCase names stored on the document. Every flow
declares which keys it accepts; anything else is rejected rather than
silently dropped, so a staff member cannot smuggle ``salary`` into a
self-service update.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Iterable, Mapping

from ..common.datetime_utils import coerce_datetime
from ..common.validators import coerce_bool, optional_str, require_non_empty, require_non_negative_number
from ..core.enums import BloodGroup, StaffStatus
from ..core.exceptions import ValidationError
from ..database.mongo_base import optional_object_id

SELF_EDITABLE_FIELDS = frozenset(
    {
        "phone",
        "dateOfBirth",
        "bloodGroup",
        "address",
        "emergencyContact",
        "fathersName",
        "mothersName",
        "spouseName",
        "bankAccountNo",
        "bankAccountName",
        "bankName",
    }
)

PROFILE_COMPLETION_FIELDS = SELF_EDITABLE_FIELDS | {
    "nationalId",
    "branchId",
    "department",
    "designation",
    "joinDate",
}

CREATE_FIELDS = frozenset(
    {"staffId", "phone", "branchId", "department", "designation", "joinDate", "userId", "salary"}
)

ADMIN_EDITABLE_FIELDS = PROFILE_COMPLETION_FIELDS | {
    "status",
    "exitDate",
    "salary",
    "salaryVisibleToEmployee",
}

CREATE_REQUIRED_FIELDS = ("staffId", "phone", "designation", "joinDate")
SHELL_REQUIRED_FIELDS = ("phone", "designation", "joinDate")


def _required_string(key: str) -> Callable[[Any], Any]:
    return lambda v: require_non_empty(v, key)


def _date(key: str) -> Callable[[Any], Any]:
    return lambda v: coerce_datetime(v, key)


def _object_id(key: str) -> Callable[[Any], Any]:
    return lambda v: optional_object_id(v, key)


def _status(value: Any) -> str:
    try:
        return StaffStatus(str(value).strip().lower()).value
    except ValueError:
        raise ValidationError("status must be one of: active, inactive, terminated")


def _blood_group(value: Any) -> Any:
    v = optional_str(value)
    if v is None:
        return None
    try:
        return BloodGroup(v.upper()).value
    except ValueError:
        raise ValidationError("bloodGroup is not valid")


def _emergency_contact(value: Any) -> Any:
    if value is None:
        return None
    if not isinstance(value, Mapping):
        raise ValidationError("emergencyContact must be an object")
    return {k: optional_str(value.get(k)) for k in ("name", "relation", "phone")}


_COERCERS: Dict[str, Callable[[Any], Any]] = {
    "staffId": _required_string("staffId"),
    "phone": _required_string("phone"),
    "designation": _required_string("designation"),
    "department": optional_str,
    "nationalId": optional_str,
    "address": optional_str,
    "fathersName": optional_str,
    "mothersName": optional_str,
    "spouseName": optional_str,
    "bankAccountNo": optional_str,
    "bankAccountName": optional_str,
    "bankName": optional_str,
    "joinDate": _date("joinDate"),
    "dateOfBirth": _date("dateOfBirth"),
    "exitDate": _date("exitDate"),
    "branchId": _object_id("branchId"),
    "userId": _object_id("userId"),
    "status": _status,
    "bloodGroup": _blood_group,
    "emergencyContact": _emergency_contact,
    "salary": lambda v: require_non_negative_number(v, "salary"),
    "salaryVisibleToEmployee": coerce_bool,
}


def clean_fields(payload: Mapping[str, Any], allowed: Iterable[str]) -> Dict[str, Any]:
    """Validate and coerce ``payload`` against the ``allowed`` key set."""

    if not isinstance(payload, Mapping):
        raise ValidationError("Payload must be an object")

    allowed = frozenset(allowed)
    unknown = sorted(k for k in payload if k not in allowed)
    if unknown:
        raise ValidationError(f"Field(s) not allowed: {', '.join(unknown)}")

    return {key: _COERCERS[key](value) for key, value in payload.items()}


def require_fields(fields: Mapping[str, Any], required: Iterable[str]) -> None:
    missing = [k for k in required if fields.get(k) in (None, "")]
    if missing:
        raise ValidationError(f"Missing required field(s): {', '.join(missing)}")
