from __future__ import annotations

import hashlib
import logging
import secrets
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, Mapping, Optional, Sequence, Union

from bson import ObjectId
from werkzeug.security import check_password_hash, generate_password_hash

from ..branches.repository import BranchRepository
from ..common.datetime_utils import now_local
from ..common.validators import optional_str, require_non_negative_number, require_pin
from ..core.constants import DEFAULT_PIN_RESET_TTL_MINUTES, MIN_SALARY_PIN_LENGTH, STAFF_ID_COUNTER
from ..core.enums import PRIVILEGED_ROLES, STAFF_MANAGER_ROLES, Role
from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from ..counters.codes import format_staff_code
from ..counters.repository import CounterRepository
from ..database.unit_of_work import UnitOfWork
from ..users.repository import UserRepository
from .fields import (
    ADMIN_EDITABLE_FIELDS,
    CREATE_FIELDS,
    CREATE_REQUIRED_FIELDS,
    PROFILE_COMPLETION_FIELDS,
    SELF_EDITABLE_FIELDS,
    SHELL_REQUIRED_FIELDS,
    clean_fields,
    require_fields,
)
from .model import SalaryHistoryEntry, Staff
from .repository import SalaryHistoryRepository, StaffRepository

logger = logging.getLogger(__name__)


def _hash_token(token: str) -> str:
    # Deterministic so the stored value can be looked up directly.
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


class StaffService:
    """Use cases: staff creation, profile completion/update, salary and PIN.

    Multi-step mutations run inside ``uow.transaction()`` so that every write
    in the flow commits together or not at all.
    """

    def __init__(
        self,
        staffs: StaffRepository,
        salary_history: SalaryHistoryRepository,
        users: UserRepository,
        branches: BranchRepository,
        counters: CounterRepository,
        uow: UnitOfWork,
        *,
        pin_reset_ttl_minutes: int = DEFAULT_PIN_RESET_TTL_MINUTES,
        clock: Callable[[], datetime] = now_local,
    ):
        self._staffs = staffs
        self._salary_history = salary_history
        self._users = users
        self._branches = branches
        self._counters = counters
        self._uow = uow
        self._pin_reset_ttl = timedelta(minutes=int(pin_reset_ttl_minutes))
        self._clock = clock

    # ---- helpers -----------------------------------------------------------

    @staticmethod
    def _require_manager(current_role: Role) -> None:
        if current_role not in STAFF_MANAGER_ROLES:
            raise AuthorizationError("Forbidden: You do not have permission")

    def _require_staff(self, staff_pk: ObjectId, *, session: Optional[Any] = None) -> Staff:
        staff = self._staffs.get_by_pk(staff_pk, session=session)
        if not staff:
            raise NotFoundError("Staff not found.")
        return staff

    @staticmethod
    def _require_owner(staff: Staff, user_id: ObjectId) -> None:
        if staff.user_id != user_id:
            raise AuthorizationError("You can only access your own salary information.")

    def _require_branch(self, fields: Mapping[str, Any], *, session: Optional[Any] = None) -> None:
        branch_id = fields.get("branchId")
        if branch_id is not None and not self._branches.get_by_id(branch_id, session=session):
            raise NotFoundError("Branch not found.")

    def _apply_salary_change(
        self,
        staff: Staff,
        new_salary: Union[int, float],
        *,
        changed_by: ObjectId,
        reason: Optional[str],
        session: Optional[Any],
    ) -> None:
        self._staffs.update_fields(staff.pk, {"salary": new_salary}, session=session)
        self._salary_history.append(
            staff_pk=staff.pk,
            previous_salary=staff.salary,
            new_salary=new_salary,
            changed_by=changed_by,
            reason=reason,
            effective_date=self._clock(),
            session=session,
        )

    # ---- lifecycle ---------------------------------------------------------

    def get_my_staff(self, user_id: ObjectId) -> Staff:
        staff = self._staffs.get_by_user_id(user_id)
        if not staff:
            raise NotFoundError("No staff profile found.")
        return staff

    def create_staff(self, *, current_role: Role, payload: Mapping[str, Any]) -> Staff:
        self._require_manager(current_role)

        fields = clean_fields(payload, CREATE_FIELDS)
        require_fields(fields, CREATE_REQUIRED_FIELDS)

        with self._uow.transaction() as session:
            if self._staffs.get_by_staff_id(fields["staffId"], session=session):
                raise ConflictError("Staff with this ID already exists.")
            self._require_branch(fields, session=session)
            if fields.get("userId") and not self._users.get_by_id(fields["userId"], session=session):
                raise NotFoundError("User not found.")
            if fields.get("userId") and self._staffs.get_by_user_id(fields["userId"], session=session):
                raise ConflictError("This user is already linked to a staff record.")

            pk = self._staffs.insert(fields, session=session)
            staff = self._require_staff(pk, session=session)

        logger.info("staff created staffId=%s pk=%s", staff.staff_id, staff.pk)
        return staff

    def complete_profile(self, *, user_id: ObjectId, payload: Mapping[str, Any]) -> Staff:
        # blank values must not erase what an admin already set on the record
        fields = {k: v for k, v in clean_fields(payload, PROFILE_COMPLETION_FIELDS).items() if v is not None}

        with self._uow.transaction() as session:
            staff = self._staffs.get_by_user_id(user_id, session=session)
            if staff and staff.profile_completed:
                raise ConflictError("Profile already completed.")
            self._require_branch(fields, session=session)

            if staff:
                pk = staff.pk
            else:
                require_fields(fields, SHELL_REQUIRED_FIELDS)
                seq = self._counters.next_value(STAFF_ID_COUNTER, session=session)
                pk = self._staffs.insert(
                    {**fields, "userId": user_id, "staffId": format_staff_code(seq)},
                    session=session,
                )

            # Conditional on profileCompleted still being false: a concurrent
            # completion that won the race makes this a no-op.
            if not self._staffs.mark_profile_completed(pk, fields, session=session):
                raise ConflictError("Profile already completed.")
            result = self._require_staff(pk, session=session)

        logger.info("profile completed staffId=%s", result.staff_id)
        return result

    def update_profile(self, *, user_id: ObjectId, payload: Mapping[str, Any]) -> Staff:
        fields = clean_fields(payload, SELF_EDITABLE_FIELDS)
        if not fields:
            raise ValidationError("Nothing to update")

        updated = self._staffs.update_completed_profile(user_id, fields)
        if not updated:
            raise NotFoundError("Profile not found or not completed yet.")
        return updated

    def update_staff(
        self,
        *,
        current_role: Role,
        actor_user_id: ObjectId,
        staff_pk: ObjectId,
        payload: Mapping[str, Any],
        role: Optional[str] = None,
        reason: Optional[str] = None,
    ) -> Staff:
        """Admin edit of a staff record, optionally changing the linked user's role."""

        self._require_manager(current_role)

        fields = clean_fields(payload, ADMIN_EDITABLE_FIELDS)
        new_salary = fields.pop("salary", None)

        new_role: Optional[Role] = None
        if role:
            try:
                new_role = Role(str(role).strip().lower())
            except ValueError:
                raise ValidationError("Invalid role")
            if new_role in PRIVILEGED_ROLES and current_role != Role.SUPER_ADMIN:
                raise AuthorizationError("Only a super admin can grant admin roles")

        with self._uow.transaction() as session:
            staff = self._require_staff(staff_pk, session=session)
            self._require_branch(fields, session=session)
            if new_role is not None and staff.user_id:
                target = self._users.get_by_id(staff.user_id, session=session)
                if target and target.role in PRIVILEGED_ROLES and current_role != Role.SUPER_ADMIN:
                    raise AuthorizationError("Only a super admin can change an admin's role")

            if fields:
                self._staffs.update_fields(staff.pk, fields, session=session)

            if new_role is not None:
                if not staff.user_id:
                    raise ValidationError("Staff has no linked user account")
                if not self._users.set_role(staff.user_id, new_role, session=session):
                    raise NotFoundError("User not found.")

            if new_salary is not None and new_salary != staff.salary:
                self._apply_salary_change(
                    staff, new_salary, changed_by=actor_user_id, reason=optional_str(reason), session=session
                )

            result = self._require_staff(staff.pk, session=session)

        logger.info("staff updated staffId=%s by=%s", result.staff_id, actor_user_id)
        return result

    # ---- salary ------------------------------------------------------------

    def update_salary(
        self,
        *,
        current_role: Role,
        actor_user_id: ObjectId,
        staff_pk: ObjectId,
        new_salary: Any,
        reason: Optional[str] = None,
    ) -> Staff:
        self._require_manager(current_role)
        amount = require_non_negative_number(new_salary, "salary")

        with self._uow.transaction() as session:
            staff = self._require_staff(staff_pk, session=session)
            if amount == staff.salary:
                return staff

            self._apply_salary_change(
                staff, amount, changed_by=actor_user_id, reason=optional_str(reason), session=session
            )
            result = self._require_staff(staff.pk, session=session)

        logger.info("salary changed staffId=%s by=%s", result.staff_id, actor_user_id)
        return result

    def get_salary_history(self, *, current_role: Role, staff_pk: ObjectId) -> Sequence[SalaryHistoryEntry]:
        self._require_manager(current_role)
        self._require_staff(staff_pk)
        return self._salary_history.list_for_staff(staff_pk)

    def set_salary_pin(self, *, user_id: ObjectId, staff_pk: ObjectId, pin: Any) -> None:
        pin = require_pin(pin, MIN_SALARY_PIN_LENGTH)
        staff = self._require_staff(staff_pk)
        self._require_owner(staff, user_id)
        if staff.is_salary_pin_set:
            raise ConflictError("Salary PIN already set. Use reset instead.")

        self._staffs.update_fields(staff.pk, {"salaryPin": generate_password_hash(pin)})
        logger.info("salary pin set staffId=%s", staff.staff_id)

    def view_salary(self, *, user_id: ObjectId, staff_pk: ObjectId, pin: Any) -> Dict[str, Any]:
        """Reveal salary to its owner. Every missing precondition fails closed."""

        staff = self._require_staff(staff_pk)
        self._require_owner(staff, user_id)

        if not staff.salary_visible_to_employee:
            raise AuthorizationError("Salary is not visible. Please contact HR.")
        if not staff.is_salary_pin_set:
            raise AuthenticationError("Salary PIN required. Please set a PIN first.")

        try:
            ok = check_password_hash(staff.salary_pin_hash, str(pin or ""))
        except ValueError:
            # corrupted or placeholder hash values
            ok = False
        if not ok:
            raise AuthenticationError("Invalid PIN")

        return {"salary": staff.salary, "salaryVisibleToEmployee": True}

    def request_pin_reset(self, *, user_id: ObjectId, staff_pk: ObjectId) -> str:
        """Issue a single-use reset token; only its hash is stored."""

        staff = self._require_staff(staff_pk)
        self._require_owner(staff, user_id)

        token = secrets.token_urlsafe(32)
        self._staffs.update_fields(
            staff.pk,
            {
                "salaryPinResetToken": _hash_token(token),
                "salaryPinResetExpires": self._clock() + self._pin_reset_ttl,
            },
        )
        logger.info("salary pin reset issued staffId=%s", staff.staff_id)
        return token

    def reset_salary_pin(self, *, token: str, new_pin: Any) -> None:
        pin = require_pin(new_pin, MIN_SALARY_PIN_LENGTH)
        if not token or not str(token).strip():
            raise AuthenticationError("Reset link is invalid or has expired.")

        staff = self._staffs.get_by_reset_token_hash(_hash_token(str(token).strip()))
        expires = staff.salary_pin_reset_expires if staff else None
        if not staff or not expires or expires < self._clock():
            raise AuthenticationError("Reset link is invalid or has expired.")

        self._staffs.update_fields(
            staff.pk,
            {
                "salaryPin": generate_password_hash(pin),
                "salaryPinResetToken": None,
                "salaryPinResetExpires": None,
            },
        )
        logger.info("salary pin reset staffId=%s", staff.staff_id)
