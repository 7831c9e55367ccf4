from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional, Protocol, Sequence, Union

from bson import ObjectId

from .model import SalaryHistoryEntry, Staff


class StaffRepository(Protocol):
    """Repository interface for Staff.

    Note (DIP): services depend on this interface, never on pymongo directly.
    Methods taking ``session`` join the caller's transaction when one is given.
    """

    def get_by_pk(self, pk: ObjectId, *, session: Optional[Any] = None) -> Optional[Staff]:
        raise NotImplementedError

    def get_by_user_id(self, user_id: ObjectId, *, session: Optional[Any] = None) -> Optional[Staff]:
        raise NotImplementedError

    def get_by_staff_id(self, staff_id: str, *, session: Optional[Any] = None) -> Optional[Staff]:
        raise NotImplementedError

    def get_by_reset_token_hash(self, token_hash: str, *, session: Optional[Any] = None) -> Optional[Staff]:
        raise NotImplementedError

    def insert(self, fields: Dict[str, Any], *, session: Optional[Any] = None) -> ObjectId:
        raise NotImplementedError

    def update_fields(self, pk: ObjectId, fields: Dict[str, Any], *, session: Optional[Any] = None) -> bool:
        raise NotImplementedError

    def mark_profile_completed(self, pk: ObjectId, fields: Dict[str, Any], *, session: Optional[Any] = None) -> bool:
        """Apply ``fields`` and flip ``profileCompleted`` only if it is still false."""

        raise NotImplementedError

    def update_completed_profile(self, user_id: ObjectId, fields: Dict[str, Any]) -> Optional[Staff]:
        raise NotImplementedError


class SalaryHistoryRepository(Protocol):
    def append(
        self,
        *,
        staff_pk: ObjectId,
        previous_salary: Union[int, float],
        new_salary: Union[int, float],
        changed_by: ObjectId,
        reason: Optional[str],
        effective_date: datetime,
        session: Optional[Any] = None,
    ) -> ObjectId:
        raise NotImplementedError

    def list_for_staff(self, staff_pk: ObjectId) -> Sequence[SalaryHistoryEntry]:
        """Newest first."""

        raise NotImplementedError
