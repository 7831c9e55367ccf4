from __future__ import annotations

from contextlib import contextmanager
from datetime import datetime
from typing import Any, Dict, Iterator, Optional, Tuple

from bson import ObjectId
from bson.errors import InvalidId
from pymongo.client_session import ClientSession
from pymongo.database import Database

from ..core.exceptions import ValidationError
from .connection import DatabaseConnection


@contextmanager
def transaction(conn_factory: DatabaseConnection) -> Iterator[Tuple[Database, ClientSession]]:
    """Run a block inside a multi-document transaction.

    Commits when the block finishes, aborts and re-raises on any exception.
    Requires a replica set or sharded cluster.
    """

    session = conn_factory.client.start_session()
    try:
        session.start_transaction()
        try:
            yield conn_factory.db, session
        except Exception:
            session.abort_transaction()
            raise
        session.commit_transaction()
    finally:
        session.end_session()


def to_object_id(value: Any, field_name: str = "id") -> ObjectId:
    """Validate identifier shape; malformed ids are a client error, not a miss."""

    if isinstance(value, ObjectId):
        return value
    try:
        return ObjectId(str(value).strip())
    except (InvalidId, TypeError):
        raise ValidationError(f"{field_name} is not a valid identifier")


def optional_object_id(value: Any, field_name: str = "id") -> Optional[ObjectId]:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    return to_object_id(value, field_name)


def to_jsonable(value: Any) -> Any:
    """Convert ObjectId/datetime values (recursively) into JSON-friendly forms."""

    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, dict):
        return {k: to_jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_jsonable(v) for v in value]
    return value


def stamp_new(doc: Dict[str, Any], now: datetime) -> Dict[str, Any]:
    doc["createdAt"] = now
    doc["updatedAt"] = now
    return doc
