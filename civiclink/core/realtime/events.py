# Standard library imports
from collections.abc import Callable
from datetime import UTC, datetime
import enum
from typing import Any

# Third-party imports
from fastapi.encoders import jsonable_encoder
from pydantic import BaseModel, Field
from sqlalchemy import inspect


class Topic(str, enum.Enum):
    """Topics mirror the tables whose rows are published."""

    ISSUES = "issues"
    VOTES = "issue_upvotes"
    COMMENTS = "issue_updates"
    NOTIFICATIONS = "notifications"


class ChangeType(str, enum.Enum):
    INSERT = "INSERT"
    UPDATE = "UPDATE"
    DELETE = "DELETE"


class ChangeEvent(BaseModel):
    topic: Topic
    event_type: ChangeType
    record: dict[str, Any] = Field(default_factory=dict)
    old_record: dict[str, Any] | None = None
    emitted_at: datetime = Field(default_factory=lambda: datetime.now(UTC))


Predicate = Callable[[ChangeEvent], bool]


def to_record(instance: Any) -> dict[str, Any]:
    """Column values of a mapped instance as a JSON-safe dict."""
    mapper = inspect(instance).mapper
    values = {attr.key: getattr(instance, attr.key) for attr in mapper.column_attrs}
    return jsonable_encoder(values)


def field_equals(field: str, value: Any) -> Predicate:
    """Predicate matching events whose record (or old record) has ``field == value``."""
    expected = str(value)

    def _predicate(event: ChangeEvent) -> bool:
        record = event.record or event.old_record or {}
        return str(record.get(field)) == expected

    return _predicate
