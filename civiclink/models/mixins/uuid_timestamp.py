# Standard library imports
from datetime import UTC, datetime
import uuid

# Third-party imports
from sqlalchemy import DateTime, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column


def utcnow() -> datetime:
    return datetime.now(UTC)


class UUIDTimeStampMixin:
    """A reusable mixin that:
    - Provides a UUID primary key named 'id'
    - Includes created_at and updated_at timestamps, set client-side so they
      are readable right after a flush without a refresh round trip

    The mixin is not mapped as its own table.
    """

    id: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
        onupdate=utcnow,
    )
