# Standard library imports
import uuid

# Third-party imports
from sqlalchemy import Boolean, ForeignKey, Index, String, Text, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column

# Local application imports
from civiclink.models.base import Base
from civiclink.models.mixins.uuid_timestamp import UUIDTimeStampMixin


class Notification(UUIDTimeStampMixin, Base):
    __tablename__ = "notifications"
    __table_args__ = (Index("ix_notifications_user_created", "user_id", "created_at"),)

    user_id: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), nullable=False, index=True, comment="Recipient")
    issue_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("issues.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    read: Mapped[bool] = mapped_column(Boolean, default=False, server_default=text("false"), nullable=False)

    def __str__(self) -> str:
        return f"Notification: {self.title} -> {self.user_id}"
