# Third-party imports
from sqlalchemy import Integer, String, text
from sqlalchemy.orm import Mapped, mapped_column

# Local application imports
from civiclink.models.base import Base
from civiclink.models.mixins.uuid_timestamp import UUIDTimeStampMixin


class Profile(UUIDTimeStampMixin, Base):
    """Public per-user record. ``id`` is the identity provider's user id."""

    __tablename__ = "profiles"

    full_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    points: Mapped[int] = mapped_column(Integer, default=0, server_default=text("0"), nullable=False, index=True)

    def __str__(self) -> str:
        return f"Profile: {self.full_name or self.id} ({self.points} pts)"
