# Standard library imports
import enum

# Third-party imports
from sqlalchemy import Column, DateTime, Enum as SQLEnum, Float, Integer, String, Text, Uuid
from sqlalchemy.orm import relationship

# Local application imports
from civiclink.models.base import Base
from civiclink.models.mixins.uuid_timestamp import UUIDTimeStampMixin


class IssueStatus(str, enum.Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    RESOLVED = "resolved"
    REJECTED = "rejected"


class IssueCategory(str, enum.Enum):
    ROADS = "roads"
    LIGHTING = "lighting"
    WASTE = "waste"
    WATER = "water"
    PARKS = "parks"
    SAFETY = "safety"
    OTHER = "other"


def enum_values(enum_cls: type[enum.Enum]) -> list[str]:
    return [member.value for member in enum_cls]


class Issue(UUIDTimeStampMixin, Base):
    __tablename__ = "issues"

    # Issue details (owned by the reporter)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=False)
    category = Column(SQLEnum(IssueCategory, name="issue_category", values_callable=enum_values), nullable=False)
    photo_url = Column(String(1024), nullable=True)

    # Location information
    address = Column(Text, nullable=True)
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)

    reporter_id = Column(Uuid(as_uuid=True), nullable=False, index=True)

    # Triage fields (owned by administrators)
    status = Column(
        SQLEnum(IssueStatus, name="issue_status", values_callable=enum_values),
        nullable=False,
        default=IssueStatus.PENDING,
        index=True,
    )
    department = Column(String(100), nullable=True)
    resolved_at = Column(DateTime(timezone=True), nullable=True)

    # Denormalized count of rows in issue_upvotes; always re-derived, never incremented
    upvotes = Column(Integer, nullable=False, default=0, index=True)

    votes = relationship("Vote", back_populates="issue", cascade="all, delete-orphan", passive_deletes=True)
    comments = relationship("Comment", back_populates="issue", cascade="all, delete-orphan", passive_deletes=True)
