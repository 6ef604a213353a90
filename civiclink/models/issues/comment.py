# Third-party imports
from sqlalchemy import Column, Enum as SQLEnum, ForeignKey, Text, Uuid
from sqlalchemy.orm import relationship

# Local application imports
from civiclink.models.base import Base
from civiclink.models.issues.issue import IssueStatus, enum_values
from civiclink.models.mixins.uuid_timestamp import UUIDTimeStampMixin


class Comment(UUIDTimeStampMixin, Base):
    __tablename__ = "issue_updates"

    issue_id = Column(Uuid(as_uuid=True), ForeignKey("issues.id", ondelete="CASCADE"), nullable=False, index=True)
    author_id = Column(Uuid(as_uuid=True), nullable=False, index=True)
    comment = Column(Text, nullable=False)
    # Issue status at the time the comment was posted
    status = Column(SQLEnum(IssueStatus, name="issue_status", values_callable=enum_values), nullable=False)

    issue = relationship("Issue", back_populates="comments")
