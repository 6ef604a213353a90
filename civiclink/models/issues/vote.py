# Third-party imports
from sqlalchemy import Column, ForeignKey, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship

# Local application imports
from civiclink.models.base import Base
from civiclink.models.mixins.uuid_timestamp import UUIDTimeStampMixin


class Vote(UUIDTimeStampMixin, Base):
    """An active upvote. The row existing is the vote; removing a vote deletes it."""

    __tablename__ = "issue_upvotes"
    __table_args__ = (UniqueConstraint("issue_id", "user_id", name="unique_issue_voter"),)

    issue_id = Column(Uuid(as_uuid=True), ForeignKey("issues.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Uuid(as_uuid=True), nullable=False, index=True)

    issue = relationship("Issue", back_populates="votes")
