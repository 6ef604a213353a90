# Standard library imports
from datetime import datetime
from uuid import UUID

# Third-party imports
from pydantic import BaseModel, ConfigDict

# Local application imports
from civiclink.models.issues.issue import IssueStatus


class CommentCreate(BaseModel):
    # Length is checked after trimming by the comment service
    comment: str


class CommentUpdate(BaseModel):
    comment: str


class CommentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    issue_id: UUID
    author_id: UUID
    comment: str
    status: IssueStatus
    created_at: datetime
    updated_at: datetime
