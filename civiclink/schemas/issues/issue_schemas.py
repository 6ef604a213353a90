# Standard library imports
from datetime import datetime
from enum import Enum
from uuid import UUID

# Third-party imports
from pydantic import BaseModel, ConfigDict, Field

# Local application imports
from civiclink.models.issues.issue import IssueCategory, IssueStatus


class IssueSortField(str, Enum):
    CREATED_AT = "created_at"
    UPVOTES = "upvotes"


class IssueCreate(BaseModel):
    title: str
    description: str
    category: IssueCategory
    address: str | None = Field(None, max_length=500)
    latitude: float | None = Field(None, ge=-90, le=90)
    longitude: float | None = Field(None, ge=-180, le=180)
    photo_url: str | None = Field(None, max_length=1024)
    # Reporter-suggested department; left empty for AI classification
    department: str | None = Field(None, max_length=100)


class IssueResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    description: str
    category: IssueCategory
    status: IssueStatus
    address: str | None
    latitude: float | None
    longitude: float | None
    photo_url: str | None
    reporter_id: UUID
    department: str | None
    upvotes: int
    resolved_at: datetime | None
    created_at: datetime
    updated_at: datetime


class IssueListResponse(BaseModel):
    issues: list[IssueResponse]
    total: int
    page: int
    per_page: int


class StatusChangeRequest(BaseModel):
    status: IssueStatus
    # Optional remark recorded on the issue timeline with the new status
    note: str | None = None


class DepartmentAssignRequest(BaseModel):
    department: str = Field(..., min_length=1, max_length=100)


class AllowedTransitionsResponse(BaseModel):
    status: IssueStatus
    allowed: list[IssueStatus]


class IssueStats(BaseModel):
    total: int = 0
    pending: int = 0
    in_progress: int = 0
    resolved: int = 0
    rejected: int = 0
