from .comment_schemas import CommentCreate, CommentResponse, CommentUpdate
from .issue_schemas import (
    AllowedTransitionsResponse,
    DepartmentAssignRequest,
    IssueCreate,
    IssueListResponse,
    IssueResponse,
    IssueSortField,
    IssueStats,
    StatusChangeRequest,
)
from .verification_schemas import ImageVerificationRequest, ImageVerificationResponse
from .vote_schemas import VoteStateResponse

__all__ = [
    "AllowedTransitionsResponse",
    "CommentCreate",
    "CommentResponse",
    "CommentUpdate",
    "DepartmentAssignRequest",
    "ImageVerificationRequest",
    "ImageVerificationResponse",
    "IssueCreate",
    "IssueListResponse",
    "IssueResponse",
    "IssueSortField",
    "IssueStats",
    "StatusChangeRequest",
    "VoteStateResponse",
]
