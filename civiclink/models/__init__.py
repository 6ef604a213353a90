"""
Database models package.

This package contains all SQLAlchemy models for the application.
"""

# Local application imports
from civiclink.models.base import Base
from civiclink.models.issues import Comment, Issue, IssueCategory, IssueStatus, Vote
from civiclink.models.notifications import Notification
from civiclink.models.profiles import Profile

__all__ = [
    "Base",
    # Issue engagement models
    "Comment",
    "Issue",
    "IssueCategory",
    "IssueStatus",
    "Vote",
    # Notification models
    "Notification",
    # Profile models
    "Profile",
]
