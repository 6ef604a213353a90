from .comment import Comment
from .issue import Issue, IssueCategory, IssueStatus
from .vote import Vote

__all__ = ["Comment", "Issue", "IssueCategory", "IssueStatus", "Vote"]
