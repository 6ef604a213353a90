# Local application imports
from civiclink.services.issues.comment_services import (
    delete_comment,
    edit_comment,
    list_comments,
    post_comment,
    validate_comment_text,
)
from civiclink.services.issues.issue_services import get_issue, list_issues, report_issue
from civiclink.services.issues.lifecycle import (
    ALLOWED_TRANSITIONS,
    TERMINAL_STATUSES,
    InvalidTransition,
    assign_department,
    change_status,
    get_allowed_transitions,
    is_valid_transition,
    issue_stats,
    issue_transitions,
)
from civiclink.services.issues.vote_ledger import (
    VoteToggleResult,
    get_vote_state,
    reconcile_all_vote_counts,
    reconcile_issue_counts,
    reconcile_vote_count,
    toggle_vote,
)

__all__ = [
    "ALLOWED_TRANSITIONS",
    "TERMINAL_STATUSES",
    "InvalidTransition",
    "VoteToggleResult",
    "assign_department",
    "change_status",
    "delete_comment",
    "edit_comment",
    "get_allowed_transitions",
    "get_issue",
    "get_vote_state",
    "is_valid_transition",
    "issue_stats",
    "issue_transitions",
    "list_comments",
    "list_issues",
    "post_comment",
    "reconcile_all_vote_counts",
    "reconcile_issue_counts",
    "reconcile_vote_count",
    "report_issue",
    "toggle_vote",
    "validate_comment_text",
]
