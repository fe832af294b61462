"""Domain models for pull requests, review comments and mutations (Pydantic)."""

from prsync.models.comment import PullRequestComment
from prsync.models.pull_request import PullRequest
from prsync.models.comment_request import (
    CommentRequest,
    FileLevelCommentRequest,
    GlobalCommentRequest,
    InlineCommentRequest,
    InvalidCommentPlacement,
    comment_request_for,
)
from prsync.models.results import MutationResult, MutationStatus

__all__ = [
    "CommentRequest",
    "FileLevelCommentRequest",
    "GlobalCommentRequest",
    "InlineCommentRequest",
    "InvalidCommentPlacement",
    "MutationResult",
    "MutationStatus",
    "PullRequest",
    "PullRequestComment",
    "comment_request_for",
]
