"""Abstract base class for review platform adapters."""

from abc import ABC, abstractmethod
from typing import List

from prsync.errors import MalformedResponseError, ReviewPlatformError, UnexpectedResponseError
from prsync.models import CommentRequest, MutationResult, PullRequest, PullRequestComment

__all__ = ["MalformedResponseError", "ReviewPlatformAdapter", "ReviewPlatformError", "UnexpectedResponseError"]


class ReviewPlatformAdapter(ABC):
    """Operations the review orchestrator needs from a code hosting
    platform."""

    @abstractmethod
    def find_pull_requests_with_source_branch(self, branch_name: str) -> List[PullRequest]:
        """List open pull requests whose source branch is branch_name.

        Args:
            branch_name: Source branch name (e.g. feature/login)

        Returns:
            Matching pull requests; empty list if none
        """
        ...

    @abstractmethod
    def find_own_pull_request_comments(self, pull_request: PullRequest) -> List[PullRequestComment]:
        """List the comments the bot identity posted on a pull request."""
        ...

    @abstractmethod
    def get_pull_request_diff(self, pull_request: PullRequest) -> str:
        """Return the unified diff of a pull request without context lines."""
        ...

    @abstractmethod
    def post_comment(self, pull_request: PullRequest, request: CommentRequest) -> MutationResult:
        """Post a new comment described by request."""
        ...

    def create_pull_request_comment(
        self,
        pull_request: PullRequest,
        message: str,
        line: int | None = None,
        file_path: str | None = None,
    ) -> MutationResult:
        """Post a comment at a loosely described placement. Override if
        needed."""
        raise NotImplementedError("create_pull_request_comment")

    @abstractmethod
    def update_review_comment(self, pull_request: PullRequest, comment_id: int, message: str) -> MutationResult:
        """Replace the content of an existing comment."""
        ...

    @abstractmethod
    def delete_pull_request_comment(self, pull_request: PullRequest, comment_id: int) -> bool:
        """Delete a comment by id.

        Returns:
            True if the platform reported success, False otherwise
        """
        ...

    @abstractmethod
    def approve(self, pull_request: PullRequest) -> MutationResult:
        """Approve the pull request as the bot identity."""
        ...

    @abstractmethod
    def unapprove(self, pull_request: PullRequest) -> MutationResult:
        """Withdraw the bot's approval of the pull request."""
        ...
