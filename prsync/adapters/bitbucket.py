"""Bitbucket Cloud API adapter.

Comment create/update/delete go through the 1.0 API; listing, diffs and
approvals through 2.0, because each capability is only available (or only
behaves as needed) in one of the two versions.
"""

import logging
from typing import Any, Dict, List

import requests
from pydantic import ValidationError
from requests.auth import AuthBase

from prsync.adapters._http import is_success, raise_for_status
from prsync.adapters.base import (
    MalformedResponseError,
    ReviewPlatformAdapter,
    ReviewPlatformError,
    UnexpectedResponseError,
)
from prsync.adapters.endpoints import DEFAULT_API_URL, ApiEndpoint
from prsync.adapters.pagination import PageFetcher
from prsync.auth import auth_from_config
from prsync.config import AppConfig
from prsync.models import (
    CommentRequest,
    InvalidCommentPlacement,
    MutationResult,
    PullRequest,
    PullRequestComment,
    comment_request_for,
)
from prsync.schemas import CommentPayload, PullRequestPayload

log = logging.getLogger("prsync.adapters.bitbucket")


def _values(page: Dict[str, Any], what: str) -> List[Dict[str, Any]]:
    values = page.get("values")
    if not isinstance(values, list):
        raise MalformedResponseError(f"{what}: page has no 'values' list")
    return values


def _pull_requests_from_page(page: Dict[str, Any]) -> List[PullRequest]:
    try:
        return [PullRequestPayload.model_validate(v).to_model() for v in _values(page, "pull requests")]
    except ValidationError as e:
        raise MalformedResponseError(f"Unexpected pull request payload: {e}") from e


def _comments_from_page(page: Dict[str, Any]) -> List[CommentPayload]:
    try:
        return [CommentPayload.model_validate(v) for v in _values(page, "comments")]
    except ValidationError as e:
        raise MalformedResponseError(f"Unexpected comment payload: {e}") from e


class BitbucketAdapter(ReviewPlatformAdapter):
    """Bitbucket Cloud implementation of ReviewPlatformAdapter for one
    repository."""

    def __init__(
        self,
        account_name: str,
        repo_slug: str,
        team_name: str | None = None,
        auth: AuthBase | None = None,
        api_url: str = DEFAULT_API_URL,
        timeout: int = 30,
        legacy_api: ApiEndpoint | None = None,
        api: ApiEndpoint | None = None,
    ) -> None:
        self.account_name = account_name
        self.repo_slug = repo_slug
        self.team_name = team_name
        self.timeout = timeout
        # 1.0: comment create, update, delete
        self.legacy_api = legacy_api or ApiEndpoint.for_repository("1.0", account_name, repo_slug, api_url)
        # 2.0: pull request and comment listing, diff, approval
        self.api = api or ApiEndpoint.for_repository("2.0", account_name, repo_slug, api_url)
        self._session = requests.Session()
        self._session.headers.update({"Accept": "application/json"})
        if auth is not None:
            self._session.auth = auth
        self._pages = PageFetcher(self._request, self.api)

    @classmethod
    def from_config(cls, config: AppConfig, auth: AuthBase | None = None) -> "BitbucketAdapter":
        """Build an adapter for the configured repository.

        Credentials are picked with auth_from_config unless auth is given.
        """
        config.validate_repository()
        bitbucket = config.bitbucket
        return cls(
            account_name=bitbucket.account_name,
            repo_slug=bitbucket.repo_slug,
            team_name=bitbucket.team_name,
            auth=auth or auth_from_config(config),
            api_url=bitbucket.api_url,
            timeout=bitbucket.request_timeout,
        )

    def __enter__(self) -> "BitbucketAdapter":
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def close(self) -> None:
        self._session.close()

    @property
    def identity(self) -> str:
        """User name of the bot's comments: team name if set, else account
        name."""
        return self.team_name or self.account_name

    def _request(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        try:
            return self._session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            raise ReviewPlatformError(f"{method} {url} failed: {e}") from e

    def list_open_pull_requests(self) -> List[PullRequest]:
        """List all open pull requests of the repository."""
        return self._pages.fetch_all("/pullrequests", _pull_requests_from_page, query=("state", "OPEN"))

    def find_pull_requests_with_source_branch(self, branch_name: str) -> List[PullRequest]:
        """List open pull requests whose source branch is branch_name.

        The API cannot filter by branch, so all open pull requests are
        fetched and filtered here.
        """
        pull_requests = [pr for pr in self.list_open_pull_requests() if pr.src_branch == branch_name]
        log.debug("Found %d open pull request(s) for branch %s", len(pull_requests), branch_name)
        return pull_requests

    def find_own_pull_request_comments(self, pull_request: PullRequest) -> List[PullRequestComment]:
        """List comments on the pull request authored by the bot identity."""
        identity = self.identity
        payloads = self._pages.fetch_all(f"/pullrequests/{pull_request.id}/comments", _comments_from_page)
        return [p.to_model() for p in payloads if p.author == identity]

    def get_pull_request_diff(self, pull_request: PullRequest) -> str:
        """Return the diff of the pull request with no context lines.

        The diff endpoint redirects to the actual diff. Redirects are not
        followed automatically because the context parameter would be lost
        on the way, so the Location is requested explicitly.

        Raises:
            UnexpectedResponseError: If the endpoint does not redirect
            ReviewPlatformError: If fetching the redirect target fails
        """
        path = f"/pullrequests/{pull_request.id}/diff"
        resp = self._request(
            "HEAD",
            self.api.url(path),
            headers={"Content-Type": "application/json"},
            allow_redirects=False,
        )
        location = resp.headers.get("Location")
        if resp.status_code != 302 or not location:
            raise UnexpectedResponseError(
                f"Unexpected response {resp.status_code} from {path}", status_code=resp.status_code
            )
        diff_resp = self._request("GET", location, params={"context": "0"}, headers={"Accept": "*/*"})
        raise_for_status(diff_resp, f"GET diff of pull request {pull_request.id}")
        return diff_resp.text

    def create_pull_request_comment(
        self,
        pull_request: PullRequest,
        message: str,
        line: int | None = None,
        file_path: str | None = None,
    ) -> MutationResult:
        """Post a comment on the pull request.

        Without file_path the comment is global. With file_path, a positive
        line makes it inline and line 0 makes it a file-level comment. Any
        other line is not sent; a warning is logged and a failed result
        returned so that one bad comment does not abort a batch.
        """
        try:
            request = comment_request_for(message, line=line, file_path=file_path)
        except InvalidCommentPlacement as e:
            log.warning("Skipping comment on pull request %d: %s", pull_request.id, e)
            return MutationResult.failed(str(e))
        return self.post_comment(pull_request, request)

    def post_comment(self, pull_request: PullRequest, request: CommentRequest) -> MutationResult:
        path = f"/pullrequests/{pull_request.id}/comments"
        resp = self._request("POST", self.legacy_api.url(path), json=request.to_payload(pull_request))
        raise_for_status(resp, f"POST {path}")
        log.info("Created %s comment on pull request %d", request.kind, pull_request.id)
        return MutationResult.applied()

    def update_review_comment(self, pull_request: PullRequest, comment_id: int, message: str) -> MutationResult:
        """Replace the content of a comment; its placement stays as is."""
        path = f"/pullrequests/{pull_request.id}/comments/{comment_id}"
        resp = self._request("PUT", self.legacy_api.url(path), json={"content": message})
        raise_for_status(resp, f"PUT {path}")
        log.info("Updated comment %d on pull request %d", comment_id, pull_request.id)
        return MutationResult.applied()

    def delete_pull_request_comment(self, pull_request: PullRequest, comment_id: int) -> bool:
        """Delete a comment.

        Returns:
            True on a success status, False otherwise (e.g. the comment was
            already deleted)
        """
        path = f"/pullrequests/{pull_request.id}/comments/{comment_id}"
        resp = self._request("DELETE", self.legacy_api.url(path))
        if not is_success(resp):
            log.warning(
                "Deleting comment %d on pull request %d returned %d", comment_id, pull_request.id, resp.status_code
            )
            return False
        log.info("Deleted comment %d on pull request %d", comment_id, pull_request.id)
        return True

    def approve(self, pull_request: PullRequest) -> MutationResult:
        """Approve the pull request; 409 means it is already approved."""
        path = f"/pullrequests/{pull_request.id}/approve"
        resp = self._request("POST", self.api.url(path))
        if resp.status_code == 409:
            log.debug("Pull request %d is already approved", pull_request.id)
            return MutationResult.unchanged("already approved")
        raise_for_status(resp, f"POST {path}")
        log.info("Approved pull request %d", pull_request.id)
        return MutationResult.applied()

    def unapprove(self, pull_request: PullRequest) -> MutationResult:
        """Remove the approval; 404 means the pull request is not approved."""
        path = f"/pullrequests/{pull_request.id}/approve"
        resp = self._request("DELETE", self.api.url(path))
        if resp.status_code == 404:
            log.debug("Pull request %d is not approved", pull_request.id)
            return MutationResult.unchanged("not approved")
        raise_for_status(resp, f"DELETE {path}")
        log.info("Removed approval of pull request %d", pull_request.id)
        return MutationResult.applied()
