"""Payloads of the Bitbucket REST API as consumed by the adapter.

Responses are validated against these models at the boundary; unknown
fields are ignored, missing or mistyped ones fail validation.
"""

from pydantic import BaseModel, ConfigDict

from prsync.models import PullRequest, PullRequestComment


class _Payload(BaseModel):
    model_config = ConfigDict(extra="ignore")


class CommitRef(_Payload):
    hash: str


class BranchRef(_Payload):
    name: str


class SourceRef(_Payload):
    commit: CommitRef
    branch: BranchRef


class DestinationRef(_Payload):
    commit: CommitRef


class PullRequestPayload(_Payload):
    """Entry of GET /2.0/repositories/{account}/{slug}/pullrequests."""

    id: int
    source: SourceRef
    destination: DestinationRef

    def to_model(self) -> PullRequest:
        return PullRequest(
            id=self.id,
            src_branch=self.source.branch.name,
            src_commit_hash=self.source.commit.hash,
            dst_commit_hash=self.destination.commit.hash,
        )


class UserRef(_Payload):
    username: str


class ContentRef(_Payload):
    raw: str


class InlineRef(_Payload):
    path: str | None = None
    to: int | None = None


class CommentPayload(_Payload):
    """Entry of GET /2.0/.../pullrequests/{id}/comments."""

    id: int
    user: UserRef
    content: ContentRef
    inline: InlineRef | None = None

    @property
    def author(self) -> str:
        return self.user.username

    def to_model(self) -> PullRequestComment:
        path: str | None = None
        line: int | None = None
        if self.inline is not None and self.inline.path is not None and self.inline.to is not None:
            path = self.inline.path
            line = self.inline.to
        return PullRequestComment(
            comment_id=self.id,
            content=self.content.raw,
            line=line,
            file_path=path,
        )

