"""Requests for new pull request comments.

Each variant carries exactly the fields its placement needs, so a request
with a file path but no usable line cannot be built.
"""

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, PositiveInt

from prsync.models.pull_request import PullRequest


class InvalidCommentPlacement(ValueError):
    """Raised when a line/file path combination cannot be posted."""

    pass


class GlobalCommentRequest(BaseModel):
    """Comment on the pull request itself."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["global"] = "global"
    content: str

    def to_payload(self, pull_request: PullRequest) -> dict[str, Any]:
        return {"content": self.content}


class InlineCommentRequest(BaseModel):
    """Comment anchored to a line of a file."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["inline"] = "inline"
    content: str
    file_path: str
    line: PositiveInt

    def to_payload(self, pull_request: PullRequest) -> dict[str, Any]:
        return {"content": self.content, "filename": self.file_path, "line_to": self.line}


class FileLevelCommentRequest(BaseModel):
    """Comment on a file as a whole.

    The API anchors these to the diff between the source and destination
    commits of the pull request instead of to a line.
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["file"] = "file"
    content: str
    file_path: str

    def to_payload(self, pull_request: PullRequest) -> dict[str, Any]:
        return {
            "content": self.content,
            "filename": self.file_path,
            "anchor": pull_request.src_commit_hash,
            "dest_rev": pull_request.dst_commit_hash,
        }


CommentRequest = Annotated[
    Union[GlobalCommentRequest, InlineCommentRequest, FileLevelCommentRequest],
    Field(discriminator="kind"),
]


def comment_request_for(message: str, line: int | None = None, file_path: str | None = None) -> CommentRequest:
    """Pick the request variant for a (line, file path) placement.

    Args:
        message: Comment text (markdown supported)
        line: Line in the new version of the file; 0 means the whole file
        file_path: Path of the file relative to the repository root

    Returns:
        Global request without a file path, inline request for a positive
        line, file-level request for line 0

    Raises:
        InvalidCommentPlacement: If a file path comes with a negative or
            missing line
    """
    if file_path is None:
        return GlobalCommentRequest(content=message)
    if line is not None and line > 0:
        return InlineCommentRequest(content=message, file_path=file_path, line=line)
    if line == 0:
        return FileLevelCommentRequest(content=message, file_path=file_path)
    raise InvalidCommentPlacement(f"Invalid or missing line number {line!r} for comment on {file_path}")
