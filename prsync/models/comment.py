"""Review comment posted on a pull request."""

from pydantic import BaseModel, ConfigDict, model_validator


class PullRequestComment(BaseModel):
    """Comment on a pull request.

    Global comments have neither line nor file path; inline comments have
    both. Only the content can change after the comment was posted.
    """

    model_config = ConfigDict(frozen=True)

    comment_id: int
    content: str
    line: int | None = None
    file_path: str | None = None

    @model_validator(mode="after")
    def check_line_and_path_together(self) -> "PullRequestComment":
        if (self.line is None) != (self.file_path is None):
            raise ValueError("line and file_path must be set together or both be absent")
        return self

    @property
    def is_inline(self) -> bool:
        """True when the comment is anchored to a file and line."""
        return self.line is not None and self.file_path is not None
