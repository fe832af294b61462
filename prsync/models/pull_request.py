"""Pull request model."""

from pydantic import BaseModel, ConfigDict


class PullRequest(BaseModel):
    """Open pull request as returned by the locator.

    Two instances are equal when they carry the same id, so callers can
    deduplicate results of repeated queries.
    """

    model_config = ConfigDict(frozen=True)

    id: int
    src_branch: str
    src_commit_hash: str
    dst_commit_hash: str

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PullRequest):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)
