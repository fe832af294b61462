"""Outcome of a remote mutation."""

from enum import Enum

from pydantic import BaseModel, ConfigDict


class MutationStatus(str, Enum):
    APPLIED = "applied"
    ALREADY_IN_DESIRED_STATE = "already_in_desired_state"
    FAILED = "failed"


class MutationResult(BaseModel):
    """Status of a create/update/approve call plus an optional reason."""

    model_config = ConfigDict(frozen=True)

    status: MutationStatus
    reason: str | None = None

    @classmethod
    def applied(cls) -> "MutationResult":
        return cls(status=MutationStatus.APPLIED)

    @classmethod
    def unchanged(cls, reason: str | None = None) -> "MutationResult":
        return cls(status=MutationStatus.ALREADY_IN_DESIRED_STATE, reason=reason)

    @classmethod
    def failed(cls, reason: str) -> "MutationResult":
        return cls(status=MutationStatus.FAILED, reason=reason)

    @property
    def ok(self) -> bool:
        """True when the remote side ends up in the requested state."""
        return self.status is not MutationStatus.FAILED
