"""Review platform adapters."""

from prsync.adapters.base import (
    MalformedResponseError,
    ReviewPlatformAdapter,
    ReviewPlatformError,
    UnexpectedResponseError,
)
from prsync.adapters.bitbucket import BitbucketAdapter
from prsync.adapters.endpoints import ApiEndpoint

__all__ = [
    "ApiEndpoint",
    "BitbucketAdapter",
    "MalformedResponseError",
    "ReviewPlatformAdapter",
    "ReviewPlatformError",
    "UnexpectedResponseError",
]
