"""Versioned API roots of a Bitbucket repository."""

from pydantic import BaseModel, ConfigDict

DEFAULT_API_URL = "https://api.bitbucket.org"


class ApiEndpoint(BaseModel):
    """Base URL of one API version for a repository, e.g.
    https://api.bitbucket.org/2.0/repositories/{account}/{repo_slug}."""

    model_config = ConfigDict(frozen=True)

    base_url: str

    @classmethod
    def for_repository(
        cls,
        version: str,
        account_name: str,
        repo_slug: str,
        api_url: str = DEFAULT_API_URL,
    ) -> "ApiEndpoint":
        return cls(base_url=f"{api_url.rstrip('/')}/{version}/repositories/{account_name}/{repo_slug}")

    def url(self, path: str) -> str:
        """Join path (with or without leading slash) to the base URL."""
        return f"{self.base_url}{path}" if path.startswith("/") else f"{self.base_url}/{path}"
