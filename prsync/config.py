"""Configuration loading from YAML and environment.

Secrets (API key, OAuth client secret) are taken from environment
variables or from files (Docker secrets). Never put real credentials in
config files committed to the repo.
"""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ConfigurationError(ValueError):
    """Raised when the configuration cannot be used (e.g. no credentials)."""

    pass


def _read_secret(env_key: str, file_env_key: str) -> str | None:
    """Read secret from env var or from file path in env (e.g. Docker
    secrets)."""
    value = _current_env.get(env_key)
    if value:
        return value.strip()
    file_path = _current_env.get(file_env_key)
    if file_path:
        return Path(file_path).read_text().strip()
    return None


def _is_placeholder(value: str | None) -> bool:
    return not value or value.startswith("${")


# Injected by load_config so secret lookups can read env/file
_current_env: dict[str, str] = {}


class BitbucketConfig(BaseSettings):
    """Bitbucket repository, identity and credentials."""

    model_config = SettingsConfigDict(env_prefix="BITBUCKET_", extra="ignore")

    account_name: str = Field(default="", description="Account the repository belongs to")
    repo_slug: str = Field(default="", description="Repository slug (bitbucket.org/{account}/{slug})")
    team_name: str | None = Field(
        default=None, description="Team account that posts the comments; takes precedence over account_name"
    )
    api_key: str | None = Field(default=None, description="Team API key; use env or secret file")
    oauth_client_key: str | None = Field(default=None, description="OAuth consumer key")
    oauth_client_secret: str | None = Field(default=None, description="OAuth consumer secret; use env or secret file")
    api_url: str = Field(default="https://api.bitbucket.org", description="API root (without version)")
    oauth_token_url: str = Field(
        default="https://bitbucket.org/site/oauth2/access_token",
        description="OAuth2 token endpoint",
    )
    request_timeout: int = Field(default=30, ge=1, description="Timeout of each HTTP request in seconds")
    branch_name: str | None = Field(default=None, description="Source branch whose pull requests are reviewed")

    @property
    def identity(self) -> str:
        """User name the bot's comments are posted under."""
        return self.team_name or self.account_name


class LoggingConfig(BaseSettings):
    """Logging settings."""

    model_config = SettingsConfigDict(env_prefix="LOGGING_", extra="ignore")

    level: str = Field(default="INFO", description="Log level")
    format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log format",
    )


class AppConfig(BaseSettings):
    """Root application config from YAML + env."""

    model_config = SettingsConfigDict(extra="ignore")

    bitbucket: BitbucketConfig = Field(default_factory=BitbucketConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @property
    def api_key_resolved(self) -> str | None:
        """Resolve Bitbucket API key from config, env or Docker secret
        file."""
        key = self.bitbucket.api_key
        if not _is_placeholder(key):
            return key
        return _read_secret("BITBUCKET_API_KEY", "BITBUCKET_API_KEY_FILE")

    @property
    def oauth_client_secret_resolved(self) -> str | None:
        """Resolve OAuth client secret from config, env or Docker secret
        file."""
        secret = self.bitbucket.oauth_client_secret
        if not _is_placeholder(secret):
            return secret
        return _read_secret("BITBUCKET_OAUTH_CLIENT_SECRET", "BITBUCKET_OAUTH_CLIENT_SECRET_FILE")

    def validate_repository(self) -> None:
        """Raise ConfigurationError unless account and repo slug are set."""
        missing = [name for name in ("account_name", "repo_slug") if not getattr(self.bitbucket, name)]
        if missing:
            raise ConfigurationError(f"Missing bitbucket settings: {', '.join(missing)}")


def _substitute_env(value: Any) -> Any:
    """Replace ${VAR} and $VAR in strings with os.environ."""
    if isinstance(value, str):
        if value.startswith("${") and value.endswith("}"):
            key = value[2:-1].strip()
            return _current_env.get(key, value)
        # Simple $VAR
        if value.startswith("$") and not value.startswith("${"):
            key = value[1:].strip()
            return _current_env.get(key, value)
        return value
    if isinstance(value, dict):
        return {k: _substitute_env(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_substitute_env(v) for v in value]
    return value


def load_config(config_path: Path | None = None) -> AppConfig:
    """Load config from YAML file and environment.

    Values from the YAML file win over BITBUCKET_* / LOGGING_* env vars,
    except BITBUCKET_BRANCH_NAME which CI jobs set per build.
    """
    global _current_env

    _current_env = dict(os.environ)

    path = config_path or Path("config.yaml")
    if not path.is_file():
        return AppConfig()

    raw = yaml.safe_load(path.read_text()) or {}
    raw = _substitute_env(raw)

    bitbucket_raw = raw.get("bitbucket") or {}
    if _current_env.get("BITBUCKET_BRANCH_NAME"):
        bitbucket_raw = {**bitbucket_raw, "branch_name": _current_env["BITBUCKET_BRANCH_NAME"]}
    elif _is_placeholder(bitbucket_raw.get("branch_name")):
        bitbucket_raw = {k: v for k, v in bitbucket_raw.items() if k != "branch_name"}

    bitbucket = BitbucketConfig(**bitbucket_raw)
    logging = LoggingConfig(**(raw.get("logging") or {}))

    return AppConfig(bitbucket=bitbucket, logging=logging)
