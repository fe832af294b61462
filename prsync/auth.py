"""Credentials applied to every request sent to Bitbucket.

Two schemes are supported: the API key of a team account (HTTP basic auth)
and an OAuth consumer of a personal account (client credentials grant).
"""

import logging

import requests
from requests.auth import AuthBase, HTTPBasicAuth

from prsync.config import AppConfig, ConfigurationError
from prsync.errors import ReviewPlatformError


class ApiKeyAuth(HTTPBasicAuth):
    """Basic auth with the account (or team) name and its API key."""

    def __init__(self, username: str, api_key: str) -> None:
        super().__init__(username, api_key)


class OAuthClientCredentialsAuth(AuthBase):
    """Bearer token obtained with the OAuth2 client credentials grant.

    The token is requested on first use and reused until the API answers
    401, after which the next request fetches a new one.
    """

    def __init__(self, client_key: str, client_secret: str, token_url: str, timeout: int = 30) -> None:
        self.client_key = client_key
        self.client_secret = client_secret
        self.token_url = token_url
        self.timeout = timeout
        self._token: str | None = None

    def _fetch_token(self) -> str:
        log = logging.getLogger("prsync.auth")
        log.debug("Requesting OAuth access token from %s", self.token_url)
        resp = requests.post(
            self.token_url,
            data={"grant_type": "client_credentials"},
            auth=(self.client_key, self.client_secret),
            timeout=self.timeout,
        )
        if resp.status_code != 200:
            raise ReviewPlatformError(
                f"OAuth token request failed with {resp.status_code}: {resp.text}", status_code=resp.status_code
            )
        token = resp.json().get("access_token")
        if not token:
            raise ReviewPlatformError("OAuth token response has no access_token", status_code=resp.status_code)
        return token

    @property
    def token(self) -> str:
        if self._token is None:
            self._token = self._fetch_token()
        return self._token

    def _drop_expired_token(self, resp: requests.Response, *args: object, **kwargs: object) -> requests.Response:
        if resp.status_code == 401:
            logging.getLogger("prsync.auth").debug("OAuth token rejected, fetching a new one on next request")
            self._token = None
        return resp

    def __call__(self, r: requests.PreparedRequest) -> requests.PreparedRequest:
        r.headers["Authorization"] = f"Bearer {self.token}"
        r.register_hook("response", self._drop_expired_token)
        return r


def auth_from_config(config: AppConfig) -> AuthBase:
    """Pick the authentication scheme from config.

    OAuth is used when both client key and secret are configured, the API
    key otherwise.

    Raises:
        ConfigurationError: If neither scheme is configured
    """
    bitbucket = config.bitbucket
    client_secret = config.oauth_client_secret_resolved
    if bitbucket.oauth_client_key and client_secret:
        return OAuthClientCredentialsAuth(
            bitbucket.oauth_client_key,
            client_secret,
            bitbucket.oauth_token_url,
            timeout=bitbucket.request_timeout,
        )
    api_key = config.api_key_resolved
    if api_key:
        return ApiKeyAuth(bitbucket.identity, api_key)
    raise ConfigurationError("No Bitbucket credentials: set api_key or oauth_client_key and oauth_client_secret")
