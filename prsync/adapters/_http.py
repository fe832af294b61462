"""Response checks shared by the adapter and the page fetcher."""

from typing import Any, Dict

import requests

from prsync.adapters.base import MalformedResponseError, ReviewPlatformError


def is_success(resp: requests.Response) -> bool:
    return 200 <= resp.status_code < 300


def raise_for_status(resp: requests.Response, what: str) -> None:
    """Raise ReviewPlatformError for any non-2xx response.

    Uses the API's error message when the body carries one.
    """
    if is_success(resp):
        return
    msg = resp.text or resp.reason or str(resp.status_code)
    try:
        error = resp.json().get("error")
        if isinstance(error, dict) and error.get("message"):
            msg = error["message"]
    except Exception:
        pass
    raise ReviewPlatformError(f"{what} failed with {resp.status_code}: {msg}", status_code=resp.status_code)


def json_object(resp: requests.Response, what: str) -> Dict[str, Any]:
    """Decode the body of a successful response as a JSON object."""
    try:
        data = resp.json()
    except ValueError as e:
        raise MalformedResponseError(f"{what}: response is not valid JSON: {e}", resp.status_code) from e
    if not isinstance(data, dict):
        raise MalformedResponseError(f"{what}: expected a JSON object, got {type(data).__name__}", resp.status_code)
    return data
