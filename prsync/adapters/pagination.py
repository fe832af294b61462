"""Page-by-page retrieval of Bitbucket list resources."""

import logging
from typing import Any, Callable, Dict, List, Sequence, Tuple, TypeVar

import requests

from prsync.adapters._http import json_object, raise_for_status
from prsync.adapters.endpoints import ApiEndpoint

T = TypeVar("T")

PAGE_START_INDEX = 1
# Largest pagelen the pull request resources accept
MAX_PAGE_LENGTH = 50

log = logging.getLogger("prsync.adapters.pagination")


class PageFetcher:
    """Collects all items of a list resource by requesting pages in order.

    A page whose body contains a ``next`` key is followed by a request for
    page index + 1. The ``next`` URL itself is not followed, so items added
    or removed while paging can shift between pages and be seen twice or
    missed.
    """

    def __init__(
        self,
        request: Callable[..., requests.Response],
        endpoint: ApiEndpoint,
        page_length: int = MAX_PAGE_LENGTH,
    ) -> None:
        self._request = request
        self._endpoint = endpoint
        self._page_length = page_length

    def fetch_page(
        self,
        path: str,
        extract: Callable[[Dict[str, Any]], Sequence[T]],
        query: Tuple[str, str] | None = None,
        page: int = PAGE_START_INDEX,
    ) -> Tuple[int | None, List[T]]:
        """Fetch one page.

        Returns:
            Index of the next page (None on the last page) and the items
            extracted from this page
        """
        params: Dict[str, Any] = {"page": page, "pagelen": self._page_length}
        if query is not None:
            name, value = query
            params[name] = value
        log.debug("GET %s page %d", path, page)
        resp = self._request("GET", self._endpoint.url(path), params=params)
        raise_for_status(resp, f"GET {path} page {page}")
        data = json_object(resp, f"GET {path} page {page}")
        next_page = page + 1 if "next" in data else None
        return next_page, list(extract(data))

    def fetch_all(
        self,
        path: str,
        extract: Callable[[Dict[str, Any]], Sequence[T]],
        query: Tuple[str, str] | None = None,
        start: int = PAGE_START_INDEX,
    ) -> List[T]:
        """Fetch every page from start on and concatenate the items.

        Args:
            path: Resource path below the endpoint (e.g. /pullrequests)
            extract: Maps a decoded page object to its items
            query: Optional single filter parameter, e.g. ("state", "OPEN")
            start: First page index

        Returns:
            All items in page order

        Raises:
            ReviewPlatformError: If any page request fails; nothing is
                returned in that case
        """
        items: List[T] = []
        page: int | None = start
        while page is not None:
            page, page_items = self.fetch_page(path, extract, query=query, page=page)
            items.extend(page_items)
        return items
