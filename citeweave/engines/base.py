"""
citeweave/engines/base.py

Abstract base classes for item and locale getters.

Item getters implement fetch(ids) -> {id: record}; ids they cannot
resolve are simply left out. Locale getters implement
fetch(tag) -> record with at least a 'lang' key.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, Sequence

import requests

from ..config import DEFAULT_HEADERS, DEFAULT_TIMEOUT

logger = logging.getLogger(__name__)


class ItemGetter(ABC):
    """Batch source of bibliographic item records (CSL-JSON mappings)."""

    name: str = "Base Item Getter"

    @abstractmethod
    def fetch(self, ids: Sequence[str]) -> Dict[str, Dict[str, Any]]:
        """
        Fetch records for `ids`.

        Returns:
            Mapping of id -> record for every id that could be resolved
        """
        pass


class LocaleGetter(ABC):
    """Source of locale records."""

    name: str = "Base Locale Getter"

    @abstractmethod
    def fetch(self, tag: str) -> Dict[str, Any]:
        """Fetch the locale for `tag`; the record must carry 'lang'."""
        pass


class RemoteSource:
    """
    Mixin for getters backed by HTTP.

    Provides a lazily created requests session with default headers.
    """

    name: str = "Remote Source"
    base_url: str = ""

    def __init__(self, base_url: Optional[str] = None, timeout: int = DEFAULT_TIMEOUT):
        if base_url:
            self.base_url = base_url
        self.timeout = timeout
        self._session = None

    @property
    def session(self) -> requests.Session:
        """Lazy-loaded requests session with default headers."""
        if self._session is None:
            self._session = requests.Session()
            self._session.headers.update(DEFAULT_HEADERS)
        return self._session

    def _make_request(self, url: str, headers: Optional[dict] = None) -> requests.Response:
        """
        GET `url`. HTTP error statuses are returned to the caller; transport
        errors propagate as requests.RequestException.
        """
        merged_headers = dict(DEFAULT_HEADERS)
        if headers:
            merged_headers.update(headers)
        logger.debug("[%s] GET %s", self.name, url)
        return self.session.get(url, headers=merged_headers, timeout=self.timeout)
