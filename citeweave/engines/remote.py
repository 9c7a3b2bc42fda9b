"""
citeweave/engines/remote.py

HTTP getters.
- CrossrefItemGetter: CSL-JSON for DOIs via content negotiation
- RemoteLocaleGetter: CSL locale files from the locales repository
"""

import logging
import re
from typing import Any, Dict, Optional, Sequence

import requests

from ..config import CSL_JSON_MIME, CSL_LOCALES_URL, DEFAULT_TIMEOUT, DOI_RESOLVER_URL, primary_dialect
from ..errors import ItemFetchError, LocaleUnavailable
from .base import ItemGetter, LocaleGetter, RemoteSource
from .local import parse_locale_xml

logger = logging.getLogger(__name__)

DOI_PREFIX_PATTERN = re.compile(r'^(?:https?://(?:dx\.)?doi\.org/|doi:)', re.IGNORECASE)


def normalize_doi(doi: str) -> str:
    """Strip resolver URLs and 'doi:' prefixes: 'https://doi.org/10.1/x' -> '10.1/x'."""
    return DOI_PREFIX_PATTERN.sub('', doi.strip())


class CrossrefItemGetter(RemoteSource, ItemGetter):
    """
    Fetch CSL-JSON records for DOI item ids.

    Each record is re-keyed to the id it was requested with. DOIs the
    resolver does not know (404) are left out of the result.
    """

    name = "Crossref DOI"
    base_url = DOI_RESOLVER_URL

    def fetch_one(self, doi: str) -> Optional[Dict[str, Any]]:
        url = f"{self.base_url.rstrip('/')}/{normalize_doi(doi)}"
        response = self._make_request(url, headers={'Accept': CSL_JSON_MIME})
        if response.status_code == 404:
            logger.info("[%s] Not found: %s", self.name, doi)
            return None
        response.raise_for_status()
        record = response.json()
        record['id'] = doi
        return record

    def fetch(self, ids: Sequence[str]) -> Dict[str, Dict[str, Any]]:
        result = {}
        for doi in ids:
            try:
                record = self.fetch_one(doi)
            except (requests.RequestException, ValueError) as e:
                raise ItemFetchError(f"[{self.name}] Request error: {e}", ids=ids) from e
            if record is not None:
                result[doi] = record
        return result


class RemoteLocaleGetter(RemoteSource, LocaleGetter):
    """Fetch 'locales-<tag>.xml' from the CSL locales repository."""

    name = "CSL Locales"
    base_url = CSL_LOCALES_URL

    def __init__(self, base_url: Optional[str] = None, timeout: int = DEFAULT_TIMEOUT):
        super().__init__(base_url=base_url, timeout=timeout)
        self._cache: Dict[str, Dict[str, Any]] = {}

    def fetch(self, tag: str) -> Dict[str, Any]:
        tag = primary_dialect(tag)
        if tag in self._cache:
            return dict(self._cache[tag])
        url = f"{self.base_url.rstrip('/')}/locales-{tag}.xml"
        try:
            response = self._make_request(url, headers={'Accept': 'application/xml'})
            response.raise_for_status()
            record = parse_locale_xml(response.text)
        except requests.RequestException as e:
            raise LocaleUnavailable(f"[{self.name}] Request error: {e}", locale=tag) from e
        except Exception as e:
            raise LocaleUnavailable(f"[{self.name}] Invalid locale file: {e}", locale=tag) from e
        self._cache[tag] = record
        return dict(record)
