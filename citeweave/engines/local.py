"""
citeweave/engines/local.py

Getters backed by in-memory data and local files.
- DictItemGetter / CSLJSONItemGetter: CSL-JSON item records
- DictLocaleGetter / DirLocaleGetter: locale records and CSL locale files
"""

import json
import logging
import os
import xml.etree.ElementTree as ET
from typing import Any, Dict, Iterable, Mapping, Sequence

from ..config import primary_dialect
from ..errors import LocaleUnavailable
from .base import ItemGetter, LocaleGetter

logger = logging.getLogger(__name__)

CSL_NS = '{http://purl.org/net/xbiblio/csl}'
XML_LANG = '{http://www.w3.org/XML/1998/namespace}lang'


# =============================================================================
# ITEMS
# =============================================================================

class DictItemGetter(ItemGetter):
    """Serve items from CSL-JSON records already in memory."""

    name = "Dict"

    def __init__(self, items: Iterable[Dict[str, Any]]):
        self._items = {str(item['id']): item for item in items if 'id' in item}

    def fetch(self, ids: Sequence[str]) -> Dict[str, Dict[str, Any]]:
        return {i: dict(self._items[i]) for i in ids if i in self._items}

    def __len__(self) -> int:
        return len(self._items)


class CSLJSONItemGetter(DictItemGetter):
    """Serve items from a CSL-JSON file (a JSON array of item objects)."""

    name = "CSL-JSON"

    def __init__(self, path: str):
        self.path = path
        with open(path, encoding='utf-8') as f:
            data = json.load(f)
        if isinstance(data, dict):
            data = data.get('items', [])
        super().__init__(data)
        logger.debug("[%s] Loaded %d items from %s", self.name, len(self), path)


# =============================================================================
# LOCALES
# =============================================================================

def parse_locale_xml(text: str) -> Dict[str, Any]:
    """
    Parse a CSL locale file.

    Returns:
        {'lang': ..., 'options': {style-option attrs}, 'terms': {name: text}}
        Only terms with a single (long) form are kept in 'terms'.
    """
    root = ET.fromstring(text)
    record: Dict[str, Any] = {
        'lang': root.get(XML_LANG, ''),
        'options': {},
        'terms': {},
    }

    style_options = root.find(f'{CSL_NS}style-options')
    if style_options is not None:
        record['options'] = dict(style_options.attrib)

    for term in root.iter(f'{CSL_NS}term'):
        name = term.get('name')
        if not name or term.get('form', 'long') != 'long':
            continue
        if term.find(f'{CSL_NS}single') is not None:
            continue
        record['terms'][name] = (term.text or '').strip()

    return record


class DictLocaleGetter(LocaleGetter):
    """Serve locale records from a mapping of tag -> record."""

    name = "Dict Locales"

    def __init__(self, locales: Mapping[str, Dict[str, Any]]):
        self._locales = dict(locales)

    def fetch(self, tag: str) -> Dict[str, Any]:
        record = self._locales.get(tag) or self._locales.get(primary_dialect(tag))
        if record is None:
            raise LocaleUnavailable("Unknown locale", locale=tag)
        return dict(record)


class DirLocaleGetter(LocaleGetter):
    """
    Read CSL locale files ('locales-<tag>.xml') from a directory.

    A bare language tag falls back to its primary dialect ('de' -> 'de-DE').
    """

    name = "Locale Dir"

    def __init__(self, directory: str):
        self.directory = directory

    def path_for(self, tag: str) -> str:
        path = os.path.join(self.directory, f'locales-{tag}.xml')
        if not os.path.exists(path):
            path = os.path.join(self.directory, f'locales-{primary_dialect(tag)}.xml')
        return path

    def fetch(self, tag: str) -> Dict[str, Any]:
        path = self.path_for(tag)
        try:
            with open(path, encoding='utf-8') as f:
                return parse_locale_xml(f.read())
        except (OSError, ET.ParseError) as e:
            raise LocaleUnavailable(f"Could not read locale file: {e}", locale=tag) from e
