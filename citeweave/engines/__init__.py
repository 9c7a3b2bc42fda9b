"""
citeweave/engines/__init__.py

Item and locale getters package.
"""

from .base import ItemGetter, LocaleGetter, RemoteSource
from .local import (
    DictItemGetter,
    CSLJSONItemGetter,
    DictLocaleGetter,
    DirLocaleGetter,
    parse_locale_xml,
)
from .remote import (
    CrossrefItemGetter,
    RemoteLocaleGetter,
    normalize_doi,
)

__all__ = [
    # Base
    'ItemGetter',
    'LocaleGetter',
    'RemoteSource',
    # Local
    'DictItemGetter',
    'CSLJSONItemGetter',
    'DictLocaleGetter',
    'DirLocaleGetter',
    'parse_locale_xml',
    # Remote
    'CrossrefItemGetter',
    'RemoteLocaleGetter',
    'normalize_doi',
]
