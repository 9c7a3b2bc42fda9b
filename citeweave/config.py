"""
citeweave/config.py

Configuration, constants, and shared settings.
"""

import os
from typing import Dict

# =============================================================================
# LOCALE SETTINGS
# =============================================================================

DEFAULT_LOCALE = os.environ.get('CITEWEAVE_DEFAULT_LOCALE', 'en-US')

# Primary dialect for each bare language tag (CSL locales repository).
PRIMARY_DIALECTS: Dict[str, str] = {
    'af': 'af-ZA',
    'ar': 'ar',
    'bg': 'bg-BG',
    'ca': 'ca-AD',
    'cs': 'cs-CZ',
    'cy': 'cy-GB',
    'da': 'da-DK',
    'de': 'de-DE',
    'el': 'el-GR',
    'en': 'en-US',
    'es': 'es-ES',
    'et': 'et-EE',
    'eu': 'eu',
    'fa': 'fa-IR',
    'fi': 'fi-FI',
    'fr': 'fr-FR',
    'he': 'he-IL',
    'hr': 'hr-HR',
    'hu': 'hu-HU',
    'id': 'id-ID',
    'is': 'is-IS',
    'it': 'it-IT',
    'ja': 'ja-JP',
    'km': 'km-KH',
    'ko': 'ko-KR',
    'la': 'la',
    'lt': 'lt-LT',
    'lv': 'lv-LV',
    'mn': 'mn-MN',
    'nb': 'nb-NO',
    'nl': 'nl-NL',
    'nn': 'nn-NO',
    'pl': 'pl-PL',
    'pt': 'pt-PT',
    'ro': 'ro-RO',
    'ru': 'ru-RU',
    'sk': 'sk-SK',
    'sl': 'sl-SI',
    'sr': 'sr-RS',
    'sv': 'sv-SE',
    'th': 'th-TH',
    'tr': 'tr-TR',
    'uk': 'uk-UA',
    'vi': 'vi-VN',
    'zh': 'zh-CN',
}

# =============================================================================
# HTTP SETTINGS
# =============================================================================

DEFAULT_TIMEOUT = int(os.environ.get('CITEWEAVE_TIMEOUT', '10'))  # seconds
DEFAULT_HEADERS = {
    'User-Agent': 'citeweave/0.3 (mailto:user@example.com)',
    'Accept': 'application/json'
}

CSL_JSON_MIME = 'application/vnd.citationstyles.csl+json'
DOI_RESOLVER_URL = os.environ.get('CITEWEAVE_DOI_RESOLVER', 'https://doi.org')
CSL_LOCALES_URL = os.environ.get(
    'CITEWEAVE_LOCALES_URL',
    'https://raw.githubusercontent.com/citation-style-language/locales/master'
)

# =============================================================================
# SENTINELS AND RESERVED KEYS
# =============================================================================

NO_BIB_LAYOUT = '[NO BIBLIOGRAPHY LAYOUT IN CSL STYLE]'
NO_ITEM_DATA_PREFIX = 'NO_ITEM_DATA:'

ITEM_DATA_KEY = 'itd'           # cached ItemData attached to an ingested cite
VAR_UNPROCESSED = 'unprocessed'
VAR_ITEM_NO = 'citation-number'
VAR_YEAR_SUFFIX = 'year-suffix'

CITED_ITEM_NO_ATTR = 'cited-item-no'
BIB_ITEM_NO_ATTR = 'bib-item-no'

# =============================================================================
# STYLE OPTION DEFAULTS
# =============================================================================

CITE_OPTION_DEFAULTS: Dict[str, str] = {
    'near-note-distance': '5',
}

BIB_OPTION_DEFAULTS: Dict[str, str] = {
    'line-spacing': '1',
    'entry-spacing': '1',
}

CITE_LAYOUT_DEFAULTS: Dict[str, str] = {
    'delimiter': '; ',
}


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================

def primary_dialect(tag: str) -> str:
    """Expand a bare language tag ('de') to its primary dialect ('de-DE')."""
    if not tag or '-' in tag:
        return tag
    return PRIMARY_DIALECTS.get(tag.lower(), tag)
