"""
citeweave/bibliography.py

Bibliography pipeline: sort, render, substitute repeated authors, measure
the first-field width, derive formatting parameters, and format.
"""

import logging
import re
from enum import Enum, auto
from typing import Any, Dict, Mapping, Tuple, Union

from .config import NO_BIB_LAYOUT
from .formatters import get_formatter
from .models import FormattingParams, RenderMode, RenderPurpose, SecondFieldAlign
from .render import item_var_map, render_item
from .rich_text import max_offset, subsequent_author_substitute

logger = logging.getLogger(__name__)


# =============================================================================
# OPTION SCHEMA AND COERCION
# =============================================================================

class OptionKind(Enum):
    BOOLEAN = auto()
    INTEGER = auto()
    ALIGNMENT = auto()


BIB_OPTION_SCHEMA: Dict[str, OptionKind] = {
    'hanging-indent': OptionKind.BOOLEAN,
    'line-spacing': OptionKind.INTEGER,
    'entry-spacing': OptionKind.INTEGER,
    'second-field-align': OptionKind.ALIGNMENT,
}

_NUMBER_RE = re.compile(r'^\s*([-+]?(?:\d+(?:\.\d*)?|\.\d+))')


def parse_number(value: Any) -> Union[int, float]:
    """
    Best-effort numeric parse of a leading number; 0 when there is none.

    '2' -> 2, '1.5' -> 1.5, '2em' -> 2, 'abc' -> 0
    """
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value
    match = _NUMBER_RE.match(str(value))
    if not match:
        return 0
    number = float(match.group(1))
    return int(number) if number.is_integer() else number


def _coerce_flag(value: Any) -> Any:
    """'true'/'false' become booleans; anything else is parsed as a number."""
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text == 'true':
        return True
    if text == 'false':
        return False
    return parse_number(value)


def _coerce_alignment(value: Any) -> SecondFieldAlign:
    text = str(value).strip().lower()
    if text == 'flush':
        return SecondFieldAlign.FLUSH
    if text == 'margin':
        return SecondFieldAlign.MARGIN
    return SecondFieldAlign.NONE


_COERCERS = {
    OptionKind.BOOLEAN: _coerce_flag,
    OptionKind.INTEGER: _coerce_flag,
    OptionKind.ALIGNMENT: _coerce_alignment,
}


def derive_params(bib_options: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Coerce the formatting-related bibliography options.

    Only options present in `bib_options` appear in the result, except
    'second-field-align', which is always there (NONE when unset).
    Keys outside the schema are dropped.
    """
    params: Dict[str, Any] = {}
    for key, raw in bib_options.items():
        kind = BIB_OPTION_SCHEMA.get(key)
        if kind is None:
            logger.debug("[Bibliography] Ignoring option %s", key)
            continue
        params[key] = _COERCERS[kind](raw)
    params.setdefault('second-field-align', SecondFieldAlign.NONE)
    return params


# =============================================================================
# PIPELINE
# =============================================================================

def render_bibliography(
    processor,
    format: str = 'plain',
    no_link_targets: bool = False
) -> Tuple[str, FormattingParams]:
    """
    Render the bibliography of everything the processor has ingested.

    Returns:
        (formatted bibliography, FormattingParams). Styles without a
        bibliography layout give (NO_BIB_LAYOUT, FormattingParams()).
    """
    style = processor.style
    if not style.has_bibliography:
        return NO_BIB_LAYOUT, FormattingParams()

    processor.ensure_finalized()
    items = processor.sorted_items()
    logger.debug("[Bibliography] Rendering %d entries", len(items))

    entries = [
        render_item(item_var_map(itd), style, RenderMode.BIB, RenderPurpose.DISPLAY)
        for itd in items
    ]

    options = derive_params(style.bib_options)
    offset = 0
    if options['second-field-align'] != SecondFieldAlign.NONE:
        offset = max_offset(entries)

    replacement = style.bib_options.get('subsequent-author-substitute')
    if replacement is not None:
        entries = subsequent_author_substitute(entries, replacement)

    params = FormattingParams.from_options(options, offset)
    formatter = get_formatter(format)
    rendered = [
        formatter.render_bib_item(formatter.render_rich_text(rt, no_links=no_link_targets), params)
        for rt in entries
    ]
    return formatter.render_bibliography(rendered, params), params
