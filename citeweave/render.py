"""
citeweave/render.py

Per-item rendering: builds the variable map and context for one item, runs
the style's layout function, and decorates the resulting rich text with
item numbers and year suffixes.
"""

import logging
from typing import Any, Dict

from .config import (
    ITEM_DATA_KEY,
    NO_ITEM_DATA_PREFIX,
    VAR_UNPROCESSED,
    VAR_ITEM_NO,
    VAR_YEAR_SUFFIX,
    CITED_ITEM_NO_ATTR,
    BIB_ITEM_NO_ATTR,
)
from .models import (
    Citation,
    ItemData,
    RenderContext,
    RenderMode,
    RenderPurpose,
    Style,
)
from .rich_text import Node, RichText, add_year_suffix, join, with_attr

logger = logging.getLogger(__name__)

_ITEM_NO_ATTRS = {
    RenderMode.CITE: CITED_ITEM_NO_ATTR,
    RenderMode.BIB: BIB_ITEM_NO_ATTR,
}


# =============================================================================
# VARIABLE MAPS
# =============================================================================

def item_var_map(itd: ItemData) -> Dict[str, Any]:
    """Variables of a cached item, plus its number and year suffix."""
    var_map = dict(itd.vars)
    var_map['id'] = itd.id
    var_map[VAR_ITEM_NO] = itd.seq
    if itd.year_suffix:
        var_map[VAR_YEAR_SUFFIX] = itd.year_suffix
    return var_map


def cite_var_map(cite: Dict[str, Any]) -> Dict[str, Any]:
    """
    Variables of an ingested cite.

    Cite fields (locator, label, ...) override item fields of the same name.
    Cites without item data map to the unprocessed marker.
    """
    itd = cite.get(ITEM_DATA_KEY)
    if not isinstance(itd, ItemData):
        return {'id': cite.get('id'), VAR_UNPROCESSED: True}
    var_map = item_var_map(itd)
    for key, value in cite.items():
        if key not in ('id', ITEM_DATA_KEY):
            var_map[key] = value
    return var_map


# =============================================================================
# RENDERING
# =============================================================================

def render_item(
    var_map: Dict[str, Any],
    style: Style,
    mode: RenderMode = RenderMode.CITE,
    render_mode: RenderPurpose = RenderPurpose.DISPLAY,
    suppress_item_no: bool = False
) -> RichText:
    """
    Render one item with the style's layout for `mode`.

    Items without data render as a single 'NO_ITEM_DATA:<id>' leaf.
    """
    if var_map.get(VAR_UNPROCESSED):
        logger.warning("[Render] No item data for %s", var_map.get('id'))
        return f"{NO_ITEM_DATA_PREFIX}{var_map.get('id')}"

    layout = style.layout_for(mode)
    context = RenderContext(vars=var_map, style=style, mode=mode, render_mode=render_mode)
    rt = layout(context) if layout is not None else ""

    item_no = var_map.get(VAR_ITEM_NO)
    if not suppress_item_no and item_no is not None:
        rt = with_attr(rt, _ITEM_NO_ATTRS[mode], item_no)

    year_suffix = var_map.get(VAR_YEAR_SUFFIX)
    if year_suffix:
        # The style prints year-suffix itself; insert nothing.
        rt = add_year_suffix(rt, "" if style.uses_ys_var else year_suffix)
    return rt


def render_citation_rt(citation: Citation, style: Style) -> Node:
    """Render all cites of a citation and combine them per the layout attributes."""
    attrs = style.cite_layout_attrs
    rts = [
        render_item(cite_var_map(cite), style, RenderMode.CITE, RenderPurpose.DISPLAY)
        for cite in citation.cites
    ]
    body = join(rts, attrs.get('delimiter', ''))
    prefix = attrs.get('prefix', '')
    suffix = attrs.get('suffix', '')
    if not prefix and not suffix:
        return body
    content = ([prefix] if prefix else []) + [body] + ([suffix] if suffix else [])
    return Node({}, content)
