"""
citeweave/formatters/plain.py

Plain-text output: attributes are dropped, text is concatenated.
"""

from ..rich_text import RichText, to_plain
from .base import BaseOutputFormat, register_formatter


@register_formatter('text')
@register_formatter('plain')
class PlainFormatter(BaseOutputFormat):
    """Plain-text format. Links have no representation, so no_links is ignored."""

    def render_rich_text(self, rt: RichText, no_links: bool = False) -> str:
        return to_plain(rt)
