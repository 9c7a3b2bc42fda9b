"""
citeweave/formatters/base.py

Base output format and format registry.
"""

from abc import ABC, abstractmethod
from typing import List, Sequence

from ..errors import UnknownFormatError
from ..models import Citation, FormattingParams
from ..render import render_citation_rt
from ..rich_text import RichText


class BaseOutputFormat(ABC):
    """
    Abstract base class for output formats.

    Each target format (plain text, HTML, ...) implements this interface.
    Subclasses must implement render_rich_text(); the bibliography and
    citation methods have sensible defaults built on top of it.
    """

    name: str = ""

    @abstractmethod
    def render_rich_text(self, rt: RichText, no_links: bool = False) -> str:
        """Turn a finalized rich-text tree into a string."""
        pass

    def render_bib_item(self, text: str, params: FormattingParams) -> str:
        """Format one rendered bibliography entry. Default: unchanged."""
        return text

    def render_bibliography(self, items: Sequence[str], params: FormattingParams) -> str:
        """
        Combine the rendered entries.

        Entries are separated by `entry_spacing` newlines (at least one).
        """
        separator = "\n" * max(1, params.entry_spacing or 1)
        return separator.join(items)

    def render_formatted_citation(self, citation: Citation, processor, no_links: bool = False) -> str:
        """Render a whole citation with the processor's style."""
        rt = render_citation_rt(citation, processor.style)
        return self.render_rich_text(rt, no_links=no_links)


# =============================================================================
# FORMAT REGISTRY
# =============================================================================

_formatters = {}


def register_formatter(name: str):
    """
    Decorator to register an output format class.

    Can be stacked for aliases:
        @register_formatter('plain')
        @register_formatter('text')
        class PlainFormatter: ...
    """
    def decorator(cls):
        _formatters[str(name).lower()] = cls
        if not cls.name:
            cls.name = str(name).lower()
        return cls
    return decorator


def get_formatter(name: str) -> BaseOutputFormat:
    """
    Get a formatter instance by format name (case-insensitive).

    Raises:
        UnknownFormatError: nothing registered under `name`
    """
    formatter_cls = _formatters.get(str(name).lower())
    if formatter_cls is None:
        raise UnknownFormatError(name)
    return formatter_cls()


def available_formats() -> List[str]:
    """Names of all registered formats, sorted."""
    return sorted(_formatters)
