"""
citeweave/processor.py

The citation processor: ingests citations incrementally, caches the items
they reference, and renders citations and the bibliography on demand.

Usage:
    proc = create_processor(raw_style, item_getter, locale_getter, compiler)
    proc.append_citations([[{'id': 'doe2001', 'locator': '12'}]])
    proc.render_citations('plain')
    bib, params = proc.render_bibliography('plain')

A Processor is mutable, single-writer state. Renders on a finalized
processor do not modify it; anything that appends or finalizes must be
serialized by the caller.
"""

import logging
from collections import deque
from typing import Any, Callable, Deque, Iterable, List, Mapping, Optional, Sequence, Tuple

from .bibliography import render_bibliography
from .cache import ItemCache
from .config import ITEM_DATA_KEY
from .errors import ItemFetchError
from .formatters import get_formatter
from .models import UNPROCESSED, Citation, FormattingParams, ItemData, Style
from .style import StyleCompiler, resolve_style

logger = logging.getLogger(__name__)

Finalizer = Callable[["Processor"], None]
Sorter = Callable[["Processor"], List[ItemData]]


def sort_by_sequence(processor: "Processor") -> List[ItemData]:
    """Default bibliography order: sort keys from finalize, then first appearance."""
    return sorted(
        processor.cache,
        key=lambda itd: (itd.sort_key is None, itd.sort_key if itd.sort_key is not None else 0, itd.seq),
    )


class Processor:
    """
    Citation processor for one style and locale.

    Args:
        style: Compiled Style
        item_getter: Object with fetch(ids) -> {id: record}
        finalizer: Optional disambiguation/sort-key pass, called with the
            processor before rendering a dirty processor
        sorter: Returns cached items in bibliography order
    """

    def __init__(
        self,
        style: Style,
        item_getter,
        finalizer: Optional[Finalizer] = None,
        sorter: Optional[Sorter] = None
    ):
        self.style = style
        self.item_getter = item_getter
        self.finalizer = finalizer
        self.sorter = sorter or sort_by_sequence
        self.cache = ItemCache()
        self.citations: Deque[Citation] = deque()
        self.finalized = True

    # =========================================================================
    # INGESTION
    # =========================================================================

    def _fetch(self, ids: Sequence[str]) -> List[ItemData]:
        """Fetch uncached ids in one batch; nothing is stored yet."""
        new_ids = self.cache.missing(ids)
        if not new_ids:
            return []
        logger.debug("[Processor] Fetching %d new items", len(new_ids))
        try:
            records = self.item_getter.fetch(new_ids)
        except ItemFetchError:
            raise
        except Exception as e:
            raise ItemFetchError(f"Item getter failed: {e}", ids=new_ids) from e
        if records is None:
            records = {}
        if not isinstance(records, Mapping):
            raise ItemFetchError(
                f"Item getter returned {type(records).__name__}, expected a mapping",
                ids=new_ids
            )
        prepared = self.cache.prepare(new_ids, records)
        if len(prepared) < len(new_ids):
            found = {itd.id for itd in prepared}
            logger.warning(
                "[Processor] No data for %s",
                ", ".join(i for i in new_ids if i not in found)
            )
        return prepared

    def append_citations(self, citations: Iterable[Any]) -> None:
        """
        Add citations to the end of the queue.

        Each citation is a Citation or a sequence of cite dicts, each with
        an 'id'. Unseen items are fetched in one batch. On any error the
        processor is left unchanged.

        Raises:
            ValueError: a cite has no 'id'
            ItemFetchError: the item getter failed
        """
        new_citations = [Citation.from_value(c) for c in citations]
        for citation in new_citations:
            for cite in citation.cites:
                if 'id' not in cite:
                    raise ValueError(f"Cite without 'id': {cite!r}")

        ids = [item_id for citation in new_citations for item_id in citation.ids]
        self.cache.commit(self._fetch(ids))

        for citation in new_citations:
            for cite in citation.cites:
                itd = self.cache.get(cite['id'])
                cite[ITEM_DATA_KEY] = itd if itd is not None else UNPROCESSED
            self.citations.append(citation)
        self.finalized = False

    def add_uncited(self, ids: Sequence[str]) -> None:
        """Add items that appear in the bibliography without being cited."""
        self.cache.commit(self._fetch(list(ids)))
        self.finalized = False

    # =========================================================================
    # FINALIZE
    # =========================================================================

    def finalize(self) -> None:
        """Run the finalize pass (if any) and mark the processor clean."""
        if self.finalizer is not None:
            self.finalizer(self)
        self.finalized = True

    def ensure_finalized(self) -> None:
        if not self.finalized:
            self.finalize()

    def sorted_items(self) -> List[ItemData]:
        return list(self.sorter(self))

    # =========================================================================
    # RENDERING
    # =========================================================================

    def render_citations(self, format: str = 'plain', no_links: bool = False) -> List[str]:
        """Formatted citations, in queue order."""
        self.ensure_finalized()
        formatter = get_formatter(format)
        return [
            formatter.render_formatted_citation(citation, self, no_links=no_links)
            for citation in self.citations
        ]

    def render_bibliography(self, format: str = 'plain', no_link_targets: bool = False) -> Tuple[str, FormattingParams]:
        """Formatted bibliography and its formatting parameters."""
        return render_bibliography(self, format, no_link_targets)

    def __repr__(self) -> str:
        return (
            f"<Processor locale={self.style.locale!r} items={len(self.cache)} "
            f"citations={len(self.citations)} finalized={self.finalized}>"
        )


def create_processor(
    raw_style: Any,
    item_getter,
    locale_getter,
    compiler: StyleCompiler,
    locale: Optional[str] = None,
    force_locale: bool = False,
    finalizer: Optional[Finalizer] = None,
    sorter: Optional[Sorter] = None
) -> Processor:
    """
    Compile a style and wrap it in a fresh Processor.

    Raises:
        StyleCompileError, LocaleUnavailable
    """
    style = resolve_style(
        raw_style,
        locale_getter,
        compiler,
        preferred_locale=locale,
        force_locale=force_locale,
    )
    return Processor(style, item_getter, finalizer=finalizer, sorter=sorter)
