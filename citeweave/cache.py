"""
citeweave/cache.py

Item cache: one ItemData per item id, numbered in order of first appearance.
"""

from collections import OrderedDict
from typing import Any, Dict, Iterator, List, Mapping, Optional, Sequence

from .models import ItemData


class ItemCache:
    """
    Ordered id -> ItemData mapping with a monotonic sequence counter.

    The counter is incremented exactly once per newly inserted id, so the
    Nth distinct id ever stored gets seq == N.
    """

    def __init__(self):
        self._items: "OrderedDict[str, ItemData]" = OrderedDict()
        self._counter = 0

    def __contains__(self, item_id: str) -> bool:
        return item_id in self._items

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[ItemData]:
        return iter(self._items.values())

    def get(self, item_id: str) -> Optional[ItemData]:
        return self._items.get(item_id)

    def missing(self, ids: Sequence[str]) -> List[str]:
        """Ids not yet cached, deduplicated, first occurrence order kept."""
        seen = set()
        result = []
        for item_id in ids:
            if item_id in seen or item_id in self._items:
                continue
            seen.add(item_id)
            result.append(item_id)
        return result

    def prepare(self, ids: Sequence[str], records: Mapping[str, Dict[str, Any]]) -> List[ItemData]:
        """
        Build ItemData for the fetched `ids`, numbered after the cached ones.

        Nothing is stored; pass the result to commit(). Ids absent from
        `records` are skipped and consume no number.
        """
        prepared = []
        seq = self._counter
        for item_id in ids:
            record = records.get(item_id)
            if record is None or item_id in self._items:
                continue
            seq += 1
            prepared.append(ItemData(id=item_id, vars=dict(record), seq=seq))
        return prepared

    def commit(self, prepared: Sequence[ItemData]) -> None:
        for itd in prepared:
            self._items[itd.id] = itd
            self._counter = max(self._counter, itd.seq)
