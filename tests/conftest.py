"""
Shared pytest fixtures for citeweave tests.

Fixture Organization
--------------------
- **items**: CSL-JSON item records
- **item_getter**: DictItemGetter that records each batch it is asked for
- **locale_getter**: in-memory locales (en-US, de-DE, fr-FR)
- **compiler**: FakeCompiler, a StyleCompiler over dict "raw styles"
- **raw_style**: author-date style with a bibliography
- **processor**: Processor built from the fixtures above

Layouts render names inside a 'rendered-names' node, the date inside a
'rendered-var=issued' node and, in the bibliography, the item number in a
left-margin first field:

    cite: Doe, Jane 2001, 12
    bib:  [1] Doe, Jane. 2001. First book
"""

from typing import Any, Dict, List, Optional, Sequence

import pytest

from citeweave.engines import DictItemGetter, DictLocaleGetter
from citeweave.models import RenderContext, Style
from citeweave.processor import create_processor
from citeweave.rich_text import Node
from citeweave.style import StyleCompiler


# ============================================================================
# Layouts and compiler
# ============================================================================


def cite_layout(ctx: RenderContext) -> Node:
    v = ctx.vars
    content = [
        Node({'rendered-names': True}, [v.get('author', '')]),
        ' ',
        Node({'rendered-var': 'issued'}, [str(v.get('issued', ''))]),
    ]
    if v.get('locator'):
        content += [', ', v['locator']]
    return Node({}, content)


def bib_layout(ctx: RenderContext) -> Node:
    v = ctx.vars
    return Node({}, [
        Node({'display': 'left-margin'}, [f"[{v['citation-number']}]"]),
        ' ',
        Node({'rendered-names': True}, [v.get('author', '')]),
        '. ',
        Node({'rendered-var': 'issued'}, [str(v.get('issued', ''))]),
        '. ',
        v.get('title', ''),
    ])


class FakeCompiler(StyleCompiler):
    """Compiles dict styles; anything else is malformed."""

    def __init__(self):
        self.compiled_with: List[tuple] = []

    def parse(self, raw_style: Any) -> Dict[str, Any]:
        if not isinstance(raw_style, dict):
            raise ValueError("style must be a mapping")
        return raw_style

    def default_locale(self, parsed: Dict[str, Any]) -> Optional[str]:
        return parsed.get('locale')

    def uses_year_suffix_var(self, parsed: Dict[str, Any]) -> bool:
        return bool(parsed.get('uses_ys_var', False))

    def compile(self, parsed: Dict[str, Any], has_ys_var: bool, locale: str) -> Style:
        self.compiled_with.append((has_ys_var, locale))
        return Style(
            locale=locale,
            cite_layout=parsed.get('cite_layout', cite_layout),
            bib_layout=parsed.get('bib_layout', bib_layout) if parsed.get('bibliography', True) else None,
            bib_options=dict(parsed.get('bib_options', {})),
            cite_layout_attrs=dict(parsed.get('layout_attrs', {'prefix': '(', 'suffix': ')'})),
            terms=dict(parsed.get('terms', {})),
            uses_ys_var=has_ys_var,
        )


class RecordingItemGetter(DictItemGetter):
    """DictItemGetter that remembers every batch it was asked for."""

    def __init__(self, items):
        super().__init__(items)
        self.calls: List[List[str]] = []

    def fetch(self, ids: Sequence[str]) -> Dict[str, Dict[str, Any]]:
        self.calls.append(list(ids))
        return super().fetch(ids)


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def items() -> List[Dict[str, Any]]:
    return [
        {'id': 'doe2001', 'type': 'book', 'author': 'Doe, Jane', 'issued': 2001, 'title': 'First book'},
        {'id': 'doe2003', 'type': 'book', 'author': 'Doe, Jane', 'issued': 2003, 'title': 'Second book'},
        {'id': 'roe1999', 'type': 'book', 'author': 'Roe, Richard', 'issued': 1999, 'title': 'Third book'},
    ]


@pytest.fixture
def item_getter(items) -> RecordingItemGetter:
    return RecordingItemGetter(items)


@pytest.fixture
def locale_getter() -> DictLocaleGetter:
    return DictLocaleGetter({
        'en-US': {'lang': 'en-US', 'options': {'punctuation-in-quote': 'true'}, 'terms': {'and': 'and'}},
        'de-DE': {'lang': 'de-DE', 'options': {'punctuation-in-quote': 'false'}, 'terms': {'and': 'und'}},
        'fr-FR': {'lang': 'fr-FR', 'terms': {'and': 'et'}},
    })


@pytest.fixture
def compiler() -> FakeCompiler:
    return FakeCompiler()


@pytest.fixture
def raw_style() -> Dict[str, Any]:
    return {'bib_options': {}}


@pytest.fixture
def processor(raw_style, item_getter, locale_getter, compiler):
    return create_processor(raw_style, item_getter, locale_getter, compiler)
