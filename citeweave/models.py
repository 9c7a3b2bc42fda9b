"""
citeweave/models.py

Core data models for the citation processor.
All modules communicate through these standardized structures.
"""

from dataclasses import dataclass, field
from typing import Optional, List, Dict, Any, Callable, Iterable, Union
from enum import Enum

from .rich_text import RichText


class RenderMode(Enum):
    """Which layout of the style an item is rendered with."""
    CITE = "cite"
    BIB = "bib"


class RenderPurpose(Enum):
    """Whether the rendering is shown to the user or used as a sort key."""
    DISPLAY = "display"
    SORT = "sort"


class SecondFieldAlign(Enum):
    """Bibliography second-field alignment modes."""
    NONE = "none"
    FLUSH = "flush"
    MARGIN = "margin"


class _Unprocessed:
    """Marker attached to cites whose item could not be fetched."""

    def __repr__(self) -> str:
        return "UNPROCESSED"


UNPROCESSED = _Unprocessed()


@dataclass
class ItemData:
    """
    A cached bibliographic item.

    `vars` holds the item's field values (CSL-JSON style). `seq` is the
    1-based position at which the id was first seen by the processor and is
    never reassigned. `year_suffix` and `sort_key` belong to the finalize
    collaborator.
    """
    id: str
    vars: Dict[str, Any] = field(default_factory=dict)
    seq: int = 0
    year_suffix: Optional[str] = None
    sort_key: Optional[Any] = None


@dataclass
class Citation:
    """An ordered group of cites as they appear at one point of a document."""
    cites: List[Dict[str, Any]] = field(default_factory=list)
    note_index: Optional[int] = None
    mode: Optional[str] = None

    @classmethod
    def from_value(cls, value: Union["Citation", Iterable[Dict[str, Any]]]) -> "Citation":
        """
        Normalize caller input into a fresh Citation.

        Cite dicts are copied so ingestion never mutates caller objects.
        """
        if isinstance(value, Citation):
            return cls(
                cites=[dict(c) for c in value.cites],
                note_index=value.note_index,
                mode=value.mode,
            )
        return cls(cites=[dict(c) for c in value])

    @property
    def ids(self) -> List[str]:
        return [c['id'] for c in self.cites]


@dataclass
class FormattingParams:
    """Layout hints handed to the bibliography formatters."""
    max_offset: int = 0
    line_spacing: Optional[int] = None
    entry_spacing: Optional[int] = None
    second_field_align: SecondFieldAlign = SecondFieldAlign.NONE
    hanging_indent: Optional[bool] = None

    @classmethod
    def from_options(cls, options: Dict[str, Any], max_offset: int = 0) -> "FormattingParams":
        """Create from the coerced option mapping produced by derive_params()."""
        return cls(
            max_offset=max_offset,
            line_spacing=options.get('line-spacing'),
            entry_spacing=options.get('entry-spacing'),
            second_field_align=options.get('second-field-align', SecondFieldAlign.NONE),
            hanging_indent=options.get('hanging-indent'),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Hyphenated option names; absent values are omitted."""
        d = {
            'max-offset': self.max_offset,
            'second-field-align': self.second_field_align.value,
        }
        if self.line_spacing is not None:
            d['line-spacing'] = self.line_spacing
        if self.entry_spacing is not None:
            d['entry-spacing'] = self.entry_spacing
        if self.hanging_indent is not None:
            d['hanging-indent'] = self.hanging_indent
        return d


@dataclass
class RenderContext:
    """Everything a layout function sees when rendering one item."""
    vars: Dict[str, Any]
    style: "Style"
    mode: RenderMode = RenderMode.CITE
    render_mode: RenderPurpose = RenderPurpose.DISPLAY

    @property
    def locale(self) -> str:
        return self.style.locale

    def term(self, name: str, default: str = "") -> str:
        return self.style.terms.get(name, default)


Layout = Callable[[RenderContext], RichText]


@dataclass
class Style:
    """
    A compiled style, as produced by a StyleCompiler.

    Option tables hold raw textual values straight from the style
    definition; the bibliography pipeline coerces them.
    """
    locale: str
    cite_layout: Optional[Layout] = None
    bib_layout: Optional[Layout] = None
    locale_options: Dict[str, str] = field(default_factory=dict)
    cite_options: Dict[str, str] = field(default_factory=dict)
    bib_options: Dict[str, str] = field(default_factory=dict)
    cite_layout_attrs: Dict[str, str] = field(default_factory=dict)
    terms: Dict[str, str] = field(default_factory=dict)
    info: Dict[str, Any] = field(default_factory=dict)
    uses_ys_var: bool = False

    def layout_for(self, mode: RenderMode) -> Optional[Layout]:
        if mode == RenderMode.BIB:
            return self.bib_layout
        return self.cite_layout

    @property
    def has_bibliography(self) -> bool:
        return self.bib_layout is not None
