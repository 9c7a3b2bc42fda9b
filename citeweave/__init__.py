"""
citeweave - Incremental Citation Processor

Turns a compiled citation style and a growing stream of citations into
formatted citations and a formatted bibliography.

Usage:
    from citeweave import create_processor, DictItemGetter, DirLocaleGetter

    proc = create_processor(raw_style, DictItemGetter(items),
                            DirLocaleGetter('locales/'), compiler)
    proc.append_citations([[{'id': 'doe2001', 'locator': '12'}]])
    proc.render_citations('plain')
    bibliography, params = proc.render_bibliography('plain')

Architecture:
    ┌─────────────────────────────────────────┐
    │ Style Resolver (style.py)               │
    │ locale precedence → StyleCompiler       │
    └─────────────────┬───────────────────────┘
                      ▼
    ┌─────────────────────────────────────────┐
    │ Processor (processor.py)                │
    │ ItemCache (cache.py) ← engines/         │
    │ Citation queue                          │
    └─────────────────┬───────────────────────┘
            ┌─────────┴─────────┐
            ▼                   ▼
    ┌───────────────┐   ┌─────────────────────┐
    │ render.py     │   │ bibliography.py     │
    │ per-item      │◄──│ sort, substitute,   │
    │ rendering     │   │ params              │
    └───────┬───────┘   └──────────┬──────────┘
            └──────────┬───────────┘
                       ▼
            ┌─────────────────────┐
            │ Rich text           │
            │ (rich_text.py)      │
            └──────────┬──────────┘
                       ▼
            ┌─────────────────────┐
            │ Formatters          │
            │ (formatters/)       │
            └─────────────────────┘

Modules:
    - models.py: Data structures (Style, ItemData, Citation, FormattingParams)
    - config.py: Constants, sentinels, option defaults
    - errors.py: Exception hierarchy
    - rich_text.py: Rich-text trees and their rewrites
    - style.py: StyleCompiler base class and locale resolution
    - cache.py: Item cache with first-appearance numbering
    - render.py: Per-item rendering
    - bibliography.py: Bibliography pipeline and option coercion
    - processor.py: The Processor
    - engines/: Item and locale getters (in-memory, files, HTTP)
    - formatters/: Output format registry (plain text built in)
    - app.py: Flask JSON API
"""

__version__ = "0.3.0"

# =============================================================================
# PUBLIC API
# =============================================================================

# Models
from .models import (
    Citation,
    FormattingParams,
    ItemData,
    RenderContext,
    RenderMode,
    RenderPurpose,
    SecondFieldAlign,
    Style,
    UNPROCESSED,
)

# Errors
from .errors import (
    CiteweaveError,
    ItemFetchError,
    LocaleUnavailable,
    StyleCompileError,
    UnknownFormatError,
)

# Rich text
from .rich_text import (
    Node,
    RichText,
    to_plain,
    subsequent_author_substitute,
)

# Style resolution
from .style import StyleCompiler, resolve_style

# Rendering
from .render import render_item
from .bibliography import derive_params, render_bibliography

# Processor
from .processor import Processor, create_processor

# Formatting
from .formatters import (
    BaseOutputFormat,
    PlainFormatter,
    available_formats,
    get_formatter,
    register_formatter,
)

# Engines
from .engines import (
    ItemGetter,
    LocaleGetter,
    DictItemGetter,
    CSLJSONItemGetter,
    DictLocaleGetter,
    DirLocaleGetter,
    CrossrefItemGetter,
    RemoteLocaleGetter,
)

__all__ = [
    # Version
    '__version__',

    # Models
    'Citation',
    'FormattingParams',
    'ItemData',
    'RenderContext',
    'RenderMode',
    'RenderPurpose',
    'SecondFieldAlign',
    'Style',
    'UNPROCESSED',

    # Errors
    'CiteweaveError',
    'ItemFetchError',
    'LocaleUnavailable',
    'StyleCompileError',
    'UnknownFormatError',

    # Rich text
    'Node',
    'RichText',
    'to_plain',
    'subsequent_author_substitute',

    # Style
    'StyleCompiler',
    'resolve_style',

    # Rendering
    'render_item',
    'derive_params',
    'render_bibliography',

    # Processor
    'Processor',
    'create_processor',

    # Formatting
    'BaseOutputFormat',
    'PlainFormatter',
    'available_formats',
    'get_formatter',
    'register_formatter',

    # Engines
    'ItemGetter',
    'LocaleGetter',
    'DictItemGetter',
    'CSLJSONItemGetter',
    'DictLocaleGetter',
    'DirLocaleGetter',
    'CrossrefItemGetter',
    'RemoteLocaleGetter',
]
