"""
citeweave/errors.py

Exception hierarchy for the citation processor.

    CiteweaveError (base)
    ├── LocaleUnavailable    locale getter failed (processor creation)
    ├── StyleCompileError    style could not be parsed/compiled
    ├── ItemFetchError       batch item fetch failed (append leaves state unchanged)
    └── UnknownFormatError   no formatter registered under a name

Missing bibliography layouts and items without data are not errors: they
render as visible sentinel text (see config.NO_BIB_LAYOUT and
config.NO_ITEM_DATA_PREFIX).
"""

from typing import Any, Dict, Optional, Sequence


class CiteweaveError(Exception):
    """Base class for all citeweave errors."""

    def __init__(self, message: str, **context: Any):
        super().__init__(message)
        self.message = message
        self.context: Dict[str, Any] = context

    def __str__(self) -> str:
        if not self.context:
            return self.message
        details = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
        return f"{self.message} ({details})"


class LocaleUnavailable(CiteweaveError):
    """The locale getter could not provide the requested locale."""

    def __init__(self, message: str, locale: Optional[str] = None):
        super().__init__(message, locale=locale)
        self.locale = locale


class StyleCompileError(CiteweaveError):
    """The raw style is malformed or could not be compiled."""


class ItemFetchError(CiteweaveError):
    """The item getter failed for a batch of ids."""

    def __init__(self, message: str, ids: Sequence[str] = ()):
        super().__init__(message, ids=list(ids))
        self.ids = list(ids)


class UnknownFormatError(CiteweaveError, KeyError):
    """No output formatter is registered under the requested name."""

    def __init__(self, name: str):
        super().__init__(f"Unknown output format: {name}", format=name)
        self.name = name

    def __str__(self) -> str:
        return CiteweaveError.__str__(self)
