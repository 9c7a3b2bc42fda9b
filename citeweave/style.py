"""
citeweave/style.py

Style resolution: picks the effective locale for a style and hands the
compilation itself to a StyleCompiler.

Locale precedence (first match wins):
    1. force_locale set         -> preferred_locale (or the default)
    2. style declares a locale  -> the style's default locale
    3. preferred_locale given   -> preferred_locale
    4. otherwise                -> config.DEFAULT_LOCALE ('en-US')
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from .config import (
    DEFAULT_LOCALE,
    CITE_OPTION_DEFAULTS,
    BIB_OPTION_DEFAULTS,
    CITE_LAYOUT_DEFAULTS,
)
from .errors import LocaleUnavailable, StyleCompileError
from .models import Style

logger = logging.getLogger(__name__)


class StyleCompiler(ABC):
    """
    Abstract base class for style compilers.

    A compiler turns a raw style definition into a Style bound to a locale.
    Subclasses must implement:
    - parse(raw) -> parsed style (any representation)
    - default_locale(parsed) -> declared default locale or None
    - uses_year_suffix_var(parsed) -> whether layouts render 'year-suffix'
    - compile(parsed, has_ys_var, locale) -> Style

    Locale overrides and option defaults have working defaults here.
    """

    @abstractmethod
    def parse(self, raw_style: Any) -> Any:
        """Parse a raw style definition."""
        pass

    @abstractmethod
    def default_locale(self, parsed: Any) -> Optional[str]:
        """Locale declared by the style itself, if any."""
        pass

    @abstractmethod
    def uses_year_suffix_var(self, parsed: Any) -> bool:
        """True if the style's layouts render the year-suffix variable."""
        pass

    @abstractmethod
    def compile(self, parsed: Any, has_ys_var: bool, locale: str) -> Style:
        """Build a Style bound to `locale`."""
        pass

    def apply_locale_overrides(self, style: Style, locale_record: Dict[str, Any]) -> None:
        """
        Merge locale options and terms into the style.

        Values the style sets itself take precedence over the locale's.
        """
        style.locale_options = {**locale_record.get('options', {}), **style.locale_options}
        style.terms = {**locale_record.get('terms', {}), **style.terms}

    def apply_option_defaults(self, style: Style) -> None:
        """Fill options the style left unset."""
        for key, value in CITE_OPTION_DEFAULTS.items():
            style.cite_options.setdefault(key, value)
        if style.has_bibliography:
            for key, value in BIB_OPTION_DEFAULTS.items():
                style.bib_options.setdefault(key, value)
        for key, value in CITE_LAYOUT_DEFAULTS.items():
            style.cite_layout_attrs.setdefault(key, value)


def select_locale(
    style_locale: Optional[str],
    preferred_locale: Optional[str] = None,
    force_locale: bool = False
) -> str:
    """Apply the locale precedence rules."""
    if force_locale:
        return preferred_locale or DEFAULT_LOCALE
    return style_locale or preferred_locale or DEFAULT_LOCALE


def fetch_locale(locale_getter, tag: str) -> Dict[str, Any]:
    """Fetch a locale record, normalizing every failure to LocaleUnavailable."""
    try:
        record = locale_getter.fetch(tag)
    except LocaleUnavailable:
        raise
    except Exception as e:
        raise LocaleUnavailable(f"Could not fetch locale: {e}", locale=tag) from e
    if not record or not record.get('lang'):
        raise LocaleUnavailable("Locale record has no language tag", locale=tag)
    return record


def resolve_style(
    raw_style: Any,
    locale_getter,
    compiler: StyleCompiler,
    preferred_locale: Optional[str] = None,
    force_locale: bool = False
) -> Style:
    """
    Compile `raw_style` against the effective locale.

    Args:
        raw_style: Style definition, passed through to the compiler
        locale_getter: Object with fetch(tag) -> locale record ('lang' key)
        compiler: StyleCompiler implementation
        preferred_locale: Caller's locale, e.g. 'de-DE'
        force_locale: Use preferred_locale even if the style declares one

    Raises:
        StyleCompileError: raw style is malformed or compilation failed
        LocaleUnavailable: the effective locale could not be fetched
    """
    try:
        parsed = compiler.parse(raw_style)
        style_locale = compiler.default_locale(parsed)
        has_ys_var = compiler.uses_year_suffix_var(parsed)
    except StyleCompileError:
        raise
    except Exception as e:
        raise StyleCompileError(f"Could not parse style: {e}") from e

    tag = select_locale(style_locale, preferred_locale, force_locale)
    logger.debug("[StyleResolver] Effective locale: %s", tag)
    record = fetch_locale(locale_getter, tag)
    lang = record['lang']

    try:
        style = compiler.compile(parsed, has_ys_var, lang)
    except StyleCompileError:
        raise
    except Exception as e:
        raise StyleCompileError(f"Could not compile style: {e}", locale=lang) from e

    compiler.apply_locale_overrides(style, record)
    compiler.apply_option_defaults(style)
    return style
