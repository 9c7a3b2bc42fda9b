"""
citeweave/formatters/__init__.py

Output format package.
"""

from .base import (
    BaseOutputFormat,
    register_formatter,
    get_formatter,
    available_formats,
)
from .plain import PlainFormatter

__all__ = [
    'BaseOutputFormat',
    'register_formatter',
    'get_formatter',
    'available_formats',
    'PlainFormatter',
]
