"""
Post-processing formatters for generated modules.
"""

from __future__ import annotations

from .base import Formatter
from .prettier_formatter import PrettierFormatter, format_with_prettier

__all__ = [
    "Formatter",
    "PrettierFormatter",
    "format_with_prettier",
]
