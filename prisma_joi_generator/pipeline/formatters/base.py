"""
Base class for source formatters.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from ..config import FormatterConfig


class Formatter(ABC):
    """Abstract base class for source formatters."""

    @abstractmethod
    def format(self, code: str, config: FormatterConfig, filename: str = "module.ts") -> str:
        """
        Format the given code.

        Args:
            code: The source code to format
            config: Formatter configuration
            filename: Name used to pick the parser

        Returns:
            Formatted code
        """

    @abstractmethod
    def is_available(self) -> bool:
        """
        Check if the formatter is available (tool installed).

        Returns:
            True if the formatter can be used
        """
