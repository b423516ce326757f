"""
Prettier formatter for TypeScript modules.
"""

from __future__ import annotations

import subprocess

from ...gen_logging import get_logger
from ..config import FormatterConfig
from .base import Formatter

logger = get_logger(__name__)


class PrettierFormatter(Formatter):
    """Formatter running the prettier CLI over stdin/stdout."""

    def __init__(self, executable: str = "prettier"):
        self.executable = executable
        self._available = None

    def is_available(self) -> bool:
        """Check if prettier is installed."""
        if self._available is None:
            try:
                result = subprocess.run(
                    [self.executable, "--version"],
                    capture_output=True,
                    text=True,
                    timeout=5,
                )
                self._available = result.returncode == 0
            except (subprocess.SubprocessError, FileNotFoundError):
                self._available = False
            if not self._available:
                logger.warning("prettier is not available, generated files are left unformatted")
        return self._available

    def format(self, code: str, config: FormatterConfig, filename: str = "module.ts") -> str:
        """
        Format TypeScript code using prettier.

        Args:
            code: TypeScript source code to format
            config: Formatter configuration
            filename: Name passed to --stdin-filepath

        Returns:
            Formatted code, or the input unchanged if prettier fails
        """
        if not self.is_available():
            return code

        cmd = [self.executable, "--stdin-filepath", filename]
        if config.line_length:
            cmd.extend(["--print-width", str(config.line_length)])

        try:
            result = subprocess.run(
                cmd,
                input=code,
                capture_output=True,
                text=True,
                timeout=30,
            )
        except subprocess.SubprocessError as e:
            logger.warning("prettier failed on %s: %s", filename, e)
            return code

        if result.returncode != 0:
            logger.warning("prettier failed on %s: %s", filename, result.stderr.strip())
            return code
        return result.stdout


def format_with_prettier(code: str, filename: str = "module.ts", line_length: int = 100) -> str:
    """
    Convenience function to format TypeScript code with prettier.

    Args:
        code: TypeScript source code
        filename: Name used to pick the parser
        line_length: Maximum line length

    Returns:
        Formatted code
    """
    formatter = PrettierFormatter()
    config = FormatterConfig(enabled=True, line_length=line_length)
    return formatter.format(code, config, filename)
