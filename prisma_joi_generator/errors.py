"""
Exception hierarchy for the Prisma Joi generator.

Every failure is fatal to the run and propagates to the invocation
boundary (CLI or JSON-RPC server).
"""

from __future__ import annotations


class GeneratorError(Exception):
    """Base class for all generator failures."""

    pass


class ConfigError(GeneratorError):
    """Raised when the generator configuration is invalid or inconsistent.

    The rendered message carries the offending field, the accepted values
    and a remediation hint when they are known.
    """

    def __init__(
        self,
        message: str,
        field: str | None = None,
        suggestion: str | None = None,
        valid_values: list[str] | None = None,
    ):
        self.reason = message
        self.field = field
        self.suggestion = suggestion
        self.valid_values = list(valid_values or [])

        full_message = f"Joi Generator Configuration Error: {message}"
        if field:
            full_message += f"\n  Field: {field}"
        if self.valid_values:
            full_message += f"\n  Valid values: {', '.join(self.valid_values)}"
        if suggestion:
            full_message += f"\n  Suggestion: {suggestion}"
        super().__init__(full_message)


class DependencyError(GeneratorError):
    """Raised when enabled artifact kinds have unsatisfiable dependencies."""

    def __init__(self, errors: list[str]):
        self.errors = list(errors)
        super().__init__("Dependency validation failed:\n" + "\n".join(self.errors))


class DescriptionError(GeneratorError):
    """Raised when the DMMF document is missing required structure."""

    pass


class UpstreamGeneratorError(GeneratorError):
    """Raised when no compatible Prisma client generator is configured."""

    pass


class GenerationIOError(GeneratorError):
    """Raised when creating a directory or writing a file fails."""

    def __init__(self, message: str, path: str):
        self.path = path
        super().__init__(message)
