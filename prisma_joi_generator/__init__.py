"""Prisma Joi Generator

A Prisma generator that emits Joi validation schemas (TypeScript) for
every model operation, input object type and enum of a Prisma schema.
"""

__version__ = "1.0.1"

from .errors import (
    ConfigError,
    DependencyError,
    DescriptionError,
    GenerationIOError,
    GeneratorError,
    UpstreamGeneratorError,
)
from .pipeline import (
    GenerationResult,
    GeneratorOptions,
    ValidatedConfig,
    generate,
    parse_generator_config,
)

__all__ = [
    "ConfigError",
    "DependencyError",
    "DescriptionError",
    "GenerationIOError",
    "GeneratorError",
    "UpstreamGeneratorError",
    "GenerationResult",
    "GeneratorOptions",
    "ValidatedConfig",
    "generate",
    "parse_generator_config",
]
