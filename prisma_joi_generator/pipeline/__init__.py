"""
Pipeline - Prisma DMMF to Joi validation schema generator.

A run goes through these phases:

1. Config: Validate the raw generator configuration
2. DMMF: Parse the Prisma DMMF into a typed description
3. Registry: Order the enabled artifact kinds by their dependencies
4. Emitter: Map fields, render and write enum, object and operation modules
5. Formatter: Optional post-processing (prettier)
6. Index: Re-export the modules written during the run
"""

from __future__ import annotations

from .config import (
    Category,
    DirectoryStrategy,
    FileType,
    FilterStrategy,
    FormatterConfig,
    ValidatedConfig,
    parse_generator_config,
)
from .dmmf import Description, DMMFParser
from .emitter import JoiEmitter
from .generator import GenerationResult, GeneratorOptions, generate
from .paths import PathResolver
from .registry import FileTypeRegistry, GenerationContext, build_default_registry
from .session import GenerationSession
from .writer import FileWriter

__all__ = [
    "Category",
    "DirectoryStrategy",
    "FileType",
    "FilterStrategy",
    "FormatterConfig",
    "ValidatedConfig",
    "parse_generator_config",
    "Description",
    "DMMFParser",
    "JoiEmitter",
    "GenerationResult",
    "GeneratorOptions",
    "generate",
    "PathResolver",
    "FileTypeRegistry",
    "GenerationContext",
    "build_default_registry",
    "GenerationSession",
    "FileWriter",
]
