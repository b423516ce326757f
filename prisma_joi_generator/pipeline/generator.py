"""
Generation entry point.

generate() is the invocation boundary shared by the CLI and the JSON-RPC
server: it validates configuration, prepares the output directory, runs
the registry pipeline with a fresh session and writes the index files.
Any failure propagates to the caller; nothing is retried.
"""

from __future__ import annotations

import shutil
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from ..errors import DependencyError, GenerationIOError, UpstreamGeneratorError
from ..gen_logging import get_logger, timed
from .config import ValidatedConfig, parse_generator_config
from .dmmf import Description, DMMFParser
from .emitter import JoiEmitter
from .formatters import Formatter
from .paths import MODULE_EXTENSION, PathResolver
from .registry import GenerationContext, build_default_registry
from .session import GenerationSession
from .writer import FileWriter, describe_os_error

logger = get_logger(__name__)

# Prisma client generators whose DMMF this generator understands
CLIENT_PROVIDERS = ("prisma-client-js", "prisma-client")

MISSING_CLIENT_MESSAGE = """Prisma Joi Generator requires either "prisma-client-js" or "prisma-client" generator to be present in your schema.prisma file.

Please add one of the following to your schema.prisma:

// For the legacy generator:
generator client {
  provider = "prisma-client-js"
}

// Or for the new generator (Prisma 6.12.0+):
generator client {
  provider = "prisma-client"
}"""


@dataclass
class GeneratorOptions:
    """Inputs of one generation run.

    Attributes:
        output_path: Output directory; its contents are replaced
        dmmf: DMMF document (dict) or an already parsed Description
        config: Raw generator configuration, string values as Prisma passes them
        client_providers: Providers of the other generators in the schema
        formatter: Formatter override, PrettierFormatter by default
    """

    output_path: str
    dmmf: dict[str, Any] | Description
    config: Mapping[str, str | list[str]] = field(default_factory=dict)
    client_providers: list[str] = field(default_factory=lambda: ["prisma-client-js"])
    formatter: Formatter | None = None


@dataclass
class GenerationResult:
    """Summary of a finished run."""

    output_path: str
    config: ValidatedConfig
    schema_count: int = 0
    object_count: int = 0
    enum_count: int = 0
    index_count: int = 0
    file_count: int = 0

    @property
    def module_count(self) -> int:
        return self.schema_count + self.object_count + self.enum_count


def check_client_generator(client_providers: list[str]) -> str:
    """
    Return the first recognized Prisma client provider.

    Raises:
        UpstreamGeneratorError: If none of the providers is a supported client
    """
    for provider in client_providers:
        if provider in CLIENT_PROVIDERS:
            return provider
    raise UpstreamGeneratorError(MISSING_CLIENT_MESSAGE)


def clear_output_directory(output_path: Path) -> None:
    """Create the output directory and remove everything inside it.

    Raises:
        GenerationIOError: If the directory cannot be created or emptied
    """
    try:
        output_path.mkdir(parents=True, exist_ok=True)
        for child in output_path.iterdir():
            if child.is_dir() and not child.is_symlink():
                shutil.rmtree(child)
            else:
                child.unlink()
    except OSError as e:
        raise GenerationIOError(describe_os_error(e, output_path, "clear output directory"), str(output_path)) from e


def count_generated_files(output_path: Path) -> int:
    """Number of generated modules under the output directory, 0 if it cannot be read."""
    try:
        return sum(1 for path in output_path.rglob(f"*{MODULE_EXTENSION}") if path.is_file())
    except OSError as e:
        logger.warning("Could not count generated files: %s", e)
        return 0


def generate(options: GeneratorOptions) -> GenerationResult:
    """
    Run a complete generation.

    Args:
        options: Generation inputs

    Returns:
        Summary of the generated modules

    Raises:
        ConfigError: If the configuration is invalid (nothing is written)
        UpstreamGeneratorError: If no Prisma client generator is configured
        DescriptionError: If the DMMF document is malformed
        DependencyError: If enabled kinds depend on disabled ones (nothing is written)
        GenerationIOError: If the output cannot be written
    """
    with timed(logger, "Total generation"):
        logger.info("Starting Prisma Joi Generator")

        with timed(logger, "Configuration parsing"):
            config = parse_generator_config(options.config)
        logger.info("Configuration: %s strategy, %s directories", config.filter_strategy.value, config.directory_strategy.value)
        logger.debug("Output: %s", options.output_path)
        logger.debug("Types: %s", ", ".join(config.enabled_type_names()))

        provider = check_client_generator(options.client_providers)
        logger.debug("Using DMMF produced for %s", provider)

        if isinstance(options.dmmf, Description):
            description = options.dmmf
        else:
            with timed(logger, "DMMF loading"):
                description = DMMFParser().parse(options.dmmf)

        # Checked before the output directory is cleared
        registry = build_default_registry(config)
        errors = registry.validate_dependencies()
        if errors:
            raise DependencyError(errors)

        output_path = Path(options.output_path)
        clear_output_directory(output_path)

        logger.info("Starting generation for %d models", len(description.models))
        logger.debug("Enabled file types: %s", ", ".join(config.enabled_type_names()))

        resolver = PathResolver(config, str(output_path))
        writer = FileWriter()
        with timed(logger, "Directory creation"):
            directories = resolver.get_required_directories(description.model_names)
            logger.debug("Creating %d directories", len(directories))
            for directory in directories:
                logger.debug("Creating directory: %s (strategy: %s)", directory, config.directory_strategy.value)
            writer.make_directories([resolver.get_absolute_path(directory) for directory in directories])

        # A fresh session per run so no state leaks between invocations
        session = GenerationSession(enum_names=description.enum_names)
        emitter = JoiEmitter(config, resolver, session, description.model_names, writer, options.formatter)
        with timed(logger, "Schema generation"):
            registry.execute_generation(GenerationContext(description=description, config=config, emitter=emitter))

        with timed(logger, "Index generation"):
            index_count = emitter.write_indexes()

        result = GenerationResult(
            output_path=str(output_path),
            config=config,
            schema_count=len(session.schema_modules),
            object_count=len(session.object_modules),
            enum_count=len(session.enum_modules),
            index_count=index_count,
            file_count=count_generated_files(output_path),
        )
        logger.info("Generated %d files", result.file_count)
        return result
