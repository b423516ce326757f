"""
Artifact type registry.

A declarative table of artifact kinds. Each kind has a priority, the kinds
it depends on and a generator callback; the registry validates the
dependencies of the enabled subset, orders it topologically and runs it.
"""

from __future__ import annotations

import gc
from collections.abc import Callable
from dataclasses import dataclass, replace

from ..errors import DependencyError
from ..gen_logging import get_logger, timed
from .builders import OPERATION_FILE_TYPES
from .config import ALL_FILE_TYPES, FileType, ValidatedConfig
from .dmmf.nodes import Description
from .emitter import JoiEmitter

logger = get_logger(__name__)


@dataclass(frozen=True)
class GenerationContext:
    """Everything a kind generator needs; batches get a narrowed copy."""

    description: Description
    config: ValidatedConfig
    emitter: JoiEmitter


GeneratorFunction = Callable[[GenerationContext], None]


@dataclass(frozen=True)
class FileTypeMetadata:
    """Static description of an artifact kind."""

    display_name: str
    description: str
    priority: int  # Lower runs earlier when otherwise unconstrained
    dependencies: tuple[FileType, ...] = ()
    per_model: bool = False


@dataclass(frozen=True)
class RegistryEntry:
    file_type: FileType
    metadata: FileTypeMetadata
    generator: GeneratorFunction


class FileTypeRegistry:
    """Registry of artifact kinds for one configuration."""

    # Per-model kinds are batched above BATCH_THRESHOLD models
    BATCH_SIZE = 5
    BATCH_THRESHOLD = 10
    # Garbage collection is hinted between batches above GC_THRESHOLD models
    GC_THRESHOLD = 20

    def __init__(self, config: ValidatedConfig):
        self.config = config
        self._entries: dict[FileType, RegistryEntry] = {}

    def register(self, file_type: FileType, metadata: FileTypeMetadata, generator: GeneratorFunction) -> None:
        """Register (or replace) the generator of a kind."""
        self._entries[file_type] = RegistryEntry(file_type, metadata, generator)

    def get_metadata(self, file_type: FileType) -> FileTypeMetadata | None:
        entry = self._entries.get(file_type)
        return entry.metadata if entry else None

    def is_enabled(self, file_type: FileType) -> bool:
        return file_type in self._entries and self.config.is_enabled(file_type)

    def get_enabled_types(self) -> list[FileType]:
        return [file_type for file_type in self._entries if self.is_enabled(file_type)]

    def validate_dependencies(self) -> list[str]:
        """
        Check that every enabled kind's dependencies are enabled too.

        Returns:
            One message per unsatisfied dependency; empty when valid
        """
        errors = []
        for file_type in self.get_enabled_types():
            for dependency in self._entries[file_type].metadata.dependencies:
                if not self.is_enabled(dependency):
                    errors.append(f"File type '{file_type.value}' depends on '{dependency.value}' which is not enabled")
        return errors

    def get_generation_order(self) -> list[FileType]:
        """
        Order the enabled kinds so each one runs after its dependencies.

        Depth-first topological sort seeded by priority.

        Raises:
            DependencyError: If the dependencies contain a cycle
        """
        enabled = sorted(self.get_enabled_types(), key=lambda file_type: self._entries[file_type].metadata.priority)
        order: list[FileType] = []
        visited: set[FileType] = set()
        visiting: set[FileType] = set()

        def visit(file_type: FileType) -> None:
            if file_type in visited:
                return
            if file_type in visiting:
                raise DependencyError([f"Circular dependency detected involving file type: {file_type.value}"])
            visiting.add(file_type)
            for dependency in self._entries[file_type].metadata.dependencies:
                if self.is_enabled(dependency):
                    visit(dependency)
            visiting.discard(file_type)
            visited.add(file_type)
            order.append(file_type)

        for file_type in enabled:
            visit(file_type)
        return order

    def execute_generation(self, context: GenerationContext) -> None:
        """
        Run every enabled kind in dependency order.

        Raises:
            DependencyError: If dependencies are unsatisfied or cyclic
            GeneratorError: Whatever a kind generator raises; the run stops there
        """
        errors = self.validate_dependencies()
        if errors:
            raise DependencyError(errors)

        order = self.get_generation_order()
        skipped = [file_type.value for file_type in ALL_FILE_TYPES if file_type in self._entries and not self.is_enabled(file_type)]
        if skipped:
            logger.info("Skipping disabled file types: %s", ", ".join(skipped))

        for position, file_type in enumerate(order, start=1):
            entry = self._entries[file_type]
            logger.info("[%d/%d] Generating %s schemas...", position, len(order), entry.metadata.display_name)
            try:
                with timed(logger, f"{file_type.value} generation"):
                    if entry.metadata.per_model and len(context.description.models) > self.BATCH_THRESHOLD:
                        self._generate_in_batches(entry, context)
                    else:
                        entry.generator(context)
            except Exception:
                logger.error("Failed to generate %s schemas", entry.metadata.display_name)
                raise

    def _generate_in_batches(self, entry: RegistryEntry, context: GenerationContext) -> None:
        """Run a per-model kind over consecutive slices of the model mappings.

        Mappings keep their order and every mapping lands in exactly one
        batch; each batch's models are narrowed to the ones its mappings name.
        """
        description = context.description
        mappings = description.model_operations
        total_batches = (len(mappings) + self.BATCH_SIZE - 1) // self.BATCH_SIZE
        for batch_number, start in enumerate(range(0, len(mappings), self.BATCH_SIZE), start=1):
            batch = mappings[start : start + self.BATCH_SIZE]
            batch_names = {mapping.model for mapping in batch}
            batch_description = replace(
                description,
                models=tuple(model for model in description.models if model.name in batch_names),
                model_operations=batch,
            )
            logger.debug("Processing %s batch %d/%d (%d models)", entry.file_type.value, batch_number, total_batches, len(batch))
            entry.generator(replace(context, description=batch_description))
            if len(description.models) > self.GC_THRESHOLD:
                gc.collect()


# Built-in kind generators


def generate_enums(context: GenerationContext) -> None:
    count = context.emitter.emit_enums(context.description.enums)
    logger.debug("Generated %d enum schemas", count)


def generate_objects(context: GenerationContext) -> None:
    emitter = context.emitter
    count = emitter.emit_object_types(context.description.field_ref_types)
    count += emitter.emit_object_types(context.description.input_object_types)
    logger.debug("Generated %d object schemas", count)


def classified_object_generator(file_type: FileType) -> GeneratorFunction:
    """Generator for the filter/orderBy/unchecked kinds.

    These only emit their share of the input objects when the objects kind
    is disabled, since objects already covers every input object type. The
    object and field-ref types their share references are emitted with it.
    """

    def generate(context: GenerationContext) -> None:
        if context.config.is_enabled(FileType.OBJECTS):
            logger.debug("%s input objects are emitted by the objects generator", file_type.value)
            return
        description = context.description
        count = context.emitter.emit_object_types((*description.field_ref_types, *description.input_object_types), file_type)
        logger.debug("Generated %d %s object schemas", count, file_type.value)

    return generate


def operation_generator(file_type: FileType) -> GeneratorFunction:
    """Generator emitting one operation kind for every model mapping in the context."""

    def generate(context: GenerationContext) -> None:
        count = 0
        for mapping in context.description.model_operations:
            count += len(context.emitter.emit_operations(mapping, file_type))
        logger.debug("Generated %d %s operation schemas", count, file_type.value)

    return generate


_OBJECT_KIND_METADATA = {
    FileType.FILTER: FileTypeMetadata("filter", "WhereInput and filter input objects", 3, (FileType.ENUMS,)),
    FileType.ORDER_BY: FileTypeMetadata("orderBy", "OrderBy input objects", 4, (FileType.ENUMS,)),
    FileType.UNCHECKED: FileTypeMetadata("unchecked", "Unchecked create/update input objects", 5, (FileType.ENUMS,)),
}

_OPERATION_KIND_METADATA = {
    FileType.FIND: ("find", "findUnique, findFirst and findMany operation schemas", 10),
    FileType.CREATE: ("create", "createOne operation schemas", 11),
    FileType.UPDATE: ("update", "updateOne and updateMany operation schemas", 12),
    FileType.UPSERT: ("upsert", "upsertOne operation schemas", 13),
    FileType.DELETE: ("delete", "deleteOne and deleteMany operation schemas", 14),
    FileType.AGGREGATE: ("aggregate", "aggregate operation schemas", 15),
    FileType.GROUP_BY: ("groupBy", "groupBy operation schemas", 16),
}


def build_default_registry(config: ValidatedConfig) -> FileTypeRegistry:
    """Registry with every built-in kind registered."""
    registry = FileTypeRegistry(config)
    registry.register(FileType.ENUMS, FileTypeMetadata("enum", "Enum validators", 1), generate_enums)
    registry.register(
        FileType.OBJECTS,
        FileTypeMetadata("object", "Input object and field-ref type key maps", 2, (FileType.ENUMS,)),
        generate_objects,
    )
    for file_type, metadata in _OBJECT_KIND_METADATA.items():
        registry.register(file_type, metadata, classified_object_generator(file_type))
    for file_type in OPERATION_FILE_TYPES:
        display_name, description, priority = _OPERATION_KIND_METADATA[file_type]
        registry.register(
            file_type,
            FileTypeMetadata(display_name, description, priority, (FileType.OBJECTS, FileType.ENUMS), per_model=True),
            operation_generator(file_type),
        )
    return registry
