"""
Joi module emitter.

Builds shapes, resolves paths and imports, renders, optionally formats and
writes every module, tracking each one in the generation session so the
index files can be assembled at the end of the run.
"""

from __future__ import annotations

from collections.abc import Iterable

from ..gen_logging import get_logger
from .builders import (
    EnumShapeBuilder,
    ObjectShapeBuilder,
    OperationShapeBuilder,
    classify_input_object,
)
from .config import Category, FileType, ValidatedConfig
from .dmmf.nodes import EnumType, InputObjectType, ModelMapping
from .formatters import Formatter, PrettierFormatter
from .mapper import enum_symbol, object_symbol
from .paths import FileInfo, PathResolver, ResolvedPath, extract_model_name, relative_module_path
from .renderer import JoiRenderer, ModuleImport, group_imports
from .session import GeneratedArtifact, GenerationSession
from .writer import FileWriter

logger = get_logger(__name__)

# Index files re-export categories in this order
INDEX_CATEGORY_ORDER = (Category.SCHEMA, Category.OBJECT, Category.ENUM)


class JoiEmitter:
    """Emits enum, object and operation modules for one generation run."""

    def __init__(
        self,
        config: ValidatedConfig,
        resolver: PathResolver,
        session: GenerationSession,
        model_names: Iterable[str] = (),
        writer: FileWriter | None = None,
        formatter: Formatter | None = None,
    ):
        """
        Initialize the emitter.

        Args:
            config: Validated generator configuration
            resolver: Path resolver for the output directory
            session: Session the emitted modules are tracked in
            model_names: Every model of the description, used for by-model placement
            writer: File writer, a fresh FileWriter by default
            formatter: Source formatter used when formatting is enabled
        """
        self.config = config
        self.resolver = resolver
        self.session = session
        self.model_names = frozenset(model_names)
        self.writer = writer or FileWriter()
        self.formatter = formatter or PrettierFormatter()
        self.renderer = JoiRenderer()
        self.object_builder = ObjectShapeBuilder()
        self.operation_builder = OperationShapeBuilder(session.enum_names)
        self.enum_builder = EnumShapeBuilder()

    # Placement

    def model_for(self, artifact_name: str) -> str | None:
        """Owning model of an artifact, only when it names a known model."""
        model_name = extract_model_name(artifact_name)
        return model_name if model_name in self.model_names else None

    def object_file_info(self, name: str) -> FileInfo:
        return FileInfo(classify_input_object(name), name, Category.OBJECT, self.model_for(name))

    def enum_file_info(self, name: str) -> FileInfo:
        return FileInfo(FileType.ENUMS, name, Category.ENUM)

    def _file_info(self, name: str, category: Category) -> FileInfo:
        if category is Category.ENUM:
            return self.enum_file_info(name)
        return self.object_file_info(name)

    def import_source(self, name: str, category: Category, from_directory: str, through_index: bool = True) -> str:
        """
        Module specifier a file in from_directory uses to import a referenced module.

        References go through the category's index when indexes are generated
        and the index is not in the importing directory; otherwise they point
        at the module itself.
        """
        if through_index and self.config.generate_index:
            index = self.resolver.resolve_index_path(category)
            if index.directory != from_directory:
                return relative_module_path(from_directory, index.file_path)
        module = self.resolver.resolve_path(self._file_info(name, category))
        return relative_module_path(from_directory, module.file_path)

    def _imports(self, dependencies: dict[str, Category], from_directory: str, objects_through_index: bool) -> list[ModuleImport]:
        pairs = []
        for name, category in dependencies.items():
            if category is Category.ENUM:
                symbol = enum_symbol(name)
                source = self.import_source(name, category, from_directory)
            else:
                symbol = object_symbol(name)
                source = self.import_source(name, category, from_directory, objects_through_index)
            pairs.append((symbol, source))
        return group_imports(pairs)

    # Emission

    def emit_enums(self, enums: Iterable[EnumType]) -> int:
        count = 0
        for enum_type in enums:
            self.emit_enum(enum_type)
            count += 1
        return count

    def emit_enum(self, enum_type: EnumType) -> GeneratedArtifact:
        shape = self.enum_builder.build(enum_type)
        file_info = self.enum_file_info(enum_type.name)
        resolved = self.resolver.resolve_path(file_info)
        self._write(resolved, self.renderer.render_enum(shape))
        return self._track(Category.ENUM, file_info, resolved, shape.symbol)

    def emit_object_types(self, object_types: Iterable[InputObjectType], file_type: FileType | None = None) -> int:
        """
        Emit object modules.

        Args:
            object_types: Input object or field-ref types
            file_type: When given, only types classified into this kind are
                emitted, together with the object types they reference

        Returns:
            Number of modules written; types already emitted in this session are skipped
        """
        object_types = list(object_types)
        if file_type is not None:
            object_types = self.select_object_types(object_types, file_type)
        count = 0
        for object_type in object_types:
            if self.session.is_emitted(Category.OBJECT, object_type.name):
                continue
            self.emit_object_type(object_type)
            count += 1
        return count

    def select_object_types(self, object_types: list[InputObjectType], file_type: FileType) -> list[InputObjectType]:
        """
        The types classified into file_type plus every object type they
        reference, directly or transitively. Order follows object_types.
        """
        by_name = {object_type.name: object_type for object_type in object_types}
        pending = [name for name in by_name if classify_input_object(name) is file_type]
        selected = set(pending)
        while pending:
            shape = self.object_builder.build(by_name[pending.pop()])
            for name, category in shape.dependencies.items():
                if category is Category.OBJECT and name in by_name and name not in selected:
                    selected.add(name)
                    pending.append(name)
        return [object_type for object_type in object_types if object_type.name in selected]

    def emit_object_type(self, object_type: InputObjectType) -> GeneratedArtifact:
        shape = self.object_builder.build(object_type)
        file_info = self.object_file_info(object_type.name)
        resolved = self.resolver.resolve_path(file_info)
        # Sibling objects are imported directly to avoid index cycles
        imports = self._imports(shape.dependencies, resolved.directory, objects_through_index=False)
        self._write(resolved, self.renderer.render_object(shape, imports))
        return self._track(Category.OBJECT, file_info, resolved, shape.symbol)

    def emit_operations(self, mapping: ModelMapping, file_type: FileType) -> list[GeneratedArtifact]:
        """
        Emit the operation modules of one kind for a model.

        Args:
            mapping: The model's operation mapping
            file_type: Operation kind (find, create, update, ...)

        Returns:
            The emitted artifacts, empty when the kind is disabled or unsupported
        """
        if not self.config.is_enabled(file_type):
            return []
        artifacts = []
        for shape in self.operation_builder.build(mapping, file_type):
            file_info = FileInfo(file_type, shape.artifact_name, Category.SCHEMA, self.model_for(shape.artifact_name))
            resolved = self.resolver.resolve_path(file_info)
            imports = self._imports(shape.dependencies, resolved.directory, objects_through_index=True)
            self._write(resolved, self.renderer.render_operation(shape, imports))
            artifacts.append(self._track(Category.SCHEMA, file_info, resolved, shape.symbol))
        return artifacts

    def write_indexes(self) -> int:
        """
        Write one index file per distinct index path.

        Categories sharing an index path (flat layout) are combined into one
        file. Only modules tracked in this session are exported; a category
        with no modules still gets an (empty) index.

        Returns:
            Number of index files written
        """
        if not self.config.generate_index:
            return 0

        groups: dict[str, tuple[ResolvedPath, list[Category]]] = {}
        for category in INDEX_CATEGORY_ORDER:
            index = self.resolver.resolve_index_path(category)
            groups.setdefault(index.file_path, (index, []))[1].append(category)

        written = 0
        for index, categories in groups.values():
            export_paths = [artifact.path.import_path for category in categories for artifact in self.session.modules_for(category)]
            self._write(index, self.renderer.render_index(export_paths))
            logger.debug("Index %s exports %d modules", index.file_path, len(export_paths))
            written += 1
        return written

    def _track(self, category: Category, file_info: FileInfo, resolved: ResolvedPath, symbol: str) -> GeneratedArtifact:
        artifact = GeneratedArtifact(
            category=category,
            name=file_info.file_name,
            file_type=file_info.file_type,
            path=resolved,
            symbol=symbol,
            model_name=file_info.model_name,
        )
        self.session.track(artifact)
        return artifact

    def _write(self, resolved: ResolvedPath, content: str) -> None:
        if self.config.formatter.enabled:
            content = self.formatter.format(content, self.config.formatter, resolved.filename)
        self.writer.write(self.resolver.get_absolute_path(resolved.file_path), content, resolved.file_path)
