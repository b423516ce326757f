"""
Path resolution for generated modules.

Three interchangeable layouts decide which directory a module goes to;
the resolver adds file naming and relative import paths on top of them.
All paths are POSIX-style and relative to the output directory.
"""

from __future__ import annotations

import posixpath
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path

from .config import Category, DirectoryStrategy, FileType, ValidatedConfig

MODULE_EXTENSION = ".ts"
INDEX_FILENAME = f"index{MODULE_EXTENSION}"

# Kinds whose generators emit object modules
OBJECT_FILE_TYPES = (FileType.OBJECTS, FileType.FILTER, FileType.ORDER_BY, FileType.UNCHECKED)

_OPERATION_PREFIX = re.compile(r"^(findUnique|findFirst|findMany|createOne|updateOne|deleteOne|upsertOne|deleteMany|updateMany|aggregate|groupBy)(.+)$")
_INPUT_TYPE_SUFFIX = re.compile(
    r"^(.+?)("
    r"CreateInput|UpdateInput|WhereInput|OrderByInput|UncheckedCreateInput|UncheckedUpdateInput|"
    r"AvgOrderByAggregateInput|CountOrderByAggregateInput|MaxOrderByAggregateInput|MinOrderByAggregateInput|"
    r"SumOrderByAggregateInput|ScalarWhereWithAggregatesInput|CreateManyInput|UpdateManyMutationInput|"
    r"UncheckedUpdateManyInput|OrderByWithAggregationInput|OrderByWithRelationInput|WhereUniqueInput|"
    r"ListRelationFilter|ScalarRelationFilter|NullableScalarRelationFilter|CreateNestedManyWithoutInput|"
    r"CreateNestedOneWithoutInput|UpdateNestedManyWithoutInput|UpdateNestedOneWithoutInput|"
    r"UncheckedCreateNestedManyWithoutInput|UncheckedUpdateNestedManyWithoutInput|CreateOrConnectWithoutInput|"
    r"UpdateWithWhereUniqueWithoutInput|UpdateWithoutInput|UpsertWithWhereUniqueWithoutInput|UpsertWithoutInput|"
    r"CreateWithoutInput|UncheckedCreateWithoutInput|UncheckedUpdateWithoutInput|UpdateManyWithWhereWithoutInput|"
    r"UpdateManyWithoutNestedInput|CreateManyInputEnvelope|ScalarWhereInput"
    r").*$"
)
_SCHEMA_SUFFIX = re.compile(r"^(.+)(Schema)$")


def extract_model_name(artifact_name: str) -> str | None:
    """
    Recover the owning model from an artifact name.

    Tries, in order: an operation prefix ("findManyPost" -> "Post"), an
    input-type suffix ("UserCreateInput" -> "User"), a "Schema" suffix.

    Returns:
        The model name, or None when no pattern matches
    """
    match = _OPERATION_PREFIX.match(artifact_name)
    if match:
        return match.group(2)
    for pattern in (_INPUT_TYPE_SUFFIX, _SCHEMA_SUFFIX):
        match = pattern.match(artifact_name)
        if match:
            return match.group(1)
    return None


def sanitize_directory_name(name: str) -> str:
    """Lowercase, collapse non-alphanumeric runs to '-', trim edge hyphens."""
    sanitized = re.sub(r"[^a-z0-9]+", "-", name.lower())
    return sanitized.strip("-")


def relative_module_path(from_directory: str, target_file: str) -> str:
    """
    Module specifier for importing target_file from a file in from_directory.

    The module extension is dropped and a trailing "/index" collapses to
    its directory, so "../enums/index.ts" becomes "../enums".
    """
    target = target_file[: -len(MODULE_EXTENSION)] if target_file.endswith(MODULE_EXTENSION) else target_file
    relative = posixpath.relpath(target, from_directory or ".")
    if relative == "index":
        relative = "./index"
    elif relative.endswith("/index"):
        relative = relative[: -len("/index")]
    if not relative.startswith("."):
        relative = f"./{relative}"
    return relative


@dataclass(frozen=True)
class FileInfo:
    """Logical identity of a generated module."""

    file_type: FileType
    file_name: str  # e.g. "findManyUser", "UserCreateInput", "Role"
    category: Category
    model_name: str | None = None


@dataclass(frozen=True)
class ResolvedPath:
    """Where a module is written and how its index references it."""

    file_path: str  # Relative to the output directory
    directory: str
    filename: str
    import_path: str  # Relative to the directory of the category's index file


class DirectoryLayout(ABC):
    """Abstract base class for directory strategies."""

    def __init__(self, config: ValidatedConfig):
        self.config = config
        self.directories = config.directories

    @abstractmethod
    def directory_for(self, file_info: FileInfo) -> str:
        """Directory a module is written to."""

    @abstractmethod
    def index_directory(self, category: Category) -> str:
        """Directory of the index file re-exporting a category."""

    @abstractmethod
    def required_directories(self, model_names: list[str]) -> list[str]:
        """Every directory the enabled kinds need, without duplicates."""

    def model_index_directory(self, model_name: str) -> str | None:
        """Directory of a model's own index, None when models share the category indexes."""
        return None

    def has_object_types(self) -> bool:
        return any(self.config.is_enabled(file_type) for file_type in OBJECT_FILE_TYPES)

    def _join(self, *parts: str) -> str:
        return posixpath.join(self.directories.base, *parts)


class FlatLayout(DirectoryLayout):
    """Every module directly in the base directory."""

    def directory_for(self, file_info: FileInfo) -> str:
        return self.directories.base

    def index_directory(self, category: Category) -> str:
        return self.directories.base

    def required_directories(self, model_names: list[str]) -> list[str]:
        return [self.directories.base]


class GroupedLayout(DirectoryLayout):
    """Operation schemas in the base directory, objects and enums in subdirectories."""

    def directory_for(self, file_info: FileInfo) -> str:
        return self.index_directory(file_info.category)

    def index_directory(self, category: Category) -> str:
        if category is Category.ENUM:
            return self._join(self.directories.enums)
        if category is Category.OBJECT:
            return self._join(self.directories.objects)
        return self.directories.base

    def required_directories(self, model_names: list[str]) -> list[str]:
        directories = [self.directories.base]
        if self.config.is_enabled(FileType.ENUMS):
            directories.append(self._join(self.directories.enums))
        if self.has_object_types():
            directories.append(self._join(self.directories.objects))
        return list(dict.fromkeys(directories))


class ByModelLayout(GroupedLayout):
    """One directory per model; enums and model-less objects stay grouped."""

    def model_directory(self, model_name: str) -> str:
        return self._join(self.directories.models, sanitize_directory_name(model_name))

    def model_index_directory(self, model_name: str) -> str:
        return self.model_directory(model_name)

    def directory_for(self, file_info: FileInfo) -> str:
        if file_info.model_name is None or file_info.category is Category.ENUM:
            return super().directory_for(file_info)
        model_directory = self.model_directory(file_info.model_name)
        if file_info.category is Category.OBJECT:
            return posixpath.join(model_directory, self.directories.objects)
        return model_directory

    def required_directories(self, model_names: list[str]) -> list[str]:
        directories = super().required_directories(model_names)
        for model_name in model_names:
            model_directory = self.model_directory(model_name)
            directories.append(model_directory)
            if self.has_object_types():
                directories.append(posixpath.join(model_directory, self.directories.objects))
        return list(dict.fromkeys(directories))


LAYOUTS: dict[DirectoryStrategy, type[DirectoryLayout]] = {
    DirectoryStrategy.FLAT: FlatLayout,
    DirectoryStrategy.GROUPED: GroupedLayout,
    DirectoryStrategy.BY_MODEL: ByModelLayout,
}


class PathResolver:
    """Resolves output paths, index paths and import paths for a configuration."""

    def __init__(self, config: ValidatedConfig, output_path: str):
        """
        Initialize the resolver.

        Args:
            config: Validated generator configuration
            output_path: Absolute output directory
        """
        self.config = config
        self.output_path = output_path
        self.layout = LAYOUTS[config.directory_strategy](config)

    def resolve_path(self, file_info: FileInfo) -> ResolvedPath:
        """Resolve where a module is written."""
        directory = self.layout.directory_for(file_info)
        filename = self.get_filename(file_info)
        file_path = posixpath.join(directory, filename)
        return ResolvedPath(
            file_path=file_path,
            directory=directory,
            filename=filename,
            import_path=relative_module_path(self.layout.index_directory(file_info.category), file_path),
        )

    def resolve_index_path(self, category: Category, model_name: str | None = None) -> ResolvedPath:
        """
        Resolve the index file of a category; flat layouts share one index.

        Args:
            category: Category the index re-exports
            model_name: When given and the layout has per-model directories,
                the model's own index (e.g. "schemas/models/user/index.ts")
                is resolved instead
        """
        directory = self.layout.model_index_directory(model_name) if model_name is not None else None
        if directory is None:
            directory = self.layout.index_directory(category)
        file_path = posixpath.join(directory, INDEX_FILENAME)
        return ResolvedPath(
            file_path=file_path,
            directory=directory,
            filename=INDEX_FILENAME,
            import_path=relative_module_path(self.config.directories.base, file_path),
        )

    def get_filename(self, file_info: FileInfo) -> str:
        """Apply the category's naming pattern and append the module extension."""
        pattern = self.config.naming.pattern_for(file_info.category)
        final_name = pattern.replace("{operation}", file_info.file_name).replace("{name}", file_info.file_name).replace("{type}", file_info.file_type.value)
        return f"{final_name}{MODULE_EXTENSION}"

    def get_required_directories(self, model_names: list[str]) -> list[str]:
        return self.layout.required_directories(model_names)

    def get_absolute_path(self, relative_path: str) -> Path:
        return Path(self.output_path, *relative_path.split("/"))
