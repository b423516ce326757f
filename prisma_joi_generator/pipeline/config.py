"""
Configuration for the Joi generator pipeline.

Prisma hands generator configuration over as raw strings (or lists of
strings). This module coerces them into a validated, read-only policy:
which artifact kinds are enabled, where files go and how they are named.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum

from ..errors import ConfigError


class FileType(str, Enum):
    """Artifact kinds the generator can emit."""

    CREATE = "create"  # CreateInput operation schemas
    UPDATE = "update"  # updateOne / updateMany
    UPSERT = "upsert"
    UNCHECKED = "unchecked"  # Unchecked input objects (no relations)
    FILTER = "filter"  # WhereInput and *Filter input objects
    ORDER_BY = "orderBy"
    AGGREGATE = "aggregate"
    GROUP_BY = "groupBy"
    FIND = "find"  # findUnique / findFirst / findMany
    DELETE = "delete"  # deleteOne / deleteMany
    ENUMS = "enums"
    OBJECTS = "objects"  # Every input object and field-ref type


ALL_FILE_TYPES: tuple[FileType, ...] = tuple(FileType)
FILE_TYPE_NAMES: list[str] = [file_type.value for file_type in FileType]


class FilterStrategy(str, Enum):
    """How the enabled artifact kinds are derived from configuration."""

    SELECTIVE = "selective"  # Default: one boolean flag per kind
    WHITELIST = "whitelist"  # Only kinds listed in includeTypes
    BLACKLIST = "blacklist"  # Every kind except those in excludeTypes


class DirectoryStrategy(str, Enum):
    """Directory layout of the generated files."""

    FLAT = "flat"  # Everything in the base directory
    GROUPED = "grouped"  # Default: objects/ and enums/ subdirectories
    BY_MODEL = "by-model"  # One directory per model, shared enums/


class Category(str, Enum):
    """Category of a generated module, used for placement and index files."""

    SCHEMA = "schema"  # Operation schemas
    OBJECT = "object"
    ENUM = "enum"


_DIRECTORY_NAME = re.compile(r"^[a-zA-Z0-9_-]+$")
_NAMING_PLACEHOLDERS = ("{operation}", "{name}", "{type}")

_TRUE_VALUES = {"true", "1", "yes"}
_FALSE_VALUES = {"false", "0", "no"}


@dataclass(frozen=True)
class DirectoryConfig:
    """Directory names under the output directory."""

    base: str = "schemas"
    objects: str = "objects"
    enums: str = "enums"
    models: str = "models"


@dataclass(frozen=True)
class NamingConfig:
    """File naming patterns; the module extension is appended afterwards."""

    schema_files: str = "{operation}.schema"
    object_files: str = "{name}.schema"
    enum_files: str = "{name}.schema"

    def pattern_for(self, category: Category) -> str:
        if category is Category.OBJECT:
            return self.object_files
        if category is Category.ENUM:
            return self.enum_files
        return self.schema_files


@dataclass(frozen=True)
class FormatterConfig:
    """Configuration for the post-processing source formatter."""

    # Whether formatting is enabled
    enabled: bool = False

    # Line length for the formatter
    line_length: int = 100


@dataclass(frozen=True)
class ValidatedConfig:
    """Generator configuration after validation.

    enabled_types is derived from the filter strategy and is never empty.
    """

    filter_strategy: FilterStrategy = FilterStrategy.SELECTIVE
    directory_strategy: DirectoryStrategy = DirectoryStrategy.GROUPED
    enabled_types: frozenset[FileType] = frozenset(ALL_FILE_TYPES)
    include_types: tuple[FileType, ...] = ()
    exclude_types: tuple[FileType, ...] = ()
    directories: DirectoryConfig = field(default_factory=DirectoryConfig)
    naming: NamingConfig = field(default_factory=NamingConfig)
    generate_index: bool = True
    formatter: FormatterConfig = field(default_factory=FormatterConfig)

    def is_enabled(self, file_type: FileType) -> bool:
        return file_type in self.enabled_types

    def enabled_type_names(self) -> list[str]:
        """Enabled kinds in declaration order, for logging."""
        return [file_type.value for file_type in ALL_FILE_TYPES if file_type in self.enabled_types]


def get_config_string(value: str | list[str]) -> str:
    """Extract a single string from a Prisma config value (string or list)."""
    if isinstance(value, (list, tuple)):
        return value[0] if value else ""
    return value


def parse_boolean_string(value: str, field_name: str | None = None) -> bool:
    """Parse true/false, 1/0 or yes/no, case-insensitively.

    Raises:
        ConfigError: If the value is not one of the accepted literals
    """
    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise ConfigError(
        f'Invalid boolean value: "{value}". Expected true/false, 1/0, or yes/no',
        field_name,
        valid_values=["true", "false", "1", "0", "yes", "no"],
    )


def parse_comma_separated(value: str | list[str]) -> list[str]:
    """Split a comma-separated config value, dropping empty entries.

    A list value (Prisma passes arrays through) is flattened the same way.
    """
    if isinstance(value, (list, tuple)):
        parts = [part for item in value for part in item.split(",")]
    else:
        parts = value.split(",")
    return [part.strip() for part in parts if part.strip()]


def _to_file_types(names: list[str], field_name: str, suggestion: str) -> tuple[FileType, ...]:
    invalid = [name for name in names if name not in FILE_TYPE_NAMES]
    if invalid:
        raise ConfigError(
            f"Invalid file types in {field_name}: {', '.join(invalid)}",
            field_name,
            suggestion,
            FILE_TYPE_NAMES,
        )
    # Keep first occurrence order, drop duplicates
    return tuple(dict.fromkeys(FileType(name) for name in names))


def _parse_enum_option(raw: Mapping[str, str | list[str]], key: str, enum_cls, suggestion: str):
    value = get_config_string(raw[key]).strip()
    try:
        return enum_cls(value)
    except ValueError:
        raise ConfigError(
            f"Invalid {key}: {value}",
            key,
            suggestion,
            [member.value for member in enum_cls],
        ) from None


def _validate_directory(key: str, value: str) -> str:
    if not _DIRECTORY_NAME.match(value):
        raise ConfigError(
            f"Invalid directory name '{value}' for {key}. Directory names must contain only letters, numbers, underscores, and hyphens",
            f"directories.{key}",
            "Use a name matching [a-zA-Z0-9_-]+",
        )
    return value


def _validate_pattern(key: str, value: str) -> str:
    if not any(placeholder in value for placeholder in _NAMING_PLACEHOLDERS):
        raise ConfigError(
            f"Naming pattern '{value}' for {key} contains no placeholder, every file would get the same name",
            key,
            "Include {operation}, {name} or {type}, e.g. '{name}.schema'",
            list(_NAMING_PLACEHOLDERS),
        )
    return value


def compute_enabled_types(
    strategy: FilterStrategy,
    include_types: tuple[FileType, ...],
    exclude_types: tuple[FileType, ...],
    file_type_flags: Mapping[FileType, bool],
) -> frozenset[FileType]:
    """Derive the enabled kinds for a filter strategy."""
    if strategy is FilterStrategy.WHITELIST:
        return frozenset(include_types)
    if strategy is FilterStrategy.BLACKLIST:
        return frozenset(file_type for file_type in ALL_FILE_TYPES if file_type not in exclude_types)
    return frozenset(file_type for file_type in ALL_FILE_TYPES if file_type_flags.get(file_type, True))


def parse_generator_config(raw: Mapping[str, str | list[str]]) -> ValidatedConfig:
    """
    Parse and validate raw generator configuration.

    Args:
        raw: String-keyed configuration as supplied by Prisma
            (``generator.config``); values are strings or lists of strings.

    Returns:
        The validated configuration

    Raises:
        ConfigError: If any value is invalid or the options are inconsistent
    """
    filter_strategy = FilterStrategy.SELECTIVE
    if raw.get("filterStrategy"):
        filter_strategy = _parse_enum_option(
            raw,
            "filterStrategy",
            FilterStrategy,
            'Use "selective" for individual type flags (create="true"), "whitelist" for includeTypes, or "blacklist" for excludeTypes',
        )

    directory_strategy = DirectoryStrategy.GROUPED
    if raw.get("directoryStrategy"):
        directory_strategy = _parse_enum_option(
            raw,
            "directoryStrategy",
            DirectoryStrategy,
            'Use "grouped" for type-based folders (default), "flat" for single directory, or "by-model" for model-based organization',
        )

    include_names = parse_comma_separated(raw["includeTypes"]) if raw.get("includeTypes") else None
    exclude_names = parse_comma_separated(raw["excludeTypes"]) if raw.get("excludeTypes") else None
    include_field = "includeTypes"
    exclude_field = "excludeTypes"

    # Legacy aliases switch the strategy when the canonical lists are absent
    if raw.get("enabledTypes") and include_names is None:
        include_names = parse_comma_separated(raw["enabledTypes"])
        include_field = "enabledTypes"
        filter_strategy = FilterStrategy.WHITELIST
    if raw.get("disabledTypes") and exclude_names is None:
        exclude_names = parse_comma_separated(raw["disabledTypes"])
        exclude_field = "disabledTypes"
        filter_strategy = FilterStrategy.BLACKLIST

    include_types = (
        _to_file_types(include_names, include_field, 'Use comma-separated list of valid file types, e.g., "create,find,objects,enums"')
        if include_names is not None
        else ()
    )
    exclude_types = (
        _to_file_types(exclude_names, exclude_field, 'Use comma-separated list of valid file types to exclude, e.g., "aggregate,groupBy"')
        if exclude_names is not None
        else ()
    )

    if filter_strategy is FilterStrategy.WHITELIST:
        if not include_types:
            raise ConfigError(
                "includeTypes must be specified and non-empty when using whitelist strategy",
                "includeTypes",
                'Add includeTypes with desired file types, e.g., includeTypes = "create,find,objects,enums"',
                FILE_TYPE_NAMES,
            )
        if exclude_types:
            raise ConfigError(
                "excludeTypes cannot be combined with the whitelist strategy",
                exclude_field,
                'Remove excludeTypes or switch to filterStrategy = "blacklist"',
            )
    elif filter_strategy is FilterStrategy.BLACKLIST:
        if not exclude_types:
            raise ConfigError(
                "excludeTypes must be specified and non-empty when using blacklist strategy",
                "excludeTypes",
                'Add excludeTypes with file types to exclude, e.g., excludeTypes = "aggregate,groupBy,unchecked"',
                FILE_TYPE_NAMES,
            )
        if include_types:
            raise ConfigError(
                "includeTypes cannot be combined with the blacklist strategy",
                include_field,
                'Remove includeTypes or switch to filterStrategy = "whitelist"',
            )
    elif include_types or exclude_types:
        raise ConfigError(
            "includeTypes/excludeTypes are only used by the whitelist and blacklist strategies",
            include_field if include_types else exclude_field,
            'Set filterStrategy = "whitelist" (includeTypes) or "blacklist" (excludeTypes), or use per-type flags such as create = "false"',
            [FilterStrategy.WHITELIST.value, FilterStrategy.BLACKLIST.value],
        )

    file_type_flags: dict[FileType, bool] = {}
    for file_type in ALL_FILE_TYPES:
        if file_type.value in raw:
            file_type_flags[file_type] = parse_boolean_string(get_config_string(raw[file_type.value]), file_type.value)

    enabled_types = compute_enabled_types(filter_strategy, include_types, exclude_types, file_type_flags)
    if not enabled_types:
        raise ConfigError(
            "At least one file type must be enabled",
            "fileTypes",
            'Enable at least one type, e.g., objects = "true"',
            FILE_TYPE_NAMES,
        )

    directory_overrides: dict[str, str] = {}
    for key, attribute in (
        ("baseDirectory", "base"),
        ("objectsDirectory", "objects"),
        ("enumsDirectory", "enums"),
        ("modelsDirectory", "models"),
    ):
        if raw.get(key):
            directory_overrides[attribute] = _validate_directory(attribute, get_config_string(raw[key]))

    naming_overrides: dict[str, str] = {}
    for key, attribute in (
        ("schemaFilePattern", "schema_files"),
        ("objectFilePattern", "object_files"),
        ("enumFilePattern", "enum_files"),
    ):
        if raw.get(key):
            naming_overrides[attribute] = _validate_pattern(key, get_config_string(raw[key]))

    generate_index = True
    if raw.get("generateIndex") is not None:
        generate_index = parse_boolean_string(get_config_string(raw["generateIndex"]), "generateIndex")

    format_enabled = False
    if raw.get("formatWithPrettier") is not None:
        format_enabled = parse_boolean_string(get_config_string(raw["formatWithPrettier"]), "formatWithPrettier")

    return ValidatedConfig(
        filter_strategy=filter_strategy,
        directory_strategy=directory_strategy,
        enabled_types=enabled_types,
        include_types=include_types,
        exclude_types=exclude_types,
        directories=DirectoryConfig(**directory_overrides),
        naming=NamingConfig(**naming_overrides),
        generate_index=generate_index,
        formatter=FormatterConfig(enabled=format_enabled),
    )
