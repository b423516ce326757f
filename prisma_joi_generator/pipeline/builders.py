"""
Shape builders for the three module kinds.

Builders decide what a module contains (fields, top-level keys,
dependencies); rendering the shape into source text is the renderer's job.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field

from .config import Category, FileType
from .dmmf.nodes import EnumType, InputObjectType, ModelMapping
from .mapper import FieldMapper, MappedField, array_of, enum_symbol, object_keys, object_symbol

_FILTER_SUFFIXES = ("Filter", "WhereInput", "WhereUniqueInput", "WhereWithAggregatesInput")


def classify_input_object(name: str) -> FileType:
    """
    Artifact kind an input object type belongs to, judged by its name.

    Examples:
        "UserUncheckedCreateInput" -> unchecked
        "UserOrderByWithRelationInput" -> orderBy
        "UserWhereInput", "StringFilter" -> filter
        "UserCreateInput" -> objects
    """
    if "Unchecked" in name:
        return FileType.UNCHECKED
    if "OrderBy" in name:
        return FileType.ORDER_BY
    if name.endswith(_FILTER_SUFFIXES):
        return FileType.FILTER
    return FileType.OBJECTS


@dataclass
class ObjectModuleShape:
    """An object module: one exported keys map."""

    name: str
    symbol: str
    fields: list[MappedField] = field(default_factory=list)
    dependencies: dict[str, Category] = field(default_factory=dict)


class ObjectShapeBuilder:
    """Builds object module shapes from input object and field-ref types."""

    def build(self, object_type: InputObjectType) -> ObjectModuleShape:
        mapper = FieldMapper(owner=object_type.name)
        fields = mapper.map_fields(object_type.fields)
        return ObjectModuleShape(
            name=object_type.name,
            symbol=object_symbol(object_type.name),
            fields=fields,
            dependencies=mapper.dependencies,
        )


@dataclass(frozen=True)
class OperationKey:
    """A top-level key of an operation schema."""

    name: str
    kind: str  # "object", "enum_list" or "number"
    type_name: str | None = None
    required: bool = False

    def expression(self) -> str:
        if self.kind == "object":
            expression = object_keys(self.type_name)
        elif self.kind == "enum_list":
            expression = array_of(enum_symbol(self.type_name))
        else:
            expression = "Joi.number()"
        if self.required:
            expression += ".required()"
        return expression

    def dependency(self) -> tuple[str, Category] | None:
        if self.kind == "object":
            return self.type_name, Category.OBJECT
        if self.kind == "enum_list":
            return self.type_name, Category.ENUM
        return None


@dataclass
class OperationShape:
    """An operation module: one exported Joi object schema."""

    operation: str  # DMMF operation, e.g. "findMany"
    artifact_name: str  # e.g. "findManyUser"
    model: str
    file_type: FileType
    symbol: str
    keys: list[OperationKey] = field(default_factory=list)

    @property
    def dependencies(self) -> dict[str, Category]:
        dependencies: dict[str, Category] = {}
        for key in self.keys:
            dependency = key.dependency()
            if dependency is not None and dependency[0] not in dependencies:
                dependencies[dependency[0]] = dependency[1]
        return dependencies


def _where(model: str) -> OperationKey:
    return OperationKey("where", "object", f"{model}WhereInput")


def _where_unique(model: str, key: str = "where") -> OperationKey:
    return OperationKey(key, "object", f"{model}WhereUniqueInput")


def _paging() -> list[OperationKey]:
    return [OperationKey("take", "number"), OperationKey("skip", "number")]


def _find_unique_keys(model: str) -> list[OperationKey]:
    return [_where_unique(model)]


def _find_keys(model: str) -> list[OperationKey]:
    return [
        _where(model),
        OperationKey("orderBy", "object", f"{model}OrderByWithRelationInput"),
        _where_unique(model, "cursor"),
        *_paging(),
        OperationKey("distinct", "enum_list", f"{model}ScalarFieldEnum"),
    ]


def _create_keys(model: str) -> list[OperationKey]:
    return [OperationKey("data", "object", f"{model}CreateInput")]


def _delete_one_keys(model: str) -> list[OperationKey]:
    return [_where_unique(model)]


def _delete_many_keys(model: str) -> list[OperationKey]:
    return [_where(model)]


def _update_one_keys(model: str) -> list[OperationKey]:
    return [OperationKey("data", "object", f"{model}UpdateInput"), _where_unique(model)]


def _update_many_keys(model: str) -> list[OperationKey]:
    return [OperationKey("data", "object", f"{model}UpdateManyMutationInput"), _where(model)]


def _upsert_keys(model: str) -> list[OperationKey]:
    return [
        _where_unique(model),
        OperationKey("data", "object", f"{model}CreateInput"),
        OperationKey("update", "object", f"{model}UpdateInput"),
    ]


def _aggregate_keys(model: str) -> list[OperationKey]:
    return [
        _where(model),
        OperationKey("orderBy", "object", f"{model}OrderByWithRelationInput"),
        _where_unique(model, "cursor"),
        *_paging(),
    ]


def _group_by_keys(model: str) -> list[OperationKey]:
    return [
        _where(model),
        OperationKey("orderBy", "object", f"{model}OrderByWithAggregationInput"),
        OperationKey("having", "object", f"{model}ScalarWhereWithAggregatesInput"),
        *_paging(),
        OperationKey("by", "enum_list", f"{model}ScalarFieldEnum", required=True),
    ]


@dataclass(frozen=True)
class OperationSpec:
    """How one DMMF operation maps to a module."""

    attribute: str  # ModelMapping attribute
    operation: str
    file_type: FileType
    export_suffix: str
    keys: Callable[[str], list[OperationKey]]


# Emission order within a model
OPERATION_SPECS: tuple[OperationSpec, ...] = (
    OperationSpec("find_unique", "findUnique", FileType.FIND, "FindUnique", _find_unique_keys),
    OperationSpec("find_first", "findFirst", FileType.FIND, "FindFirst", _find_keys),
    OperationSpec("find_many", "findMany", FileType.FIND, "FindMany", _find_keys),
    OperationSpec("create_one", "createOne", FileType.CREATE, "Create", _create_keys),
    OperationSpec("delete_one", "deleteOne", FileType.DELETE, "DeleteOne", _delete_one_keys),
    OperationSpec("delete_many", "deleteMany", FileType.DELETE, "DeleteMany", _delete_many_keys),
    OperationSpec("update_one", "updateOne", FileType.UPDATE, "UpdateOne", _update_one_keys),
    OperationSpec("update_many", "updateMany", FileType.UPDATE, "UpdateMany", _update_many_keys),
    OperationSpec("upsert_one", "upsertOne", FileType.UPSERT, "Upsert", _upsert_keys),
    OperationSpec("aggregate", "aggregate", FileType.AGGREGATE, "Aggregate", _aggregate_keys),
    OperationSpec("group_by", "groupBy", FileType.GROUP_BY, "GroupBy", _group_by_keys),
)

OPERATION_FILE_TYPES: tuple[FileType, ...] = tuple(dict.fromkeys(spec.file_type for spec in OPERATION_SPECS))


class OperationShapeBuilder:
    """Builds the operation module shapes of one model mapping."""

    def __init__(self, enum_names: frozenset[str] | None = None):
        """
        Args:
            enum_names: Known enums; when given, the optional "distinct" key
                is left out if the model's ScalarFieldEnum is not among them
        """
        self.enum_names = enum_names

    def build(self, mapping: ModelMapping, file_type: FileType) -> list[OperationShape]:
        """
        Build the shapes of every operation of a given kind present in the mapping.

        Args:
            mapping: The model's operation mapping
            file_type: Operation kind to build (find, create, ...)

        Returns:
            Shapes in emission order; empty when the model has no such operation
        """
        shapes = []
        for spec in OPERATION_SPECS:
            if spec.file_type is not file_type:
                continue
            artifact_name = getattr(mapping, spec.attribute)
            if not artifact_name:
                continue
            keys = [key for key in spec.keys(mapping.model) if self._keep(key)]
            shapes.append(
                OperationShape(
                    operation=spec.operation,
                    artifact_name=artifact_name,
                    model=mapping.model,
                    file_type=spec.file_type,
                    symbol=f"{mapping.model}{spec.export_suffix}Schema",
                    keys=keys,
                )
            )
        return shapes

    def _keep(self, key: OperationKey) -> bool:
        if key.name != "distinct" or self.enum_names is None:
            return True
        return key.type_name in self.enum_names


@dataclass
class EnumModuleShape:
    """An enum module: a string validator restricted to the enum's values."""

    name: str
    symbol: str
    values: list[str] = field(default_factory=list)


class EnumShapeBuilder:
    """Builds enum module shapes, keeping value order."""

    def build(self, enum_type: EnumType) -> EnumModuleShape:
        return EnumModuleShape(name=enum_type.name, symbol=enum_symbol(enum_type.name), values=list(enum_type.values))
