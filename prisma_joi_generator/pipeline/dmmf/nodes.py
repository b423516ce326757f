"""
Typed representation of the Prisma DMMF document.

These nodes are produced once by the parser and never mutated afterwards.
Input-type candidates are classified at ingestion into a closed set of
type shapes so the field mapper never re-derives type identity from names.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class ScalarKind(Enum):
    """Scalars with a fixed Joi validator."""

    STRING = "string"
    NUMBER = "number"  # Int and Float
    BOOLEAN = "boolean"
    DATE_TIME = "date"
    JSON = "any"


@dataclass(frozen=True)
class ScalarType:
    """A recognized scalar."""

    kind: ScalarKind


@dataclass(frozen=True)
class EnumRef:
    """Reference to a schema enum."""

    name: str


@dataclass(frozen=True)
class ObjectRef:
    """Reference to another input object or field-ref type."""

    name: str


@dataclass(frozen=True)
class SelfRef:
    """Reference from a type to itself (AND/OR/NOT in WhereInput)."""

    name: str


@dataclass(frozen=True)
class UnsupportedType:
    """A candidate with no validator mapping (BigInt, Decimal, Bytes, ...)."""

    name: str


TypeShape = ScalarType | EnumRef | ObjectRef | SelfRef | UnsupportedType


@dataclass(frozen=True)
class InputTypeRef:
    """One candidate type of a field."""

    type_name: str
    shape: TypeShape
    is_list: bool = False
    namespace: str | None = None


@dataclass(frozen=True)
class FieldDescription:
    """A field of an input object type.

    More than one candidate means the field accepts any of those shapes.
    """

    name: str
    is_required: bool = False
    is_nullable: bool = False
    input_types: tuple[InputTypeRef, ...] = ()


@dataclass(frozen=True)
class InputObjectType:
    """A named composite input shape (input object or field-ref type)."""

    name: str
    fields: tuple[FieldDescription, ...] = ()


@dataclass(frozen=True)
class EnumType:
    """An enum and its ordered values."""

    name: str
    values: tuple[str, ...] = ()


@dataclass(frozen=True)
class ModelField:
    """A field of a datamodel model."""

    name: str
    kind: str = "scalar"  # "scalar", "object", "enum"
    type_name: str = ""
    is_list: bool = False
    is_required: bool = False


@dataclass(frozen=True)
class ModelMapping:
    """Operation entry points Prisma generated for one model.

    Each attribute holds the operation's artifact name (e.g. "findManyUser")
    or None when the model does not support it.
    """

    model: str
    find_unique: str | None = None
    find_first: str | None = None
    find_many: str | None = None
    create_one: str | None = None
    update_one: str | None = None
    update_many: str | None = None
    delete_one: str | None = None
    delete_many: str | None = None
    upsert_one: str | None = None
    aggregate: str | None = None
    group_by: str | None = None


@dataclass(frozen=True)
class ModelDescription:
    """A datamodel model."""

    name: str
    fields: tuple[ModelField, ...] = ()


@dataclass(frozen=True)
class Description:
    """The parsed DMMF document consumed by the pipeline."""

    enums: tuple[EnumType, ...] = ()
    input_object_types: tuple[InputObjectType, ...] = ()
    field_ref_types: tuple[InputObjectType, ...] = ()
    models: tuple[ModelDescription, ...] = ()
    model_operations: tuple[ModelMapping, ...] = ()
    enum_names: frozenset[str] = field(default_factory=frozenset)

    @property
    def model_names(self) -> list[str]:
        return [model.name for model in self.models]
