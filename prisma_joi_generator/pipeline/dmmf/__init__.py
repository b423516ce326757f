"""
DMMF module.

Contains the typed description nodes and the parser for Prisma's DMMF.
"""

from __future__ import annotations

from .nodes import (
    Description,
    EnumRef,
    EnumType,
    FieldDescription,
    InputObjectType,
    InputTypeRef,
    ModelDescription,
    ModelField,
    ModelMapping,
    ObjectRef,
    ScalarKind,
    ScalarType,
    SelfRef,
    TypeShape,
    UnsupportedType,
)
from .parser import DMMFParser

__all__ = [
    "Description",
    "EnumRef",
    "EnumType",
    "FieldDescription",
    "InputObjectType",
    "InputTypeRef",
    "ModelDescription",
    "ModelField",
    "ModelMapping",
    "ObjectRef",
    "ScalarKind",
    "ScalarType",
    "SelfRef",
    "TypeShape",
    "UnsupportedType",
    "DMMFParser",
]
