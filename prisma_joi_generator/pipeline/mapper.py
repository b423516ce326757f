"""
Field mapper: turns one field description into a Joi validator expression.

Single-candidate fields get `.required()` / `.allow(null)` appended;
multi-candidate fields become a `Joi.alternatives().try(...)` and are left
as is.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from .config import Category
from .dmmf.nodes import (
    EnumRef,
    FieldDescription,
    InputTypeRef,
    ObjectRef,
    ScalarKind,
    ScalarType,
    SelfRef,
)

SCALAR_VALIDATORS = {
    ScalarKind.STRING: "Joi.string()",
    ScalarKind.NUMBER: "Joi.number()",
    ScalarKind.BOOLEAN: "Joi.boolean()",
    ScalarKind.DATE_TIME: "Joi.date()",
    ScalarKind.JSON: "Joi.any()",
}

REQUIRED_MARKER = ".required()"
NULLABLE_MARKER = ".allow(null)"


def enum_symbol(name: str) -> str:
    """Exported symbol of an enum module."""
    return f"{name}Schema"


def object_symbol(name: str) -> str:
    """Exported symbol of an object module (a plain keys map)."""
    return f"{name}SchemaObject"


def array_of(expression: str) -> str:
    return f"Joi.array().items({expression})"


def object_keys(name: str) -> str:
    return f"Joi.object().keys({object_symbol(name)})"


@dataclass
class MappedField:
    """A field rendered as a key of the object literal."""

    name: str
    expression: str
    is_alternation: bool = False

    def render(self) -> str:
        return f"{self.name}: {self.expression}"


@dataclass
class FieldMapper:
    """Maps the fields of one type, collecting the modules they depend on.

    Attributes:
        owner: Name of the type being defined; candidates naming it are
            emitted as Joi.link() instead of an import
        dependencies: Referenced type name -> category, in first-seen order
    """

    owner: str
    dependencies: dict[str, Category] = field(default_factory=dict)

    def map_fields(self, fields: tuple[FieldDescription, ...] | list[FieldDescription]) -> list[MappedField]:
        """Map every field in input order, dropping those with no usable candidate."""
        mapped = []
        for field_description in fields:
            result = self.map_field(field_description)
            if result is not None:
                mapped.append(result)
        return mapped

    def map_field(self, field_description: FieldDescription) -> MappedField | None:
        """
        Map one field.

        Args:
            field_description: The field to map

        Returns:
            The mapped field, or None when no candidate produces a validator
        """
        candidates = field_description.input_types
        if not candidates:
            return None

        if len(candidates) == 1:
            expression = self._candidate_expression(candidates[0], allow_json=False)
            if expression is None:
                return None
            if field_description.is_required:
                expression += REQUIRED_MARKER
            if field_description.is_nullable:
                expression += NULLABLE_MARKER
            return MappedField(field_description.name, expression)

        alternatives = []
        for candidate in candidates:
            expression = self._candidate_expression(candidate, allow_json=True)
            if expression is not None:
                alternatives.append(expression)
        if not alternatives:
            return None
        # Required/nullable markers are never appended to an alternation
        return MappedField(
            field_description.name,
            f"Joi.alternatives().try({', '.join(alternatives)})",
            is_alternation=True,
        )

    def _candidate_expression(self, candidate: InputTypeRef, allow_json: bool) -> str | None:
        shape = candidate.shape
        if isinstance(shape, ScalarType):
            if shape.kind is ScalarKind.JSON and not allow_json:
                return None
            base = SCALAR_VALIDATORS[shape.kind]
        elif isinstance(shape, SelfRef):
            base = f"Joi.link('#{shape.name}')"
        elif isinstance(shape, EnumRef):
            self._add_dependency(shape.name, Category.ENUM)
            base = enum_symbol(shape.name)
        elif isinstance(shape, ObjectRef):
            if shape.name == self.owner:
                base = f"Joi.link('#{shape.name}')"
            else:
                self._add_dependency(shape.name, Category.OBJECT)
                base = object_keys(shape.name)
        else:
            return None
        return array_of(base) if candidate.is_list else base

    def _add_dependency(self, name: str, category: Category) -> None:
        if name not in self.dependencies:
            self.dependencies[name] = category
