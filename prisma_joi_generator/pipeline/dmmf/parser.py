"""
DMMF parser that builds the typed description.

Reads the JSON document Prisma produces for generators and classifies
every input-type candidate into a TypeShape relative to its owning type.
"""

from __future__ import annotations

from typing import Any

from ...errors import DescriptionError
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


class DMMFParser:
    """Parses a DMMF document into a Description."""

    # Scalar type names with a fixed validator
    SCALAR_KINDS = {
        "String": ScalarKind.STRING,
        "Int": ScalarKind.NUMBER,
        "Float": ScalarKind.NUMBER,
        "Boolean": ScalarKind.BOOLEAN,
        "DateTime": ScalarKind.DATE_TIME,
        "Json": ScalarKind.JSON,
    }

    # Namespaces of types owned by the Prisma schema
    SCHEMA_NAMESPACES = {"prisma", "model"}

    # ModelMapping attribute -> DMMF keys, current name first
    OPERATION_KEYS = {
        "find_unique": ("findUnique",),
        "find_first": ("findFirst",),
        "find_many": ("findMany",),
        "create_one": ("createOne", "create"),
        "update_one": ("updateOne", "update"),
        "update_many": ("updateMany",),
        "delete_one": ("deleteOne", "delete"),
        "delete_many": ("deleteMany",),
        "upsert_one": ("upsertOne", "upsert"),
        "aggregate": ("aggregate",),
        "group_by": ("groupBy",),
    }

    def parse(self, document: dict[str, Any]) -> Description:
        """
        Parse a DMMF document.

        Args:
            document: Either the bare DMMF (with "datamodel", "schema" and
                "mappings") or generator options carrying it under "dmmf"

        Returns:
            The typed description

        Raises:
            DescriptionError: If a required section is missing or malformed
        """
        if "dmmf" in document and isinstance(document["dmmf"], dict):
            document = document["dmmf"]

        schema = self._require(document, "schema", "dmmf")
        datamodel = self._require(document, "datamodel", "dmmf")
        mappings = document.get("mappings") or {}

        enum_types = self._namespaced(schema.get("enumTypes"), "schema.enumTypes")
        enums = tuple(self._parse_enum(raw_enum, f"schema.enumTypes[{index}]") for index, raw_enum in enumerate(enum_types))
        enum_names = frozenset(enum.name for enum in enums)

        input_object_types = tuple(
            self._parse_object_type(raw_type, enum_names, f"schema.inputObjectTypes.prisma[{index}]")
            for index, raw_type in enumerate(self._prisma_only(schema.get("inputObjectTypes"), "schema.inputObjectTypes"))
        )
        field_ref_types = tuple(
            self._parse_object_type(raw_type, enum_names, f"schema.fieldRefTypes.prisma[{index}]")
            for index, raw_type in enumerate(self._prisma_only(schema.get("fieldRefTypes"), "schema.fieldRefTypes"))
        )

        models = tuple(self._parse_model(raw_model, f"datamodel.models[{index}]") for index, raw_model in enumerate(datamodel.get("models") or []))
        model_operations = tuple(
            self._parse_mapping(raw_mapping, f"mappings.modelOperations[{index}]") for index, raw_mapping in enumerate(mappings.get("modelOperations") or [])
        )

        return Description(
            enums=enums,
            input_object_types=input_object_types,
            field_ref_types=field_ref_types,
            models=models,
            model_operations=model_operations,
            enum_names=enum_names,
        )

    def _require(self, node: dict[str, Any], key: str, path: str) -> Any:
        if not isinstance(node, dict) or key not in node:
            raise DescriptionError(f"DMMF document is missing '{key}' at {path}")
        return node[key]

    def _namespaced(self, section: Any, path: str) -> list[dict[str, Any]]:
        """Collect the prisma and model namespaces of a section, in that order."""
        if section is None:
            return []
        if isinstance(section, list):
            return section
        if not isinstance(section, dict):
            raise DescriptionError(f"Expected an object or list at {path}")
        return [*(section.get("prisma") or []), *(section.get("model") or [])]

    def _prisma_only(self, section: Any, path: str) -> list[dict[str, Any]]:
        if section is None:
            return []
        if isinstance(section, list):
            return section
        if not isinstance(section, dict):
            raise DescriptionError(f"Expected an object or list at {path}")
        return list(section.get("prisma") or [])

    def _parse_enum(self, raw_enum: dict[str, Any], path: str) -> EnumType:
        name = self._require(raw_enum, "name", path)
        values = []
        for value in raw_enum.get("values") or []:
            # datamodel enums carry {"name": ..., "dbName": ...} objects
            values.append(value["name"] if isinstance(value, dict) else str(value))
        return EnumType(name=name, values=tuple(values))

    def _parse_object_type(self, raw_type: dict[str, Any], enum_names: frozenset[str], path: str) -> InputObjectType:
        name = self._require(raw_type, "name", path)
        fields = tuple(
            self._parse_field(raw_field, name, enum_names, f"{path}.fields[{index}]") for index, raw_field in enumerate(raw_type.get("fields") or [])
        )
        return InputObjectType(name=name, fields=fields)

    def _parse_field(self, raw_field: dict[str, Any], owner: str, enum_names: frozenset[str], path: str) -> FieldDescription:
        name = self._require(raw_field, "name", path)
        input_types = tuple(
            self._parse_input_type(raw_input, owner, enum_names, f"{path}.inputTypes[{index}]")
            for index, raw_input in enumerate(raw_field.get("inputTypes") or [])
        )
        return FieldDescription(
            name=name,
            is_required=bool(raw_field.get("isRequired", False)),
            is_nullable=bool(raw_field.get("isNullable", False)),
            input_types=input_types,
        )

    def _parse_input_type(self, raw_input: dict[str, Any], owner: str, enum_names: frozenset[str], path: str) -> InputTypeRef:
        type_name = self._require(raw_input, "type", path)
        if not isinstance(type_name, str):
            # Older DMMF versions inline the referenced type object
            type_name = self._require(type_name, "name", f"{path}.type")
        namespace = raw_input.get("namespace")
        return InputTypeRef(
            type_name=type_name,
            shape=self.classify(type_name, namespace, owner, enum_names),
            is_list=bool(raw_input.get("isList", False)),
            namespace=namespace,
        )

    def classify(self, type_name: str, namespace: str | None, owner: str, enum_names: frozenset[str]) -> TypeShape:
        """
        Classify one candidate type relative to the type that owns the field.

        Args:
            type_name: The candidate's type name
            namespace: The candidate's namespace tag, if any
            owner: Name of the input object type being described
            enum_names: Names of every known enum

        Returns:
            The type shape the field mapper dispatches on
        """
        if namespace in self.SCHEMA_NAMESPACES:
            if type_name == owner:
                return SelfRef(type_name)
            if type_name in enum_names:
                return EnumRef(type_name)
            return ObjectRef(type_name)
        scalar_kind = self.SCALAR_KINDS.get(type_name)
        if scalar_kind is not None:
            return ScalarType(scalar_kind)
        return UnsupportedType(type_name)

    def _parse_model(self, raw_model: dict[str, Any], path: str) -> ModelDescription:
        name = self._require(raw_model, "name", path)
        fields = tuple(
            ModelField(
                name=raw_field.get("name", ""),
                kind=raw_field.get("kind", "scalar"),
                type_name=raw_field.get("type", ""),
                is_list=bool(raw_field.get("isList", False)),
                is_required=bool(raw_field.get("isRequired", False)),
            )
            for raw_field in raw_model.get("fields") or []
        )
        return ModelDescription(name=name, fields=fields)

    def _parse_mapping(self, raw_mapping: dict[str, Any], path: str) -> ModelMapping:
        model = self._require(raw_mapping, "model", path)
        operations: dict[str, str | None] = {}
        for attribute, keys in self.OPERATION_KEYS.items():
            operations[attribute] = next((raw_mapping[key] for key in keys if raw_mapping.get(key)), None)
        return ModelMapping(model=model, **operations)
