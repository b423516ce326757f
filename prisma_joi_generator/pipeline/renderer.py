"""
Jinja2 renderer turning module shapes into TypeScript source text.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path

import jinja2

from .builders import EnumModuleShape, ObjectModuleShape, OperationShape


@dataclass
class ModuleImport:
    """One import statement: symbols pulled from a single module specifier."""

    source: str
    symbols: list[str] = field(default_factory=list)


def group_imports(pairs: list[tuple[str, str]]) -> list[ModuleImport]:
    """
    Merge (symbol, source) pairs into one import per source.

    Sources and symbols keep first-seen order; repeated symbols are dropped.
    """
    grouped: dict[str, ModuleImport] = {}
    for symbol, source in pairs:
        module_import = grouped.setdefault(source, ModuleImport(source))
        if symbol not in module_import.symbols:
            module_import.symbols.append(symbol)
    return list(grouped.values())


class JoiRenderer:
    """Renders Joi modules from the templates/joi directory."""

    TEMPLATE_LANG = "joi"

    def __init__(self):
        self._setup_templates()

    def _setup_templates(self) -> None:
        """Set up Jinja2 templates."""
        template_dir = Path(__file__).parent.parent / "templates" / self.TEMPLATE_LANG
        self.jinja_env = jinja2.Environment(
            loader=jinja2.FileSystemLoader(str(template_dir)),
            lstrip_blocks=True,
            trim_blocks=True,
            keep_trailing_newline=True,
            autoescape=False,
        )
        self.object_template = self.jinja_env.get_template("object.ts.jinja2")
        self.operation_template = self.jinja_env.get_template("operation.ts.jinja2")
        self.enum_template = self.jinja_env.get_template("enum.ts.jinja2")
        self.index_template = self.jinja_env.get_template("index.ts.jinja2")

    def render_object(self, shape: ObjectModuleShape, imports: list[ModuleImport]) -> str:
        fields_block = ",\n".join(f"  {mapped.render()}" for mapped in shape.fields)
        return self.object_template.render(symbol=shape.symbol, imports=imports, fields_block=fields_block)

    def render_operation(self, shape: OperationShape, imports: list[ModuleImport]) -> str:
        keys_block = ", ".join(f"{key.name}: {key.expression()}" for key in shape.keys)
        return self.operation_template.render(symbol=shape.symbol, imports=imports, keys_block=keys_block)

    def render_enum(self, shape: EnumModuleShape) -> str:
        values_json = json.dumps(shape.values, separators=(",", ":"))
        return self.enum_template.render(symbol=shape.symbol, values_json=values_json)

    def render_index(self, export_paths: list[str]) -> str:
        return self.index_template.render(export_paths=export_paths)
