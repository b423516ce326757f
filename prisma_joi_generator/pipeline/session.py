"""
Per-invocation generation state.

A fresh session is created for every run; it owns the known enum names
and the ordered lists of emitted modules that index assembly reads.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from .config import Category, FileType
from .paths import ResolvedPath


@dataclass(frozen=True)
class GeneratedArtifact:
    """A module emitted during this run and where it was written."""

    category: Category
    name: str  # Artifact name, e.g. "createOneUser" or "UserCreateInput"
    file_type: FileType
    path: ResolvedPath
    symbol: str  # Exported symbol, e.g. "UserCreateSchema"
    model_name: str | None = None


@dataclass
class GenerationSession:
    """Symbol registry shared by the emitter and the index writer."""

    enum_names: frozenset[str] = frozenset()
    schema_modules: list[GeneratedArtifact] = field(default_factory=list)
    object_modules: list[GeneratedArtifact] = field(default_factory=list)
    enum_modules: list[GeneratedArtifact] = field(default_factory=list)
    _emitted: set[tuple[Category, str]] = field(default_factory=set, init=False, repr=False)

    def modules_for(self, category: Category) -> list[GeneratedArtifact]:
        if category is Category.OBJECT:
            return self.object_modules
        if category is Category.ENUM:
            return self.enum_modules
        return self.schema_modules

    def track(self, artifact: GeneratedArtifact) -> None:
        """Record an emitted module, in emission order."""
        self.modules_for(artifact.category).append(artifact)
        self._emitted.add((artifact.category, artifact.name))

    def is_emitted(self, category: Category, name: str) -> bool:
        return (category, name) in self._emitted

    @property
    def module_count(self) -> int:
        return len(self.schema_modules) + len(self.object_modules) + len(self.enum_modules)
