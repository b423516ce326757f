"""
Tests for path resolution across the three directory strategies.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from prisma_joi_generator.pipeline.config import Category, FileType, parse_generator_config
from prisma_joi_generator.pipeline.paths import (
    FileInfo,
    PathResolver,
    extract_model_name,
    relative_module_path,
    sanitize_directory_name,
)

FIND_MANY_USER = FileInfo(FileType.FIND, "findManyUser", Category.SCHEMA, "User")
USER_WHERE = FileInfo(FileType.FILTER, "UserWhereInput", Category.OBJECT, "User")
INT_FILTER = FileInfo(FileType.FILTER, "IntFilter", Category.OBJECT)
ROLE = FileInfo(FileType.ENUMS, "Role", Category.ENUM)


def resolver(**raw) -> PathResolver:
    return PathResolver(parse_generator_config(raw), "/tmp/generated")


class TestExtractModelName:
    """Test model name recovery from artifact names"""

    @pytest.mark.parametrize(
        "artifact_name, expected",
        [
            ("findManyPost", "Post"),
            ("findUniqueUser", "User"),
            ("groupByBlogPost", "BlogPost"),
            ("UserCreateInput", "User"),
            ("UserUncheckedCreateInput", "User"),
            ("PostWhereUniqueInput", "Post"),
            ("UserOrderByWithRelationInput", "User"),
            ("UserScalarWhereWithAggregatesInput", "User"),
            ("PostListRelationFilter", "Post"),
            ("UserNullableScalarRelationFilter", "User"),
            ("RoleSchema", "Role"),
        ],
    )
    def test_recognized(self, artifact_name, expected):
        assert extract_model_name(artifact_name) == expected

    @pytest.mark.parametrize("artifact_name", ["IntFilter", "SortOrder", "StringFieldUpdateOperationsInput"])
    def test_unrecognized(self, artifact_name):
        assert extract_model_name(artifact_name) is None

    def test_idempotent(self):
        assert extract_model_name("findManyPost") == extract_model_name("findManyPost")


class TestHelpers:
    """Test naming helpers"""

    def test_sanitize_directory_name(self):
        assert sanitize_directory_name("BlogPost") == "blogpost"
        assert sanitize_directory_name("user_profile") == "user-profile"
        assert sanitize_directory_name("--Weird  Name!!") == "weird-name"

    @pytest.mark.parametrize(
        "from_directory, target, expected",
        [
            ("schemas", "schemas/objects/index.ts", "./objects"),
            ("schemas/objects", "schemas/enums/index.ts", "../enums"),
            ("schemas/objects", "schemas/objects/IntFilter.schema.ts", "./IntFilter.schema"),
            ("schemas", "schemas/index.ts", "./index"),
            ("schemas/models/user/objects", "schemas/objects/IntFilter.schema.ts", "../../../objects/IntFilter.schema"),
            ("schemas/models/user", "schemas/enums/index.ts", "../../enums"),
        ],
    )
    def test_relative_module_path(self, from_directory, target, expected):
        assert relative_module_path(from_directory, target) == expected


class TestGroupedLayout:
    """Test the default grouped strategy"""

    def test_operation_in_base(self):
        resolved = resolver().resolve_path(FIND_MANY_USER)
        assert resolved.file_path == "schemas/findManyUser.schema.ts"
        assert resolved.directory == "schemas"
        assert resolved.filename == "findManyUser.schema.ts"
        assert resolved.import_path == "./findManyUser.schema"

    def test_object_and_enum_subdirectories(self):
        path_resolver = resolver()
        assert path_resolver.resolve_path(USER_WHERE).file_path == "schemas/objects/UserWhereInput.schema.ts"
        assert path_resolver.resolve_path(ROLE).file_path == "schemas/enums/Role.schema.ts"

    def test_index_paths(self):
        path_resolver = resolver()
        assert path_resolver.resolve_index_path(Category.SCHEMA).file_path == "schemas/index.ts"
        assert path_resolver.resolve_index_path(Category.OBJECT).file_path == "schemas/objects/index.ts"
        assert path_resolver.resolve_index_path(Category.ENUM).import_path == "./enums"

    def test_required_directories(self):
        assert resolver().get_required_directories(["User"]) == ["schemas", "schemas/enums", "schemas/objects"]

    def test_required_directories_follow_enabled_kinds(self):
        path_resolver = resolver(filterStrategy="whitelist", includeTypes="find,objects")
        assert path_resolver.get_required_directories(["User"]) == ["schemas", "schemas/objects"]

    def test_custom_names(self):
        path_resolver = resolver(baseDirectory="joi", enumsDirectory="enum-types", enumFilePattern="{name}.enum")
        assert path_resolver.resolve_path(ROLE).file_path == "joi/enum-types/Role.enum.ts"

    def test_type_placeholder(self):
        path_resolver = resolver(objectFilePattern="{type}/{name}")
        assert path_resolver.get_filename(USER_WHERE) == "filter/UserWhereInput.ts"


class TestFlatLayout:
    """Test the flat strategy"""

    def test_everything_in_base(self):
        path_resolver = resolver(directoryStrategy="flat")
        for file_info in (FIND_MANY_USER, USER_WHERE, ROLE):
            assert path_resolver.resolve_path(file_info).directory == "schemas"

    def test_single_shared_index(self):
        path_resolver = resolver(directoryStrategy="flat")
        paths = {path_resolver.resolve_index_path(category).file_path for category in Category}
        assert paths == {"schemas/index.ts"}

    def test_required_directories(self):
        assert resolver(directoryStrategy="flat").get_required_directories(["User", "Post"]) == ["schemas"]


class TestByModelLayout:
    """Test the by-model strategy"""

    def test_model_placement(self):
        path_resolver = resolver(directoryStrategy="by-model")
        assert path_resolver.resolve_path(FIND_MANY_USER).file_path == "schemas/models/user/findManyUser.schema.ts"
        assert path_resolver.resolve_path(USER_WHERE).file_path == "schemas/models/user/objects/UserWhereInput.schema.ts"

    def test_shared_placement(self):
        path_resolver = resolver(directoryStrategy="by-model")
        assert path_resolver.resolve_path(INT_FILTER).file_path == "schemas/objects/IntFilter.schema.ts"
        assert path_resolver.resolve_path(ROLE).file_path == "schemas/enums/Role.schema.ts"

    def test_index_import_paths_reach_model_directories(self):
        path_resolver = resolver(directoryStrategy="by-model")
        assert path_resolver.resolve_path(FIND_MANY_USER).import_path == "./models/user/findManyUser.schema"
        assert path_resolver.resolve_path(USER_WHERE).import_path == "../models/user/objects/UserWhereInput.schema"

    def test_model_index_path(self):
        index = resolver(directoryStrategy="by-model").resolve_index_path(Category.SCHEMA, "BlogPost")
        assert index.file_path == "schemas/models/blogpost/index.ts"
        assert index.directory == "schemas/models/blogpost"
        assert index.filename == "index.ts"
        assert index.import_path == "./models/blogpost"

    def test_model_index_falls_back_to_category_index(self):
        assert resolver(directoryStrategy="by-model").resolve_index_path(Category.OBJECT).file_path == "schemas/objects/index.ts"
        assert resolver().resolve_index_path(Category.SCHEMA, "User").file_path == "schemas/index.ts"
        assert resolver(directoryStrategy="flat").resolve_index_path(Category.ENUM, "User").file_path == "schemas/index.ts"

    def test_required_directories(self):
        directories = resolver(directoryStrategy="by-model").get_required_directories(["User", "BlogPost"])
        assert directories == [
            "schemas",
            "schemas/enums",
            "schemas/objects",
            "schemas/models/user",
            "schemas/models/user/objects",
            "schemas/models/blogpost",
            "schemas/models/blogpost/objects",
        ]


def test_resolution_is_deterministic():
    first = resolver(directoryStrategy="by-model").resolve_path(USER_WHERE)
    second = resolver(directoryStrategy="by-model").resolve_path(USER_WHERE)
    assert first == second


def test_strategy_does_not_change_enabled_kinds():
    enabled = {strategy: parse_generator_config({"directoryStrategy": strategy}).enabled_types for strategy in ("flat", "grouped", "by-model")}
    assert enabled["flat"] == enabled["grouped"] == enabled["by-model"]


def test_absolute_path():
    assert resolver().get_absolute_path("schemas/enums/Role.schema.ts") == Path("/tmp/generated/schemas/enums/Role.schema.ts")
