"""
Tests for generator configuration parsing and validation.
"""

from __future__ import annotations

import pytest

from prisma_joi_generator.errors import ConfigError
from prisma_joi_generator.pipeline.config import (
    ALL_FILE_TYPES,
    DirectoryStrategy,
    FileType,
    FilterStrategy,
    compute_enabled_types,
    get_config_string,
    parse_boolean_string,
    parse_comma_separated,
    parse_generator_config,
)


class TestParseHelpers:
    """Test the raw value helpers"""

    @pytest.mark.parametrize("value", ["true", "TRUE", "True", "1", "yes", " Yes "])
    def test_true_literals(self, value):
        assert parse_boolean_string(value) is True

    @pytest.mark.parametrize("value", ["false", "FALSE", "0", "no", "No"])
    def test_false_literals(self, value):
        assert parse_boolean_string(value) is False

    def test_invalid_boolean_names_field(self):
        with pytest.raises(ConfigError) as exc_info:
            parse_boolean_string("maybe", "generateIndex")
        assert exc_info.value.field == "generateIndex"
        assert "maybe" in str(exc_info.value)
        assert "true" in exc_info.value.valid_values

    def test_comma_separated_drops_empty_entries(self):
        assert parse_comma_separated(" create, find,,enums ,") == ["create", "find", "enums"]

    def test_comma_separated_accepts_lists(self):
        assert parse_comma_separated(["create,find", "enums"]) == ["create", "find", "enums"]

    def test_config_string_from_list(self):
        assert get_config_string(["grouped", "flat"]) == "grouped"
        assert get_config_string([]) == ""
        assert get_config_string("flat") == "flat"


class TestDefaults:
    """Test the configuration produced from an empty mapping"""

    def test_everything_enabled(self):
        config = parse_generator_config({})
        assert config.filter_strategy is FilterStrategy.SELECTIVE
        assert config.directory_strategy is DirectoryStrategy.GROUPED
        assert config.enabled_types == frozenset(ALL_FILE_TYPES)
        assert config.generate_index is True
        assert config.formatter.enabled is False

    def test_default_directories_and_naming(self):
        config = parse_generator_config({})
        assert config.directories.base == "schemas"
        assert config.directories.objects == "objects"
        assert config.directories.enums == "enums"
        assert config.directories.models == "models"
        assert config.naming.schema_files == "{operation}.schema"
        assert config.naming.object_files == "{name}.schema"

    def test_unknown_keys_are_ignored(self):
        config = parse_generator_config({"provider": "prisma-joi-generator", "output": "./generated"})
        assert config.enabled_types == frozenset(ALL_FILE_TYPES)

    def test_config_is_frozen(self):
        config = parse_generator_config({})
        with pytest.raises(AttributeError):
            config.generate_index = False


class TestSelectiveStrategy:
    """Test per-kind boolean flags"""

    def test_mixed_case_flag_parses_true(self):
        config = parse_generator_config({"create": "TRUE"})
        assert config.is_enabled(FileType.CREATE)

    def test_disabling_one_kind(self):
        config = parse_generator_config({"aggregate": "false", "groupBy": "0"})
        assert not config.is_enabled(FileType.AGGREGATE)
        assert not config.is_enabled(FileType.GROUP_BY)
        assert config.is_enabled(FileType.FIND)

    def test_all_flags_false_fails(self):
        raw = {file_type.value: "false" for file_type in ALL_FILE_TYPES}
        with pytest.raises(ConfigError) as exc_info:
            parse_generator_config(raw)
        assert exc_info.value.field == "fileTypes"

    def test_invalid_flag_value_fails(self):
        with pytest.raises(ConfigError) as exc_info:
            parse_generator_config({"enums": "sometimes"})
        assert exc_info.value.field == "enums"

    def test_include_types_require_whitelist(self):
        with pytest.raises(ConfigError) as exc_info:
            parse_generator_config({"includeTypes": "create"})
        assert exc_info.value.field == "includeTypes"


class TestWhitelistBlacklist:
    """Test list-based strategies"""

    def test_whitelist(self):
        config = parse_generator_config({"filterStrategy": "whitelist", "includeTypes": "find,objects,enums"})
        assert config.enabled_types == frozenset({FileType.FIND, FileType.OBJECTS, FileType.ENUMS})
        assert config.include_types == (FileType.FIND, FileType.OBJECTS, FileType.ENUMS)

    def test_whitelist_without_include_types_fails(self):
        with pytest.raises(ConfigError) as exc_info:
            parse_generator_config({"filterStrategy": "whitelist"})
        assert exc_info.value.field == "includeTypes"
        assert "whitelist" in str(exc_info.value)

    def test_whitelist_with_empty_include_types_fails(self):
        with pytest.raises(ConfigError):
            parse_generator_config({"filterStrategy": "whitelist", "includeTypes": " , "})

    def test_blacklist(self):
        config = parse_generator_config({"filterStrategy": "blacklist", "excludeTypes": "aggregate,groupBy"})
        assert config.enabled_types == frozenset(ALL_FILE_TYPES) - {FileType.AGGREGATE, FileType.GROUP_BY}

    def test_blacklist_without_exclude_types_fails(self):
        with pytest.raises(ConfigError) as exc_info:
            parse_generator_config({"filterStrategy": "blacklist"})
        assert exc_info.value.field == "excludeTypes"

    def test_blacklist_excluding_everything_fails(self):
        raw = {"filterStrategy": "blacklist", "excludeTypes": ",".join(file_type.value for file_type in ALL_FILE_TYPES)}
        with pytest.raises(ConfigError) as exc_info:
            parse_generator_config(raw)
        assert exc_info.value.field == "fileTypes"

    def test_invalid_kind_name_lists_valid_values(self):
        with pytest.raises(ConfigError) as exc_info:
            parse_generator_config({"filterStrategy": "whitelist", "includeTypes": "create,models"})
        error = exc_info.value
        assert "models" in error.reason
        assert "orderBy" in error.valid_values
        assert "Valid values:" in str(error)

    def test_legacy_enabled_types_switch_to_whitelist(self):
        config = parse_generator_config({"enabledTypes": "objects,enums"})
        assert config.filter_strategy is FilterStrategy.WHITELIST
        assert config.enabled_types == frozenset({FileType.OBJECTS, FileType.ENUMS})

    def test_legacy_disabled_types_switch_to_blacklist(self):
        config = parse_generator_config({"disabledTypes": "unchecked"})
        assert config.filter_strategy is FilterStrategy.BLACKLIST
        assert not config.is_enabled(FileType.UNCHECKED)

    def test_compute_enabled_types_selective_defaults_to_enabled(self):
        enabled = compute_enabled_types(FilterStrategy.SELECTIVE, (), (), {FileType.CREATE: False})
        assert FileType.CREATE not in enabled
        assert len(enabled) == len(ALL_FILE_TYPES) - 1


class TestLayoutOptions:
    """Test directory, naming and misc options"""

    def test_invalid_strategy_name(self):
        with pytest.raises(ConfigError) as exc_info:
            parse_generator_config({"filterStrategy": "random"})
        assert exc_info.value.field == "filterStrategy"
        assert exc_info.value.valid_values == ["selective", "whitelist", "blacklist"]

    def test_directory_strategy(self):
        assert parse_generator_config({"directoryStrategy": "by-model"}).directory_strategy is DirectoryStrategy.BY_MODEL
        assert parse_generator_config({"directoryStrategy": "flat"}).directory_strategy is DirectoryStrategy.FLAT

    def test_invalid_directory_strategy(self):
        with pytest.raises(ConfigError) as exc_info:
            parse_generator_config({"directoryStrategy": "nested"})
        assert "by-model" in exc_info.value.valid_values

    def test_directory_override(self):
        config = parse_generator_config({"baseDirectory": "joi_schemas", "enumsDirectory": "enum-types"})
        assert config.directories.base == "joi_schemas"
        assert config.directories.enums == "enum-types"
        assert config.directories.objects == "objects"

    def test_directory_name_with_space_fails(self):
        with pytest.raises(ConfigError) as exc_info:
            parse_generator_config({"objectsDirectory": "my objects"})
        assert exc_info.value.field == "directories.objects"

    def test_directory_name_with_slash_fails(self):
        with pytest.raises(ConfigError):
            parse_generator_config({"baseDirectory": "../escape"})

    def test_naming_pattern_override(self):
        config = parse_generator_config({"schemaFilePattern": "{operation}.joi"})
        assert config.naming.schema_files == "{operation}.joi"

    def test_naming_pattern_without_placeholder_fails(self):
        with pytest.raises(ConfigError) as exc_info:
            parse_generator_config({"objectFilePattern": "schema"})
        assert exc_info.value.field == "objectFilePattern"

    def test_generate_index_and_prettier(self):
        config = parse_generator_config({"generateIndex": "False", "formatWithPrettier": "yes"})
        assert config.generate_index is False
        assert config.formatter.enabled is True

    def test_enabled_type_names_in_declaration_order(self):
        config = parse_generator_config({"filterStrategy": "whitelist", "includeTypes": "enums,create,objects"})
        assert config.enabled_type_names() == ["create", "enums", "objects"]


def test_error_message_layout():
    error = ConfigError("Something is off", "baseDirectory", "Rename it", ["a", "b"])
    message = str(error)
    assert message.startswith("Joi Generator Configuration Error: Something is off")
    assert "\n  Field: baseDirectory" in message
    assert "\n  Valid values: a, b" in message
    assert "\n  Suggestion: Rename it" in message
