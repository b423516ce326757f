"""
Tests for the Prisma generator protocol server.
"""

from __future__ import annotations

import io
import json
from pathlib import Path

import pytest

from prisma_joi_generator.errors import GeneratorError
from prisma_joi_generator.pipeline.rpc import (
    GENERATOR_FAILURE,
    METHOD_NOT_FOUND,
    PARSE_ERROR,
    GeneratorServer,
    manifest,
    options_from_params,
    parse_env_value,
)

TEST_DATA = Path(__file__).parent / "test_data"


@pytest.fixture
def blog_dmmf():
    with open(TEST_DATA / "blog_dmmf.json") as f:
        return json.load(f)


def generate_params(output, dmmf, config=None, providers=("prisma-client-js",)):
    return {
        "generator": {"name": "joi", "provider": {"value": "prisma-joi-generator"}, "output": {"value": str(output)}, "config": config or {}},
        "otherGenerators": [{"name": "client", "provider": {"value": provider}} for provider in providers],
        "dmmf": dmmf,
    }


def serve(*lines: str) -> list[dict]:
    responses = io.StringIO()
    GeneratorServer(stdin=io.StringIO("".join(line + "\n" for line in lines)), stdout=responses).serve()
    return [json.loads(line) for line in responses.getvalue().splitlines()]


class TestEnvValues:
    """Test EnvValue resolution"""

    def test_plain_values(self):
        assert parse_env_value("./out") == "./out"
        assert parse_env_value(None) is None
        assert parse_env_value({"value": "./out", "fromEnvVar": None}) == "./out"

    def test_from_env_var(self, monkeypatch):
        monkeypatch.setenv("JOI_OUTPUT", "/tmp/joi")
        assert parse_env_value({"value": None, "fromEnvVar": "JOI_OUTPUT"}) == "/tmp/joi"

    def test_unset_env_var(self, monkeypatch):
        monkeypatch.delenv("JOI_OUTPUT", raising=False)
        assert parse_env_value({"fromEnvVar": "JOI_OUTPUT"}) is None


class TestOptionsFromParams:
    """Test request to GeneratorOptions conversion"""

    def test_options(self, tmp_path, blog_dmmf):
        options = options_from_params(generate_params(tmp_path, blog_dmmf, {"generateIndex": "false"}, ("prisma-client",)))
        assert options.output_path == str(tmp_path)
        assert options.config == {"generateIndex": "false"}
        assert options.client_providers == ["prisma-client"]
        assert options.dmmf is blog_dmmf

    def test_missing_output(self):
        with pytest.raises(GeneratorError, match="output path"):
            options_from_params({"generator": {"config": {}}})


class TestGeneratorServer:
    """Test request handling"""

    def test_get_manifest(self):
        (response,) = serve(json.dumps({"jsonrpc": "2.0", "id": 1, "method": "getManifest", "params": {}}))
        assert response == {"jsonrpc": "2.0", "id": 1, "result": {"manifest": manifest()}}
        assert response["result"]["manifest"]["prettyName"] == "Prisma Joi Generator"
        assert response["result"]["manifest"]["defaultOutput"] == "./generated"

    def test_unknown_method(self):
        response = GeneratorServer().handle({"jsonrpc": "2.0", "id": 7, "method": "shutdown"})
        assert response["id"] == 7
        assert response["error"]["code"] == METHOD_NOT_FOUND

    def test_parse_error_does_not_stop_the_server(self):
        responses = serve("{not json", "", json.dumps({"id": 2, "method": "getManifest"}))
        assert responses[0]["error"]["code"] == PARSE_ERROR
        assert responses[0]["id"] is None
        assert responses[1]["id"] == 2
        assert "result" in responses[1]

    def test_generate(self, tmp_path, blog_dmmf):
        output = tmp_path / "generated"
        response = GeneratorServer().handle({"jsonrpc": "2.0", "id": 3, "method": "generate", "params": generate_params(output, blog_dmmf)})
        assert response == {"jsonrpc": "2.0", "id": 3, "result": None}
        assert (output / "schemas" / "findManyUser.schema.ts").is_file()

    def test_generate_failure(self, tmp_path, blog_dmmf):
        params = generate_params(tmp_path / "generated", blog_dmmf, {"directoryStrategy": "nested"})
        response = GeneratorServer().handle({"jsonrpc": "2.0", "id": 4, "method": "generate", "params": params})
        assert response["error"]["code"] == GENERATOR_FAILURE
        assert response["error"]["data"] == {"type": "ConfigError"}
        assert "directoryStrategy" in response["error"]["message"]

    def test_generate_without_client_generator(self, tmp_path, blog_dmmf):
        params = generate_params(tmp_path / "generated", blog_dmmf, providers=())
        response = GeneratorServer().handle({"id": 5, "method": "generate", "params": params})
        assert response["error"]["data"] == {"type": "UpstreamGeneratorError"}
        assert not (tmp_path / "generated").exists()
