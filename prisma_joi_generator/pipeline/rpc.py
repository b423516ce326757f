"""
Prisma generator protocol.

Prisma spawns the generator and talks line-delimited JSON-RPC 2.0: requests
arrive on stdin and responses are written to stderr. Two methods are
served: getManifest and generate.
"""

from __future__ import annotations

import json
import os
import sys
from collections.abc import Mapping
from typing import Any, TextIO

from ..errors import GeneratorError
from ..gen_logging import get_logger
from .generator import GeneratorOptions, generate

logger = get_logger(__name__)

PRETTY_NAME = "Prisma Joi Generator"
DEFAULT_OUTPUT = "./generated"

# JSON-RPC error codes
PARSE_ERROR = -32700
METHOD_NOT_FOUND = -32601
GENERATOR_FAILURE = -32000


def manifest() -> dict[str, Any]:
    return {
        "prettyName": PRETTY_NAME,
        "defaultOutput": DEFAULT_OUTPUT,
        "requiresGenerators": ["prisma-client-js"],
    }


def parse_env_value(value: Any) -> str | None:
    """Resolve a Prisma EnvValue ({"value": ..., "fromEnvVar": ...}) or plain string."""
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, Mapping):
        if value.get("value") is not None:
            return value["value"]
        env_var = value.get("fromEnvVar")
        if env_var:
            return os.environ.get(env_var)
    return None


def options_from_params(params: Mapping[str, Any]) -> GeneratorOptions:
    """
    Build GeneratorOptions from the params of a generate request.

    Raises:
        GeneratorError: If the generator output path is missing
    """
    generator = params.get("generator") or {}
    output_path = parse_env_value(generator.get("output"))
    if not output_path:
        raise GeneratorError("Generator output path is missing from the generate request")
    client_providers = [parse_env_value(other.get("provider")) or "" for other in params.get("otherGenerators") or []]
    return GeneratorOptions(
        output_path=output_path,
        dmmf=params.get("dmmf") or {},
        config=generator.get("config") or {},
        client_providers=client_providers,
    )


class GeneratorServer:
    """Serves JSON-RPC requests until stdin is closed."""

    def __init__(self, stdin: TextIO | None = None, stdout: TextIO | None = None):
        """
        Args:
            stdin: Request stream, sys.stdin by default
            stdout: Response stream, sys.stderr by default (Prisma reads
                generator responses from stderr)
        """
        self.stdin = stdin or sys.stdin
        self.stdout = stdout or sys.stderr

    def handle(self, request: Mapping[str, Any]) -> dict[str, Any]:
        """Handle one request and return its response."""
        request_id = request.get("id")
        method = request.get("method")
        if method == "getManifest":
            return self._result(request_id, {"manifest": manifest()})
        if method == "generate":
            try:
                generate(options_from_params(request.get("params") or {}))
            except Exception as e:
                logger.error("Generation failed: %s", e)
                return self._error(request_id, GENERATOR_FAILURE, str(e), {"type": type(e).__name__})
            return self._result(request_id, None)
        return self._error(request_id, METHOD_NOT_FOUND, f"Method not found: {method}")

    def serve(self) -> None:
        for line in self.stdin:
            line = line.strip()
            if not line:
                continue
            try:
                request = json.loads(line)
            except json.JSONDecodeError as e:
                self._send(self._error(None, PARSE_ERROR, f"Parse error: {e}"))
                continue
            self._send(self.handle(request))

    def _send(self, response: dict[str, Any]) -> None:
        self.stdout.write(json.dumps(response) + "\n")
        self.stdout.flush()

    @staticmethod
    def _result(request_id: Any, result: Any) -> dict[str, Any]:
        return {"jsonrpc": "2.0", "id": request_id, "result": result}

    @staticmethod
    def _error(request_id: Any, code: int, message: str, data: Any = None) -> dict[str, Any]:
        error: dict[str, Any] = {"code": code, "message": message}
        if data is not None:
            error["data"] = data
        return {"jsonrpc": "2.0", "id": request_id, "error": error}
