"""
CLI utilities: generator configuration from the command line and config
files, and command line reconstruction for logging.
"""

from __future__ import annotations

import json
from pathlib import Path

import click

PROGRAM_NAME = "prisma-joi-generator"


def parse_config_pairs(pairs: tuple[str, ...] | list[str]) -> dict[str, str]:
    """
    Parse repeated ``key=value`` options into a config mapping.

    Later pairs override earlier ones. Values are kept as strings, the way
    Prisma passes generator configuration.

    Raises:
        click.BadParameter: If a pair has no '=' or an empty key
    """
    config: dict[str, str] = {}
    for pair in pairs:
        key, separator, value = pair.partition("=")
        key = key.strip()
        if not separator or not key:
            raise click.BadParameter(f"Expected key=value, got '{pair}'", param_hint="--config")
        config[key] = value.strip()
    return config


def _config_value(key: str, value) -> str | list[str]:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float, str)):
        return str(value)
    if isinstance(value, list) and all(isinstance(item, str) for item in value):
        return value
    raise click.BadParameter(f"Unsupported value for '{key}': {value!r}", param_hint="--config-file")


def load_config_file(path: str | Path) -> dict[str, str | list[str]]:
    """
    Load generator configuration from a JSON object file.

    Booleans and numbers are converted to the string form Prisma would pass;
    lists of strings are kept.

    Raises:
        click.BadParameter: If the file is not a JSON object or holds
            unsupported values
    """
    with open(path, encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise click.BadParameter(f"Invalid JSON in {path}: {e}", param_hint="--config-file") from e
    if not isinstance(data, dict):
        raise click.BadParameter(f"{path} must contain a JSON object", param_hint="--config-file")
    return {key: _config_value(key, value) for key, value in data.items()}


def reconstruct_command_line(click_command: click.Command) -> str:
    """
    Reconstruct command line from current Click context using introspection.

    Args:
        click_command: Click command object for introspection

    Returns:
        Reconstructed command line string
    """
    try:
        ctx = click.get_current_context()
        cli_args = ctx.params
    except RuntimeError:
        # No active context, return basic command
        return PROGRAM_NAME

    cmd_parts = [PROGRAM_NAME]
    if click_command.name:
        cmd_parts.append(click_command.name)
    if not cli_args:
        return " ".join(cmd_parts)

    arguments = []  # For positional arguments
    options = []  # For optional arguments

    for param in click_command.params:
        param_name = param.name
        if param_name not in cli_args:
            continue

        value = cli_args[param_name]
        if not value:
            continue

        if isinstance(param, click.Argument):
            arguments.append(str(value))

        elif isinstance(param, click.Option):
            # Skip if it's the default value
            if value == param.default:
                continue
            flag = param.opts[0] if param.opts else f"--{param_name}"
            if param.is_flag:
                options.append(flag)
            elif isinstance(value, (tuple, list)):
                for item in value:
                    options.extend([flag, str(item)])
            else:
                options.extend([flag, str(value)])

    cmd_parts.extend(arguments)
    cmd_parts.extend(options)

    return " ".join(cmd_parts)
