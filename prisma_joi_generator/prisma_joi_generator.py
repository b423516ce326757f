import json

import click

from .cli_utils import load_config_file, parse_config_pairs, reconstruct_command_line
from .errors import GeneratorError
from .gen_logging import configure_gen_logging, get_logger
from .pipeline import GeneratorOptions, generate
from .pipeline.rpc import GeneratorServer

logger = get_logger(__name__)


@click.group()
@click.version_option(package_name="prisma_joi_generator")
def cli():
    """Generate Joi validation schemas from a Prisma DMMF document."""


@cli.command("generate")
@click.option("--config", "-c", "config_pairs", multiple=True, metavar="KEY=VALUE", help="Generator option, may be repeated")
@click.option(
    "--config-file",
    default=None,
    type=click.Path(exists=True, dir_okay=False, resolve_path=True),
    help="JSON file of generator options; --config pairs take precedence",
)
@click.option("--client-provider", default="prisma-client-js", show_default=True, help="Provider of the Prisma client generator")
@click.option("--verbose", "-v", is_flag=True, default=False, help="Enable debug logging")
@click.option("--quiet", "-q", is_flag=True, default=False, help="Only log warnings and errors")
@click.argument("dmmf_path", type=click.Path(exists=True, dir_okay=False, resolve_path=True))
@click.argument("output", type=click.Path(file_okay=False, resolve_path=True))
def generate_command(config_pairs, config_file, client_provider, verbose, quiet, dmmf_path, output):
    """Generate schemas from DMMF_PATH into OUTPUT (its contents are replaced)."""
    configure_gen_logging(verbose=verbose, quiet=quiet)
    logger.debug("Invoked as: %s", reconstruct_command_line(generate_command))

    config = load_config_file(config_file) if config_file is not None else {}
    config.update(parse_config_pairs(config_pairs))

    with open(dmmf_path, encoding="utf-8") as f:
        try:
            dmmf = json.load(f)
        except json.JSONDecodeError as e:
            raise click.ClickException(f"Invalid DMMF JSON in {dmmf_path}: {e}") from e

    options = GeneratorOptions(output_path=output, dmmf=dmmf, config=config, client_providers=[client_provider])
    try:
        result = generate(options)
    except GeneratorError as e:
        raise click.ClickException(str(e)) from e

    click.echo(
        f"Generated {result.file_count} files ({result.schema_count} operation, {result.object_count} object, "
        f"{result.enum_count} enum schemas) in {result.output_path}"
    )


@cli.command("serve")
@click.option("--verbose", "-v", is_flag=True, default=False, help="Enable debug logging")
@click.option("--quiet", "-q", is_flag=True, default=False, help="Only log warnings and errors")
def serve_command(verbose, quiet):
    """Serve Prisma's generator protocol on stdin/stderr."""
    configure_gen_logging(verbose=verbose, quiet=quiet)
    GeneratorServer().serve()


if __name__ == "__main__":
    cli()
