"""Command line interface entry point."""

from __future__ import annotations

import logging
import sys

import click

from xso_normalizer.configuration import DEFAULT_CONFIG_FILENAME, write_placeholder_configuration
from xso_normalizer.document_assembly import initialize_swagger, service_base_name, slugify_name
from xso_normalizer.document_io import DocumentError, write_document
from xso_normalizer.pipeline import NormalizationError, NormalizationRequest, run_normalization

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


class CliError(Exception):
    """Custom CLI error."""


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="xso-normalizer")
@click.option(
    "--log-level",
    type=click.Choice(_LOG_LEVELS, case_sensitive=False),
    default="WARNING",
    show_default=True,
    help="Verbosity of diagnostics written to stderr",
)
def cli(log_level: str) -> None:
    """Normalize WSDL/XSD-generated API documents for gateway deployment."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(levelname)s %(name)s: %(message)s",
    )


@cli.command(name="normalize")
@click.option(
    "--input",
    "input_path",
    required=True,
    type=click.Path(path_type=str),
    help="Path to the generated JSON/YAML API document",
)
@click.option(
    "--dictionary",
    "dictionary_path",
    required=True,
    type=click.Path(path_type=str),
    help="Path to the JSON/YAML namespace dictionary of the document",
)
@click.option(
    "--config",
    "config_path",
    required=False,
    type=click.Path(path_type=str),
    help="Optional YAML normalization configuration",
)
@click.option(
    "--output",
    "output_path",
    required=True,
    type=click.Path(path_type=str),
    help="Path of the normalized document to write (.yaml/.yml for YAML, JSON otherwise)",
)
def normalize(
    input_path: str, dictionary_path: str, config_path: str | None, output_path: str
) -> None:
    """Run the post-generation normalization passes over one document."""
    try:
        outcome = run_normalization(
            NormalizationRequest(
                input_path=input_path,
                dictionary_path=dictionary_path,
                output_path=output_path,
                config_path=config_path,
            )
        )
    except NormalizationError as exc:
        raise CliError(str(exc)) from exc
    click.echo(str(outcome.output_path))


@cli.command(name="generate-config")
@click.option(
    "--output",
    "output_path",
    required=False,
    default=DEFAULT_CONFIG_FILENAME,
    show_default=True,
    type=click.Path(path_type=str),
    help="Path to the YAML normalization configuration template to write",
)
def generate_config(output_path: str) -> None:
    """Generate a YAML normalization configuration with guidance comments."""
    try:
        resolved_output = write_placeholder_configuration(output_path)
    except (FileExistsError, OSError) as exc:
        raise CliError(str(exc)) from exc
    click.echo(str(resolved_output))


@cli.command(name="init-document")
@click.option("--service-name", required=True, help="Name of the proxied SOAP service")
@click.option("--endpoint", "endpoint_url", required=True, help="Target URL of the service")
@click.option("--port", required=False, help="Explicit port of the service, added to the title")
@click.option("--gateway", required=False, help="Gateway type of the assembly")
@click.option(
    "--output",
    "output_path",
    required=False,
    type=click.Path(path_type=str),
    help="Path of the document to write; defaults to <service>.yaml",
)
def init_document(
    service_name: str,
    endpoint_url: str,
    port: str | None,
    gateway: str | None,
    output_path: str | None,
) -> None:
    """Write the initial HTTP-XML Swagger document for a service."""
    document = initialize_swagger(service_name, endpoint_url, port=port, gateway=gateway)
    destination = output_path or f"{slugify_name(service_base_name(service_name))}.yaml"
    try:
        resolved_output = write_document(document, destination)
    except DocumentError as exc:
        raise CliError(str(exc)) from exc
    click.echo(str(resolved_output))


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for console_scripts wiring."""
    argv = argv if argv is not None else sys.argv[1:]
    try:
        cli.main(args=list(argv), standalone_mode=False)
    except CliError as exc:
        click.echo(str(exc), err=True)
        return 1
    except click.ClickException as exc:
        exc.show()
        return exc.exit_code
    except click.Abort:
        click.echo("Aborted.", err=True)
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
