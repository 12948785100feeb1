"""Command line interface entry point."""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Any

import click

from simple_property_mapper.configuration import (
    DEFAULT_CONFIG_FILENAME,
    ConfigurationError,
    MapperConfiguration,
    load_configuration,
    write_placeholder_configuration,
)
from simple_property_mapper.key_parsing import build_key
from simple_property_mapper.mapping_errors import MappingError
from simple_property_mapper.marshalling import build_records, encode_field_value
from simple_property_mapper.record_storage import write_records
from simple_property_mapper.schema_management import SchemaResolver, TypeSchema
from simple_property_mapper.unmarshalling import PropertyUnmarshaller

_INSTANCE_PLACEHOLDER = "<instance>"


class CliError(Exception):
    """Custom CLI error."""


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="simple-property-mapper")
@click.option("--verbose", "-v", is_flag=True, default=False, help="Log mapping details.")
def cli(verbose: bool) -> None:
    """Map properties files to registered Python types and back."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


@cli.command(name="generate-config")
@click.option(
    "--output",
    "output_path",
    required=False,
    default=DEFAULT_CONFIG_FILENAME,
    show_default=True,
    type=click.Path(path_type=str),
    help="Path to the YAML mapper configuration template to write",
)
def generate_config(output_path: str) -> None:
    """Generate a placeholder YAML mapper configuration with guidance comments."""
    try:
        resolved_output = write_placeholder_configuration(output_path)
    except (FileExistsError, OSError) as exc:
        raise CliError(str(exc)) from exc
    click.echo(str(resolved_output))


@cli.command(name="describe")
@click.option(
    "--config",
    "config_path",
    required=True,
    type=click.Path(path_type=str),
    help="Path to YAML/JSON mapper configuration file",
)
def describe(config_path: str) -> None:
    """Print the key pattern of every configured type."""
    try:
        configuration = load_configuration(config_path)
        resolver = SchemaResolver(configuration.registrations)
        schemas = [resolver.resolve(type_) for type_ in resolver.registered_types]
    except (ConfigurationError, MappingError) as exc:
        raise CliError(str(exc)) from exc
    for schema in schemas:
        for field in schema.fields:
            key = build_key(schema.root_name, _INSTANCE_PLACEHOLDER, field.external_key)
            if field.converter is not None:
                conversion = f"converter {type(field.converter).__qualname__}"
            else:
                conversion = field.value_type.__name__
            click.echo(f"{key}\t{conversion}")


@cli.command(name="read")
@click.option(
    "--config",
    "config_path",
    required=True,
    type=click.Path(path_type=str),
    help="Path to YAML/JSON mapper configuration file",
)
@click.option(
    "--input",
    "input_path",
    required=True,
    type=click.Path(path_type=str),
    help="Path to the properties file to read",
)
def read_properties(config_path: str, input_path: str) -> None:
    """Unmarshal every configured type and print the instances as JSON."""
    try:
        configuration = load_configuration(config_path)
        document = _describe_instances(_unmarshal_configured_types(configuration, input_path))
    except (ConfigurationError, MappingError, OSError) as exc:
        raise CliError(str(exc)) from exc
    click.echo(json.dumps(document, indent=2, sort_keys=True))


def _describe_instances(
    unmarshalled: list[tuple[TypeSchema, dict[str, Any]]],
) -> dict[str, dict[str, dict[str, str]]]:
    document: dict[str, dict[str, dict[str, str]]] = {}
    for schema, objects in unmarshalled:
        by_instance = document.setdefault(schema.root_name, {})
        for instance_name, obj in objects.items():
            fields = by_instance.setdefault(instance_name, {})
            for field in schema.fields:
                key = build_key(schema.root_name, instance_name, field.external_key)
                text = encode_field_value(field, obj, key=key, owner=schema.type_)
                if text is not None:
                    fields[field.external_key] = text
    return document


@cli.command(name="rewrite")
@click.option(
    "--config",
    "config_path",
    required=True,
    type=click.Path(path_type=str),
    help="Path to YAML/JSON mapper configuration file",
)
@click.option(
    "--input",
    "input_path",
    required=True,
    type=click.Path(path_type=str),
    help="Path to the properties file to read",
)
@click.option(
    "--output",
    "output_path",
    required=True,
    type=click.Path(path_type=str),
    help="Path to the normalized properties file to write",
)
@click.option(
    "--comment",
    required=False,
    default=None,
    help="Comment line for the written file; defaults to record_format.comment.",
)
def rewrite_properties(
    config_path: str, input_path: str, output_path: str, comment: str | None
) -> None:
    """Read a properties file and write back only the records of configured types."""
    try:
        configuration = load_configuration(config_path)
        records: dict[str, str] = {}
        for schema, objects in _unmarshal_configured_types(configuration, input_path):
            records.update(build_records(objects, schema))
        record_format = configuration.record_format
        with Path(output_path).open("w", encoding=record_format.encoding, newline="") as sink:
            write_records(
                records,
                sink,
                comment=record_format.comment if comment is None else comment,
                record_format=record_format,
            )
    except (ConfigurationError, MappingError, OSError) as exc:
        raise CliError(str(exc)) from exc
    click.echo(str(Path(output_path).resolve()))


def _unmarshal_configured_types(
    configuration: MapperConfiguration, input_path: str
) -> list[tuple[TypeSchema, dict[str, Any]]]:
    with PropertyUnmarshaller.open(
        input_path,
        registrations=configuration.registrations,
        record_format=configuration.record_format,
    ) as unmarshaller:
        return [
            (
                unmarshaller.resolver.resolve(registration.type_),
                unmarshaller.unmarshal(registration.type_),
            )
            for registration in configuration.registrations
        ]


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
