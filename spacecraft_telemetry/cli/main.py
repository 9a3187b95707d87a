"""Main CLI entry point for spacecraft-telemetry management commands."""

import click

from spacecraft_telemetry.cli.commands import schema, server
from spacecraft_telemetry.infra.logging.config import setup_logging


@click.group()
@click.version_option(package_name="spacecraft-telemetry", prog_name="spacecraft-telemetry")
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Spacecraft Telemetry CLI.

    \b
    Command Groups:
      server     Run the API server
      schema     Provision the Cassandra keyspace and tables

    \b
    Quick Start:
      spacecraft-telemetry schema show     # Print the DDL
      spacecraft-telemetry schema init     # Apply it
      spacecraft-telemetry server run      # Serve the API
    """
    ctx.ensure_object(dict)


cli.add_command(server.server)
cli.add_command(schema.schema)


def main() -> None:
    """Entry point for CLI."""
    setup_logging()
    cli(obj={})


if __name__ == "__main__":
    main()
