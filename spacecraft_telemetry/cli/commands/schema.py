"""Schema provisioning commands."""

import sys

import click

from spacecraft_telemetry.cli.utils import coro, error, info, success
from spacecraft_telemetry.core.exceptions import AppException
from spacecraft_telemetry.core.settings import get_cassandra_settings
from spacecraft_telemetry.infra.cassandra.schema import (
    ensure_schema,
    render_create_keyspace,
    schema_statements,
)
from spacecraft_telemetry.infra.cassandra.session import CassandraStore


@click.group(name="schema")
def schema() -> None:
    """Keyspace and table provisioning."""


@schema.command()
@click.option(
    "--create-keyspace/--no-create-keyspace",
    default=True,
    help="Create the keyspace if missing (ignored for secure connect bundles)",
)
@coro
async def init(create_keyspace: bool) -> None:
    """Create the user type, catalog and telemetry tables."""
    settings = get_cassandra_settings()
    info(f"Provisioning keyspace: {settings.keyspace}")

    store = CassandraStore(settings)
    try:
        # No keyspace yet: it may not exist before provisioning
        await store.startup(use_keyspace=False)
        executed = await ensure_schema(store, create_keyspace=create_keyspace)
    except AppException as e:
        error(f"Schema provisioning failed: {e.detail}")
        sys.exit(1)
    finally:
        await store.shutdown()

    success(f"Applied {len(executed)} statement(s)")


@schema.command()
def show() -> None:
    """Print the DDL without connecting."""
    settings = get_cassandra_settings()
    if not settings.uses_cloud_bundle:
        click.echo(render_create_keyspace(settings.keyspace, settings.replication_factor) + ";")
        click.echo(f"USE {settings.keyspace};")
    for statement in schema_statements():
        click.echo(statement + ";")
