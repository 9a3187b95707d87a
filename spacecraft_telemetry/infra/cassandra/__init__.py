"""Cassandra store session and schema provisioning."""

from spacecraft_telemetry.infra.cassandra.session import (
    CassandraStore,
    PagedStatementExecutor,
    StorePage,
    translate_driver_error,
)

__all__ = [
    "CassandraStore",
    "PagedStatementExecutor",
    "StorePage",
    "translate_driver_error",
]
