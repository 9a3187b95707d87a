"""Cassandra store session.

Owns the driver ``Cluster``/``Session`` pair for the lifetime of the
application. Created explicitly in the lifespan, attached to ``app.state`` and
injected into the services; nothing here is a module-level singleton.

Driver calls return ``ResponseFuture`` objects completed on driver threads.
They are bridged into asyncio futures so a paged read is a single ``await``.

Example:
    async with CassandraStore(get_cassandra_settings()) as store:
        statement = store.prepare("SELECT * FROM t WHERE k = :k")
        page = await store.execute_page(statement, {"k": 1}, page_size=10)
        page.rows, page.paging_state
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
import logging
from typing import TYPE_CHECKING, Any, Protocol

from cassandra import OperationTimedOut, Timeout, Unavailable
from cassandra.auth import PlainTextAuthProvider
from cassandra.cluster import (
    EXEC_PROFILE_DEFAULT,
    Cluster,
    ExecutionProfile,
    NoHostAvailable,
    Session,
    UserTypeDoesNotExist,
)
from cassandra.connection import ConnectionException
from cassandra.policies import DCAwareRoundRobinPolicy, TokenAwarePolicy
from cassandra.query import PreparedStatement, SimpleStatement, dict_factory
from opentelemetry import trace

from spacecraft_telemetry.core.exceptions import AppException, StoreError, StoreUnavailable
from spacecraft_telemetry.infra.metrics.tracking import track_store_request

if TYPE_CHECKING:
    from collections.abc import Mapping
    from types import TracebackType

    from cassandra.cluster import ResponseFuture

    from spacecraft_telemetry.core.settings.cassandra import CassandraSettings

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)

LOCATION_UDT = "location_udt"
FETCH_ALL_PAGE_SIZE = 5000

# Errors the client may retry later; anything else the store raised is a
# rejected query.
UNAVAILABLE_ERRORS: tuple[type[BaseException], ...] = (
    NoHostAvailable,
    OperationTimedOut,
    Unavailable,
    Timeout,
    ConnectionException,
)


@dataclass(frozen=True, slots=True)
class StorePage:
    """Rows of exactly one store page plus the native continuation token."""

    rows: list[dict[str, Any]] = field(default_factory=list)
    paging_state: bytes | None = None

    @property
    def has_more(self) -> bool:
        return self.paging_state is not None


class PagedStatementExecutor(Protocol):
    """The store surface the services depend on."""

    @property
    def is_ready(self) -> bool: ...

    def prepare(self, cql: str) -> Any: ...

    async def execute_page(
        self,
        statement: Any,
        params: Mapping[str, Any],
        *,
        page_size: int,
        paging_state: bytes | None = None,
    ) -> StorePage: ...

    async def fetch_all(
        self, statement: Any, params: Mapping[str, Any] | None = None
    ) -> list[dict[str, Any]]: ...

    async def execute(
        self, statement: Any, params: Mapping[str, Any] | None = None
    ) -> list[dict[str, Any]]: ...


def translate_driver_error(exc: BaseException, operation: str) -> AppException:
    """Map a driver exception onto the application error family.

    Args:
        exc: Exception raised by the driver or the server
        operation: Store operation being executed (for the error context)

    Returns:
        StoreUnavailable for transient conditions, StoreError otherwise
    """
    extra = {"operation": operation, "driver_error": type(exc).__name__}
    if isinstance(exc, UNAVAILABLE_ERRORS):
        return StoreUnavailable(f"Store unavailable: {exc}", extra=extra)
    return StoreError(f"Store rejected the request: {exc}", extra=extra)


async def _wait_for(response_future: ResponseFuture) -> Any:
    """Await a driver ResponseFuture and return its ResultSet."""
    loop = asyncio.get_running_loop()
    done: asyncio.Future[None] = loop.create_future()

    def _resolve(_: Any) -> None:
        if not done.done():
            done.set_result(None)

    def _reject(exc: BaseException) -> None:
        if not done.done():
            done.set_exception(exc)

    response_future.add_callbacks(
        callback=lambda rows: loop.call_soon_threadsafe(_resolve, rows),
        errback=lambda exc: loop.call_soon_threadsafe(_reject, exc),
    )
    await done
    # Already completed on the driver thread; result() does not block here
    return response_future.result()


class CassandraStore:
    """Async facade over a Cassandra cluster session.

    Example:
        >>> store = CassandraStore(get_cassandra_settings())
        >>> await store.startup()
        >>> statement = store.prepare("SELECT ... WHERE spacecraft_name = :spacecraft_name")
        >>> page = await store.execute_page(statement, params, page_size=10)
        >>> await store.shutdown()
    """

    def __init__(self, settings: CassandraSettings) -> None:
        self.settings = settings
        self._cluster: Cluster | None = None
        self._session: Session | None = None

    async def __aenter__(self) -> CassandraStore:
        """Async context manager entry."""
        await self.startup()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Async context manager exit."""
        await self.shutdown()

    @property
    def is_ready(self) -> bool:
        """Check if the session is connected and ready for queries."""
        return self._session is not None and not self._session.is_shutdown

    @property
    def keyspace(self) -> str:
        return self.settings.keyspace

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def startup(self, *, use_keyspace: bool = True) -> None:
        """Connect to the cluster.

        Called during application startup in the lifespan context. Blocking
        driver setup runs in a worker thread.

        Args:
            use_keyspace: Bind the session to the configured keyspace. The
                schema provisioning command connects without it so it can
                create the keyspace first.

        Raises:
            StoreUnavailable: If no host can be reached
            StoreError: If the cluster rejects the connection (e.g. unknown keyspace)
        """
        if self._session is not None:
            logger.debug("Cassandra session already initialized")
            return

        logger.info(
            "Connecting to Cassandra",
            extra={
                "keyspace": self.settings.keyspace,
                "cloud_bundle": self.settings.uses_cloud_bundle,
                "contact_points": None if self.settings.uses_cloud_bundle else self.settings.contact_points,
            },
        )

        cluster = self._build_cluster()
        try:
            session = await asyncio.to_thread(
                cluster.connect, self.settings.keyspace if use_keyspace else None
            )
        except Exception as exc:
            cluster.shutdown()
            logger.exception("Failed to connect to Cassandra")
            raise translate_driver_error(exc, "connect") from exc

        self._cluster = cluster
        self._session = session
        if use_keyspace:
            self.register_location_type()

        logger.info("Cassandra session established", extra={"keyspace": session.keyspace})

    async def shutdown(self) -> None:
        """Close the session and the cluster. Safe to call more than once."""
        if self._cluster is None:
            logger.debug("Cassandra session not initialized, nothing to shutdown")
            return

        logger.info("Shutting down Cassandra session")
        cluster, self._cluster, self._session = self._cluster, None, None
        await asyncio.to_thread(cluster.shutdown)
        logger.info("Cassandra session shutdown complete")

    def register_location_type(self) -> None:
        """Return ``location_udt`` values as plain dicts."""
        if self._cluster is None:
            return
        try:
            self._cluster.register_user_type(self.settings.keyspace, LOCATION_UDT, dict)
        except UserTypeDoesNotExist:
            logger.warning(
                "User type not found; location readings unavailable until the schema is provisioned",
                extra={"keyspace": self.settings.keyspace, "user_type": LOCATION_UDT},
            )

    async def set_keyspace(self, keyspace: str) -> None:
        """Switch the session keyspace (used after provisioning it)."""
        session = self._require_session()
        await asyncio.to_thread(session.set_keyspace, keyspace)

    def _build_cluster(self) -> Cluster:
        settings = self.settings

        profile_kwargs: dict[str, Any] = {
            "row_factory": dict_factory,
            "request_timeout": settings.request_timeout,
        }
        if settings.local_datacenter and not settings.uses_cloud_bundle:
            profile_kwargs["load_balancing_policy"] = TokenAwarePolicy(
                DCAwareRoundRobinPolicy(local_dc=settings.local_datacenter)
            )

        cluster_kwargs: dict[str, Any] = {
            "execution_profiles": {EXEC_PROFILE_DEFAULT: ExecutionProfile(**profile_kwargs)},
            "connect_timeout": settings.connect_timeout,
        }
        if settings.protocol_version is not None:
            cluster_kwargs["protocol_version"] = settings.protocol_version
        if settings.username and settings.password is not None:
            cluster_kwargs["auth_provider"] = PlainTextAuthProvider(
                username=settings.username,
                password=settings.password.get_secret_value(),
            )
        if settings.uses_cloud_bundle:
            cluster_kwargs["cloud"] = {"secure_connect_bundle": str(settings.secure_connect_bundle)}
        else:
            cluster_kwargs["contact_points"] = list(settings.contact_points)
            cluster_kwargs["port"] = settings.port

        return Cluster(**cluster_kwargs)

    def _require_session(self) -> Session:
        if self._session is None:
            raise StoreUnavailable(
                "Store session is not started",
                extra={"keyspace": self.settings.keyspace},
            )
        return self._session

    # ------------------------------------------------------------------
    # Statements
    # ------------------------------------------------------------------

    def prepare(self, cql: str) -> PreparedStatement:
        """Prepare a statement once; the result is reused for every request.

        Raises:
            StoreUnavailable: If the session is not started or unreachable
            StoreError: If the server rejects the statement
        """
        session = self._require_session()
        try:
            with track_store_request("prepare"):
                return session.prepare(cql)
        except Exception as exc:
            raise translate_driver_error(exc, "prepare") from exc

    async def execute_page(
        self,
        statement: PreparedStatement | str,
        params: Mapping[str, Any],
        *,
        page_size: int,
        paging_state: bytes | None = None,
    ) -> StorePage:
        """Execute one page of a read.

        Args:
            statement: Prepared statement (or raw CQL)
            params: Named parameter values
            page_size: Rows per page (driver ``fetch_size``)
            paging_state: Native continuation token from the previous page

        Returns:
            Exactly the rows of this page and the token for the next one

        Raises:
            StoreUnavailable: Store unreachable or timed out
            StoreError: Query rejected by the store
        """
        session = self._require_session()
        bound = self._bind(statement, params)
        bound.fetch_size = page_size

        with tracer.start_as_current_span("cassandra.execute_page") as span:
            span.set_attribute("db.system", "cassandra")
            span.set_attribute("db.cassandra.page_size", page_size)
            span.set_attribute("db.cassandra.has_paging_state", paging_state is not None)
            try:
                with track_store_request("execute_page"):
                    result = await _wait_for(
                        session.execute_async(
                            bound,
                            paging_state=paging_state,
                            timeout=self.settings.request_timeout,
                        )
                    )
            except Exception as exc:
                span.record_exception(exc)
                raise translate_driver_error(exc, "execute_page") from exc

        return StorePage(rows=list(result.current_rows), paging_state=result.paging_state)

    async def fetch_all(
        self, statement: PreparedStatement | str, params: Mapping[str, Any] | None = None
    ) -> list[dict[str, Any]]:
        """Follow paging states until the result is exhausted."""
        rows: list[dict[str, Any]] = []
        paging_state: bytes | None = None
        while True:
            page = await self.execute_page(
                statement,
                params or {},
                page_size=FETCH_ALL_PAGE_SIZE,
                paging_state=paging_state,
            )
            rows.extend(page.rows)
            if page.paging_state is None:
                return rows
            paging_state = page.paging_state

    async def execute(
        self, statement: PreparedStatement | str, params: Mapping[str, Any] | None = None
    ) -> list[dict[str, Any]]:
        """Execute a write or DDL statement and return its (first page of) rows."""
        session = self._require_session()
        bound = self._bind(statement, params or {})
        try:
            with track_store_request("execute"):
                result = await _wait_for(
                    session.execute_async(bound, timeout=self.settings.request_timeout)
                )
        except Exception as exc:
            raise translate_driver_error(exc, "execute") from exc
        return list(result.current_rows)

    @staticmethod
    def _bind(statement: PreparedStatement | str, params: Mapping[str, Any]) -> Any:
        if isinstance(statement, PreparedStatement):
            return statement.bind(dict(params))
        if params:
            msg = "Raw CQL statements take no parameters; prepare the statement instead"
            raise TypeError(msg)
        return SimpleStatement(statement)
