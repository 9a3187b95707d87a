"""Tests for the Cassandra store session with a mocked driver."""

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace
from unittest.mock import MagicMock

from cassandra import InvalidRequest, OperationTimedOut, Unavailable
from cassandra.auth import PlainTextAuthProvider
from cassandra.cluster import NoHostAvailable, UserTypeDoesNotExist
from cassandra.query import PreparedStatement, SimpleStatement
import pytest

from spacecraft_telemetry.core.exceptions import StoreError, StoreUnavailable
from spacecraft_telemetry.core.settings.cassandra import CassandraSettings
from spacecraft_telemetry.infra.cassandra import session as session_module
from spacecraft_telemetry.infra.cassandra.session import (
    LOCATION_UDT,
    CassandraStore,
    StorePage,
    translate_driver_error,
)


class FakeResponseFuture:
    """Completes immediately, like a driver future whose callbacks fire at once."""

    def __init__(self, rows=None, paging_state=None, error: Exception | None = None) -> None:
        self._result = SimpleNamespace(current_rows=rows or [], paging_state=paging_state)
        self._error = error

    def add_callbacks(self, callback, errback) -> None:
        if self._error is not None:
            errback(self._error)
        else:
            callback(self._result.current_rows)

    def result(self):
        if self._error is not None:
            raise self._error
        return self._result


def _settings(**overrides) -> CassandraSettings:
    return CassandraSettings(enabled=True, **overrides)


@pytest.fixture
def connected_store():
    store = CassandraStore(_settings())
    store._session = MagicMock()
    store._session.is_shutdown = False
    return store


@pytest.fixture
def cluster_cls(monkeypatch):
    cluster_cls = MagicMock(name="Cluster")
    monkeypatch.setattr(session_module, "Cluster", cluster_cls)
    return cluster_cls


class TestTranslateDriverError:
    @pytest.mark.parametrize(
        "exc",
        [
            NoHostAvailable("Unable to connect", {}),
            OperationTimedOut("timed out"),
            Unavailable("not enough replicas"),
        ],
    )
    def test_transient_errors_are_unavailable(self, exc) -> None:
        error = translate_driver_error(exc, "execute_page")

        assert isinstance(error, StoreUnavailable)
        assert error.status_code == 503
        assert error.extra == {"operation": "execute_page", "driver_error": type(exc).__name__}

    @pytest.mark.parametrize("exc", [InvalidRequest("bad paging state"), ValueError("boom")])
    def test_other_errors_are_store_errors(self, exc) -> None:
        error = translate_driver_error(exc, "execute_page")

        assert isinstance(error, StoreError)
        assert error.status_code == 500


class TestExecutePage:
    @pytest.mark.asyncio
    async def test_binds_params_and_returns_one_page(self, connected_store) -> None:
        statement = MagicMock(spec=PreparedStatement)
        rows = [{"reading_time": 1}, {"reading_time": 2}]
        connected_store._session.execute_async.return_value = FakeResponseFuture(rows, b"\x00\x01")

        page = await connected_store.execute_page(
            statement, {"spacecraft_name": "gemini3"}, page_size=2, paging_state=b"\xaa"
        )

        assert page == StorePage(rows=rows, paging_state=b"\x00\x01")
        assert page.has_more
        statement.bind.assert_called_once_with({"spacecraft_name": "gemini3"})
        bound = statement.bind.return_value
        assert bound.fetch_size == 2
        connected_store._session.execute_async.assert_called_once_with(
            bound, paging_state=b"\xaa", timeout=10.0
        )

    @pytest.mark.asyncio
    async def test_last_page_has_no_paging_state(self, connected_store) -> None:
        connected_store._session.execute_async.return_value = FakeResponseFuture([{"a": 1}], None)

        page = await connected_store.execute_page(
            MagicMock(spec=PreparedStatement), {}, page_size=10
        )

        assert page.paging_state is None
        assert not page.has_more

    @pytest.mark.asyncio
    async def test_driver_failure_is_translated(self, connected_store) -> None:
        connected_store._session.execute_async.return_value = FakeResponseFuture(
            error=NoHostAvailable("Unable to complete the operation", {})
        )

        with pytest.raises(StoreUnavailable) as exc_info:
            await connected_store.execute_page(MagicMock(spec=PreparedStatement), {}, page_size=10)

        assert exc_info.value.extra["operation"] == "execute_page"

    @pytest.mark.asyncio
    async def test_rejected_query_is_store_error(self, connected_store) -> None:
        connected_store._session.execute_async.return_value = FakeResponseFuture(
            error=InvalidRequest("Invalid value for the paging state")
        )

        with pytest.raises(StoreError):
            await connected_store.execute_page(MagicMock(spec=PreparedStatement), {}, page_size=10)

    @pytest.mark.asyncio
    async def test_not_started_is_unavailable(self) -> None:
        store = CassandraStore(_settings())

        assert not store.is_ready
        with pytest.raises(StoreUnavailable, match="not started"):
            await store.execute_page(MagicMock(spec=PreparedStatement), {}, page_size=10)

    @pytest.mark.asyncio
    async def test_fetch_all_follows_paging_states(self, connected_store) -> None:
        connected_store._session.execute_async.side_effect = [
            FakeResponseFuture([{"n": 1}], b"\x01"),
            FakeResponseFuture([{"n": 2}], None),
        ]

        rows = await connected_store.fetch_all(MagicMock(spec=PreparedStatement))

        assert rows == [{"n": 1}, {"n": 2}]
        second_call = connected_store._session.execute_async.call_args_list[1]
        assert second_call.kwargs["paging_state"] == b"\x01"


class TestExecute:
    @pytest.mark.asyncio
    async def test_raw_cql_becomes_simple_statement(self, connected_store) -> None:
        connected_store._session.execute_async.return_value = FakeResponseFuture()

        await connected_store.execute("CREATE TABLE t (k int PRIMARY KEY)")

        (statement,), _ = connected_store._session.execute_async.call_args
        assert isinstance(statement, SimpleStatement)

    @pytest.mark.asyncio
    async def test_raw_cql_with_params_is_rejected(self, connected_store) -> None:
        with pytest.raises(TypeError):
            await connected_store.execute("INSERT INTO t (k) VALUES (:k)", {"k": 1})


class TestLifecycle:
    @pytest.mark.asyncio
    async def test_startup_with_contact_points(self, cluster_cls) -> None:
        store = CassandraStore(_settings(contact_points=["10.0.0.1", "10.0.0.2"], port=9043))

        await store.startup()

        kwargs = cluster_cls.call_args.kwargs
        assert kwargs["contact_points"] == ["10.0.0.1", "10.0.0.2"]
        assert kwargs["port"] == 9043
        assert "cloud" not in kwargs
        assert "auth_provider" not in kwargs
        cluster_cls.return_value.connect.assert_called_once_with("spacecraft")
        cluster_cls.return_value.register_user_type.assert_called_once_with(
            "spacecraft", LOCATION_UDT, dict
        )

    @pytest.mark.asyncio
    async def test_startup_with_cloud_bundle_and_credentials(self, cluster_cls) -> None:
        store = CassandraStore(
            _settings(
                secure_connect_bundle=Path("/secrets/bundle.zip"),
                username="client-id",
                password="client-secret",
            )
        )

        await store.startup()

        kwargs = cluster_cls.call_args.kwargs
        assert kwargs["cloud"] == {"secure_connect_bundle": "/secrets/bundle.zip"}
        assert "contact_points" not in kwargs
        assert isinstance(kwargs["auth_provider"], PlainTextAuthProvider)
        assert kwargs["auth_provider"].password == "client-secret"

    @pytest.mark.asyncio
    async def test_startup_without_keyspace(self, cluster_cls) -> None:
        store = CassandraStore(_settings())

        await store.startup(use_keyspace=False)

        cluster_cls.return_value.connect.assert_called_once_with(None)
        cluster_cls.return_value.register_user_type.assert_not_called()

    @pytest.mark.asyncio
    async def test_missing_user_type_is_not_fatal(self, cluster_cls) -> None:
        cluster_cls.return_value.register_user_type.side_effect = UserTypeDoesNotExist("missing")
        cluster_cls.return_value.connect.return_value.is_shutdown = False
        store = CassandraStore(_settings())

        await store.startup()

        assert store.is_ready

    @pytest.mark.asyncio
    async def test_connect_failure_shuts_cluster_down(self, cluster_cls) -> None:
        cluster_cls.return_value.connect.side_effect = NoHostAvailable("Unable to connect", {})
        store = CassandraStore(_settings())

        with pytest.raises(StoreUnavailable) as exc_info:
            await store.startup()

        assert exc_info.value.extra["operation"] == "connect"
        cluster_cls.return_value.shutdown.assert_called_once()
        assert not store.is_ready

    @pytest.mark.asyncio
    async def test_shutdown_is_idempotent(self, cluster_cls) -> None:
        cluster_cls.return_value.connect.return_value.is_shutdown = False
        async with CassandraStore(_settings()) as store:
            assert store.is_ready

        await store.shutdown()

        cluster_cls.return_value.shutdown.assert_called_once()
        assert not store.is_ready
