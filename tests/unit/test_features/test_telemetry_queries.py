"""Tests for partition-scoped query templates."""

from __future__ import annotations

import dataclasses

import pytest

from spacecraft_telemetry.core.exceptions import SchemaMismatch
from spacecraft_telemetry.features.telemetry.entities import (
    TEMPERATURE_SCHEMA,
    Column,
    TelemetryKind,
    get_entity_schema,
)
from spacecraft_telemetry.features.telemetry.queries import QueryTemplateBuilder, render_select


def test_render_select_temperature() -> None:
    assert render_select(TEMPERATURE_SCHEMA) == (
        "SELECT spacecraft_name, journey_id, reading_time, temperature, temperature_unit "
        "FROM spacecraft_temperature_over_time "
        "WHERE spacecraft_name = :spacecraft_name AND journey_id = :journey_id"
    )


@pytest.mark.parametrize("kind", list(TelemetryKind))
def test_render_select_is_deterministic_and_unordered(kind: TelemetryKind) -> None:
    schema = get_entity_schema(kind)
    cql = render_select(schema)

    assert cql == render_select(schema)
    assert "ORDER BY" not in cql
    assert f"FROM {schema.table_name} " in cql
    for column in schema.column_names:
        assert column in cql


def test_render_select_requires_partition_key() -> None:
    broken = dataclasses.replace(
        TEMPERATURE_SCHEMA,
        partition_columns=(Column("spacecraft_name", "text"),),
    )
    with pytest.raises(SchemaMismatch) as exc_info:
        render_select(broken)
    assert exc_info.value.extra["partition_key"] == ["spacecraft_name"]


def test_build_prepares_once(store) -> None:
    plan = QueryTemplateBuilder(store).build(TEMPERATURE_SCHEMA)

    assert store.prepared == [plan.cql]
    assert plan.statement == plan.cql
    assert plan.kind is TelemetryKind.TEMPERATURE
    assert plan.parameter_names == ("spacecraft_name", "journey_id")


def test_build_all_covers_every_kind(store) -> None:
    plans = QueryTemplateBuilder(store).build_all()

    assert set(plans) == set(TelemetryKind)
    assert len(store.prepared) == len(TelemetryKind)
    assert {plan.schema.table_name for plan in plans.values()} == {
        f"spacecraft_{kind.value}_over_time" for kind in TelemetryKind
    }
