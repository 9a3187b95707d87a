"""Prometheus scrape endpoint.

Example Prometheus configuration:
    ```yaml
    scrape_configs:
      - job_name: 'spacecraft-telemetry'
        static_configs:
          - targets: ['localhost:8080']
        metrics_path: '/metrics'
    ```
"""

from __future__ import annotations

from fastapi import APIRouter, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from spacecraft_telemetry.infra.metrics.prometheus import REGISTRY

router = APIRouter(tags=["observability"])


@router.get("/metrics")
async def metrics() -> Response:
    """Expose the service registry in Prometheus text format."""
    return Response(
        content=generate_latest(REGISTRY),
        media_type=CONTENT_TYPE_LATEST,
        headers={"Cache-Control": "no-cache, no-store, must-revalidate"},
    )
