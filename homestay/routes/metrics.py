"""
Prometheus scrape endpoint.

Example:
    GET /metrics

    Response:
        # HELP homestay_bookings_created_total Total number of bookings created
        # TYPE homestay_bookings_created_total counter
        homestay_bookings_created_total 12.0
        ...
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter
from fastapi.responses import Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

router = APIRouter()


@router.get("/metrics", response_class=Response)
async def metrics() -> Any:
    """Expose booking and push delivery metrics in Prometheus text format."""
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
