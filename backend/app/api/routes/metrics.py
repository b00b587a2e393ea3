"""
Prometheus scrape endpoint for the contact book counters
"""
from fastapi import APIRouter
from fastapi.responses import Response

from app.core.metrics import get_metrics, get_metrics_content_type

router = APIRouter(tags=["metrics"])


@router.get("/metrics", include_in_schema=False)
def scrape_metrics() -> Response:
    """HTTP, auth, contact and database metrics in the exposition format; never cached"""
    return Response(
        content=get_metrics(),
        media_type=get_metrics_content_type(),
        headers={"Cache-Control": "no-store"},
    )
