"""
Health check endpoint.

Provides system health status for monitoring and load balancers.
"""

from fastapi import APIRouter

from invoicedesk import __version__
from invoicedesk.api.schemas import HealthResponse

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """
    Check system health.
    
    Returns status for monitoring dashboards and load balancer health checks.
    """
    return HealthResponse(
        status="healthy",
        version=__version__,
    )
