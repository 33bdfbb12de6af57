from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from aba_finder.api.deps import get_status_monitor
from aba_finder.core.config import settings
from aba_finder.schemas.health import HealthResponse, UpstreamStatusResponse
from aba_finder.services.network_status import UpstreamStatusMonitor

router = APIRouter(tags=["health"])


@router.get("/api/health", response_model=HealthResponse)
@router.get("/health", response_model=HealthResponse, include_in_schema=False)
async def health() -> HealthResponse:
    return HealthResponse(
        status="OK",
        message=f"{settings.app_name} is running",
        timestamp=datetime.now(timezone.utc),
    )


@router.get("/api/status/upstream", response_model=UpstreamStatusResponse)
async def upstream_status(
    monitor: UpstreamStatusMonitor = Depends(get_status_monitor),
) -> UpstreamStatusResponse:
    return UpstreamStatusResponse(
        online=monitor.is_online,
        checked=monitor.started,
        last_changed=monitor.last_changed,
    )
