import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, ConfigDict

from aba_finder.api.routes_health import router as health_router
from aba_finder.api.routes_places import router as places_router
from aba_finder.api.routes_screening import router as screening_router
from aba_finder.core.config import settings
from aba_finder.core.errors import ProxyError, handle_proxy_error
from aba_finder.core.logging_setup import configure_logging
from aba_finder.services.network_status import UpstreamStatusMonitor
from aba_finder.services.places_proxy import PlacesProxy, mask_credential

logger = logging.getLogger(__name__)


def _log_upstream_status(online: bool) -> None:
    if online:
        logger.info("Places API is reachable")
    else:
        logger.warning("Places API is unreachable")


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(settings.log_level)
    monitor = UpstreamStatusMonitor()
    monitor.start()
    monitor.subscribe(_log_upstream_status)
    app.state.upstream_monitor = monitor
    app.state.places_proxy = PlacesProxy.from_settings(settings, monitor=monitor)
    if settings.google_places_api_key:
        logger.info("Places API key loaded (%s)", mask_credential(settings.google_places_api_key))
    else:
        logger.warning("GOOGLE_PLACES_API_KEY is not set; places requests will fail")
    try:
        yield
    finally:
        monitor.unsubscribe(_log_upstream_status)
        proxy = app.state.places_proxy
        del app.state.places_proxy
        await proxy.aclose()


app = FastAPI(title=settings.app_name, lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.cors_allow_origins),
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)
app.add_exception_handler(ProxyError, handle_proxy_error)

app.include_router(health_router)
app.include_router(places_router)
app.include_router(screening_router)


class RootResponse(BaseModel):
    model_config = ConfigDict(extra="forbid", strict=True)

    message: str
    disclaimer: str


@app.get("/", response_model=RootResponse)
async def root() -> RootResponse:
    return RootResponse(
        message=settings.app_name,
        disclaimer="Screening tools are not a substitute for an official diagnosis.",
    )
