from fastapi import Request

from aba_finder.core.errors import ConfigurationError
from aba_finder.services.network_status import UpstreamStatusMonitor
from aba_finder.services.places_proxy import PlacesProxy


def get_status_monitor(request: Request) -> UpstreamStatusMonitor:
    monitor = getattr(request.app.state, "upstream_monitor", None)
    if monitor is None:
        monitor = UpstreamStatusMonitor()
        request.app.state.upstream_monitor = monitor
    return monitor


def get_places_proxy(request: Request) -> PlacesProxy:
    # Owned by the lifespan handler, which also closes its HTTP client.
    proxy = getattr(request.app.state, "places_proxy", None)
    if proxy is None:
        raise ConfigurationError("Places proxy is not running")
    return proxy
