import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

import httpx

from aba_finder.core.config import DEFAULT_PLACES_BASE_URL, Settings
from aba_finder.core.errors import BadRequestError, ConfigurationError, UpstreamError, describe_status
from aba_finder.services.network_status import UpstreamStatusMonitor


logger = logging.getLogger(__name__)

MASK_PREFIX_LENGTH = 4

QueryItems = Mapping[str, str] | Iterable[tuple[str, str]]


def mask_credential(secret: str | None) -> str:
    if not secret:
        return "[unset]"
    return f"{secret[:MASK_PREFIX_LENGTH]}..."


@dataclass(frozen=True, slots=True)
class UpstreamReply:
    status_code: int
    body: bytes
    payload: Any


class PlacesProxy:
    """Relays place-search calls to the upstream API with the server-held key.

    The key is attached on the way out and never returned to the caller.
    Each call makes exactly one outbound request; nothing is retried or cached.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        *,
        credential: str | None,
        base_url: str = DEFAULT_PLACES_BASE_URL,
        credential_param: str = "key",
        monitor: UpstreamStatusMonitor | None = None,
    ) -> None:
        self._client = client
        self._credential = credential or None
        self._base_url = httpx.URL(base_url if base_url.endswith("/") else f"{base_url}/")
        self._credential_param = credential_param
        self._monitor = monitor

    @classmethod
    def from_settings(
        cls,
        config: Settings,
        *,
        monitor: UpstreamStatusMonitor | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> "PlacesProxy":
        client = httpx.AsyncClient(timeout=config.upstream_timeout_seconds, transport=transport)
        return cls(
            client,
            credential=config.google_places_api_key,
            base_url=config.places_base_url,
            credential_param=config.places_credential_param,
            monitor=monitor,
        )

    @property
    def has_credential(self) -> bool:
        return self._credential is not None

    @property
    def timeout(self) -> httpx.Timeout:
        return self._client.timeout

    @property
    def is_closed(self) -> bool:
        return self._client.is_closed

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "PlacesProxy":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def forward_get(self, path_suffix: str, query_params: QueryItems) -> UpstreamReply:
        credential = self._require_credential()
        suffix = path_suffix.lstrip("/")
        if ".." in suffix.split("/"):
            raise BadRequestError("Invalid places API path")

        items = query_params.items() if isinstance(query_params, Mapping) else query_params
        # Drop any client-supplied key before injecting the real one.
        params = [(name, value) for name, value in items if name != self._credential_param]
        params.append((self._credential_param, credential))

        target = httpx.URL(f"{self._base_url}{suffix}", params=params)
        if not self._is_upstream_url(target):
            raise BadRequestError("Invalid places API path")
        return await self._send(target)

    async def forward_post(self, body: Any) -> UpstreamReply:
        raw_url = body.get("url") if isinstance(body, Mapping) else None
        if not isinstance(raw_url, str) or not raw_url.strip():
            raise BadRequestError("URL is required in request body")
        try:
            target = httpx.URL(raw_url.strip())
        except httpx.InvalidURL as exc:
            raise BadRequestError("URL is not valid") from exc
        if not self._is_upstream_url(target):
            raise BadRequestError("URL must point at the places API")

        credential = self._require_credential()
        if self._credential_param not in target.params:
            target = target.copy_add_param(self._credential_param, credential)
        return await self._send(target)

    def _require_credential(self) -> str:
        if self._credential is None:
            raise ConfigurationError("Places API key is not configured on the server")
        return self._credential

    def _is_upstream_url(self, url: httpx.URL) -> bool:
        base = self._base_url
        if (url.scheme, url.host, url.port) != (base.scheme, base.host, base.port):
            return False
        if ".." in url.path.split("/"):
            return False
        return url.path.startswith(base.path)

    def _redact(self, url: httpx.URL) -> str:
        if self._credential_param in url.params:
            url = url.copy_set_param(self._credential_param, mask_credential(url.params[self._credential_param]))
        return str(url)

    def _report(self, online: bool) -> None:
        if self._monitor is not None:
            self._monitor.report(online)

    async def _send(self, url: httpx.URL) -> UpstreamReply:
        logger.info("Proxying request to %s", self._redact(url))
        try:
            response = await self._client.get(url)
        except httpx.HTTPError as exc:
            self._report(False)
            # The exception text can echo the keyed URL, so only the type is logged.
            logger.warning("Upstream request failed: %s", type(exc).__name__)
            raise UpstreamError("Proxy request failed: upstream is unreachable") from exc

        self._report(True)
        try:
            payload = response.json()
        except ValueError as exc:
            logger.warning("Upstream returned non-JSON body with status %s", response.status_code)
            raise UpstreamError(
                f"Upstream returned an invalid response: {describe_status(response.status_code)}",
                upstream_status=response.status_code,
            ) from exc

        logger.info("Upstream responded with status %s", response.status_code)
        return UpstreamReply(status_code=response.status_code, body=response.content, payload=payload)
