import logging

from fastapi import Request
from fastapi.responses import JSONResponse


logger = logging.getLogger(__name__)


class ProxyError(RuntimeError):
    status_code: int = 500
    kind: str = "proxy_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_body(self) -> dict[str, object]:
        return {
            "status": "ERROR",
            "error": self.kind,
            "error_message": self.message,
            "status_code": self.status_code,
        }


class ConfigurationError(ProxyError):
    status_code = 500
    kind = "configuration_error"


class BadRequestError(ProxyError):
    status_code = 400
    kind = "bad_request"


class UpstreamError(ProxyError):
    status_code = 500
    kind = "upstream_error"

    def __init__(self, message: str, upstream_status: int | None = None) -> None:
        super().__init__(message)
        self.upstream_status = upstream_status

    def to_body(self) -> dict[str, object]:
        body = super().to_body()
        if self.upstream_status is not None:
            body["upstream_status"] = self.upstream_status
        return body


def describe_status(status_code: int | None) -> str:
    if status_code == 404:
        return "Resource not found"
    if status_code == 500:
        return "Server error - please try again later"
    if status_code == 503:
        return "Service temporarily unavailable"
    if status_code is None:
        return "An unexpected error occurred"
    return "An error occurred while loading data"


async def handle_proxy_error(request: Request, exc: ProxyError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    else:
        logger.warning("%s %s rejected: %s", request.method, request.url.path, exc.message)
    return JSONResponse(exc.to_body(), status_code=exc.status_code)
