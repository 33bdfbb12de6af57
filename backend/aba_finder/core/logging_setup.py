"""Process-wide logging for the API.

Everything goes to one stdout console handler. The handler scrubs ``key=``
query values so no upstream credential reaches the output, and the HTTP
client loggers (which print every outbound URL) are held at WARNING.
"""
from __future__ import annotations

import logging
import re
from logging.config import dictConfig

_CREDENTIAL_PARAM = re.compile(r"(\bkey=)[^&\s\"']+")
_QUIET_LOGGERS = ("httpx", "httpcore")


class CredentialRedactionFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        redacted = _CREDENTIAL_PARAM.sub(r"\1[redacted]", message)
        if redacted != message:
            record.msg = redacted
            record.args = None
        return True


def _dict_config(level: str) -> dict:
    loggers: dict[str, dict] = {
        name: {"level": level, "handlers": ["console"], "propagate": False}
        for name in ("uvicorn", "uvicorn.error", "uvicorn.access")
    }
    for name in _QUIET_LOGGERS:
        loggers[name] = {"level": "WARNING"}

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "filters": {
            "redact_credentials": {"()": CredentialRedactionFilter},
        },
        "formatters": {
            "default": {
                "format": "%(asctime)s %(levelname)s:%(name)s:%(message)s",
            }
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "level": level,
                "formatter": "default",
                "filters": ["redact_credentials"],
                "stream": "ext://sys.stdout",
            }
        },
        "root": {"level": level, "handlers": ["console"]},
        "loggers": loggers,
    }


def configure_logging(level: str = "INFO", *, force: bool = False) -> None:
    # An already-configured root (reloader, test runner) is left alone unless forced.
    if logging.getLogger().handlers and not force:
        return
    dictConfig(_dict_config(level))
