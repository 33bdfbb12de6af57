from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict


class HealthResponse(BaseModel):
    model_config = ConfigDict(extra="forbid", strict=True)

    status: Literal["OK"] = "OK"
    message: str
    timestamp: datetime


class UpstreamStatusResponse(BaseModel):
    model_config = ConfigDict(extra="forbid", strict=True)

    online: bool
    checked: bool
    last_changed: datetime | None = None
