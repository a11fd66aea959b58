"""Response models for scheduler-triggered jobs."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel


class CronJobResponse(BaseModel):
    success: bool = True
    results: dict[str, Any]
    processed_at: datetime


__all__ = ["CronJobResponse"]
