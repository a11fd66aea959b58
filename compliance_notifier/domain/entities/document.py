"""Domain entity representing a controlled document with a review date."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class Document:
    id: int | None
    organization_id: int
    title: str
    review_date: datetime | None
    owner_user_id: str | None = None
    review_alert30_sent: bool = False
    review_alert7_sent: bool = False


__all__ = ["Document"]
