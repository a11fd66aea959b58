"""Outcome counters shared by the sweep jobs."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any


@dataclass
class SweepResult:
    """How many entities a sweep looked at, alerted on and failed to process."""

    checked: int = 0
    alerted: int = 0
    failed: int = 0

    def as_dict(self) -> dict[str, Any]:
        return asdict(self)


__all__ = ["SweepResult"]
