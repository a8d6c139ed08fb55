# farmsim/results.py
"""Success/failure values returned by every fallible operation."""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class ActionResult:
    success: bool
    message: str
    cost: float = 0.0
    refund: float = 0.0
    details: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def ok(cls, message: str, **kwargs) -> 'ActionResult':
        return cls(True, message, **kwargs)

    @classmethod
    def fail(cls, message: str) -> 'ActionResult':
        return cls(False, message)


@dataclass(frozen=True)
class HarvestResult(ActionResult):
    revenue: int = 0
    quality: Optional[str] = None
    weight: float = 0.0
