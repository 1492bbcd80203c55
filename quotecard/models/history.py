"""Quote history models."""

import time

from pydantic import BaseModel, Field


def _now_ms() -> int:
    return int(time.time() * 1000)


class QuoteHistoryEntry(BaseModel):
    """A generated quote and when it was created (epoch milliseconds)."""
    text: str
    ts: int = Field(default_factory=_now_ms)
