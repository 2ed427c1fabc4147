from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True, slots=True)
class SeenReceipt:
    """Outcome of a bulk seen transition for one sender→viewer pair."""

    viewer_id: str
    counterpart_id: str
    count: int
    seen_at: datetime
