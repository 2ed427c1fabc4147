from __future__ import annotations

from pydantic import BaseModel


class PresenceResponse(BaseModel):
    online: list[str]
