from __future__ import annotations

from datetime import datetime
from uuid import UUID

from rateplate.api.schemas.common import CamelModel
from rateplate.domain import Priority


class EventPayload(CamelModel):
    id: UUID
    name: str
    start_at: datetime
    priority: Priority | None = None
