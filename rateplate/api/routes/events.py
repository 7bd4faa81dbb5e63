"""Sample events endpoints; nothing is persisted."""

from __future__ import annotations

from datetime import UTC, datetime
from uuid import UUID

import structlog
from fastapi import APIRouter, Depends, Response, status
from rateplate.api.deps import get_current_principal, parse_guid
from rateplate.api.problems import UNAUTHORIZED_RESPONSE
from rateplate.api.schemas.events import EventPayload
from rateplate.domain import Principal, Priority

router = APIRouter(prefix="/events", tags=["Events"])
logger = structlog.get_logger()

SAMPLE_EVENT_NAME = "Tasting night"


@router.get("", response_model=list[EventPayload], summary="List events")
async def list_events() -> list[EventPayload]:
    return []


@router.get(
    "/{event_id}",
    response_model=EventPayload,
    summary="Get an event",
    responses={401: UNAUTHORIZED_RESPONSE, 404: {"description": "Event not found"}},
)
async def get_event(
    event_id: str,
    _principal: Principal = Depends(get_current_principal),
) -> EventPayload | Response:
    key = parse_guid(event_id)
    if key is None or UUID(key).int == 0:
        return Response(status_code=status.HTTP_404_NOT_FOUND)

    return EventPayload(
        id=UUID(key),
        name=SAMPLE_EVENT_NAME,
        start_at=datetime.now(UTC),
        priority=Priority.STANDARD,
    )


@router.post(
    "",
    status_code=status.HTTP_204_NO_CONTENT,
    response_model=None,
    summary="Save an event",
    responses={401: UNAUTHORIZED_RESPONSE},
)
async def save_event(
    payload: EventPayload,
    principal: Principal = Depends(get_current_principal),
) -> None:
    logger.info("event_received", event_id=str(payload.id), user_id=principal.user_id)
