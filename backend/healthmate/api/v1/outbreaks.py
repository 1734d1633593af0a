from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session

from healthmate.core.dependencies import get_current_user
from healthmate.db.session import get_db
from healthmate.schemas.outbreak import OutbreakOut, OutbreakRefreshOut
from healthmate.services.outbreak_service import (
    format_sse,
    list_active_outbreaks,
    outbreak_notifier,
    refresh_health_alerts,
)

router = APIRouter(prefix="/outbreaks", tags=["Outbreaks"])


@router.get("", response_model=list[OutbreakOut])
def active_outbreaks(db: Session = Depends(get_db)):
    return list_active_outbreaks(db)


@router.post("/refresh", response_model=OutbreakRefreshOut)
def refresh_outbreaks(
    db: Session = Depends(get_db),
    current_user=Depends(get_current_user),
):
    return refresh_health_alerts(db)


async def outbreak_event_stream():
    yield format_sse("ready", {"subscribers": outbreak_notifier.subscriber_count})
    async for payload in outbreak_notifier.subscribe():
        yield format_sse("outbreak", payload)


@router.get("/stream")
async def stream_outbreaks():
    return StreamingResponse(outbreak_event_stream(), media_type="text/event-stream")
