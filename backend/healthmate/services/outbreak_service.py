import asyncio
import json
import logging
from datetime import datetime, timedelta
from threading import Lock
from typing import Any, AsyncIterator, Optional

from sqlalchemy.orm import Session

from healthmate.models.disease_outbreak import DiseaseOutbreak
from healthmate.utils.time_utils import as_utc, utc_now

logger = logging.getLogger("healthmate.outbreaks")


ALERT_TTL = timedelta(days=7)
ACTIVE_ALERT_LIMIT = 5


# Sample feed; a production deployment would pull from WHO / CDC instead.
SAMPLE_ALERTS = (
    {
        "disease_name": "Seasonal Flu",
        "severity": "moderate",
        "location": "Northern Region",
        "description": "Increase in seasonal influenza cases reported in northern areas.",
        "latitude": 28.7041,
        "longitude": 77.1025,
        "precautions": [
            "Get vaccinated",
            "Wash hands frequently",
            "Avoid close contact with sick individuals",
            "Stay home if you feel unwell",
        ],
        "source": "Regional Health Department",
    },
    {
        "disease_name": "Dengue Outbreak",
        "severity": "high",
        "location": "Coastal Areas",
        "description": "Significant increase in dengue cases due to recent rainfall.",
        "latitude": 19.0760,
        "longitude": 72.8777,
        "precautions": [
            "Use mosquito repellent",
            "Remove standing water",
            "Wear long-sleeved clothing",
            "Seek medical attention for fever",
        ],
        "source": "Municipal Health Authority",
    },
)


def outbreak_to_dict(outbreak: DiseaseOutbreak) -> dict[str, Any]:
    return {
        "id": outbreak.id,
        "disease_name": outbreak.disease_name,
        "location": outbreak.location,
        "severity": outbreak.severity,
        "description": outbreak.description,
        "precautions": list(outbreak.precautions or []),
        "source": outbreak.source,
        "reported_at": as_utc(outbreak.reported_at).isoformat(),
        "is_active": outbreak.is_active,
        "latitude": outbreak.latitude,
        "longitude": outbreak.longitude,
    }


def format_sse(event: str, data: dict[str, Any]) -> str:
    return f"event: {event}\ndata: {json.dumps(data)}\n\n"


# ------------------------------------------------------------------
# Real-time channel
# ------------------------------------------------------------------

class OutbreakNotifier:
    """
    In-process publish/subscribe for newly inserted outbreaks.

    publish() may be called from any thread; each subscriber gets its own
    bounded queue on its own event loop. A subscriber that falls behind
    loses the oldest pending alerts, never the newest.
    """

    def __init__(self, queue_size: int = 100):
        self.queue_size = queue_size
        self._subscribers: set[tuple[asyncio.AbstractEventLoop, asyncio.Queue]] = set()
        self._lock = Lock()

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscribers)

    def publish(self, payload: dict[str, Any]) -> None:
        with self._lock:
            subscribers = list(self._subscribers)

        for loop, queue in subscribers:
            try:
                loop.call_soon_threadsafe(self._offer, queue, payload)
            except RuntimeError:
                # loop already closed; its generator cleanup will unregister it
                logger.debug("Dropping alert for a closed subscriber loop")

    @staticmethod
    def _offer(queue: asyncio.Queue, payload: dict[str, Any]) -> None:
        if queue.full():
            queue.get_nowait()
            logger.warning("Outbreak subscriber queue full, dropped oldest alert")
        queue.put_nowait(payload)

    async def subscribe(self) -> AsyncIterator[dict[str, Any]]:
        queue: asyncio.Queue = asyncio.Queue(maxsize=self.queue_size)
        entry = (asyncio.get_running_loop(), queue)

        with self._lock:
            self._subscribers.add(entry)
        try:
            while True:
                yield await queue.get()
        finally:
            with self._lock:
                self._subscribers.discard(entry)


outbreak_notifier = OutbreakNotifier()


# ------------------------------------------------------------------
# Queries and refresh job
# ------------------------------------------------------------------

def list_active_outbreaks(db: Session, limit: int = ACTIVE_ALERT_LIMIT) -> list[DiseaseOutbreak]:
    return (
        db.query(DiseaseOutbreak)
        .filter(DiseaseOutbreak.is_active.is_(True))
        .order_by(DiseaseOutbreak.reported_at.desc(), DiseaseOutbreak.id.desc())
        .limit(limit)
        .all()
    )


def refresh_health_alerts(
    db: Session,
    *,
    notifier: Optional[OutbreakNotifier] = None,
    now: Optional[datetime] = None,
) -> dict[str, Any]:
    """
    Deactivate alerts older than a week, then insert today's sample alerts
    unless something was already reported today.
    """
    now = now or utc_now()
    notifier = notifier or outbreak_notifier

    deactivated = (
        db.query(DiseaseOutbreak)
        .filter(
            DiseaseOutbreak.is_active.is_(True),
            DiseaseOutbreak.reported_at < now - ALERT_TTL,
        )
        .update({DiseaseOutbreak.is_active: False}, synchronize_session=False)
    )

    start_of_day = now.replace(hour=0, minute=0, second=0, microsecond=0)
    reported_today = (
        db.query(DiseaseOutbreak.id)
        .filter(
            DiseaseOutbreak.reported_at >= start_of_day,
            DiseaseOutbreak.reported_at < start_of_day + timedelta(days=1),
        )
        .first()
        is not None
    )

    inserted: list[DiseaseOutbreak] = []
    if not reported_today:
        for alert in SAMPLE_ALERTS:
            row = DiseaseOutbreak(**alert, is_active=True, reported_at=now)
            db.add(row)
            inserted.append(row)

    db.commit()

    for row in inserted:
        db.refresh(row)
        notifier.publish(outbreak_to_dict(row))

    logger.info("Health alerts refreshed: %d deactivated, %d inserted", deactivated, len(inserted))

    return {
        "success": True,
        "message": "Health alerts updated successfully",
        "deactivated": deactivated,
        "inserted": len(inserted),
    }
