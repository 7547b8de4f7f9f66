"""
backend/studio_booking/services/events.py

Event emitter: pushes appointment lifecycle events to a Redis queue
for consumption by the notification worker.

Queue: events:p2p (instant delivery)
"""

import json
import time
import logging

from .. import redis_client as redis_module
from .slots.timeutils import as_utc

logger = logging.getLogger(__name__)

P2P_QUEUE = "events:p2p"


def emit_event(event_type: str, payload: dict) -> None:
    """
    Emit a p2p event (instant delivery).

    Failures are logged and swallowed: a booking must not fail because
    the notification queue is down.
    """
    client = redis_module.redis_client
    if client is None:
        logger.debug(f"Redis not configured, event dropped: {event_type}")
        return

    event = {
        "type": event_type,
        **payload,
        "ts": int(time.time()),
    }
    try:
        client.rpush(P2P_QUEUE, json.dumps(event, default=str))
        logger.info(f"Event emitted: {event_type} → {P2P_QUEUE}")
    except Exception as e:
        logger.error(f"Failed to emit event {event_type}: {e}")


def appointment_payload(appt) -> dict:
    return {
        "appointment_id": appt.id,
        "staff_id": appt.staff_id,
        "client_name": appt.client_name,
        "start_time": as_utc(appt.start_time).isoformat(),
        "end_time": as_utc(appt.end_time).isoformat(),
        "status": appt.status,
    }
