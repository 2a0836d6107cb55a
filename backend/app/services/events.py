"""
backend/app/services/events.py

Change feed: pushes schedule/capacity changes to a Redis list so list and
calendar views can refresh without polling.

Queue: events:p2p, one JSON object per change.
"""

import json
import time
import logging

from ..redis_client import redis_client

logger = logging.getLogger(__name__)

EVENTS_QUEUE = "events:p2p"


def emit_event(event_type: str, payload: dict) -> None:
    """
    Emit a change event. Delivery failures are logged and swallowed:
    the write they describe has already been committed.
    """
    event = {
        "type": event_type,
        **payload,
        "ts": int(time.time()),
    }
    try:
        redis_client.rpush(EVENTS_QUEUE, json.dumps(event, ensure_ascii=False))
        logger.info(f"Event emitted: {event_type} → {EVENTS_QUEUE}")
    except Exception as e:
        logger.error(f"Failed to emit event {event_type}: {e}")
