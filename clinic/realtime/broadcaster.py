"""
Real-time slot notifications.

Connected WebSocket clients are held in a process-local ``ConnectionHub``.
A ``Broadcaster`` decides how an event reaches the hubs: ``LocalBroadcaster``
hands it straight to this process's hub, ``RedisBroadcaster`` publishes it on
a Redis channel that every instance relays into its own hub (see
``relay_from_redis``). Delivery is best-effort and nothing is replayed; clients
that reconnect re-fetch ``/booked-slots``.
"""
import asyncio
import datetime as dt
import json
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Set

import redis
import redis.asyncio as aioredis
from pydantic import BaseModel

from ..schemas.common import ClockTime

logger = logging.getLogger(__name__)

SLOT_BOOKED = "slot_booked"

class SlotBookedEvent(BaseModel):
    date: dt.date
    time: ClockTime
    doctor_id: int

    def to_message(self) -> Dict[str, Any]:
        return {"event": SLOT_BOOKED, "data": self.model_dump(mode="json")}


class Subscription:
    """One connected client: its event loop and outbound queue."""

    def __init__(self, loop: asyncio.AbstractEventLoop, max_pending: int):
        self.loop = loop
        self.queue: asyncio.Queue = asyncio.Queue(maxsize=max_pending)

    def offer(self, message: Dict[str, Any]) -> None:
        # Runs on the subscriber's loop; a client that stopped reading loses events
        try:
            self.queue.put_nowait(message)
        except asyncio.QueueFull:
            logger.warning("Dropping real-time event for slow subscriber")


class ConnectionHub:
    def __init__(self, max_pending: int = 100):
        self.max_pending = max_pending
        self._subscriptions: Set[Subscription] = set()

    def subscribe(self) -> Subscription:
        """Register a subscriber. Must be called from inside its event loop."""
        subscription = Subscription(asyncio.get_running_loop(), self.max_pending)
        self._subscriptions.add(subscription)
        return subscription

    def unsubscribe(self, subscription: Subscription) -> None:
        self._subscriptions.discard(subscription)

    @property
    def subscriber_count(self) -> int:
        return len(self._subscriptions)

    def dispatch(self, message: Dict[str, Any]) -> None:
        """Fan a message out to every subscriber without blocking.

        Safe to call from worker threads as well as from an event loop.
        """
        for subscription in tuple(self._subscriptions):
            try:
                subscription.loop.call_soon_threadsafe(subscription.offer, message)
            except RuntimeError:
                # Loop already closed; the client is gone
                self.unsubscribe(subscription)


class Broadcaster(ABC):
    """Publishes booking events. Failures are logged, never raised."""

    def publish(self, event: SlotBookedEvent) -> bool:
        message = event.to_message()
        try:
            self._send(message)
        except Exception:
            logger.exception(f"Failed to broadcast {message['event']}: {message['data']}")
            return False
        return True

    @abstractmethod
    def _send(self, message: Dict[str, Any]) -> None:
        """Hand one message to the transport. May raise."""


class LocalBroadcaster(Broadcaster):
    def __init__(self, hub: ConnectionHub):
        self.hub = hub

    def _send(self, message: Dict[str, Any]) -> None:
        self.hub.dispatch(message)


class RedisBroadcaster(Broadcaster):
    def __init__(self, redis_client: "redis.Redis", channel: str):
        self.redis_client = redis_client
        self.channel = channel

    def _send(self, message: Dict[str, Any]) -> None:
        self.redis_client.publish(self.channel, json.dumps(message))


def build_broadcaster(settings, hub: ConnectionHub) -> Broadcaster:
    """Create the broadcaster selected by ``BROADCAST_BACKEND``."""
    backend = settings.BROADCAST_BACKEND.lower()
    if backend == "redis":
        client = redis.from_url(settings.REDIS_URL, decode_responses=True)
        return RedisBroadcaster(client, settings.BROADCAST_CHANNEL)
    if backend == "local":
        return LocalBroadcaster(hub)
    raise ValueError(f"Unknown broadcast backend: {settings.BROADCAST_BACKEND}")


async def relay_from_redis(
    redis_url: str,
    channel: str,
    hub: ConnectionHub,
    retry_delay: float = 1.0,
    max_retry_delay: float = 30.0,
) -> None:
    """Forward messages from the shared Redis channel into this process's hub.

    Runs until cancelled. A lost or refused broker connection is logged and
    retried with exponential backoff; events published while disconnected are
    not recovered.
    """
    delay = retry_delay
    while True:
        client = aioredis.from_url(redis_url, decode_responses=True)
        pubsub = client.pubsub()
        try:
            await pubsub.subscribe(channel)
            logger.info(f"Relaying real-time events from Redis channel '{channel}'")
            delay = retry_delay
            async for item in pubsub.listen():
                if item.get("type") != "message":
                    continue
                try:
                    message = json.loads(item["data"])
                except (TypeError, ValueError):
                    logger.warning(f"Ignoring malformed event on '{channel}': {item['data']!r}")
                    continue
                hub.dispatch(message)
        except (redis.exceptions.ConnectionError, redis.exceptions.TimeoutError) as exc:
            logger.warning(
                f"Redis relay for '{channel}' disconnected ({exc}); retrying in {delay:.1f}s"
            )
        finally:
            await pubsub.aclose()
            await client.aclose()

        await asyncio.sleep(delay)
        delay = min(delay * 2, max_retry_delay)


def log_relay_exit(task: "asyncio.Task") -> None:
    """Done-callback for the relay task; the relay only ends on cancellation."""
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.error(f"Redis relay stopped: {exc!r}")


def start_relay(redis_url: str, channel: str, hub: ConnectionHub) -> "asyncio.Task":
    """Schedule ``relay_from_redis`` on the running loop."""
    task = asyncio.create_task(relay_from_redis(redis_url, channel, hub))
    task.add_done_callback(log_relay_exit)
    return task
