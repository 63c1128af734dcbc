from .broadcaster import (
    Broadcaster,
    ConnectionHub,
    LocalBroadcaster,
    RedisBroadcaster,
    SlotBookedEvent,
    build_broadcaster,
    relay_from_redis,
    start_relay,
)

__all__ = [
    "Broadcaster",
    "ConnectionHub",
    "LocalBroadcaster",
    "RedisBroadcaster",
    "SlotBookedEvent",
    "build_broadcaster",
    "relay_from_redis",
    "start_relay",
]
