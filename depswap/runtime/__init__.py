"""Runtime collaborators of the rewrite engine."""

from depswap.runtime.eventbus import Event, EventBus, EventType
from depswap.runtime.scheduler import (
    BuildPlan,
    BuildRequest,
    BuildScheduler,
    CollectingScheduler,
)

__all__ = [
    "BuildPlan",
    "BuildRequest",
    "BuildScheduler",
    "CollectingScheduler",
    "Event",
    "EventBus",
    "EventType",
]
