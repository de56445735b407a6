"""Build scheduling boundary.

A cache miss does not build anything during the rewrite. It becomes a
``BuildRequest`` collected in a ``BuildPlan``; once the traversal has
finished the plan is handed to whatever ``BuildScheduler`` the host
provides. Dispatch is fire-and-forget.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterator, List, Protocol

from depswap.registry import ModuleRecord

logger = logging.getLogger("depswap.runtime.scheduler")


class BuildScheduler(Protocol):
    """Receives modules whose artifact has to be (re)built.

    Implementations should tolerate repeated calls for the same module.
    """

    def schedule_build(self, record: ModuleRecord) -> None:
        ...


@dataclass(frozen=True)
class BuildRequest:
    """One observed cache miss.

    Attributes:
        record: Module whose artifact is stale or missing.
        requested_by: Path of the project whose edge hit the miss.
        configuration: Configuration that declared the edge.
    """

    record: ModuleRecord
    requested_by: str
    configuration: str

    @property
    def module(self) -> str:
        return self.record.name


class BuildPlan:
    """Ordered build requests, one per module.

    Every observed request is kept in ``requests``; ``modules`` holds each
    module once, in first-seen order.
    """

    def __init__(self) -> None:
        self.requests: List[BuildRequest] = []
        self._modules: Dict[str, ModuleRecord] = {}

    def add(self, request: BuildRequest) -> bool:
        """Record a request. Returns True when the module is new to the plan."""
        self.requests.append(request)
        if request.module in self._modules:
            return False
        self._modules[request.module] = request.record
        return True

    @property
    def modules(self) -> List[ModuleRecord]:
        return list(self._modules.values())

    def dispatch(self, scheduler: BuildScheduler) -> int:
        """Hand every planned module to ``scheduler`` once.

        Returns:
            int: Number of modules dispatched.
        """
        for record in self._modules.values():
            logger.info("Scheduling artifact build for %s", record.obtain_name())
            scheduler.schedule_build(record)
        return len(self._modules)

    def __iter__(self) -> Iterator[ModuleRecord]:
        return iter(self.modules)

    def __len__(self) -> int:
        return len(self._modules)

    def __contains__(self, module: object) -> bool:
        if isinstance(module, ModuleRecord):
            return module.name in self._modules
        return module in self._modules


class CollectingScheduler:
    """Scheduler that only remembers what it was asked to build."""

    def __init__(self) -> None:
        self.scheduled: List[ModuleRecord] = []

    def schedule_build(self, record: ModuleRecord) -> None:
        self.scheduled.append(record)


__all__ = ["BuildPlan", "BuildRequest", "BuildScheduler", "CollectingScheduler"]
