"""Contexte d'exécution : passé explicitement à chaque composant d'une exécution."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Callable, Optional

from .governor import ResourceGovernor
from .types import GovernorLimits, ProgressCallback, RunStats


@dataclass
class RunContext:
    """Gouverneur + callback de progression + statistiques d'une exécution."""
    governor: ResourceGovernor
    on_progress: Optional[ProgressCallback] = None
    stats: RunStats = field(default_factory=RunStats)

    @classmethod
    def create(
        cls,
        limits: Optional[GovernorLimits] = None,
        on_progress: Optional[ProgressCallback] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> "RunContext":
        return cls(governor=ResourceGovernor(limits, clock=clock), on_progress=on_progress)

    def tick(self) -> None:
        self.governor.tick()
        self.stats.operations = self.governor.operations

    def should_stop(self) -> bool:
        return self.governor.should_stop()

    def report_progress(self, resolved: int, total: int) -> None:
        if self.on_progress is None:
            return
        percent = 100.0 * resolved / total if total else 100.0
        self.on_progress(percent, resolved, total)

    def finish(self) -> RunStats:
        """Fige les compteurs du gouverneur dans les statistiques."""
        self.stats.operations = self.governor.operations
        self.stats.max_depth_reached = self.governor.max_depth_reached
        self.stats.elapsed_ms = self.governor.elapsed_ms
        return self.stats
