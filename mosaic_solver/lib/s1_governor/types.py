"""Types pour le module s1_governor."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Callable, Dict, Mapping, Optional

from mosaic_solver.config import GOVERNOR_CONFIG

ProgressCallback = Callable[[float, int, int], None]


class TripKind(str, Enum):
    """Raison d'un arrêt forcé par le gouverneur."""
    TIMEOUT = "TIMEOUT"
    OPERATION_CAP = "OPERATION_CAP"
    DEPTH_CAP = "DEPTH_CAP"
    CANCELLED = "CANCELLED"


@dataclass(frozen=True)
class GovernorLimits:
    """Seuils du gouverneur pour une exécution."""
    time_budget_ms: float = GOVERNOR_CONFIG['time_budget_ms']
    max_depth: int = GOVERNOR_CONFIG['max_depth']
    max_operations: int = GOVERNOR_CONFIG['max_operations']

    def __post_init__(self):
        for name in ("time_budget_ms", "max_depth", "max_operations"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} doit être strictement positif")

    @classmethod
    def from_config(cls, config: Optional[Mapping[str, Any]] = None) -> "GovernorLimits":
        config = config or {}
        return cls(
            time_budget_ms=config.get("time_budget_ms", GOVERNOR_CONFIG['time_budget_ms']),
            max_depth=config.get("max_depth", GOVERNOR_CONFIG['max_depth']),
            max_operations=config.get("max_operations", GOVERNOR_CONFIG['max_operations']),
        )


@dataclass
class RunStats:
    """Compteurs d'une exécution."""
    deduction_passes: int = 0
    search_nodes: int = 0
    backtracks: int = 0
    arc_revisions: int = 0
    max_depth_reached: int = 0
    operations: int = 0
    elapsed_ms: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
