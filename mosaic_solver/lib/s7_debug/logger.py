"""Logger structuré des exécutions du solveur (JSONL)."""

import json
from dataclasses import dataclass, asdict
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional, Any


@dataclass
class RunLog:
    """Log d'une exécution solve()."""
    timestamp: str
    rows: int
    cols: int
    clue_count: int
    reason: str
    trip_kind: Optional[str]
    duration_ms: float
    deduction_passes: int
    search_nodes: int
    backtracks: int
    resolved: int
    total: int


@dataclass
class StepLog:
    """Log d'une avancée de session pas à pas."""
    timestamp: str
    iteration: int
    filled_count: int
    emptied_count: int
    complete: bool
    inconsistent: bool


class RunLogger:
    """Logger structuré des exécutions et des sessions pas à pas."""

    def __init__(self, log_dir: str = "logs"):
        self.log_dir = Path(log_dir)
        self.log_dir.mkdir(parents=True, exist_ok=True)
        self.session_id = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
        self.runs: List[RunLog] = []
        self.steps: List[StepLog] = []

    def log_run(
        self,
        rows: int,
        cols: int,
        clue_count: int,
        reason: str,
        duration_ms: float,
        trip_kind: Optional[str] = None,
        deduction_passes: int = 0,
        search_nodes: int = 0,
        backtracks: int = 0,
        resolved: int = 0,
        total: int = 0,
    ) -> None:
        """Log une exécution."""
        log = RunLog(
            timestamp=datetime.now().isoformat(),
            rows=rows,
            cols=cols,
            clue_count=clue_count,
            reason=reason,
            trip_kind=trip_kind,
            duration_ms=duration_ms,
            deduction_passes=deduction_passes,
            search_nodes=search_nodes,
            backtracks=backtracks,
            resolved=resolved,
            total=total,
        )
        self.runs.append(log)
        self._write_log("runs", asdict(log))

    def log_step(
        self,
        iteration: int,
        filled_count: int,
        emptied_count: int,
        complete: bool,
        inconsistent: bool = False,
    ) -> None:
        """Log une avancée pas à pas."""
        log = StepLog(
            timestamp=datetime.now().isoformat(),
            iteration=iteration,
            filled_count=filled_count,
            emptied_count=emptied_count,
            complete=complete,
            inconsistent=inconsistent,
        )
        self.steps.append(log)
        self._write_log("steps", asdict(log))

    def save_session(self) -> str:
        """Sauvegarde la session complète."""
        session_file = self.log_dir / f"session_{self.session_id}.json"
        data = {
            "session_id": self.session_id,
            "total_runs": len(self.runs),
            "total_steps": len(self.steps),
            "runs": [asdict(r) for r in self.runs],
            "steps": [asdict(s) for s in self.steps],
        }
        with open(session_file, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
        return str(session_file)

    def get_summary(self) -> Dict[str, Any]:
        """Retourne un résumé de la session."""
        by_reason: Dict[str, int] = {}
        for run in self.runs:
            by_reason[run.reason] = by_reason.get(run.reason, 0) + 1

        return {
            "session_id": self.session_id,
            "runs": len(self.runs),
            "steps": len(self.steps),
            "by_reason": by_reason,
            "total_search_nodes": sum(r.search_nodes for r in self.runs),
            "total_duration_ms": sum(r.duration_ms for r in self.runs),
        }

    def _write_log(self, log_type: str, data: Dict[str, Any]) -> None:
        """Écrit un log dans un fichier."""
        log_file = self.log_dir / f"{log_type}_{self.session_id}.jsonl"
        with open(log_file, "a", encoding="utf-8") as f:
            f.write(json.dumps(data, ensure_ascii=False) + "\n")
