"""Tracing module: logs generator and solver steps and writes to CSV."""

import csv
from dataclasses import dataclass, asdict
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional


@dataclass
class TraceStep:
    """A single step in the generation process."""

    timestamp: float
    step_number: int
    action_type: str  # 'assign', 'propagate', 'backtrack', 'layout_split', 'retry', 'clue_kept', etc.
    cell: Optional[int] = None
    value: Optional[Any] = None
    option_count: Optional[int] = None
    filled_count: Optional[int] = None  # Number of cells filled at this point
    line: Optional[str] = None  # e.g. 'row 3' / 'column 0' for layout steps
    is_valid: Optional[bool] = None
    reason: Optional[str] = None


class Tracer:
    """Records generation steps for logging and analysis."""

    def __init__(self, enabled: bool = True):
        self.enabled = enabled
        self.steps: List[TraceStep] = []
        self.start_time = datetime.now().timestamp()
        self.step_counter = 0

    def _get_timestamp(self) -> float:
        """Get elapsed time in seconds since tracer creation."""
        return datetime.now().timestamp() - self.start_time

    def _record(self, action_type: str, **fields: Any) -> None:
        self.step_counter += 1
        self.steps.append(TraceStep(
            timestamp=self._get_timestamp(),
            step_number=self.step_counter,
            action_type=action_type,
            **fields,
        ))

    def log_assign(self, cell: int, value: int, option_count: int, filled_count: int):
        """Log a branching assignment made by the solver."""
        if not self.enabled:
            return
        self._record('assign', cell=cell, value=value, option_count=option_count, filled_count=filled_count)

    def log_propagation(self, forced: int, filled_count: int):
        """Log a propagation pass that committed forced cells."""
        if not self.enabled:
            return
        self._record(
            'propagate',
            filled_count=filled_count,
            reason=f"Committed {forced} forced cells",
        )

    def log_backtrack(self, cell: int, reason: str = "No valid values"):
        """Log a backtrack event."""
        if not self.enabled:
            return
        self._record('backtrack', cell=cell, reason=reason)

    def log_solution_found(self, filled_count: int):
        """Log when a full assignment is found."""
        if not self.enabled:
            return
        self._record('solution_found', filled_count=filled_count)

    def log_layout_split(self, line: str, split: Any, is_valid: bool):
        """Log a candidate two-way split tried by the layout generator."""
        if not self.enabled:
            return
        self._record('layout_split', line=line, value=str(split), is_valid=is_valid)

    def log_layout_backtrack(self, line: str):
        """Log the layout generator giving up on a line."""
        if not self.enabled:
            return
        self._record('layout_backtrack', line=line, reason="All splits exhausted")

    def log_clue(self, cell: int, value: int, kept: bool):
        """Log the minimizer's decision for a single cell."""
        if not self.enabled:
            return
        self._record('clue_kept' if kept else 'clue_removed', cell=cell, value=value)

    def log_retry(self, attempt: int, reason: str):
        """Log a discarded layout/solve attempt."""
        if not self.enabled:
            return
        self._record('retry', value=attempt, reason=reason)

    def to_csv(self, filepath: Path) -> None:
        """Write trace to CSV file."""
        if not self.steps:
            print("No trace steps to write")
            return

        filepath = Path(filepath)
        filepath.parent.mkdir(parents=True, exist_ok=True)

        fieldnames = [
            'timestamp', 'step_number', 'action_type', 'cell', 'value',
            'option_count', 'filled_count', 'line', 'is_valid', 'reason'
        ]

        with open(filepath, 'w', newline='', encoding='utf-8') as f:
            writer = csv.DictWriter(f, fieldnames=fieldnames)
            writer.writeheader()
            for step in self.steps:
                writer.writerow(asdict(step))

        print(f"Trace written to {filepath} ({len(self.steps)} steps)")

    def summary(self) -> Dict[str, Any]:
        """Get a summary of the trace."""
        action_counts: Dict[str, int] = {}
        for step in self.steps:
            action_counts[step.action_type] = action_counts.get(step.action_type, 0) + 1

        return {
            'total_steps': len(self.steps),
            'elapsed_time_seconds': self._get_timestamp(),
            'action_counts': action_counts,
            'num_assignments': action_counts.get('assign', 0),
            'num_backtracks': action_counts.get('backtrack', 0),
            'num_retries': action_counts.get('retry', 0),
        }


# Global tracer instance
_global_tracer: Optional[Tracer] = None


def get_tracer() -> Tracer:
    """Get or create the global tracer."""
    global _global_tracer
    if _global_tracer is None:
        _global_tracer = Tracer(enabled=True)
    return _global_tracer


def reset_tracer() -> None:
    """Reset the global tracer."""
    global _global_tracer
    _global_tracer = None


def enable_tracing(enabled: bool = True) -> None:
    """Enable or disable tracing."""
    get_tracer().enabled = enabled
