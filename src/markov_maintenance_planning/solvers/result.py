from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple


@dataclass(frozen=True)
class OptimizationResult:
    best_policy: Tuple[int, ...]
    best_cost: float            # estimated cost per period
    trace: List[float]          # best cost per generation / epoch / candidate
    n_evaluations: int = 0
