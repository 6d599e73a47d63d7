from __future__ import annotations

import logging
from typing import Optional

import numpy as np
from mealpy import GA, BinaryVar, Problem

from markov_maintenance_planning.chain.transition import validate_transition_matrix
from markov_maintenance_planning.policy.evaluate import Policy, evaluate_policy
from markov_maintenance_planning.preprocessing.schema import CostModel, SimulationConfig
from markov_maintenance_planning.solvers.result import OptimizationResult

logger = logging.getLogger(__name__)


def _as_policy(solution) -> Policy:
    # MEALPY may pass floats; force 0/1 ints
    x = np.clip(np.rint(np.asarray(solution, dtype=float)), 0, 1).astype(int)
    return tuple(int(v) for v in x)


def solve_ga_mealpy(
    P,
    costs: CostModel,
    sim: SimulationConfig,
    seed: int = 42,
    epoch: int = 50,
    pop_size: int = 20,
    pc: float = 0.9,
    pm: float = 0.2,
) -> Optional[OptimizationResult]:
    """
    MEALPY GA solver for the same policy space as the truncation GA.

    Genome:
      x[k] in {0, 1}: preventive maintenance in state k+1

    Objective is the Monte Carlo cost per period with sim.seed fixed, so
    every candidate is compared under the same random numbers.

    Returns None if MEALPY produced no global best.
    """
    P = validate_transition_matrix(P)
    costs.check_states(P.shape[0])
    L = P.shape[0] - 2

    n_calls = 0

    class MaintenancePolicyProblem(Problem):
        def __init__(self):
            super().__init__(bounds=BinaryVar(n_vars=L, name="policy"), minmax="min", log_to=None)

        def obj_func(self, solution):
            nonlocal n_calls
            n_calls += 1
            return evaluate_policy(_as_policy(solution), P, costs, sim)

    problem = MaintenancePolicyProblem()

    model = GA.BaseGA(epoch=epoch, pop_size=pop_size, pc=pc, pm=pm)
    model.solve(problem, seed=seed)

    if model.g_best is None:
        return None

    best = _as_policy(model.g_best.solution)
    cost = evaluate_policy(best, P, costs, sim)
    trace = [float(f) for f in model.history.list_global_best_fit]

    logger.info("mealpy GA done: best=%s cost=%.4f objective calls=%d", best, cost, n_calls)
    return OptimizationResult(best_policy=best, best_cost=float(cost), trace=trace, n_evaluations=n_calls + 1)
