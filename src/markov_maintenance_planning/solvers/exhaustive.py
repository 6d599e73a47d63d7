from __future__ import annotations

import logging
from typing import Dict, Optional, Tuple

from markov_maintenance_planning.chain.transition import validate_transition_matrix
from markov_maintenance_planning.policy.evaluate import Policy, all_policies
from markov_maintenance_planning.preprocessing.schema import CostModel, SimulationConfig
from markov_maintenance_planning.simulation.sampler import SamplerFactory
from markov_maintenance_planning.solvers.ga_truncation import evaluate_population
from markov_maintenance_planning.solvers.result import OptimizationResult

logger = logging.getLogger(__name__)

MAX_POLICY_BITS = 16


def solve_exhaustive(
    P,
    costs: CostModel,
    sim: SimulationConfig,
    n_jobs: int = 1,
    sampler_factory: Optional[SamplerFactory] = None,
) -> Tuple[OptimizationResult, Dict[Policy, float]]:
    """
    Evaluate all 2^(n-2) policies with the same seed (common random numbers).

    Returns the best policy as an OptimizationResult (trace = cost of each
    policy in enumeration order) and the full cost table.
    Only meant for small chains; refuses more than MAX_POLICY_BITS flags.
    """
    P = validate_transition_matrix(P)
    costs.check_states(P.shape[0])
    if P.shape[0] - 2 > MAX_POLICY_BITS:
        raise ValueError(f"{P.shape[0] - 2} policy flags is too many to enumerate (max {MAX_POLICY_BITS})")

    policies = all_policies(P.shape[0])
    population = evaluate_population(policies, P, costs, sim, n_jobs=n_jobs, sampler_factory=sampler_factory)

    table = {ind.policy: ind.fitness for ind in population}
    best = min(population, key=lambda ind: ind.fitness)
    logger.info("exhaustive: %d policies, best=%s cost=%.4f", len(population), best.policy, best.fitness)

    result = OptimizationResult(
        best_policy=best.policy,
        best_cost=best.fitness,
        trace=[ind.fitness for ind in population],
        n_evaluations=len(population),
    )
    return result, table
