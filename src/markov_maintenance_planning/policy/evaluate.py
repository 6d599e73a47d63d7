from __future__ import annotations

import itertools
import logging
import math
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import numpy as np
from joblib import Parallel, delayed

from markov_maintenance_planning.chain.transition import (
    effective_transition_matrix,
    validate_transition_matrix,
)
from markov_maintenance_planning.preprocessing.errors import InvalidPolicyLength
from markov_maintenance_planning.preprocessing.schema import CostModel, SimulationConfig
from markov_maintenance_planning.simulation.sampler import (
    GeneratorSampler,
    SamplerFactory,
    trial_seed_sequences,
)
from markov_maintenance_planning.simulation.trajectory import simulate_states, simulate_trial_cost

logger = logging.getLogger(__name__)

Policy = Tuple[int, ...]


@dataclass(frozen=True)
class EvaluationResult:
    policy: Policy
    mean_cost: float                # average cost per period over trials
    std_error: float
    trial_rates: Tuple[float, ...]

    @property
    def num_trials(self) -> int:
        return len(self.trial_rates)


def validate_policy(policy: Sequence[int], n_states: int) -> Policy:
    """Policy as a tuple of 0/1 flags, one per maintainable state (n_states - 2)."""
    raw = tuple(policy)
    expected = int(n_states) - 2
    if len(raw) != expected:
        raise InvalidPolicyLength(f"policy has {len(raw)} flags, expected {expected}")
    # check before int(): 0.7 must not truncate to 0
    if any(f not in (0, 1) for f in raw):
        raise InvalidPolicyLength(f"policy flags must be 0 or 1, got {raw}")
    return tuple(int(f) for f in raw)


def _check_inputs(policy, P, costs: CostModel, sim: SimulationConfig) -> Tuple[Policy, np.ndarray]:
    P = validate_transition_matrix(P)
    costs.check_states(P.shape[0])
    if not isinstance(sim, SimulationConfig):
        raise TypeError("sim must be a SimulationConfig")
    return validate_policy(policy, P.shape[0]), P


def _trial_rate(
    policy: Policy,
    P_eff: np.ndarray,
    costs: CostModel,
    horizon: int,
    seed_seq: np.random.SeedSequence,
    sampler_factory: SamplerFactory,
) -> float:
    sampler = sampler_factory(np.random.default_rng(seed_seq))
    total = simulate_trial_cost(policy, P_eff, costs, horizon, sampler)
    return total / horizon


def evaluate_policy_detailed(
    policy: Sequence[int],
    P,
    costs: CostModel,
    sim: SimulationConfig,
    sampler_factory: Optional[SamplerFactory] = None,
) -> EvaluationResult:
    """
    Monte Carlo estimate of the long-run cost per period of 'policy'.

    Trial i draws from child i of SeedSequence(sim.seed), so the estimate is
    reproducible for a given seed whatever sim.n_jobs is.
    """
    flags, P = _check_inputs(policy, P, costs, sim)
    factory = sampler_factory or GeneratorSampler
    P_eff = effective_transition_matrix(P, flags)
    children = trial_seed_sequences(sim.seed, sim.num_trials)

    if sim.n_jobs == 1:
        rates = [_trial_rate(flags, P_eff, costs, sim.horizon, c, factory) for c in children]
    else:
        rates = Parallel(n_jobs=sim.n_jobs)(
            delayed(_trial_rate)(flags, P_eff, costs, sim.horizon, c, factory) for c in children
        )

    arr = np.asarray(rates, dtype=float)
    mean = float(arr.mean())
    std_error = float(arr.std(ddof=1) / math.sqrt(len(arr))) if len(arr) > 1 else 0.0

    logger.debug("policy=%s seed=%d mean=%.4f se=%.4f", flags, sim.seed, mean, std_error)
    return EvaluationResult(policy=flags, mean_cost=mean, std_error=std_error, trial_rates=tuple(rates))


def evaluate_policy(
    policy: Sequence[int],
    P,
    costs: CostModel,
    sim: SimulationConfig,
    sampler_factory: Optional[SamplerFactory] = None,
) -> float:
    return evaluate_policy_detailed(policy, P, costs, sim, sampler_factory).mean_cost


def baseline_cost(P, costs: CostModel, sim: SimulationConfig) -> float:
    """Cost of never maintaining (all-zero policy)."""
    n = validate_transition_matrix(P).shape[0]
    return evaluate_policy(never_maintain(n), P, costs, sim)


def simulate_trajectory(
    policy: Sequence[int],
    P,
    length: int,
    seed: int = 0,
    sampler_factory: Optional[SamplerFactory] = None,
) -> np.ndarray:
    """
    One simulated state path (length + 1 entries) under 'policy', for plotting.
    Uses the same stream as trial 0 of an evaluation with the same seed.
    """
    P = validate_transition_matrix(P)
    flags = validate_policy(policy, P.shape[0])
    if int(length) < 1:
        raise ValueError(f"trajectory length must be >= 1, got {length}")

    factory = sampler_factory or GeneratorSampler
    child = trial_seed_sequences(seed, 1)[0]
    sampler = factory(np.random.default_rng(child))
    return simulate_states(flags, effective_transition_matrix(P, flags), length, sampler)


def never_maintain(n_states: int) -> Policy:
    return (0,) * (int(n_states) - 2)


def threshold_policy(n_states: int, threshold_state: int) -> Policy:
    """
    Control-limit policy:
    - preventive in every maintainable state >= threshold_state
    """
    if not (1 <= threshold_state <= n_states - 1):
        raise ValueError(f"threshold_state must be in 1..{n_states - 1}, got {threshold_state}")
    return tuple(1 if s >= threshold_state else 0 for s in range(1, n_states - 1))


def all_policies(n_states: int) -> List[Policy]:
    return [tuple(p) for p in itertools.product((0, 1), repeat=int(n_states) - 2)]
