from __future__ import annotations

from typing import List, Sequence, Tuple

import numpy as np

from markov_maintenance_planning.chain.transition import BEST_STATE
from markov_maintenance_planning.policy.costs import failure_cost, maintenance_cost
from markov_maintenance_planning.preprocessing.schema import CostModel
from markov_maintenance_planning.simulation.sampler import Sampler

NO_EVENT = 0
PREVENTIVE = 1
FAILURE = 2


def _maintained_mask(policy: Sequence[int], n_states: int) -> List[bool]:
    """mask[s] is True if state s is maintained under policy (policy[k] -> state k+1)."""
    mask = [False] * n_states
    for k, flag in enumerate(policy):
        mask[k + 1] = bool(flag)
    return mask


def step(
    state: int,
    maintained: List[bool],
    rows: List[List[float]],
    sampler: Sampler,
) -> Tuple[int, int]:
    """
    Advance one period from 'state'.

    Returns (drawn_state, event):
      - maintained state: (BEST_STATE, PREVENTIVE), no random draw
      - failure drawn:    (failed_state, FAILURE), caller resets to BEST_STATE
      - otherwise:        (drawn_state, NO_EVENT)
    """
    if maintained[state]:
        return BEST_STATE, PREVENTIVE

    nxt = sampler.draw(rows[state])
    if nxt == len(rows) - 1:
        return nxt, FAILURE
    return nxt, NO_EVENT


def simulate_trial_cost(
    policy: Sequence[int],
    P_eff: np.ndarray,
    costs: CostModel,
    horizon: int,
    sampler: Sampler,
) -> float:
    """
    Total cost of one trial of 'horizon' periods starting in BEST_STATE.
    A failure is repaired in the same period: the asset restarts in BEST_STATE.
    """
    n = P_eff.shape[0]
    rows = P_eff.tolist()
    maintained = _maintained_mask(policy, n)

    total = 0.0
    state = BEST_STATE
    for _ in range(int(horizon)):
        nxt, event = step(state, maintained, rows, sampler)
        if event == PREVENTIVE:
            total += maintenance_cost(costs)
            state = BEST_STATE
        elif event == FAILURE:
            total += failure_cost(costs, state)
            state = BEST_STATE
        else:
            state = nxt
    return total


def simulate_states(
    policy: Sequence[int],
    P_eff: np.ndarray,
    length: int,
    sampler: Sampler,
) -> np.ndarray:
    """
    State sequence of one trial, shape (length + 1,), states[0] = BEST_STATE.

    A failure period is recorded as the failed state; the following period
    starts from BEST_STATE (repaired). Draws match simulate_trial_cost for the
    same sampler stream.
    """
    n = P_eff.shape[0]
    rows = P_eff.tolist()
    maintained = _maintained_mask(policy, n)

    states = np.empty(int(length) + 1, dtype=int)
    states[0] = BEST_STATE
    state = BEST_STATE
    for t in range(int(length)):
        nxt, event = step(state, maintained, rows, sampler)
        states[t + 1] = nxt
        state = BEST_STATE if event == FAILURE else nxt
    return states
