from __future__ import annotations

from typing import List, Sequence

import numpy as np

from markov_maintenance_planning.preprocessing.errors import InvalidTransitionMatrix

ROW_SUM_TOL = 1e-9
BEST_STATE = 0


def validate_transition_matrix(P) -> np.ndarray:
    """
    Return P as a float array after checking it is a degradation chain:
      - square, at least 3 states (best, one maintainable, failed)
      - entries >= 0, every row sums to 1 within ROW_SUM_TOL
      - last state is absorbing (identity row)

    State 0 is the best condition, state n-1 the failed state.
    """
    try:
        P = np.array(P, dtype=float)
    except (TypeError, ValueError) as exc:
        raise InvalidTransitionMatrix(f"transition matrix is not numeric: {exc}") from exc

    if P.ndim != 2 or P.shape[0] != P.shape[1]:
        raise InvalidTransitionMatrix(f"transition matrix must be square, got shape {P.shape}")
    n = P.shape[0]
    if n < 3:
        raise InvalidTransitionMatrix(f"need at least 3 states, got {n}")
    if not np.all(np.isfinite(P)):
        raise InvalidTransitionMatrix("transition matrix contains non-finite entries")
    if np.any(P < 0.0):
        raise InvalidTransitionMatrix("transition matrix has negative entries")

    row_sums = P.sum(axis=1)
    bad = np.where(np.abs(row_sums - 1.0) > ROW_SUM_TOL)[0]
    if len(bad) > 0:
        i = int(bad[0])
        raise InvalidTransitionMatrix(f"row {i} sums to {row_sums[i]!r}, expected 1")

    failed = n - 1
    if abs(P[failed, failed] - 1.0) > ROW_SUM_TOL:
        raise InvalidTransitionMatrix(f"last state {failed} must be absorbing")

    return P


def failed_state(n_states: int) -> int:
    return int(n_states) - 1


def maintainable_states(n_states: int) -> List[int]:
    """States a policy flag refers to: all but the best and the failed one."""
    return list(range(1, int(n_states) - 1))


def effective_transition_matrix(P: np.ndarray, policy: Sequence[int]) -> np.ndarray:
    """
    Copy of P where every maintained state jumps to BEST_STATE with probability 1.
    policy[k] belongs to state k+1. The absorbing row is left untouched.
    """
    P_eff = np.array(P, dtype=float, copy=True)
    for state, flag in zip(maintainable_states(P_eff.shape[0]), policy):
        if flag:
            P_eff[state, :] = 0.0
            P_eff[state, BEST_STATE] = 1.0
    return P_eff


def generate_degradation_matrix(p: float, n_states: int) -> np.ndarray:
    """
    Upper bidiagonal chain: from each transient state degrade one step with
    probability p, otherwise stay. Last state absorbing.
    """
    if not (0.0 < p <= 1.0):
        raise InvalidTransitionMatrix(f"degradation probability must be in (0, 1], got {p}")
    if n_states < 3:
        raise InvalidTransitionMatrix(f"need at least 3 states, got {n_states}")

    P = np.eye(n_states)
    for h in range(n_states - 1):
        P[h, h] = 1.0 - p
        P[h, h + 1] = p
    return P
