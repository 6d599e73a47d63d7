from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from markov_maintenance_planning.chain.transition import failed_state, validate_transition_matrix
from markov_maintenance_planning.preprocessing.errors import SingularFundamentalMatrix


@dataclass(frozen=True, eq=False)
class ChainDiagnostics:
    stationary: np.ndarray              # over all states
    time_to_absorption: np.ndarray      # per transient state 0..n-2

    @property
    def mttf_from_best(self) -> float:
        return float(self.time_to_absorption[0])


def stationary_distribution(P) -> np.ndarray:
    """
    Solve pi (P - I) = 0, sum(pi) = 1 as the stacked least-squares system

        [P^T - I]        [0]
        [1 ... 1 ] pi =  [1]

    With an absorbing state all mass ends up there: this only describes the
    unmanaged chain.
    """
    P = validate_transition_matrix(P)
    n = P.shape[0]

    A = np.vstack([P.T - np.eye(n), np.ones((1, n))])
    b = np.zeros(n + 1)
    b[-1] = 1.0

    pi, *_ = np.linalg.lstsq(A, b, rcond=None)
    pi = np.clip(pi, 0.0, None)  # drop round-off negatives
    return pi / pi.sum()


def fundamental_matrix(P) -> np.ndarray:
    """
    N = (I - Q)^-1 where Q is P restricted to the transient states.
    N[i, j] = expected visits to j starting from i before failure.
    """
    P = validate_transition_matrix(P)
    m = failed_state(P.shape[0])
    Q = P[:m, :m]
    A = np.eye(m) - Q

    if np.linalg.cond(A) > 1.0 / np.finfo(float).eps:
        raise SingularFundamentalMatrix("I - Q is singular: a transient state cannot reach failure")
    try:
        return np.linalg.inv(A)
    except np.linalg.LinAlgError as exc:
        raise SingularFundamentalMatrix(f"I - Q is singular: {exc}") from exc


def expected_time_to_absorption(P) -> np.ndarray:
    """Expected periods until failure, one value per transient state."""
    N = fundamental_matrix(P)
    return N.sum(axis=1)


def mean_time_to_absorption(P, initial_state: int = 0) -> float:
    t = expected_time_to_absorption(P)
    if not (0 <= initial_state < len(t)):
        raise ValueError(f"initial_state must be a transient state in 0..{len(t) - 1}, got {initial_state}")
    return float(t[initial_state])


def absorption_diagnostics(P) -> ChainDiagnostics:
    return ChainDiagnostics(
        stationary=stationary_distribution(P),
        time_to_absorption=expected_time_to_absorption(P),
    )
