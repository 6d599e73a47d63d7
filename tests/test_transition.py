"""
Tests for transition matrix validation and the policy-modified chain.
"""
import numpy as np
import pytest

from markov_maintenance_planning.chain.transition import (
    BEST_STATE,
    ROW_SUM_TOL,
    effective_transition_matrix,
    failed_state,
    generate_degradation_matrix,
    maintainable_states,
    validate_transition_matrix,
)
from markov_maintenance_planning.preprocessing.errors import InvalidTransitionMatrix


class TestValidateTransitionMatrix:
    def test_reference_chain_is_valid(self, reference_P):
        P = validate_transition_matrix(reference_P.tolist())
        assert P.dtype == float
        assert P.shape == (5, 5)
        assert np.allclose(P.sum(axis=1), 1.0, atol=ROW_SUM_TOL)

    def test_returns_copy(self, reference_P):
        P = validate_transition_matrix(reference_P)
        P[0, 0] = 0.0
        assert reference_P[0, 0] == 0.80

    def test_row_sum_outside_tolerance(self, reference_P):
        """A drift of 1e-6 in a row sum is rejected."""
        P = reference_P.copy()
        P[1, 1] += 1e-6
        with pytest.raises(InvalidTransitionMatrix, match="row 1"):
            validate_transition_matrix(P)

    def test_row_sum_inside_tolerance(self, reference_P):
        P = reference_P.copy()
        P[1, 1] += 1e-12
        validate_transition_matrix(P)

    def test_not_square(self):
        with pytest.raises(InvalidTransitionMatrix, match="square"):
            validate_transition_matrix([[0.5, 0.5, 0.0], [0.0, 0.0, 1.0]])

    def test_too_few_states(self):
        with pytest.raises(InvalidTransitionMatrix, match="at least 3"):
            validate_transition_matrix([[0.5, 0.5], [0.0, 1.0]])

    def test_negative_entry(self):
        P = [[1.2, -0.2, 0.0], [0.0, 0.5, 0.5], [0.0, 0.0, 1.0]]
        with pytest.raises(InvalidTransitionMatrix, match="negative"):
            validate_transition_matrix(P)

    def test_non_numeric(self):
        with pytest.raises(InvalidTransitionMatrix):
            validate_transition_matrix([["a", "b", "c"], [0, 0, 1], [0, 0, 1]])

    def test_last_state_must_be_absorbing(self):
        """State n-1 is the failed state and must keep probability 1 on itself."""
        P = [[0.9, 0.1, 0.0], [0.0, 0.5, 0.5], [1.0, 0.0, 0.0]]
        with pytest.raises(InvalidTransitionMatrix, match="absorbing"):
            validate_transition_matrix(P)

    def test_errors_are_value_errors(self):
        with pytest.raises(ValueError):
            validate_transition_matrix([[1.0]])


class TestStateRoles:
    def test_roles(self):
        assert failed_state(5) == 4
        assert maintainable_states(5) == [1, 2, 3]
        assert maintainable_states(3) == [1]


class TestEffectiveMatrix:
    def test_maintained_rows_jump_to_best(self, reference_P):
        P_eff = effective_transition_matrix(reference_P, (0, 1, 0))
        assert P_eff[2].tolist() == [1.0, 0.0, 0.0, 0.0, 0.0]
        # untouched rows
        assert np.array_equal(P_eff[[0, 1, 3, 4]], reference_P[[0, 1, 3, 4]])

    def test_does_not_modify_input(self, reference_P):
        before = reference_P.copy()
        effective_transition_matrix(reference_P, (1, 1, 1))
        assert np.array_equal(reference_P, before)

    def test_all_maintained_stays_row_stochastic(self, reference_P):
        P_eff = effective_transition_matrix(reference_P, (1, 1, 1))
        validate_transition_matrix(P_eff)
        assert P_eff[4, 4] == 1.0
        assert all(P_eff[s, BEST_STATE] == 1.0 for s in (1, 2, 3))


class TestGenerateDegradationMatrix:
    def test_structure(self):
        P = generate_degradation_matrix(p=0.25, n_states=4)
        validate_transition_matrix(P)
        assert P[0, 0] == pytest.approx(0.75)
        assert P[0, 1] == pytest.approx(0.25)
        assert P[2, 3] == pytest.approx(0.25)
        assert P[3, 3] == 1.0

    @pytest.mark.parametrize("p", [0.0, -0.1, 1.5])
    def test_invalid_probability(self, p):
        with pytest.raises(InvalidTransitionMatrix):
            generate_degradation_matrix(p=p, n_states=5)
