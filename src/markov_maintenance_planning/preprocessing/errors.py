from __future__ import annotations


class MaintenancePlanningError(ValueError):
    """Base class for every validation failure raised by the planner."""


class InvalidTransitionMatrix(MaintenancePlanningError):
    """Matrix is not square, has negative entries, a row not summing to 1,
    or a last row that is not absorbing."""


class InvalidCostModel(MaintenancePlanningError):
    pass


class InvalidPolicyLength(MaintenancePlanningError):
    """Policy length differs from n_states - 2 or a flag is not 0/1."""


class SingularFundamentalMatrix(MaintenancePlanningError):
    """I - Q cannot be inverted: some transient state never reaches failure."""


class InvalidSimulationConfig(MaintenancePlanningError):
    pass


class InvalidOptimizerConfig(MaintenancePlanningError):
    pass
