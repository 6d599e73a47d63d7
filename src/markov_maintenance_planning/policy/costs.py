from __future__ import annotations

from markov_maintenance_planning.preprocessing.schema import CostModel


def failure_cost(costs: CostModel, state: int) -> float:
    """
    Cost of failing out of 'state' (the pre-failure condition):
    C = repair_cost_by_state[state] + production_loss_cost
    """
    return float(costs.repair_cost_by_state[state] + costs.production_loss_cost)


def maintenance_cost(costs: CostModel) -> float:
    return float(costs.preventive_cost)
