from __future__ import annotations

import json
from pathlib import Path

import numpy as np

from markov_maintenance_planning.chain.transition import validate_transition_matrix
from markov_maintenance_planning.preprocessing.schema import CostModel, GAConfig, Scenario, SimulationConfig


def load_json(path: str | Path) -> dict:
    path = Path(path)
    with open(path, "r") as f:
        return json.load(f)


def load_transition_matrix(path: str | Path) -> np.ndarray:
    """JSON file holding either a bare list of rows or {"transition_matrix": rows}."""
    data = load_json(path)
    rows = data["transition_matrix"] if isinstance(data, dict) else data
    return validate_transition_matrix(rows)


def load_scenario(path: str | Path) -> Scenario:
    """
    Load a maintenance planning scenario.
    Scenario JSON must contain:
        - transition_matrix (rows) or transition_matrix_file
        - costs
        - simulation
        - ga
    Optional:
        - trajectory_length (default 100)
    """
    path = Path(path)
    data = load_json(path)

    if "transition_matrix_file" in data:
        # Resolve matrix file relative to scenario file
        matrix_path = Path(data["transition_matrix_file"])
        if not matrix_path.is_absolute():
            matrix_path = path.parent / matrix_path
        P = load_transition_matrix(matrix_path)
    else:
        P = validate_transition_matrix(data["transition_matrix"])

    c = data["costs"]
    costs = CostModel.from_sequence(
        preventive_cost=c["preventive_cost"],
        repair_cost_by_state=c["repair_cost_by_state"],
        production_loss_cost=c["production_loss_cost"],
    )
    costs.check_states(P.shape[0])

    s = data["simulation"]
    simulation = SimulationConfig(
        num_trials=int(s["num_trials"]),
        horizon=int(s["horizon"]),
        seed=int(s.get("seed", 0)),
        n_jobs=int(s.get("n_jobs", 1)),
    )

    g = data["ga"]
    ga = GAConfig(
        population_size=int(g["population_size"]),
        num_generations=int(g["num_generations"]),
        mutation_rate=float(g["mutation_rate"]),
        simulation=simulation,
        seed=int(g.get("seed", 42)),
        n_jobs=int(g.get("n_jobs", 1)),
        common_random_numbers=bool(g.get("common_random_numbers", True)),
    )

    trajectory_length = int(data.get("trajectory_length", 100))
    if trajectory_length < 1:
        raise ValueError("trajectory_length must be >= 1")

    return Scenario(
        transition_matrix=P,
        costs=costs,
        ga=ga,
        trajectory_length=trajectory_length,
    )
