from __future__ import annotations

from pathlib import Path

import numpy as np
import pytest

from markov_maintenance_planning.preprocessing.schema import CostModel, SimulationConfig

DATA_DIR = Path(__file__).resolve().parents[1] / "data" / "v1"


class FixedSampler:
    """Always draws the same state, whatever the row says."""

    def __init__(self, state: int):
        self.state = state

    def draw(self, row) -> int:
        return self.state


@pytest.fixture
def data_dir() -> Path:
    return DATA_DIR


@pytest.fixture
def reference_P() -> np.ndarray:
    return np.array(
        [
            [0.80, 0.15, 0.04, 0.01, 0.00],
            [0.00, 0.70, 0.20, 0.07, 0.03],
            [0.00, 0.00, 0.60, 0.28, 0.12],
            [0.00, 0.00, 0.00, 0.55, 0.45],
            [0.00, 0.00, 0.00, 0.00, 1.00],
        ]
    )


@pytest.fixture
def reference_costs() -> CostModel:
    return CostModel(
        preventive_cost=5.0,
        repair_cost_by_state=(0.0, 2.0, 8.0, 15.0, 50.0),
        production_loss_cost=20.0,
    )


@pytest.fixture
def small_sim() -> SimulationConfig:
    return SimulationConfig(num_trials=20, horizon=100, seed=123)
