from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence, Tuple

import numpy as np

from markov_maintenance_planning.preprocessing.errors import (
    InvalidCostModel,
    InvalidOptimizerConfig,
    InvalidSimulationConfig,
)


def _non_negative(name: str, value: float) -> float:
    value = float(value)
    if math.isnan(value) or value < 0.0:
        raise InvalidCostModel(f"{name} must be >= 0, got {value}")
    return value


@dataclass(frozen=True)
class CostModel:
    """
    Costs charged by the simulator.

    repair_cost_by_state[s] is paid when the asset fails while in state s
    (the state it was in before the failure transition), on top of
    production_loss_cost.
    """
    preventive_cost: float
    repair_cost_by_state: Tuple[float, ...]
    production_loss_cost: float

    def __post_init__(self) -> None:
        repair = tuple(
            _non_negative(f"repair_cost_by_state[{i}]", c)
            for i, c in enumerate(self.repair_cost_by_state)
        )
        if not repair:
            raise InvalidCostModel("repair_cost_by_state must not be empty")
        # frozen: bypass __setattr__ to store the normalised values
        object.__setattr__(self, "repair_cost_by_state", repair)
        object.__setattr__(self, "preventive_cost", _non_negative("preventive_cost", self.preventive_cost))
        object.__setattr__(
            self, "production_loss_cost", _non_negative("production_loss_cost", self.production_loss_cost)
        )

    @property
    def n_states(self) -> int:
        return len(self.repair_cost_by_state)

    def check_states(self, n_states: int) -> None:
        if self.n_states != int(n_states):
            raise InvalidCostModel(
                f"repair_cost_by_state has {self.n_states} entries, chain has {n_states} states"
            )

    @classmethod
    def from_sequence(
        cls,
        preventive_cost: float,
        repair_cost_by_state: Sequence[float],
        production_loss_cost: float,
    ) -> "CostModel":
        return cls(float(preventive_cost), tuple(repair_cost_by_state), float(production_loss_cost))


@dataclass(frozen=True)
class SimulationConfig:
    num_trials: int
    horizon: int                # periods per trial
    seed: int = 0
    n_jobs: int = 1             # joblib workers over trials

    def __post_init__(self) -> None:
        if int(self.num_trials) != self.num_trials or self.num_trials < 1:
            raise InvalidSimulationConfig(f"num_trials must be a positive integer, got {self.num_trials}")
        if int(self.horizon) != self.horizon or self.horizon < 1:
            raise InvalidSimulationConfig(f"horizon must be a positive integer, got {self.horizon}")
        if self.n_jobs == 0:
            raise InvalidSimulationConfig("n_jobs must be non-zero")

    def with_seed(self, seed: int) -> "SimulationConfig":
        return SimulationConfig(
            num_trials=self.num_trials,
            horizon=self.horizon,
            seed=int(seed),
            n_jobs=self.n_jobs,
        )


@dataclass(frozen=True)
class GAConfig:
    population_size: int
    num_generations: int
    mutation_rate: float
    simulation: SimulationConfig
    seed: int = 42              # stream for initialisation, crossover and mutation
    n_jobs: int = 1             # joblib workers over individuals
    common_random_numbers: bool = True

    def __post_init__(self) -> None:
        if int(self.population_size) != self.population_size or self.population_size < 2:
            raise InvalidOptimizerConfig(
                f"population_size must be an integer >= 2, got {self.population_size}"
            )
        if int(self.num_generations) != self.num_generations or self.num_generations < 1:
            raise InvalidOptimizerConfig(
                f"num_generations must be an integer >= 1, got {self.num_generations}"
            )
        if not (0.0 <= float(self.mutation_rate) <= 1.0):
            raise InvalidOptimizerConfig(f"mutation_rate must be in [0, 1], got {self.mutation_rate}")
        if self.n_jobs == 0:
            raise InvalidOptimizerConfig("n_jobs must be non-zero")
        if not isinstance(self.simulation, SimulationConfig):
            raise InvalidOptimizerConfig("simulation must be a SimulationConfig")


@dataclass(frozen=True, eq=False)
class Scenario:
    transition_matrix: np.ndarray
    costs: CostModel
    ga: GAConfig
    trajectory_length: int = 100

    @property
    def n_states(self) -> int:
        return int(self.transition_matrix.shape[0])

    @property
    def simulation(self) -> SimulationConfig:
        return self.ga.simulation
