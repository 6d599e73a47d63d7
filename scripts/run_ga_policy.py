# scripts/run_ga_policy.py

from __future__ import annotations

import logging

from markov_maintenance_planning.chain.analysis import mean_time_to_absorption
from markov_maintenance_planning.policy.evaluate import baseline_cost, simulate_trajectory
from markov_maintenance_planning.preprocessing.loaders import load_scenario
from markov_maintenance_planning.solvers.ga_truncation import optimize


def main() -> None:
    logging.basicConfig(level=logging.INFO)
    scenario = load_scenario("data/v1/scenarios/reference.json")

    P = scenario.transition_matrix
    sim = scenario.simulation
    print("States:", scenario.n_states, "Trials:", sim.num_trials, "Horizon:", sim.horizon)
    print("MTTF from best state (no maintenance):", round(mean_time_to_absorption(P, 0), 2))

    res = optimize(P, scenario.costs, scenario.ga)

    print("\n=== Best cost per generation ===")
    for g, c in enumerate(res.trace):
        print(f"generation {g:02d}: {c:.4f}")

    base = baseline_cost(P, scenario.costs, sim)
    print("\nBest policy (flag per state 1..n-2):", res.best_policy)
    print("GA cost per period:      ", round(res.best_cost, 4))
    print("Never-maintain baseline: ", round(base, 4))
    print("Saving per period:       ", round(base - res.best_cost, 4))

    path = simulate_trajectory(res.best_policy, P, scenario.trajectory_length, seed=sim.seed)
    print("\nTrajectory under best policy (first 30):", path[:30].tolist())


if __name__ == "__main__":
    main()
