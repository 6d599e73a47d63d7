import logging

import numpy as np

from markov_maintenance_planning.chain.analysis import absorption_diagnostics, mean_time_to_absorption
from markov_maintenance_planning.policy.evaluate import never_maintain, simulate_trajectory
from markov_maintenance_planning.preprocessing.loaders import load_scenario


def main() -> None:
    logging.basicConfig(level=logging.INFO)
    scenario = load_scenario("data/v1/scenarios/reference.json")
    P = scenario.transition_matrix

    diag = absorption_diagnostics(P)
    print("States:", scenario.n_states)
    print("Stationary distribution (unmanaged):", np.round(diag.stationary, 4))
    for s, t in enumerate(diag.time_to_absorption):
        print(f"state {s}: expected periods to failure = {t:.2f}")
    print("MTTF from best state:", round(mean_time_to_absorption(P, 0), 2))

    # Quick sample path of the unmanaged chain
    path = simulate_trajectory(never_maintain(scenario.n_states), P, scenario.trajectory_length, seed=123)
    failures = int(np.sum(path == scenario.n_states - 1))
    print(f"Sample path of {len(path) - 1} periods: {failures} failures")
    print("First 30 states:", path[:30].tolist())


if __name__ == "__main__":
    main()
