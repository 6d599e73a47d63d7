from __future__ import annotations

import logging

from markov_maintenance_planning.policy.evaluate import evaluate_policy_detailed
from markov_maintenance_planning.preprocessing.loaders import load_scenario
from markov_maintenance_planning.solvers.exhaustive import solve_exhaustive
from markov_maintenance_planning.solvers.ga_mealpy import solve_ga_mealpy
from markov_maintenance_planning.solvers.ga_truncation import optimize


def main() -> None:
    logging.basicConfig(level=logging.WARNING)
    scenario = load_scenario("data/v1/scenarios/reference.json")

    P = scenario.transition_matrix
    costs = scenario.costs
    sim = scenario.simulation

    print("States:", scenario.n_states, ", Policy bits:", scenario.n_states - 2)
    print("Trials:", sim.num_trials, "Horizon:", sim.horizon, "Seed:", sim.seed)
    print()

    # Same seed everywhere -> common random numbers -> fair comparison

    # --- Exhaustive (ground truth under this seed) ---
    exact, table = solve_exhaustive(P, costs, sim)

    # --- Truncation GA ---
    ga = optimize(P, costs, scenario.ga)

    # --- GA (MEALPY) ---
    mp = solve_ga_mealpy(
        P,
        costs,
        sim,
        seed=scenario.ga.seed,
        epoch=scenario.ga.num_generations,
        pop_size=scenario.ga.population_size,
        pc=0.9,
        pm=scenario.ga.mutation_rate,
    )

    print("=== RESULTS ===")
    print(f"Exhaustive:     {exact.best_policy}  cost={exact.best_cost:.4f}  evals={exact.n_evaluations}")
    print(f"Truncation GA:  {ga.best_policy}  cost={ga.best_cost:.4f}  evals={ga.n_evaluations}")
    if mp is None:
        print("MEALPY GA: No solution returned")
    else:
        print(f"MEALPY GA:      {mp.best_policy}  cost={mp.best_cost:.4f}  evals={mp.n_evaluations}")
    print()

    print("All policies (sorted by cost):")
    for policy, cost in sorted(table.items(), key=lambda kv: kv[1]):
        res = evaluate_policy_detailed(policy, P, costs, sim)
        marker = "  <- best" if policy == exact.best_policy else ""
        print(f"  {policy}: {cost:.4f} +/- {1.96 * res.std_error:.4f}{marker}")


if __name__ == "__main__":
    main()
