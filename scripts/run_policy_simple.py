from markov_maintenance_planning.chain.transition import generate_degradation_matrix
from markov_maintenance_planning.policy.evaluate import evaluate_policy_detailed, threshold_policy
from markov_maintenance_planning.preprocessing.schema import CostModel, SimulationConfig


def main() -> None:
    n_states = 5
    P = generate_degradation_matrix(p=0.25, n_states=n_states)

    costs = CostModel(
        preventive_cost=5.0,
        repair_cost_by_state=(0.0, 2.0, 8.0, 15.0, 50.0),
        production_loss_cost=20.0,
    )
    sim = SimulationConfig(num_trials=200, horizon=200, seed=7)

    for threshold in range(1, n_states):
        policy = threshold_policy(n_states, threshold)
        res = evaluate_policy_detailed(policy, P, costs, sim)
        print(f"threshold={threshold} policy={policy} cost/period={res.mean_cost:.3f} +/- {1.96 * res.std_error:.3f}")


if __name__ == "__main__":
    main()
