from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import numpy as np
from joblib import Parallel, delayed

from markov_maintenance_planning.chain.transition import validate_transition_matrix
from markov_maintenance_planning.policy.evaluate import Policy, evaluate_policy, validate_policy
from markov_maintenance_planning.preprocessing.schema import CostModel, GAConfig, SimulationConfig
from markov_maintenance_planning.simulation.sampler import SamplerFactory, generation_seed
from markov_maintenance_planning.solvers.result import OptimizationResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Individual:
    policy: Policy
    fitness: float              # estimated cost per period, lower is better


def random_policy(rng: np.random.Generator, length: int) -> Policy:
    return tuple(int(x) for x in rng.integers(0, 2, size=length))


def crossover(a: Sequence[int], b: Sequence[int], rng: np.random.Generator) -> Tuple[Policy, Policy]:
    """
    One-point crossover: cut at c in 1..L-1 and swap suffixes.
    Policies of length 1 have no cut point; the children are copies.
    """
    if len(a) != len(b):
        raise ValueError(f"parents differ in length: {len(a)} vs {len(b)}")
    L = len(a)
    if L < 2:
        return tuple(a), tuple(b)

    c = int(rng.integers(1, L))
    return tuple(a[:c]) + tuple(b[c:]), tuple(b[:c]) + tuple(a[c:])


def mutate(policy: Sequence[int], mutation_rate: float, rng: np.random.Generator) -> Policy:
    """With probability mutation_rate flip exactly one uniformly chosen bit."""
    child = list(policy)
    if rng.random() < mutation_rate:
        k = int(rng.integers(len(child)))
        child[k] = 1 - child[k]
    return tuple(child)


def select_survivors(population: Sequence[Individual]) -> List[Individual]:
    """Truncation selection: best half by fitness (stable sort), at least one."""
    ranked = sorted(population, key=lambda ind: ind.fitness)
    n_keep = max(1, len(ranked) // 2)
    return ranked[:n_keep]


def breed(
    survivors: Sequence[Policy],
    n_children: int,
    mutation_rate: float,
    rng: np.random.Generator,
) -> List[Policy]:
    """
    Pair survivors (0,1), (2,3), ...; an odd last survivor mates with itself.
    Pairs are cycled until n_children exist; surplus children are dropped.
    """
    if n_children <= 0:
        return []
    if not survivors:
        raise ValueError("cannot breed from an empty survivor set")

    pairs = [
        (survivors[i], survivors[i + 1] if i + 1 < len(survivors) else survivors[i])
        for i in range(0, len(survivors), 2)
    ]

    children: List[Policy] = []
    k = 0
    while len(children) < n_children:
        a, b = pairs[k % len(pairs)]
        children.extend(crossover(a, b, rng))
        k += 1

    return [mutate(c, mutation_rate, rng) for c in children[:n_children]]


def evaluate_population(
    policies: Sequence[Policy],
    P: np.ndarray,
    costs: CostModel,
    sim: SimulationConfig,
    n_jobs: int = 1,
    sampler_factory: Optional[SamplerFactory] = None,
) -> List[Individual]:
    """Fresh evaluation of every policy. Any evaluation error aborts the batch."""
    if n_jobs == 1:
        fitness = [evaluate_policy(p, P, costs, sim, sampler_factory) for p in policies]
    else:
        fitness = Parallel(n_jobs=n_jobs)(
            delayed(evaluate_policy)(p, P, costs, sim, sampler_factory) for p in policies
        )
    return [Individual(policy=tuple(p), fitness=float(f)) for p, f in zip(policies, fitness)]


class GeneticOptimizer:
    """
    Truncation-selection GA over binary maintenance policies.

    Each generation: evaluate -> keep best half -> one-point crossover ->
    one-bit mutation. The next population is survivors + children and always
    has exactly population_size members.

    With common_random_numbers every evaluation reuses simulation.seed, so a
    survivor keeps its fitness and the trace never increases.
    """

    def __init__(
        self,
        P,
        costs: CostModel,
        config: GAConfig,
        sampler_factory: Optional[SamplerFactory] = None,
    ):
        self.P = validate_transition_matrix(P)
        costs.check_states(self.P.shape[0])
        if not isinstance(config, GAConfig):
            raise TypeError("config must be a GAConfig")

        self.costs = costs
        self.config = config
        self.sampler_factory = sampler_factory
        self.policy_length = self.P.shape[0] - 2
        self.rng = np.random.default_rng(config.seed)
        self.n_evaluations = 0

    def _sim_for(self, generation: int) -> SimulationConfig:
        sim = self.config.simulation
        if self.config.common_random_numbers:
            return sim
        return sim.with_seed(generation_seed(sim.seed, generation))

    def _evaluate(self, policies: Sequence[Policy], generation: int) -> List[Individual]:
        self.n_evaluations += len(policies)
        return evaluate_population(
            policies,
            self.P,
            self.costs,
            self._sim_for(generation),
            n_jobs=self.config.n_jobs,
            sampler_factory=self.sampler_factory,
        )

    def initial_population(self) -> List[Policy]:
        return [random_policy(self.rng, self.policy_length) for _ in range(self.config.population_size)]

    def run(self, initial: Optional[Sequence[Sequence[int]]] = None) -> OptimizationResult:
        cfg = self.config
        if initial is None:
            policies = self.initial_population()
        else:
            policies = [validate_policy(p, self.P.shape[0]) for p in initial]
            if len(policies) != cfg.population_size:
                raise ValueError(
                    f"initial population has {len(policies)} members, expected {cfg.population_size}"
                )

        logger.info(
            "GA start: pop=%d generations=%d pm=%.3f trials=%d horizon=%d",
            cfg.population_size,
            cfg.num_generations,
            cfg.mutation_rate,
            cfg.simulation.num_trials,
            cfg.simulation.horizon,
        )

        trace: List[float] = []
        for g in range(cfg.num_generations):
            population = self._evaluate(policies, g)
            survivors = select_survivors(population)
            trace.append(survivors[0].fitness)
            logger.debug("generation %d best=%.4f policy=%s", g, survivors[0].fitness, survivors[0].policy)

            parents = [ind.policy for ind in survivors]
            children = breed(parents, cfg.population_size - len(parents), cfg.mutation_rate, self.rng)
            policies = parents + children

        final = self._evaluate(policies, cfg.num_generations)
        best = min(final, key=lambda ind: ind.fitness)

        logger.info("GA done: best=%s cost=%.4f evaluations=%d", best.policy, best.fitness, self.n_evaluations)
        return OptimizationResult(
            best_policy=best.policy,
            best_cost=best.fitness,
            trace=trace,
            n_evaluations=self.n_evaluations,
        )


def optimize(
    P,
    costs: CostModel,
    config: GAConfig,
    sampler_factory: Optional[SamplerFactory] = None,
) -> OptimizationResult:
    return GeneticOptimizer(P, costs, config, sampler_factory).run()
