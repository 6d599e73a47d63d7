from __future__ import annotations

from typing import Callable, List, Protocol, Sequence

import numpy as np


class Sampler(Protocol):
    def draw(self, row: Sequence[float]) -> int:
        """Return a state index drawn from the probability row."""
        ...


SamplerFactory = Callable[[np.random.Generator], Sampler]


class GeneratorSampler:
    """
    Inverse-CDF categorical draw on a numpy Generator.

    One uniform per draw; the last state with positive mass absorbs
    round-off so a row summing to 1 - 1e-12 never falls off the end.
    """

    def __init__(self, rng: np.random.Generator):
        self.rng = rng

    def draw(self, row: Sequence[float]) -> int:
        u = self.rng.random()
        acc = 0.0
        last = 0
        for j, p in enumerate(row):
            if p <= 0.0:
                continue
            acc += p
            last = j
            if u < acc:
                return j
        return last


def trial_seed_sequences(seed: int, n_trials: int) -> List[np.random.SeedSequence]:
    """
    One independent SeedSequence per trial, fixed by (seed, trial index).
    Children of SeedSequence.spawn do not depend on the order they are used in,
    and child i is the same however many trials are spawned.
    """
    return np.random.SeedSequence(int(seed)).spawn(int(n_trials))


def generation_seed(seed: int, generation: int) -> int:
    """Derived evaluation seed for one GA generation."""
    ss = np.random.SeedSequence(entropy=int(seed), spawn_key=(int(generation),))
    return int(ss.generate_state(1, dtype=np.uint32)[0])
