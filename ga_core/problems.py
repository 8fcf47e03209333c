"""
Real-valued parameter search problems.
A parameter-vector individual with uniform crossover and Gaussian mutation,
plus benchmark objectives to minimise.
"""

import math
import random
from dataclasses import dataclass
from typing import Callable, Dict, List, Sequence

from ga_engine.interfaces import IndividualOps

Objective = Callable[[Sequence[float]], float]


def sphere(params: Sequence[float]) -> float:
    """Sum of squares; minimum 0 at the origin."""
    return sum(x * x for x in params)


def rastrigin(params: Sequence[float]) -> float:
    """Highly multimodal; minimum 0 at the origin."""
    return 10.0 * len(params) + sum(
        x * x - 10.0 * math.cos(2.0 * math.pi * x) for x in params
    )


def rosenbrock(params: Sequence[float]) -> float:
    """Curved valley; minimum 0 at (1, ..., 1)."""
    return sum(
        100.0 * (params[i + 1] - params[i] ** 2) ** 2 + (1.0 - params[i]) ** 2
        for i in range(len(params) - 1)
    )


OBJECTIVES: Dict[str, Objective] = {
    "sphere": sphere,
    "rastrigin": rastrigin,
    "rosenbrock": rosenbrock,
}


def get_objective(name: str) -> Objective:
    """Look up an objective by name."""
    try:
        return OBJECTIVES[name]
    except KeyError:
        raise ValueError(
            f"Unknown objective {name!r}; available: {', '.join(sorted(OBJECTIVES))}"
        ) from None


@dataclass
class ParameterVector:
    """Candidate parameter set."""

    params: List[float]


class ParameterVectorOps(IndividualOps):
    """
    Capability set for ParameterVector individuals.

    Fitness is ``1 / (1 + objective(params))``, so lower objective values
    score higher and a perfect zero scores 1.0. Objectives are expected to
    be non-negative.
    """

    def __init__(
        self,
        objective: Objective,
        lower: float,
        upper: float,
        rng: random.Random,
        mutation_sigma: float = 0.1,
        mutation_probability: float = 0.2,
        recombination: bool = True,
        mutation: bool = True,
    ):
        if upper <= lower:
            raise ValueError("upper bound must be greater than lower bound")
        self.objective = objective
        self.lower = lower
        self.upper = upper
        self.rng = rng
        self.mutation_sigma = mutation_sigma
        self.mutation_probability = mutation_probability

        # Instance attributes shadow the methods below
        if not recombination:
            self.recombine = None
        if not mutation:
            self.mutate = None

    def clone(self, individual: ParameterVector) -> ParameterVector:
        return ParameterVector(list(individual.params))

    def fitness(self, individual: ParameterVector) -> float:
        return 1.0 / (1.0 + self.objective(individual.params))

    def recombine(
        self, first: ParameterVector, second: ParameterVector
    ) -> ParameterVector:
        """Uniform crossover: each gene comes from either parent."""
        return ParameterVector(
            [
                a if self.rng.random() < 0.5 else b
                for a, b in zip(first.params, second.params)
            ]
        )

    def mutate(self, individual: ParameterVector) -> ParameterVector:
        """Gaussian perturbation of some genes, in place, clipped to bounds."""
        scale = self.mutation_sigma * (self.upper - self.lower)
        for i, value in enumerate(individual.params):
            if self.rng.random() < self.mutation_probability:
                value += self.rng.gauss(0.0, scale)
                individual.params[i] = min(self.upper, max(self.lower, value))
        return individual


def random_population(
    size: int,
    dimensions: int,
    lower: float,
    upper: float,
    rng: random.Random,
) -> List[ParameterVector]:
    """Uniformly sampled parameter vectors inside the bounds."""
    return [
        ParameterVector([rng.uniform(lower, upper) for _ in range(dimensions)])
        for _ in range(size)
    ]
