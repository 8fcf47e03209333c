"""
Parent selection for the genetic algorithm.
Fitness-proportional (roulette wheel) selection plus a tournament alternative.
"""

import random
from typing import List, Sequence

from ga_engine.interfaces import DEFAULT_TOURNAMENT_SIZE, Individual


def roulette_select(
    population: Sequence[Individual],
    fitness_values: List[float],
    total_fitness: float,
    size: int,
    rng: random.Random,
) -> int:
    """
    Pick an index with probability proportional to its fitness.

    A uniform draw in [0, total_fitness) is located in the cumulative
    intervals of ``fitness_values``. Intervals are open at both ends, so a
    draw landing exactly on a boundary matches nothing. When no interval of
    the first ``size - 1`` entries matches, the last index is returned. This
    covers boundary ties, a zero total (the draw is then 0.0) and a
    population of one.
    """
    draw = rng.random() * total_fitness
    running = 0.0
    for i in range(size - 1):
        if running < draw < running + fitness_values[i]:
            return i
        running += fitness_values[i]
    return size - 1


class RouletteWheelSelector:
    """Roulette wheel selection bound to a random source."""

    def __init__(self, rng: random.Random):
        self.rng = rng

    def __call__(
        self,
        population: Sequence[Individual],
        fitness_values: List[float],
        total_fitness: float,
        size: int,
    ) -> int:
        return roulette_select(
            population, fitness_values, total_fitness, size, self.rng
        )


class TournamentSelector:
    """
    Tournament selection with the same signature as the roulette wheel.
    Samples ``tournament_size`` distinct indices and keeps the fittest.
    """

    def __init__(
        self, rng: random.Random, tournament_size: int = DEFAULT_TOURNAMENT_SIZE
    ):
        if tournament_size < 1:
            raise ValueError("tournament_size must be at least 1")
        self.rng = rng
        self.tournament_size = tournament_size

    def __call__(
        self,
        population: Sequence[Individual],
        fitness_values: List[float],
        total_fitness: float,
        size: int,
    ) -> int:
        contenders = self.rng.sample(range(size), min(self.tournament_size, size))
        # max() keeps the first contender on ties
        return max(contenders, key=lambda i: fitness_values[i])
