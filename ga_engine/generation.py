"""
Generation advance for the genetic algorithm.
Builds one new population from an old one using elitism, selection and the
optional recombination and mutation operations.

Two entry points differ only in who owns the old population afterwards:

- ``next_generation`` consumes it: every old individual is deleted through
  ``ops.delete`` and the old list is emptied.
- ``next_generation_retained`` borrows it: the old list and its members are
  left untouched and stay the caller's responsibility.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

from ga_engine.errors import AllocationFailure, EmptyPopulationError, InvalidConfigError
from ga_engine.interfaces import IndividualOps, Population, SelectionFunction

logger = logging.getLogger(__name__)


@dataclass
class GenerationStats:
    """Clamped fitness summary of the population a generation was bred from."""

    size: int
    best_index: int
    best_fitness: float
    total_fitness: float

    @property
    def mean_fitness(self) -> float:
        return self.total_fitness / self.size if self.size else 0.0


def _allocate_fitness_buffer(size: int) -> List[float]:
    try:
        return [0.0] * size
    except MemoryError as e:
        raise AllocationFailure("fitness buffer", size) from e


def _allocate_population(size: int) -> Population:
    try:
        return [None] * size
    except MemoryError as e:
        raise AllocationFailure("population", size) from e


def advance(
    population: Population,
    new_size: int,
    ops: IndividualOps,
    select: SelectionFunction,
) -> Optional[Tuple[Population, GenerationStats]]:
    """
    Breed a population of ``new_size`` from ``population``.

    The old population is only read. Returns the new population together
    with the fitness summary of the old one, or ``None`` if a buffer could
    not be allocated, in which case no individual has been created.
    """
    old_size = len(population)
    if old_size == 0:
        raise EmptyPopulationError("generation advance")
    if new_size < 1:
        raise InvalidConfigError([f"new population size must be >= 1, got {new_size}"])

    try:
        fitness_values = _allocate_fitness_buffer(old_size)
    except AllocationFailure as e:
        logger.error(f"Generation advance aborted: {e}")
        return None

    total_fitness = 0.0
    best = 0
    for i, individual in enumerate(population):
        value = ops.fitness(individual)
        if value < 0:
            value = 0.0
        fitness_values[i] = value
        total_fitness += value
        if value > fitness_values[best]:
            best = i

    try:
        next_population = _allocate_population(new_size)
    except AllocationFailure as e:
        logger.error(f"Generation advance aborted: {e}")
        return None

    # Elitism
    next_population[0] = ops.clone(population[best])

    recombine = ops.recombine
    mutate = ops.mutate
    for i in range(1, new_size):
        k = select(population, fitness_values, total_fitness, old_size)

        if recombine is not None:
            saved = fitness_values[k]
            fitness_values[k] = 0.0  # no self-pairing
            k2 = select(population, fitness_values, total_fitness, old_size)
            fitness_values[k] = saved
            child = recombine(population[k], population[k2])
        else:
            child = ops.clone(population[k])

        if mutate is not None:
            child = mutate(child)

        next_population[i] = child

    stats = GenerationStats(
        size=old_size,
        best_index=best,
        best_fitness=fitness_values[best],
        total_fitness=total_fitness,
    )
    return next_population, stats


def release_population(population: Population, ops: IndividualOps) -> None:
    """Delete every individual in ``population`` and empty the list."""
    for individual in population:
        if individual is not None:
            ops.delete(individual)
    population.clear()


def next_generation(
    population: Population,
    new_size: int,
    ops: IndividualOps,
    select: SelectionFunction,
) -> Optional[Population]:
    """
    Advance one generation, consuming the old population.

    On success the old individuals have each been deleted once and the old
    list is empty. On allocation failure ``None`` is returned and the old
    population is left exactly as it was, still owned by the caller.
    """
    advanced = advance(population, new_size, ops, select)
    if advanced is None:
        return None
    next_population, _ = advanced
    release_population(population, ops)
    return next_population


def next_generation_retained(
    population: Population,
    new_size: int,
    ops: IndividualOps,
    select: SelectionFunction,
) -> Optional[Population]:
    """
    Advance one generation, leaving the old population to the caller.

    Neither the old list nor any of its individuals is modified or deleted;
    disposing of them remains the caller's job.
    """
    advanced = advance(population, new_size, ops, select)
    if advanced is None:
        return None
    next_population, _ = advanced
    return next_population
