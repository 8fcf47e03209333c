"""
Ready-made early-stop callbacks.

Each callback inspects slot 0 of the population just produced. Elitism puts
a clone of the previous best there, so slot 0 tracks the best fitness seen
so far.
"""

from typing import Optional

from ga_engine.interfaces import GenerationCallback, IndividualOps, Population


def stop_at_fitness(ops: IndividualOps, threshold: float) -> GenerationCallback:
    """Stop once the elite individual reaches ``threshold``."""

    def callback(generation: int, population: Population, size: int) -> bool:
        return ops.fitness(population[0]) >= threshold

    return callback


def stop_on_stagnation(
    ops: IndividualOps, patience: int, tolerance: float = 0.0
) -> GenerationCallback:
    """
    Stop after ``patience`` consecutive generations in which the elite
    fitness improved by no more than ``tolerance``. State resets whenever
    a run starts over at generation 0.
    """
    if patience < 1:
        raise ValueError("patience must be at least 1")

    best: Optional[float] = None
    stale = 0

    def callback(generation: int, population: Population, size: int) -> bool:
        nonlocal best, stale
        current = ops.fitness(population[0])
        if generation == 0 or best is None:
            best = current
            stale = 0
            return False
        if current > best + tolerance:
            best = current
            stale = 0
        else:
            stale += 1
        return stale >= patience

    return callback


def any_of(*callbacks: GenerationCallback) -> GenerationCallback:
    """Stop when any callback asks to. Every callback runs each generation."""

    def callback(generation: int, population: Population, size: int) -> bool:
        results = [cb(generation, population, size) for cb in callbacks]
        return any(results)

    return callback
