"""
Fitness ranking of a population.
In-place partition-exchange sort (Sedgewick style) ordering individuals by
descending fitness, run from an explicit stack.
"""

from typing import List

from ga_engine.interfaces import IndividualOps, Population


def _exchange(population: Population, scores: List[float], i: int, j: int) -> None:
    scores[i], scores[j] = scores[j], scores[i]
    population[i], population[j] = population[j], population[i]


def _partition(
    population: Population, scores: List[float], left: int, right: int
) -> int:
    """Partition scores[left:right + 1] around scores[right]; requires left < right."""
    pivot = scores[right]
    i = left - 1
    j = right
    while True:
        i += 1
        # scores[right] stops this scan
        while scores[i] > pivot:
            i += 1
        j -= 1
        while pivot > scores[j]:
            if j == left:
                break
            j -= 1
        if i >= j:
            break
        _exchange(population, scores, i, j)
    _exchange(population, scores, i, right)
    return i


def rank_population(population: Population, ops: IndividualOps) -> List[float]:
    """
    Sort ``population`` in place so fitness never increases along the list.

    Fitness is evaluated once per individual. Returns the fitness values in
    the final order. Values are the raw ones returned by ``ops.fitness``;
    individuals with equal fitness end up in no particular order.
    """
    scores = [ops.fitness(individual) for individual in population]

    pending = [(0, len(population) - 1)]
    while pending:
        left, right = pending.pop()
        if right <= left:
            continue
        pivot_index = _partition(population, scores, left, right)
        # Larger side first so the smaller one is handled next
        if pivot_index - left > right - pivot_index:
            pending.append((left, pivot_index - 1))
            pending.append((pivot_index + 1, right))
        else:
            pending.append((pivot_index + 1, right))
            pending.append((left, pivot_index - 1))
    return scores
