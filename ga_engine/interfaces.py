"""ga-evolve: Core Interface Definitions"""

from abc import ABC, abstractmethod
from typing import Any, Callable, List, Optional, Sequence

# Type Aliases

Individual = Any
Population = List[Individual]

# (population, fitness_values, total_fitness, size) -> index
SelectionFunction = Callable[[Sequence[Individual], List[float], float, int], int]

# (generation, population, size) -> truthy to stop
GenerationCallback = Callable[[int, Population, int], Any]

RecombineFunction = Callable[[Individual, Individual], Individual]
MutateFunction = Callable[[Individual], Individual]


# Capability Set


class IndividualOps(ABC):
    """
    Operations the engine may perform on an individual.

    The engine never looks inside an individual; everything goes through
    these methods. Implementations must honour these preconditions, which
    the engine does not check:

    - ``clone`` returns a new handle that shares no mutable state with its
      source.
    - ``fitness`` returns a finite float. Negative values are treated as zero
      by selection; NaN or infinity leads to undefined results.
    - ``recombine`` and ``mutate`` return valid handles. ``mutate`` receives
      a freshly produced child that the engine owns; if it returns a different
      handle, disposing of its input is its own business.
    - ``recombine`` may return one of its parents. The engine stores whatever
      it returns, so when the old population is consumed the result must not
      be one of the parents being deleted.

    ``recombine`` and ``mutate`` are optional: leave them as ``None`` to
    disable recombination or mutation.
    """

    recombine: Optional[RecombineFunction] = None
    mutate: Optional[MutateFunction] = None

    @abstractmethod
    def clone(self, individual: Individual) -> Individual:
        pass

    @abstractmethod
    def fitness(self, individual: Individual) -> float:
        pass

    def delete(self, individual: Individual) -> None:
        """Release an individual. Nothing to release by default."""

    @property
    def can_recombine(self) -> bool:
        return self.recombine is not None

    @property
    def can_mutate(self) -> bool:
        return self.mutate is not None


class FunctionOps(IndividualOps):
    """Capability set assembled from plain callables."""

    def __init__(
        self,
        clone: Callable[[Individual], Individual],
        fitness: Callable[[Individual], float],
        delete: Optional[Callable[[Individual], None]] = None,
        recombine: Optional[RecombineFunction] = None,
        mutate: Optional[MutateFunction] = None,
    ):
        self._clone = clone
        self._fitness = fitness
        self._delete = delete
        self.recombine = recombine
        self.mutate = mutate

    def clone(self, individual: Individual) -> Individual:
        return self._clone(individual)

    def fitness(self, individual: Individual) -> float:
        return self._fitness(individual)

    def delete(self, individual: Individual) -> None:
        if self._delete is not None:
            self._delete(individual)


# Constants (Defaults)

DEFAULT_POPULATION_SIZE = 50
DEFAULT_MAX_GENERATIONS = 100
DEFAULT_TOURNAMENT_SIZE = 3
