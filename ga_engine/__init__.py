"""
Genetic algorithm engine for ga-evolve.
Elitist, fitness-proportional evolution over opaque individuals.
"""

from .callbacks import any_of, stop_at_fitness, stop_on_stagnation
from .engine import EvolutionConfig, EvolutionResult, GeneticAlgorithm, run_evolution
from .errors import AllocationFailure, EmptyPopulationError, GAError, InvalidConfigError
from .generation import (
    GenerationStats,
    next_generation,
    next_generation_retained,
)
from .interfaces import FunctionOps, IndividualOps
from .ranking import rank_population
from .selection import RouletteWheelSelector, TournamentSelector, roulette_select

__all__ = [
    "GeneticAlgorithm",
    "EvolutionConfig",
    "EvolutionResult",
    "run_evolution",
    "IndividualOps",
    "FunctionOps",
    "next_generation",
    "next_generation_retained",
    "GenerationStats",
    "rank_population",
    "roulette_select",
    "RouletteWheelSelector",
    "TournamentSelector",
    "stop_at_fitness",
    "stop_on_stagnation",
    "any_of",
    "GAError",
    "AllocationFailure",
    "EmptyPopulationError",
    "InvalidConfigError",
]
