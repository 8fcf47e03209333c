"""
ga-evolve - Genetic algorithm parameter search.
"""

from ga_engine import (
    EvolutionConfig,
    EvolutionResult,
    FunctionOps,
    GeneticAlgorithm,
    IndividualOps,
    run_evolution,
)

from .config import Config, get_config
from .problems import ParameterVector, ParameterVectorOps

__version__ = "0.1.0"

__all__ = [
    "GeneticAlgorithm",
    "EvolutionConfig",
    "EvolutionResult",
    "IndividualOps",
    "FunctionOps",
    "run_evolution",
    "Config",
    "get_config",
    "ParameterVector",
    "ParameterVectorOps",
]
