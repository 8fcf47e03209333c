"""
Pydantic schemas for run requests and run summaries.
Validates run parameters before an engine is built and documents the JSON
emitted by the command line.
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from ga_core.config import Config
from ga_core.problems import OBJECTIVES


class SelectionMethod(str, Enum):
    """Available parent selection strategies."""

    ROULETTE = "roulette"
    TOURNAMENT = "tournament"


# ============= Input Schemas =============


class RunRequest(BaseModel):
    """Parameters for one parameter-search run."""

    objective: str = Field(default="sphere", description="Objective to minimise")
    dimensions: int = Field(
        default=5, ge=1, le=1000, description="Number of parameters per individual"
    )
    lower_bound: float = Field(default=-5.0, description="Lower parameter bound")
    upper_bound: float = Field(default=5.0, description="Upper parameter bound")
    initial_population_size: int = Field(
        default=100, ge=1, description="Size of the random starting population"
    )
    population_size: int = Field(
        default=50, ge=1, description="Population size after the first generation"
    )
    max_generations: int = Field(
        default=100, ge=1, description="Upper bound on generation advances"
    )
    seed: Optional[int] = Field(
        default=None, description="Random seed for reproducible runs"
    )
    recombination: bool = Field(default=True, description="Enable crossover")
    mutation: bool = Field(default=True, description="Enable mutation")
    selection: SelectionMethod = Field(
        default=SelectionMethod.ROULETTE, description="Parent selection strategy"
    )
    tournament_size: int = Field(
        default=3, ge=1, description="Contenders per tournament"
    )
    mutation_sigma: float = Field(
        default=0.1, gt=0, description="Mutation step as a fraction of the bound width"
    )
    mutation_probability: float = Field(
        default=0.2, ge=0, le=1, description="Per-gene mutation probability"
    )
    fitness_threshold: Optional[float] = Field(
        default=None, ge=0, description="Stop once the best fitness reaches this"
    )
    stagnation_generations: Optional[int] = Field(
        default=None, ge=1, description="Stop after this many generations without progress"
    )
    stagnation_tolerance: float = Field(
        default=0.0, ge=0, description="Minimum improvement that counts as progress"
    )

    @field_validator("objective")
    @classmethod
    def objective_known(cls, value: str) -> str:
        if value not in OBJECTIVES:
            raise ValueError(
                f"unknown objective {value!r}; available: {', '.join(sorted(OBJECTIVES))}"
            )
        return value

    @model_validator(mode="after")
    def bounds_ordered(self) -> "RunRequest":
        if self.upper_bound <= self.lower_bound:
            raise ValueError("upper_bound must be greater than lower_bound")
        return self

    @classmethod
    def from_config(cls, config: Config) -> "RunRequest":
        """Build a request from file/environment configuration."""
        evolution = config.evolution
        problem = config.problem
        return cls(
            objective=problem.objective,
            dimensions=problem.dimensions,
            lower_bound=problem.lower_bound,
            upper_bound=problem.upper_bound,
            initial_population_size=evolution.initial_population_size,
            population_size=evolution.population_size,
            max_generations=evolution.max_generations,
            seed=evolution.seed,
            recombination=evolution.recombination,
            mutation=evolution.mutation,
            selection=evolution.selection,
            tournament_size=evolution.tournament_size,
            mutation_sigma=problem.mutation_sigma,
            mutation_probability=problem.mutation_probability,
            fitness_threshold=evolution.fitness_threshold,
            stagnation_generations=evolution.stagnation_generations,
            stagnation_tolerance=evolution.stagnation_tolerance,
        )


# ============= Output Schemas =============


class GenerationSummary(BaseModel):
    """Fitness of the population a generation was bred from."""

    generation: int
    best_fitness: float
    mean_fitness: float


class RunSummary(BaseModel):
    """Outcome of a parameter-search run."""

    run_id: str
    objective: str
    generations: int
    stopped_early: bool
    best_fitness: float
    best_objective: float
    best_params: List[float]
    population_size: int
    duration_seconds: float
    history: List[GenerationSummary] = Field(default_factory=list)
