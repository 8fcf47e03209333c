"""
Evolution driver for ga-evolve.
Runs repeated generation advances, consults the early-stop callback between
generations and ranks the final population.
"""

import random
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Union
from uuid import UUID, uuid4

from ga_engine.diagnostics import diagnostic_sink
from ga_engine.errors import EmptyPopulationError, InvalidConfigError
from ga_engine.generation import GenerationStats, advance, release_population
from ga_engine.interfaces import (
    DEFAULT_MAX_GENERATIONS,
    DEFAULT_POPULATION_SIZE,
    GenerationCallback,
    Individual,
    IndividualOps,
    Population,
    SelectionFunction,
)
from ga_engine.logging_config import LOG_LEVELS, get_logger
from ga_engine.ranking import rank_population
from ga_engine.selection import RouletteWheelSelector


@dataclass
class EvolutionConfig:
    """Configuration for evolution engine"""

    population_size: int = DEFAULT_POPULATION_SIZE
    max_generations: int = DEFAULT_MAX_GENERATIONS
    seed: Optional[int] = None
    diagnostics_file: Optional[Union[str, Path]] = None
    diagnostics_level: str = "WARNING"

    def validate(self) -> None:
        """Raise InvalidConfigError listing every problem found."""
        errors = []
        if self.population_size < 1:
            errors.append(
                f"population_size must be >= 1, got {self.population_size}"
            )
        if self.max_generations < 1:
            errors.append(
                f"max_generations must be >= 1, got {self.max_generations}"
            )
        if self.diagnostics_level.upper() not in LOG_LEVELS:
            errors.append(f"unknown diagnostics_level {self.diagnostics_level!r}")
        if errors:
            raise InvalidConfigError(errors)


@dataclass
class EvolutionResult:
    """Outcome of a run. The caller owns ``population`` and its members."""

    run_id: UUID
    population: Population
    fitness: List[float]
    generations: int
    stopped_early: bool
    history: List[GenerationStats]
    duration_seconds: float
    timestamp: datetime = field(default_factory=datetime.now)

    @property
    def best(self) -> Individual:
        return self.population[0]

    @property
    def best_fitness(self) -> float:
        return self.fitness[0]


class GeneticAlgorithm:
    """
    Generational genetic algorithm over opaque individuals.

    Each run seeds its own random source (unless one was injected), opens
    the diagnostic sink, advances the population until the callback asks to
    stop or ``max_generations`` advances have been made, then ranks the
    final population by descending fitness.
    """

    def __init__(
        self,
        ops: IndividualOps,
        config: Optional[EvolutionConfig] = None,
        selector: Optional[SelectionFunction] = None,
        callback: Optional[GenerationCallback] = None,
        rng: Optional[random.Random] = None,
    ):
        self.ops = ops
        self.config = config or EvolutionConfig()
        self.selector = selector
        self.callback = callback
        self.rng = rng

        self.current_generation = 0

    def run(self, initial_population: Population) -> Optional[EvolutionResult]:
        """
        Evolve ``initial_population`` and return the ranked result.

        The initial population is consumed by the first generation: its
        members are deleted and the list is emptied. Returns ``None`` if a
        generation could not be allocated. In that case the population being
        advanced is released by the engine, except the initial one, which
        stays intact and owned by the caller.
        """
        self.config.validate()
        if not initial_population:
            raise EmptyPopulationError("evolution run")

        run_id = uuid4()
        start_time = datetime.now()
        size = self.config.population_size

        rng = self.rng if self.rng is not None else random.Random(self.config.seed)
        select = self.selector
        if select is None:
            select = RouletteWheelSelector(rng)

        run_log = get_logger(__name__)
        run_log.set_context(run_id=str(run_id))

        with diagnostic_sink(
            self.config.diagnostics_file, self.config.diagnostics_level
        ):
            run_log.evolution_started(size, self.config.max_generations)

            population = initial_population
            history: List[GenerationStats] = []
            generation = 0
            stopped_early = False

            while True:
                self.current_generation = generation
                advanced = advance(population, size, self.ops, select)
                if advanced is None:
                    run_log.allocation_failed(generation)
                    if generation > 0:
                        release_population(population, self.ops)
                    return None

                next_population, stats = advanced
                release_population(population, self.ops)
                population = next_population
                history.append(stats)
                run_log.generation_complete(
                    generation, stats.best_fitness, stats.mean_fitness
                )

                if self.callback is not None and self.callback(
                    generation, population, size
                ):
                    stopped_early = True
                    run_log.early_stop(generation)

                generation += 1
                if stopped_early or generation >= self.config.max_generations:
                    break

            scores = rank_population(population, self.ops)

            duration = (datetime.now() - start_time).total_seconds()
            run_log.evolution_complete(generation, scores[0], int(duration * 1000))

        return EvolutionResult(
            run_id=run_id,
            population=population,
            fitness=scores,
            generations=generation,
            stopped_early=stopped_early,
            history=history,
            duration_seconds=duration,
        )


def run_evolution(
    initial_population: Population,
    ops: IndividualOps,
    population_size: int = DEFAULT_POPULATION_SIZE,
    max_generations: int = DEFAULT_MAX_GENERATIONS,
    callback: Optional[GenerationCallback] = None,
    selector: Optional[SelectionFunction] = None,
    seed: Optional[int] = None,
    rng: Optional[random.Random] = None,
    diagnostics_file: Optional[Union[str, Path]] = None,
) -> Optional[EvolutionResult]:
    """Run a genetic algorithm in one call. See GeneticAlgorithm.run."""
    config = EvolutionConfig(
        population_size=population_size,
        max_generations=max_generations,
        seed=seed,
        diagnostics_file=diagnostics_file,
    )
    engine = GeneticAlgorithm(
        ops, config=config, selector=selector, callback=callback, rng=rng
    )
    return engine.run(initial_population)
