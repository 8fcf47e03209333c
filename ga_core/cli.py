"""
CLI interface for ga-evolve.
Runs parameter searches and manages configuration.
"""

import argparse
import json
import random
import sys
from pathlib import Path
from typing import List, Optional, Tuple

from pydantic import ValidationError

from ga_core.config import DEFAULT_CONFIG_FILE, Config, get_config
from ga_core.problems import (
    OBJECTIVES,
    ParameterVectorOps,
    get_objective,
    random_population,
)
from ga_core.schemas import GenerationSummary, RunRequest, RunSummary, SelectionMethod
from ga_engine import (
    EvolutionConfig,
    EvolutionResult,
    GeneticAlgorithm,
    TournamentSelector,
    any_of,
    stop_at_fitness,
    stop_on_stagnation,
)
from ga_engine.logging_config import LOG_LEVELS, configure_logging


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="ga-evolve",
        description="Genetic algorithm parameter search",
    )
    parser.add_argument("--version", action="version", version="%(prog)s 0.1.0")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Run command
    run_parser = subparsers.add_parser("run", help="Run a parameter search")
    run_parser.add_argument(
        "--config", type=Path, default=None, help="Configuration file path"
    )
    run_parser.add_argument(
        "--objective", choices=sorted(OBJECTIVES), help="Objective to minimise"
    )
    run_parser.add_argument("--dimensions", type=int, help="Parameters per individual")
    run_parser.add_argument(
        "--initial-population-size", type=int, help="Random starting population size"
    )
    run_parser.add_argument(
        "--population-size", "-p", type=int, help="Steady population size"
    )
    run_parser.add_argument(
        "--generations", "-g", type=int, help="Maximum number of generations"
    )
    run_parser.add_argument("--seed", type=int, help="Random seed")
    run_parser.add_argument(
        "--selection",
        choices=[m.value for m in SelectionMethod],
        help="Parent selection strategy",
    )
    run_parser.add_argument(
        "--no-recombination", action="store_true", help="Disable crossover"
    )
    run_parser.add_argument(
        "--no-mutation", action="store_true", help="Disable mutation"
    )
    run_parser.add_argument(
        "--fitness-threshold", type=float, help="Stop once best fitness reaches this"
    )
    run_parser.add_argument(
        "--stagnation",
        type=int,
        help="Stop after this many generations without improvement",
    )
    run_parser.add_argument(
        "--top", "-n", type=int, default=5, help="Number of ranked individuals to show"
    )
    run_parser.add_argument(
        "--json", action="store_true", help="Print a JSON run summary"
    )
    run_parser.add_argument(
        "--diagnostics-file", type=Path, help="Write run warnings and errors here"
    )
    run_parser.add_argument(
        "--log-level", help=f"Log level ({', '.join(LOG_LEVELS)})"
    )

    # Problems command
    subparsers.add_parser("problems", help="List available objectives")

    # Init command
    init_parser = subparsers.add_parser(
        "init", help="Write a default configuration file"
    )
    init_parser.add_argument(
        "--path",
        type=Path,
        default=Path(DEFAULT_CONFIG_FILE),
        help="Configuration file path",
    )

    # Config command
    config_parser = subparsers.add_parser("config", help="Show configuration")
    config_parser.add_argument(
        "--show", action="store_true", help="Show current configuration"
    )
    config_parser.add_argument(
        "--config", type=Path, default=None, help="Configuration file path"
    )

    return parser


def _apply_run_overrides(config: Config, args: argparse.Namespace) -> None:
    """Copy explicit command-line values over the loaded configuration."""
    overrides = {
        ("problem", "objective"): args.objective,
        ("problem", "dimensions"): args.dimensions,
        ("evolution", "initial_population_size"): args.initial_population_size,
        ("evolution", "population_size"): args.population_size,
        ("evolution", "max_generations"): args.generations,
        ("evolution", "seed"): args.seed,
        ("evolution", "selection"): args.selection,
        ("evolution", "fitness_threshold"): args.fitness_threshold,
        ("evolution", "stagnation_generations"): args.stagnation,
        ("logging", "level"): args.log_level,
        ("logging", "diagnostics_file"): (
            str(args.diagnostics_file) if args.diagnostics_file else None
        ),
    }
    for (section, key), value in overrides.items():
        if value is not None:
            setattr(getattr(config, section), key, value)

    if args.no_recombination:
        config.evolution.recombination = False
    if args.no_mutation:
        config.evolution.mutation = False


def run_search(
    request: RunRequest, diagnostics_file: Optional[str] = None
) -> Optional[Tuple[RunSummary, EvolutionResult]]:
    """Run a parameter search; ``None`` if the engine aborted the run."""
    rng = random.Random(request.seed)
    objective = get_objective(request.objective)
    ops = ParameterVectorOps(
        objective,
        request.lower_bound,
        request.upper_bound,
        rng,
        mutation_sigma=request.mutation_sigma,
        mutation_probability=request.mutation_probability,
        recombination=request.recombination,
        mutation=request.mutation,
    )

    selector = None
    if request.selection == SelectionMethod.TOURNAMENT:
        selector = TournamentSelector(rng, request.tournament_size)

    callbacks = []
    if request.fitness_threshold is not None:
        callbacks.append(stop_at_fitness(ops, request.fitness_threshold))
    if request.stagnation_generations is not None:
        callbacks.append(
            stop_on_stagnation(
                ops, request.stagnation_generations, request.stagnation_tolerance
            )
        )

    engine = GeneticAlgorithm(
        ops,
        config=EvolutionConfig(
            population_size=request.population_size,
            max_generations=request.max_generations,
            seed=request.seed,
            diagnostics_file=diagnostics_file,
        ),
        selector=selector,
        callback=any_of(*callbacks) if callbacks else None,
        rng=rng,
    )

    initial = random_population(
        request.initial_population_size,
        request.dimensions,
        request.lower_bound,
        request.upper_bound,
        rng,
    )
    result = engine.run(initial)
    if result is None:
        return None

    summary = RunSummary(
        run_id=str(result.run_id),
        objective=request.objective,
        generations=result.generations,
        stopped_early=result.stopped_early,
        best_fitness=result.best_fitness,
        best_objective=objective(result.best.params),
        best_params=list(result.best.params),
        population_size=len(result.population),
        duration_seconds=result.duration_seconds,
        history=[
            GenerationSummary(
                generation=i,
                best_fitness=stats.best_fitness,
                mean_fitness=stats.mean_fitness,
            )
            for i, stats in enumerate(result.history)
        ],
    )
    return summary, result


def _format_params(params: List[float]) -> str:
    return "[" + ", ".join(f"{p:.4f}" for p in params) + "]"


def cmd_run(args: argparse.Namespace) -> int:
    """Run a parameter search."""
    config = get_config(args.config)
    _apply_run_overrides(config, args)

    try:
        configure_logging(
            level=config.logging.level,
            json_output=config.logging.json_output,
            log_file=Path(config.logging.log_file) if config.logging.log_file else None,
            use_colors=config.logging.use_colors,
        )
    except ValueError as e:
        print("Invalid run configuration:")
        print(f"  logging.level: {e}")
        return 2

    try:
        request = RunRequest.from_config(config)
    except ValidationError as e:
        print("Invalid run configuration:")
        for error in e.errors():
            location = ".".join(str(part) for part in error["loc"]) or "request"
            print(f"  {location}: {error['msg']}")
        return 2

    outcome = run_search(request, config.logging.diagnostics_file)
    if outcome is None:
        print("Run aborted: a generation could not be allocated.")
        return 1
    summary, result = outcome

    if args.json:
        print(summary.model_dump_json(indent=2))
        return 0

    print(f"Objective: {summary.objective}")
    early = " (stopped early)" if summary.stopped_early else ""
    print(f"Generations: {summary.generations}{early}")
    print(f"Best objective value: {summary.best_objective:.6g}")
    print()
    print(f"{'Rank':<6} {'Fitness':<12} {'Parameters'}")
    print("-" * 60)
    for rank, (individual, fitness) in enumerate(
        zip(result.population[: args.top], result.fitness), start=1
    ):
        print(f"{rank:<6} {fitness:<12.6f} {_format_params(individual.params)}")

    return 0


def cmd_problems(args: argparse.Namespace) -> int:
    """List available objectives."""
    for name in sorted(OBJECTIVES):
        doc = (OBJECTIVES[name].__doc__ or "").strip()
        print(f"{name}" + (f": {doc}" if doc else ""))
    return 0


def cmd_init(args: argparse.Namespace) -> int:
    """Write a default configuration file."""
    path = args.path

    if path.exists():
        print(f"Configuration already exists at {path}")
        return 0

    Config().save(path)
    print(f"Wrote default configuration to {path}")
    return 0


def cmd_config(args: argparse.Namespace) -> int:
    """Show configuration."""
    config = get_config(args.config)

    print("Current Configuration")
    print("-" * 40)
    for section, values in config.to_dict().items():
        for key, value in values.items():
            print(f"{section}.{key}: {json.dumps(value)}")

    return 0


def main(argv: Optional[list] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    commands = {
        "run": cmd_run,
        "problems": cmd_problems,
        "init": cmd_init,
        "config": cmd_config,
    }

    handler = commands.get(args.command)
    if handler:
        return handler(args)

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
