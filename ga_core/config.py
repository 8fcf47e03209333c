"""
Centralized configuration management for ga-evolve.
"""

import json
import os
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

DEFAULT_CONFIG_FILE = "ga-evolve.json"


@dataclass
class EvolutionSettings:
    """Evolution algorithm settings."""

    initial_population_size: int = 100
    population_size: int = 50
    max_generations: int = 100
    seed: Optional[int] = None
    recombination: bool = True
    mutation: bool = True
    selection: str = "roulette"  # "roulette" or "tournament"
    tournament_size: int = 3
    fitness_threshold: Optional[float] = None
    stagnation_generations: Optional[int] = None
    stagnation_tolerance: float = 0.0


@dataclass
class ProblemSettings:
    """Parameter search problem settings."""

    objective: str = "sphere"
    dimensions: int = 5
    lower_bound: float = -5.0
    upper_bound: float = 5.0
    mutation_sigma: float = 0.1
    mutation_probability: float = 0.2


@dataclass
class LoggingSettings:
    """Logging configuration."""

    level: str = "INFO"
    json_output: bool = False
    use_colors: bool = True
    log_file: Optional[str] = None
    diagnostics_file: Optional[str] = None


@dataclass
class Config:
    """Main configuration container."""

    evolution: EvolutionSettings = field(default_factory=EvolutionSettings)
    problem: ProblemSettings = field(default_factory=ProblemSettings)
    logging: LoggingSettings = field(default_factory=LoggingSettings)

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Config":
        """Create config from dictionary."""
        return cls(
            evolution=EvolutionSettings(**data.get("evolution", {})),
            problem=ProblemSettings(**data.get("problem", {})),
            logging=LoggingSettings(**data.get("logging", {})),
        )

    def save(self, path: Path) -> None:
        """Save config to file."""
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            json.dump(self.to_dict(), f, indent=2)

    @classmethod
    def load(cls, path: Path) -> "Config":
        """Load config from file."""
        with open(path) as f:
            data = json.load(f)
        return cls.from_dict(data)


def get_config(
    config_path: Optional[Path] = None,
    state_dir: Optional[Path] = None,
) -> Config:
    """Get configuration, loading from file if available.

    Priority:
    1. Explicit config_path
    2. Config in state_dir
    3. Config in current directory
    4. Defaults

    Environment variables override whichever source was used.
    """
    paths_to_try = []

    if config_path:
        paths_to_try.append(config_path)
    if state_dir:
        paths_to_try.append(state_dir / DEFAULT_CONFIG_FILE)
    paths_to_try.append(Path(DEFAULT_CONFIG_FILE))

    config = Config()
    for path in paths_to_try:
        if path.exists():
            config = Config.load(path)
            break

    _apply_env_overrides(config)
    return config


def _parse_bool(value: str) -> bool:
    return value.lower() in ("1", "true", "yes")


def _apply_env_overrides(config: Config) -> None:
    """Apply environment variable overrides to config."""
    env_mappings: Dict[str, tuple] = {
        "GA_EVOLVE_POPULATION_SIZE": ("evolution", "population_size", int),
        "GA_EVOLVE_INITIAL_POPULATION_SIZE": (
            "evolution",
            "initial_population_size",
            int,
        ),
        "GA_EVOLVE_MAX_GENERATIONS": ("evolution", "max_generations", int),
        "GA_EVOLVE_SEED": ("evolution", "seed", int),
        "GA_EVOLVE_OBJECTIVE": ("problem", "objective", str),
        "GA_EVOLVE_DIMENSIONS": ("problem", "dimensions", int),
        "GA_EVOLVE_LOG_LEVEL": ("logging", "level", str),
        "GA_EVOLVE_LOG_JSON": ("logging", "json_output", _parse_bool),
        "GA_EVOLVE_DIAGNOSTICS_FILE": ("logging", "diagnostics_file", str),
    }

    for env_var, (section, key, converter) in env_mappings.items():
        value = os.environ.get(env_var)
        if value is not None:
            try:
                converted = converter(value)
            except (ValueError, TypeError):
                continue  # Ignore invalid env values
            setattr(getattr(config, section), key, converted)
