"""
Structured logging configuration for ga-evolve.
JSON lines for files and machine consumers, a compact coloured format for
the console.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

# Record attributes copied into structured output when present
CONTEXT_FIELDS = (
    "run_id",
    "event_type",
    "generation",
    "population_size",
    "fitness",
    "mean_fitness",
    "duration_ms",
)


class StructuredFormatter(logging.Formatter):
    """JSON-formatted log output for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for name in CONTEXT_FIELDS:
            if hasattr(record, name):
                log_data[name] = getattr(record, name)

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


class HumanFormatter(logging.Formatter):
    """Human-readable log format for console output."""

    COLORS = {
        "DEBUG": "\033[36m",  # Cyan
        "INFO": "\033[32m",  # Green
        "WARNING": "\033[33m",  # Yellow
        "ERROR": "\033[31m",  # Red
        "CRITICAL": "\033[35m",  # Magenta
    }
    RESET = "\033[0m"

    def __init__(self, use_colors: bool = True):
        super().__init__()
        self.use_colors = use_colors

    def format(self, record: logging.LogRecord) -> str:
        ts = datetime.now().strftime("%H:%M:%S")
        level = record.levelname[:4]

        if self.use_colors:
            color = self.COLORS.get(record.levelname, "")
            level = f"{color}{level}{self.RESET}"

        extras = []
        if hasattr(record, "run_id"):
            extras.append(f"run={str(record.run_id)[:8]}")
        if hasattr(record, "generation"):
            extras.append(f"gen={record.generation}")
        if hasattr(record, "fitness"):
            extras.append(f"best={record.fitness:.4f}")
        if hasattr(record, "mean_fitness"):
            extras.append(f"mean={record.mean_fitness:.4f}")
        if hasattr(record, "duration_ms"):
            extras.append(f"took={record.duration_ms}ms")

        extra_str = f" [{', '.join(extras)}]" if extras else ""

        return f"{ts} {level} {record.name}: {record.getMessage()}{extra_str}"


class EvolutionLogger:
    """Logger wrapper carrying run context into every record."""

    def __init__(self, name: str = "ga_engine"):
        self.logger = logging.getLogger(name)
        self._context: Dict[str, Any] = {}

    def set_context(self, **kwargs) -> None:
        self._context.update(kwargs)

    def clear_context(self) -> None:
        self._context.clear()

    def _log(self, level: int, msg: str, **kwargs) -> None:
        extra = {**self._context, **kwargs}
        self.logger.log(level, msg, extra=extra)

    def debug(self, msg: str, **kwargs) -> None:
        self._log(logging.DEBUG, msg, **kwargs)

    def info(self, msg: str, **kwargs) -> None:
        self._log(logging.INFO, msg, **kwargs)

    def warning(self, msg: str, **kwargs) -> None:
        self._log(logging.WARNING, msg, **kwargs)

    def error(self, msg: str, **kwargs) -> None:
        self._log(logging.ERROR, msg, **kwargs)

    # Run events

    def evolution_started(self, population_size: int, max_generations: int) -> None:
        self.info(
            f"Evolution started: up to {max_generations} generations",
            event_type="evolution_started",
            population_size=population_size,
        )

    def generation_complete(
        self, generation: int, best_fitness: float, mean_fitness: float
    ) -> None:
        self.debug(
            f"Generation {generation} complete",
            event_type="generation_complete",
            generation=generation,
            fitness=best_fitness,
            mean_fitness=mean_fitness,
        )

    def early_stop(self, generation: int) -> None:
        self.info(
            f"Callback requested stop after generation {generation}",
            event_type="early_stop",
            generation=generation,
        )

    def allocation_failed(self, generation: int) -> None:
        self.error(
            f"Generation {generation} could not be allocated; aborting run",
            event_type="allocation_failed",
            generation=generation,
        )

    def evolution_complete(
        self, generations: int, best_fitness: float, duration_ms: int
    ) -> None:
        self.info(
            f"Evolution complete after {generations} generations",
            event_type="evolution_complete",
            fitness=best_fitness,
            duration_ms=duration_ms,
        )


def configure_logging(
    level: str = "INFO",
    json_output: bool = False,
    log_file: Optional[Path] = None,
    use_colors: bool = True,
) -> None:
    """Configure logging for the application.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_output: Use JSON format for console output
        log_file: Optional file path for log output
        use_colors: Use colors in console output (ignored if json_output=True)

    Raises:
        ValueError: If level is not one of LOG_LEVELS
    """
    if level.upper() not in LOG_LEVELS:
        raise ValueError(
            f"Unknown log level {level!r}; expected one of: {', '.join(LOG_LEVELS)}"
        )
    numeric_level = getattr(logging, level.upper())

    handlers: List[logging.Handler] = []

    console_handler = logging.StreamHandler(sys.stderr)
    if json_output:
        console_handler.setFormatter(StructuredFormatter())
    else:
        console_handler.setFormatter(HumanFormatter(use_colors=use_colors))
    handlers.append(console_handler)

    # File output is always JSON for machine parsing
    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(StructuredFormatter())
        handlers.append(file_handler)

    for handler in handlers:
        handler.setLevel(numeric_level)

    for name in ("ga_engine", "ga_core"):
        package_logger = logging.getLogger(name)
        package_logger.setLevel(numeric_level)
        package_logger.handlers.clear()
        for handler in handlers:
            package_logger.addHandler(handler)


def get_logger(name: str) -> EvolutionLogger:
    """Get a structured logger instance."""
    return EvolutionLogger(name)
