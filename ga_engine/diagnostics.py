"""
Scoped diagnostic sink for evolution runs.
Routes engine warnings and errors to a JSON-lines file for the duration of a
run.
"""

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional, Union

from ga_engine.logging_config import StructuredFormatter

ENGINE_LOGGER = "ga_engine"


@contextmanager
def diagnostic_sink(
    path: Optional[Union[str, Path]], level: str = "WARNING"
) -> Iterator[Optional[logging.Handler]]:
    """
    Attach a file handler to the engine logger while the block runs.

    The file is truncated on entry. The handler is removed and closed on
    every exit path, exceptions included. The engine logger is lowered to
    ``level`` for the duration if it would otherwise filter those records. With ``path=None`` nothing is
    attached and ``None`` is yielded.
    """
    if path is None:
        yield None
        return

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    numeric_level = getattr(logging, level.upper())
    handler = logging.FileHandler(path, mode="w")
    handler.setLevel(numeric_level)
    handler.setFormatter(StructuredFormatter())

    engine_logger = logging.getLogger(ENGINE_LOGGER)
    previous_level = engine_logger.level
    # Records below the effective level never reach any handler
    if engine_logger.getEffectiveLevel() > numeric_level:
        engine_logger.setLevel(numeric_level)
    engine_logger.addHandler(handler)
    try:
        yield handler
    finally:
        engine_logger.removeHandler(handler)
        engine_logger.setLevel(previous_level)
        handler.close()
