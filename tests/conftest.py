"""
Shared fixtures: instrumented individuals and a scripted random source.
"""

import itertools
import logging
from typing import Iterable, List

import pytest

from ga_engine.interfaces import IndividualOps

_ids = itertools.count()


class Token:
    """Individual with a fixed fitness value and a deletion flag."""

    def __init__(self, value: float):
        self.id = next(_ids)
        self.value = value
        self.deleted = False

    def __repr__(self) -> str:
        return f"Token(id={self.id}, value={self.value})"


class CountingOps(IndividualOps):
    """Capability set that records every clone, delete and live individual."""

    def __init__(self, recombination: bool = False, mutation: bool = False):
        self.clones = 0
        self.recombinations = 0
        self.mutations = 0
        self.fitness_calls = 0
        self.deleted: List[Token] = []
        self.live = set()
        if not recombination:
            self.recombine = None
        if not mutation:
            self.mutate = None

    def make(self, value: float) -> Token:
        token = Token(value)
        self.live.add(token.id)
        return token

    def population(self, values: Iterable[float]) -> List[Token]:
        return [self.make(v) for v in values]

    def clone(self, individual: Token) -> Token:
        assert not individual.deleted, f"clone of deleted {individual}"
        self.clones += 1
        return self.make(individual.value)

    def fitness(self, individual: Token) -> float:
        assert not individual.deleted, f"fitness of deleted {individual}"
        self.fitness_calls += 1
        return individual.value

    def delete(self, individual: Token) -> None:
        assert not individual.deleted, f"double delete of {individual}"
        individual.deleted = True
        self.deleted.append(individual)
        self.live.discard(individual.id)

    def recombine(self, first: Token, second: Token) -> Token:
        assert not first.deleted and not second.deleted
        self.recombinations += 1
        return self.make((first.value + second.value) / 2)

    def mutate(self, individual: Token) -> Token:
        # Replaces the child with a new handle and disposes of the old one
        self.mutations += 1
        mutated = self.make(individual.value + 0.5)
        self.delete(individual)
        return mutated


class ScriptedRandom:
    """Random source returning a fixed sequence of values from random()."""

    def __init__(self, values: Iterable[float]):
        self._values = iter(values)
        self.calls = 0

    def random(self) -> float:
        self.calls += 1
        return next(self._values)


@pytest.fixture
def ops():
    return CountingOps()


@pytest.fixture
def make_ops():
    return CountingOps


@pytest.fixture
def scripted_random():
    return ScriptedRandom


@pytest.fixture(autouse=True)
def reset_package_loggers():
    """Drop handlers installed by configure_logging during a test."""
    yield
    for name in ("ga_engine", "ga_core"):
        package_logger = logging.getLogger(name)
        for handler in list(package_logger.handlers):
            package_logger.removeHandler(handler)
            handler.close()
        package_logger.setLevel(logging.NOTSET)
