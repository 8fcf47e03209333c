"""
Unit tests for the generation advance.
Covers elitism, clamping, the two ownership entry points and allocation
failure, using instrumented individuals.
"""

import random
import sys

import pytest

from ga_engine.errors import AllocationFailure, EmptyPopulationError, InvalidConfigError
from ga_engine.generation import (
    _allocate_fitness_buffer,
    _allocate_population,
    advance,
    next_generation,
    next_generation_retained,
    release_population,
)
from ga_engine.selection import RouletteWheelSelector


class RecordingSelector:
    """Selector that records what it was shown and delegates to a roulette wheel."""

    def __init__(self, seed: int = 0):
        self.inner = RouletteWheelSelector(random.Random(seed))
        self.calls = []

    def __call__(self, population, fitness_values, total_fitness, size):
        index = self.inner(population, fitness_values, total_fitness, size)
        self.calls.append((list(fitness_values), total_fitness, size, index))
        return index


@pytest.fixture
def selector():
    return RouletteWheelSelector(random.Random(42))


class TestAdvance:
    """Shape of the new population."""

    def test_new_population_has_requested_size(self, ops, selector):
        old = ops.population([1.0, 2.0, 3.0, 4.0])

        new = next_generation_retained(old, 7, ops, selector)

        assert len(new) == 7
        assert all(individual is not None for individual in new)

    def test_slot_zero_is_clone_of_best(self, ops, selector):
        old = ops.population([0.5, 9.0, 3.0, 9.0])

        new = next_generation_retained(old, 5, ops, selector)

        assert new[0].value == 9.0
        assert all(new[0] is not individual for individual in old)

    def test_elite_never_worse_than_old_best(self, make_ops):
        rng = random.Random(99)
        for trial in range(25):
            ops = make_ops(recombination=True, mutation=True)
            old = ops.population([rng.uniform(0, 10) for _ in range(rng.randint(1, 12))])
            best = max(individual.value for individual in old)

            new = next_generation(
                old, rng.randint(1, 12), ops, RouletteWheelSelector(rng)
            )

            assert ops.fitness(new[0]) >= best

    def test_clone_count_without_operators(self, ops, selector):
        old = ops.population([1.0, 2.0, 3.0])

        next_generation_retained(old, 6, ops, selector)

        # One elite plus one clone per remaining slot
        assert ops.clones == 6

    def test_single_individual_fills_every_slot(self, ops):
        old = ops.population([2.5])
        selector = RecordingSelector()

        new = next_generation_retained(old, 4, ops, selector)

        assert [individual.value for individual in new] == [2.5] * 4
        assert all(index == 0 for *_, index in selector.calls)

    def test_returns_parent_stats(self, ops, selector):
        old = ops.population([1.0, -2.0, 4.0, 3.0])

        new, stats = advance(old, 3, ops, selector)

        assert stats.size == 4
        assert stats.best_index == 2
        assert stats.best_fitness == 4.0
        assert stats.total_fitness == 8.0
        assert stats.mean_fitness == 2.0

    def test_first_maximum_wins_ties(self, ops, selector):
        old = ops.population([5.0, 5.0, 1.0])

        _, stats = advance(old, 2, ops, selector)

        assert stats.best_index == 0


class TestClamping:
    """Negative fitness is treated as zero before selection."""

    def test_negative_values_clamped_for_selector(self, ops):
        old = ops.population([-5.0, -1.0, 2.0])
        selector = RecordingSelector()

        next_generation_retained(old, 3, ops, selector)

        fitness_values, total, size, _ = selector.calls[0]
        assert fitness_values == [0.0, 0.0, 2.0]
        assert total == 2.0
        assert size == 3

    def test_all_negative_population_selects_last(self, ops):
        old = ops.population([-3.0, -1.0, -2.0])
        selector = RecordingSelector()

        new = next_generation_retained(old, 4, ops, selector)

        # Everything clamps to zero: first index stays the elite and the
        # zero-total roulette falls back to the last index every time.
        assert new[0].value == -3.0
        assert all(index == 2 for *_, index in selector.calls)
        assert all(total == 0.0 for _, total, _, _ in selector.calls)


class TestOperators:
    """Recombination and mutation paths."""

    def test_recombination_hides_first_parent(self, make_ops):
        ops = make_ops(recombination=True)
        old = ops.population([1.0, 2.0, 3.0, 4.0])
        selector = RecordingSelector(seed=3)

        next_generation_retained(old, 5, ops, selector)

        assert len(selector.calls) == 8  # two selections per non-elite slot
        original = [1.0, 2.0, 3.0, 4.0]
        for first, second in zip(selector.calls[::2], selector.calls[1::2]):
            first_values, first_total, _, k = first
            second_values, second_total, _, _ = second
            assert first_values == original
            expected = list(original)
            expected[k] = 0.0
            assert second_values == expected
            # The total is not adjusted for the hidden parent
            assert second_total == first_total == 10.0

    def test_recombination_replaces_cloning(self, make_ops, selector):
        ops = make_ops(recombination=True)
        old = ops.population([1.0, 2.0, 3.0])

        next_generation_retained(old, 4, ops, selector)

        assert ops.recombinations == 3
        assert ops.clones == 1  # the elite only

    def test_mutation_result_is_stored(self, make_ops, selector):
        ops = make_ops(mutation=True)
        old = ops.population([1.0, 2.0, 3.0])

        new = next_generation_retained(old, 4, ops, selector)

        assert ops.mutations == 3
        assert new[0].value == 3.0  # elite is not mutated
        assert all(not individual.deleted for individual in new)
        assert all(individual.value in (1.5, 2.5, 3.5) for individual in new[1:])

    def test_mutation_applies_after_recombination(self, make_ops, selector):
        ops = make_ops(recombination=True, mutation=True)
        old = ops.population([2.0, 4.0])

        new = next_generation_retained(old, 3, ops, selector)

        assert ops.recombinations == 2
        assert ops.mutations == 2
        assert len(new) == 3


class TestOwnership:
    """Retain versus consume."""

    def test_retained_population_untouched(self, ops, selector):
        old = ops.population([1.0, 2.0, 3.0])
        before = list(old)

        new = next_generation_retained(old, 5, ops, selector)

        assert old == before
        assert not any(individual.deleted for individual in old)
        assert ops.deleted == []
        assert len(ops.live) == 3 + 5

    def test_consumed_population_deleted_once(self, ops, selector):
        old = ops.population([1.0, 2.0, 3.0, 4.0])
        old_members = list(old)

        new = next_generation(old, 3, ops, selector)

        assert old == []
        assert all(individual.deleted for individual in old_members)
        assert sorted(t.id for t in ops.deleted) == sorted(t.id for t in old_members)
        assert not any(individual.deleted for individual in new)
        assert ops.live == {individual.id for individual in new}

    def test_consume_skips_holes(self, ops):
        population = [ops.make(1.0), None, ops.make(2.0)]

        release_population(population, ops)

        assert population == []
        assert len(ops.deleted) == 2


class TestAllocationFailure:
    """No population is produced and the old one keeps its state."""

    @pytest.mark.parametrize("entry_point", [next_generation, next_generation_retained])
    def test_population_allocation_failure(self, mocker, ops, selector, entry_point):
        mocker.patch(
            "ga_engine.generation._allocate_population",
            side_effect=AllocationFailure("population", 5),
        )
        old = ops.population([1.0, 2.0, 3.0])
        before = list(old)

        assert entry_point(old, 5, ops, selector) is None

        assert old == before
        assert ops.deleted == []
        assert ops.clones == 0

    def test_fitness_buffer_allocation_failure(self, mocker, ops, selector):
        mocker.patch(
            "ga_engine.generation._allocate_fitness_buffer",
            side_effect=AllocationFailure("fitness buffer", 3),
        )
        old = ops.population([1.0, 2.0, 3.0])

        assert next_generation(old, 5, ops, selector) is None

        assert len(old) == 3
        assert ops.fitness_calls == 0

    def test_failure_is_logged(self, mocker, ops, selector, caplog):
        mocker.patch(
            "ga_engine.generation._allocate_population",
            side_effect=AllocationFailure("population", 5),
        )

        with caplog.at_level("ERROR", logger="ga_engine.generation"):
            next_generation(ops.population([1.0]), 5, ops, selector)

        assert "Could not allocate population of size 5" in caplog.text

    def test_allocators_translate_memory_error(self):
        with pytest.raises(AllocationFailure) as exc_info:
            _allocate_population(sys.maxsize)
        assert exc_info.value.code == "ALLOCATION_FAILURE"

        with pytest.raises(AllocationFailure):
            _allocate_fitness_buffer(sys.maxsize)


class TestPreconditions:
    def test_empty_population(self, ops, selector):
        with pytest.raises(EmptyPopulationError):
            next_generation([], 3, ops, selector)

    def test_non_positive_new_size(self, ops, selector):
        with pytest.raises(InvalidConfigError):
            next_generation_retained(ops.population([1.0]), 0, ops, selector)
