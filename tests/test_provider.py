"""
Tests for tuple composition strategies.
"""

import itertools
import random

import pytest
from hypothesis import given, settings, strategies as st

from paramfuzz import (
    AllPermutations,
    ClosedGeneratorError,
    EvenAllParamChange,
    EvenSingleParamChange,
    ExecutionResult,
    InvalidConfigurationError,
    ParamFuzzError,
    Partitioned,
    RandomSingleParamChange,
    Suggested,
    of,
)

from .conftest import CountingGenerator, EmptyGenerator, RecordingGenerator


CI_SETTINGS = settings(max_examples=25, deadline=None)

sizes_strategy = st.lists(st.integers(min_value=1, max_value=4), min_size=1, max_size=4)


def make_generators(sizes):
    """Generators whose values encode (position, index) so origins are checkable."""
    return [of(*[(pos, i) for i in range(size)]) for pos, size in enumerate(sizes)]


def take(provider, n):
    return list(itertools.islice(provider.stream(), n))


# AllPermutations

def test_all_permutations_nested_order(ab, xyz):
    provider = AllPermutations([ab, xyz])
    assert list(provider.stream()) == [
        ('a', 'x'), ('a', 'y'), ('a', 'z'),
        ('b', 'x'), ('b', 'y'), ('b', 'z'),
    ]
    # A new stream starts over
    assert len(list(provider)) == 6


def test_all_permutations_rejects_infinite(ab, counter):
    with pytest.raises(InvalidConfigurationError):
        AllPermutations([ab, counter])


def test_all_permutations_restarts_inner_sequences():
    outer = RecordingGenerator(1, 2, 3)
    inner = RecordingGenerator('p', 'q')
    assert len(list(AllPermutations([outer, inner]).stream())) == 6
    assert outer.sequence_calls == 1
    assert inner.sequence_calls == 3


@given(sizes=sizes_strategy)
@CI_SETTINGS
def test_all_permutations_count_and_order(sizes):
    tuples = list(AllPermutations(make_generators(sizes)).stream())
    assert len(tuples) == len(set(tuples)) == _product(sizes)
    # Lexicographic order of (pos, index) pairs is nested-loop order
    assert tuples == sorted(tuples)


def _product(sizes):
    total = 1
    for size in sizes:
        total *= size
    return total


# EvenAllParamChange

def test_even_all_param_change_terminates(ab, xyz):
    provider = EvenAllParamChange([ab, xyz])
    assert list(provider.stream()) == [('a', 'x'), ('b', 'y'), ('a', 'z')]


def test_even_all_param_change_without_termination(ab, xyz):
    provider = EvenAllParamChange([ab, xyz], complete_when_all_cycled=False)
    assert take(provider, 7) == [
        ('a', 'x'), ('b', 'y'), ('a', 'z'),
        ('b', 'x'), ('a', 'y'), ('b', 'z'),
        ('a', 'x'),
    ]


def test_even_all_param_change_infinite_never_ends(ab, counter):
    provider = EvenAllParamChange([ab, counter])
    assert take(provider, 5) == [('a', 0), ('b', 1), ('a', 2), ('b', 3), ('a', 4)]


# EvenSingleParamChange

def test_even_single_param_change_rotation(ab, xyz):
    tuples = list(EvenSingleParamChange([ab, xyz]).stream())
    assert tuples == [
        ('a', 'x'), ('b', 'x'), ('b', 'y'),
        ('a', 'y'), ('a', 'z'), ('b', 'z'),
    ]
    # Second component changes every other step
    changes = [i for i in range(1, len(tuples)) if tuples[i][1] != tuples[i - 1][1]]
    assert changes == [2, 4]


def test_even_single_param_change_without_termination(ab, xyz):
    provider = EvenSingleParamChange([ab, xyz], complete_when_all_cycled=False)
    assert take(provider, 8)[6:] == [('b', 'x'), ('a', 'x')]


@given(sizes=sizes_strategy)
@CI_SETTINGS
def test_even_single_param_change_one_change_per_step(sizes):
    gens = make_generators(sizes)
    tuples = list(EvenSingleParamChange(gens).stream())
    assert tuples[0] == tuple((pos, 0) for pos in range(len(sizes)))
    for prev, curr in zip(tuples, tuples[1:]):
        assert sum(1 for a, b in zip(prev, curr) if a != b) <= 1
    assert len(tuples) <= _product(sizes) * len(sizes) + 1


def test_empty_generator_is_a_configuration_error(ab):
    with pytest.raises(InvalidConfigurationError):
        list(EvenSingleParamChange([ab, EmptyGenerator()]).stream())


# RandomSingleParamChange

def test_random_single_param_change_is_reproducible():
    first = RandomSingleParamChange(make_generators([3, 4, 5]), rng=random.Random(42))
    second = RandomSingleParamChange(make_generators([3, 4, 5]), rng=random.Random(42))
    assert list(first.stream()) == list(second.stream())


def test_random_single_param_change_starts_with_initial_values():
    provider = RandomSingleParamChange(make_generators([3, 4]), rng=random.Random(1))
    assert next(provider.stream()) == ((0, 0), (1, 0))


def test_random_single_param_change_never_repeats_and_gives_up():
    provider = RandomSingleParamChange(make_generators([3, 4]), rng=random.Random(3))
    tuples = list(provider.stream())
    assert 1 <= len(tuples) <= 12
    assert len(tuples) == len(set(tuples))


def test_random_single_param_change_single_generator():
    provider = RandomSingleParamChange([of('a', 'b')], rng=random.Random(0))
    assert list(provider.stream()) == [('a',), ('b',)]


def test_random_single_param_change_seen_limit_clears():
    provider = RandomSingleParamChange([of('a', 'b')], rng=random.Random(0), seen_limit=2)
    assert take(provider, 6) == [('a',), ('b',)] * 3


def test_random_single_param_change_with_infinite_generator():
    provider = RandomSingleParamChange([CountingGenerator(), of('a', 'b')], rng=random.Random(5))
    tuples = take(provider, 50)
    assert len(tuples) == 50
    assert len(set(tuples)) == 50


@given(sizes=sizes_strategy, seed=st.integers(min_value=0, max_value=2 ** 32))
@CI_SETTINGS
def test_random_single_param_change_arity_and_origin(sizes, seed):
    provider = RandomSingleParamChange(make_generators(sizes), rng=random.Random(seed))
    for params in provider.stream():
        assert len(params) == len(sizes)
        assert all(value[0] == pos for pos, value in enumerate(params))


# Partitioned

def test_partitioned_interleaves_and_terminates(ab, xyz):
    provider = Partitioned(
        [ab, xyz],
        lambda index, gen: index == 0,
        EvenSingleParamChange,
        EvenSingleParamChange,
    )
    assert list(provider.stream()) == [('a', 'x'), ('b', 'y'), ('a', 'z')]


def test_partitioned_without_stop_runs_on(ab, xyz):
    provider = Partitioned(
        [ab, xyz],
        lambda index, gen: index == 0,
        EvenSingleParamChange,
        EvenSingleParamChange,
        stop_when_both_completed=False,
    )
    assert take(provider, 7)[-1] == ('a', 'x')


def test_partitioned_scatters_to_original_positions():
    gens = make_generators([2, 2, 2, 2])
    provider = Partitioned(
        gens,
        lambda index, gen: index % 2 == 1,
        AllPermutations,
        AllPermutations,
    )
    for params in take(provider, 10):
        assert [value[0] for value in params] == [0, 1, 2, 3]


@pytest.mark.parametrize("side", [True, False])
def test_partitioned_degenerates_to_single_provider(side):
    gens = make_generators([2, 3])
    provider = Partitioned(
        gens,
        lambda index, gen: side,
        AllPermutations,
        EvenAllParamChange,
    )
    bare = AllPermutations(gens) if side else EvenAllParamChange(gens)
    assert list(provider.stream()) == list(bare.stream())


def test_partitioned_classifies_once():
    calls = []

    def predicate(index, gen):
        calls.append(index)
        return index == 0

    provider = Partitioned(make_generators([1, 1]), predicate,
                           AllPermutations, AllPermutations)
    list(provider.stream())
    list(provider.stream())
    assert calls == [0, 1]


# Suggested

def test_suggested_all_finite_small_is_all_permutations(ab, xyz):
    assert list(Suggested([ab, xyz]).stream()) == list(AllPermutations([ab, xyz]).stream())


def test_suggested_routes_infinite_to_rotation(ab, counter):
    assert take(Suggested([counter, ab]), 5) == [
        (0, 'a'), (1, 'b'), (2, 'a'), (3, 'b'), (4, 'a'),
    ]


def test_suggested_random_side_beyond_permutation_limit():
    gens = make_generators([2, 2, 2, 2, 3])
    provider = Suggested(gens, rng=random.Random(9))
    assert isinstance(provider.provider.false_provider.false_provider, RandomSingleParamChange)
    assert provider.provider.true_provider is None

    tuples = take(provider, 40)
    assert tuples[0] == tuple((pos, 0) for pos in range(5))
    for params in tuples:
        assert [value[0] for value in params] == [0, 1, 2, 3, 4]


def test_suggested_passes_dedup_limits_to_random_side():
    provider = Suggested(make_generators([1, 1, 1, 1, 2]), rng=random.Random(0),
                         seen_limit=1, max_duplicate_draws=1)
    random_side = provider.provider.false_provider.false_provider
    assert (random_side.seen_limit, random_side.max_duplicate_draws) == (1, 1)


def test_suggested_mixes_rotation_with_finite_strategies(counter):
    gens = [counter] + make_generators([2, 2, 2, 2, 2])
    tuples = take(Suggested(gens, rng=random.Random(0)), 20)
    assert [params[0] for params in tuples] == list(range(20))


@given(sizes=sizes_strategy, infinite=st.lists(st.booleans(), min_size=4, max_size=4))
@CI_SETTINGS
def test_suggested_arity_invariant(sizes, infinite):
    gens = [CountingGenerator().map(lambda v, pos=pos: (pos, v), lambda u: u[1])
            if infinite[pos] else gen
            for pos, gen in enumerate(make_generators(sizes))]
    for params in take(Suggested(gens, rng=random.Random(0)), 30):
        assert len(params) == len(gens)
        assert [value[0] for value in params] == list(range(len(gens)))


# Shared contract

def test_zero_arity_yields_one_empty_tuple():
    assert list(AllPermutations([]).stream()) == [()]
    assert list(EvenSingleParamChange([]).stream()) == [()]
    assert list(Suggested([]).stream()) == [()]


def test_route_result_uses_position(make_result):
    first = RecordingGenerator(1)
    second = RecordingGenerator(2)
    provider = EvenAllParamChange([first, second])
    result = make_result(1, 2, error=RuntimeError())

    provider.route_result(result)

    assert first.completed == [(result, 0, 1)]
    assert second.completed == [(result, 1, 2)]


def test_route_result_rejects_wrong_arity(make_result):
    provider = AllPermutations([RecordingGenerator(1)])
    with pytest.raises(InvalidConfigurationError):
        provider.route_result(make_result(1, 2))


def test_suggested_route_result_reaches_every_generator():
    recorders = [RecordingGenerator(i) for i in range(6)]
    provider = Suggested(recorders, rng=random.Random(0))
    result = ExecutionResult(target=len, params=tuple(range(6)))
    provider.route_result(result)
    assert [r.completed[0][1:] for r in recorders] == [(i, i) for i in range(6)]


def test_close_propagates_to_every_generator():
    recorders = [RecordingGenerator(i) for i in range(3)]
    with Suggested(recorders) as provider:
        list(provider.stream())
    assert [r.close_count for r in recorders] == [1, 1, 1]


def test_stream_pulled_after_close_raises_library_error(ab):
    provider = EvenAllParamChange([ab], complete_when_all_cycled=False)
    stream = provider.stream()
    assert next(stream) == ('a',)
    provider.close()
    with pytest.raises(ClosedGeneratorError) as excinfo:
        next(stream)
    assert isinstance(excinfo.value, ParamFuzzError)
