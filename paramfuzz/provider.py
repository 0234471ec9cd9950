"""Tuple composition strategies.

A ``ParamProvider`` drives one generator per parameter and combines their
values into full argument tuples. Position ``i`` of every tuple always comes
from ``generators[i]``. Streams are plain iterators and may be infinite; a
driver stops early simply by no longer pulling.
"""

import logging
import random
from typing import Any, Callable, Iterator, List, Optional, Sequence, Tuple

from .config import (
    DEFAULT_MAX_DUPLICATE_DRAWS,
    DEFAULT_PERMUTATION_LIMIT,
    DEFAULT_SEEN_LIMIT,
    ExecutionResult,
)
from .errors import InvalidConfigurationError
from .generator import ParamGenerator


logger = logging.getLogger(__name__)

ParamTuple = Tuple[Any, ...]
ProviderFactory = Callable[[List[ParamGenerator]], 'ParamProvider']
PartitionPredicate = Callable[[int, ParamGenerator], bool]

_END = object()


class ParamProvider:
    """Base class for composition strategies over an ordered set of generators."""

    def __init__(self, generators: Sequence[ParamGenerator]):
        self.generators: Tuple[ParamGenerator, ...] = tuple(generators)

    @property
    def arity(self) -> int:
        return len(self.generators)

    def stream(self) -> Iterator[ParamTuple]:
        """Return a fresh, possibly infinite, iterator of parameter tuples."""
        if not self.generators:
            return iter([()])
        return self._stream()

    def _stream(self) -> Iterator[ParamTuple]:
        raise NotImplementedError

    def __iter__(self) -> Iterator[ParamTuple]:
        return self.stream()

    def route_result(self, result: ExecutionResult) -> None:
        """Hand an execution result to the generator behind each position."""
        if len(result.params) != self.arity:
            raise InvalidConfigurationError(
                f"Result has {len(result.params)} params, provider arity is {self.arity}"
            )
        for index, gen in enumerate(self.generators):
            gen.on_complete(result, index, result.params[index])

    def close(self) -> None:
        for gen in self.generators:
            gen.close()

    def __enter__(self) -> 'ParamProvider':
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _restart(self, index: int) -> Tuple[Iterator[Any], Any]:
        """Start a new sequence for a generator and take its first value."""
        seq = self.generators[index].sequence()
        value = next(seq, _END)
        if value is _END:
            raise InvalidConfigurationError(f"Generator at index {index} produced no values")
        return seq, value


class _CycleTracker:
    """Remembers which generator indices have wrapped at least once."""

    def __init__(self, size: int):
        self.wrapped = [False] * size
        self.remaining = size

    def mark(self, index: int) -> bool:
        """Record a wrap; True when every index has now wrapped."""
        if not self.wrapped[index]:
            self.wrapped[index] = True
            self.remaining -= 1
        return self.remaining == 0


class EvenAllParamChange(ParamProvider):
    """Advances every generator by one value on each step."""

    def __init__(self, generators: Sequence[ParamGenerator],
                 complete_when_all_cycled: bool = True):
        super().__init__(generators)
        self.complete_when_all_cycled = complete_when_all_cycled

    def _stream(self) -> Iterator[ParamTuple]:
        seqs = [gen.sequence() for gen in self.generators]
        tracker = _CycleTracker(self.arity)
        params = [None] * self.arity
        while True:
            for i, seq in enumerate(seqs):
                value = next(seq, _END)
                if value is _END:
                    if self.complete_when_all_cycled and tracker.mark(i):
                        logger.debug("All %d generators cycled, ending stream", self.arity)
                        return
                    seqs[i], value = self._restart(i)
                params[i] = value
            yield tuple(params)


class EvenSingleParamChange(ParamProvider):
    """Changes one parameter per step, rotating left to right.

    The first tuple holds every generator's initial value.
    """

    def __init__(self, generators: Sequence[ParamGenerator],
                 complete_when_all_cycled: bool = True):
        super().__init__(generators)
        self.complete_when_all_cycled = complete_when_all_cycled

    def _stream(self) -> Iterator[ParamTuple]:
        seqs = []
        params = []
        for i in range(self.arity):
            seq, value = self._restart(i)
            seqs.append(seq)
            params.append(value)
        yield tuple(params)

        tracker = _CycleTracker(self.arity)
        index = 0
        while True:
            value = next(seqs[index], _END)
            if value is _END:
                if self.complete_when_all_cycled and tracker.mark(index):
                    logger.debug("All %d generators cycled, ending stream", self.arity)
                    return
                seqs[index], value = self._restart(index)
            params[index] = value
            yield tuple(params)
            index = (index + 1) % self.arity


class AllPermutations(ParamProvider):
    """Cartesian product of finite generators.

    The first generator varies slowest and the last fastest, as nested loops
    would. Inner sequences are restarted for every outer combination.
    """

    def __init__(self, generators: Sequence[ParamGenerator]):
        super().__init__(generators)
        for i, gen in enumerate(self.generators):
            if gen.is_infinite():
                raise InvalidConfigurationError(
                    f"Cannot have infinite generator for all permutations (index {i})"
                )

    def _stream(self) -> Iterator[ParamTuple]:
        return self._expand(0, ())

    def _expand(self, index: int, prefix: ParamTuple) -> Iterator[ParamTuple]:
        if index == self.arity:
            yield prefix
            return
        for value in self.generators[index].sequence():
            yield from self._expand(index + 1, prefix + (value,))


class RandomSingleParamChange(ParamProvider):
    """Changes one randomly chosen parameter per step, avoiding repeats.

    Repeats are detected on the vector of per-generator positions. The set of
    seen vectors is cleared when it reaches ``seen_limit``, so deduplication
    is best effort. The stream ends once ``max_duplicate_draws`` consecutive
    draws only produce vectors already seen.
    """

    def __init__(self, generators: Sequence[ParamGenerator],
                 rng: Optional[random.Random] = None,
                 seen_limit: int = DEFAULT_SEEN_LIMIT,
                 max_duplicate_draws: int = DEFAULT_MAX_DUPLICATE_DRAWS):
        super().__init__(generators)
        self.rng = rng or random.Random()
        self.seen_limit = seen_limit
        self.max_duplicate_draws = max_duplicate_draws

    def _stream(self) -> Iterator[ParamTuple]:
        seqs: List[Optional[Iterator[Any]]] = [None] * self.arity
        positions = [0] * self.arity
        params: List[Any] = []
        seen = set()

        while True:
            for _ in range(self.max_duplicate_draws):
                if len(seen) >= self.seen_limit:
                    logger.debug("Clearing %d seen position vectors", len(seen))
                    seen.clear()

                if not params:
                    for i in range(self.arity):
                        seqs[i], value = self._restart(i)
                        params.append(value)
                else:
                    index = self.rng.randrange(self.arity)
                    value = next(seqs[index], _END)
                    if value is _END:
                        seqs[index], value = self._restart(index)
                        positions[index] = 0
                    else:
                        positions[index] += 1
                    params[index] = value

                key = tuple(positions)
                if key not in seen:
                    seen.add(key)
                    break
            else:
                logger.debug("Gave up after %d duplicate draws", self.max_duplicate_draws)
                return
            yield tuple(params)


class _Cursor:
    """Iterator with one value of lookahead."""

    def __init__(self, iterator: Iterator[Any]):
        self._iterator = iterator
        self._next = _END

    def has_next(self) -> bool:
        if self._next is _END:
            self._next = next(self._iterator, _END)
        return self._next is not _END

    def take(self) -> Any:
        if not self.has_next():
            raise StopIteration
        value, self._next = self._next, _END
        return value


class Partitioned(ParamProvider):
    """Splits generators in two groups, each driven by its own provider.

    ``predicate(index, generator)`` decides the group of every generator once,
    at construction. Sub-provider outputs are scattered back to the original
    positions. When one group is empty the other group's provider is used
    as is.
    """

    def __init__(self, generators: Sequence[ParamGenerator],
                 predicate: PartitionPredicate,
                 true_provider: ProviderFactory,
                 false_provider: ProviderFactory,
                 stop_when_both_completed: bool = True):
        super().__init__(generators)
        self.predicate = predicate
        self.stop_when_both_completed = stop_when_both_completed

        self.true_indices: List[int] = []
        self.false_indices: List[int] = []
        for i, gen in enumerate(self.generators):
            if predicate(i, gen):
                self.true_indices.append(i)
            else:
                self.false_indices.append(i)
        logger.debug("Partitioned %d generators: true=%s false=%s",
                     self.arity, self.true_indices, self.false_indices)

        self.true_provider: Optional[ParamProvider] = None
        self.false_provider: Optional[ParamProvider] = None
        if self.true_indices:
            self.true_provider = true_provider([self.generators[i] for i in self.true_indices])
        if self.false_indices:
            self.false_provider = false_provider([self.generators[i] for i in self.false_indices])

    def stream(self) -> Iterator[ParamTuple]:
        if self.true_provider is None and self.false_provider is None:
            return super().stream()
        if self.true_provider is None:
            return self.false_provider.stream()
        if self.false_provider is None:
            return self.true_provider.stream()
        return self._stream()

    def _stream(self) -> Iterator[ParamTuple]:
        sides = [
            _PartitionSide(self.true_provider, self.true_indices),
            _PartitionSide(self.false_provider, self.false_indices),
        ]
        while True:
            for side in sides:
                side.restart_if_exhausted()
            if self.stop_when_both_completed and all(side.completed for side in sides):
                logger.debug("Both partitions completed, ending stream")
                return

            params = [None] * self.arity
            for side in sides:
                side.scatter(params)
            yield tuple(params)


class _PartitionSide:
    """Stream state of one half of a ``Partitioned`` provider."""

    def __init__(self, provider: ParamProvider, indices: List[int]):
        self.provider = provider
        self.indices = indices
        self.cursor = _Cursor(provider.stream())
        self.completed = False

    def restart_if_exhausted(self) -> None:
        if not self.cursor.has_next():
            self.completed = True
            self.cursor = _Cursor(self.provider.stream())

    def scatter(self, params: List[Any]) -> None:
        """Write the next sub-tuple into its original positions."""
        if not self.cursor.has_next():
            raise InvalidConfigurationError(
                f"{type(self.provider).__name__} produced no tuples after restart"
            )
        for index, value in zip(self.indices, self.cursor.take()):
            params[index] = value


def _is_infinite(index: int, gen: ParamGenerator) -> bool:
    return gen.is_infinite()


class Suggested(ParamProvider):
    """Default hybrid policy.

    Infinite generators change one at a time in rotation. The first
    ``permutation_limit`` finite generators go through all permutations; the
    remaining finite ones get random single changes, deduplicated with
    ``seen_limit`` and ``max_duplicate_draws``.
    """

    def __init__(self, generators: Sequence[ParamGenerator],
                 rng: Optional[random.Random] = None,
                 permutation_limit: int = DEFAULT_PERMUTATION_LIMIT,
                 seen_limit: int = DEFAULT_SEEN_LIMIT,
                 max_duplicate_draws: int = DEFAULT_MAX_DUPLICATE_DRAWS):
        super().__init__(generators)
        self.rng = rng
        self.permutation_limit = permutation_limit
        self.seen_limit = seen_limit
        self.max_duplicate_draws = max_duplicate_draws
        self.provider = Partitioned(
            self.generators,
            _is_infinite,
            EvenSingleParamChange,
            self._finite_provider,
        )

    def _finite_provider(self, generators: List[ParamGenerator]) -> ParamProvider:
        return Partitioned(
            generators,
            lambda index, gen: index < self.permutation_limit,
            AllPermutations,
            self._random_provider,
        )

    def _random_provider(self, generators: List[ParamGenerator]) -> ParamProvider:
        return RandomSingleParamChange(generators, rng=self.rng,
                                       seen_limit=self.seen_limit,
                                       max_duplicate_draws=self.max_duplicate_draws)

    def stream(self) -> Iterator[ParamTuple]:
        return self.provider.stream()


PROVIDERS = {
    'suggested': Suggested,
    'all_permutations': AllPermutations,
    'even_single_param_change': EvenSingleParamChange,
    'even_all_param_change': EvenAllParamChange,
    'random_single_param_change': RandomSingleParamChange,
}
