"""Per-parameter value sources.

A ``ParamGenerator`` is a restartable lazy sequence of values for one
parameter of the function under test. Every call to ``sequence()`` returns an
independent iterator, so providers can restart a generator whenever its
current sequence is exhausted.
"""

import logging
import random
import re
import threading
import weakref
from collections import deque
from typing import Any, Callable, Iterable, Iterator, List, Optional

import rstr

from .config import ExecutionResult
from .errors import ClosedGeneratorError, InvalidConfigurationError


logger = logging.getLogger(__name__)


class ParamGenerator:
    """Base class for parameter value sources.

    Subclasses implement ``sequence()`` and, when their value space is
    unbounded or driven by feedback, ``is_infinite()``.
    """

    def sequence(self) -> Iterator[Any]:
        """Return a fresh iterator over this generator's values."""
        raise NotImplementedError

    def __iter__(self) -> Iterator[Any]:
        return self.sequence()

    def is_infinite(self) -> bool:
        return False

    def on_complete(self, result: ExecutionResult, index: int, value: Any) -> None:
        """Called after an invocation using ``value`` at position ``index``.

        May be called from worker threads. Generators with mutable state
        must do their own locking.
        """

    def close(self) -> None:
        """Release any held resources."""

    def __enter__(self) -> 'ParamGenerator':
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def map(self, fn_to: Callable[[Any], Any],
            fn_from: Callable[[Any], Any]) -> 'MappedGenerator':
        """Adapt values with ``fn_to``, dropping those it maps to None.

        ``fn_from`` maps a value back to this generator's domain so feedback
        can be routed to it.
        """
        return MappedGenerator(self, fn_to, fn_from)


class MappedGenerator(ParamGenerator):
    """Generator adapting the values of another generator."""

    def __init__(self, base: ParamGenerator, fn_to: Callable[[Any], Any],
                 fn_from: Callable[[Any], Any]):
        self.base = base
        self.fn_to = fn_to
        self.fn_from = fn_from

    def sequence(self) -> Iterator[Any]:
        return self._mapped(self.base.sequence())

    def _mapped(self, values: Iterator[Any]) -> Iterator[Any]:
        for value in values:
            mapped = self.fn_to(value)
            if mapped is not None:
                yield mapped

    def is_infinite(self) -> bool:
        return self.base.is_infinite()

    def on_complete(self, result: ExecutionResult, index: int, value: Any) -> None:
        self.base.on_complete(result, index, self.fn_from(value))

    def close(self) -> None:
        self.base.close()


class NullableGenerator(ParamGenerator):
    """Generator whose every sequence yields None before the base values."""

    def __init__(self, base: ParamGenerator):
        self.base = base

    def sequence(self) -> Iterator[Any]:
        return self._prefixed(self.base.sequence())

    def _prefixed(self, values: Iterator[Any]) -> Iterator[Any]:
        yield None
        yield from values

    def is_infinite(self) -> bool:
        return self.base.is_infinite()

    def on_complete(self, result: ExecutionResult, index: int, value: Any) -> None:
        # None never came from the base
        if value is not None:
            self.base.on_complete(result, index, value)

    def close(self) -> None:
        self.base.close()


class FixedGenerator(ParamGenerator):
    """Finite generator over the iterables returned by a factory.

    Each ``sequence()`` call invokes ``factory`` lazily, on first use of the
    returned iterator. Live sequences are tracked so ``close()`` can run their
    cleanup even when a provider abandoned them half way.
    """

    def __init__(self, factory: Callable[[], Iterable[Any]],
                 on_close: Optional[Callable[[], None]] = None):
        self.factory = factory
        self.on_close = on_close
        self._live = weakref.WeakSet()
        self._lock = threading.Lock()
        self._closed = False

    def sequence(self) -> Iterator[Any]:
        with self._lock:
            if self._closed:
                raise ClosedGeneratorError("Sequence requested from a closed generator")
            seq = self._iterate()
            self._live.add(seq)
        return seq

    def _iterate(self) -> Iterator[Any]:
        source = iter(self.factory())
        try:
            yield from source
        finally:
            close = getattr(source, 'close', None)
            if close is not None:
                close()

    def close(self) -> None:
        with self._lock:
            if self._closed:
                return
            self._closed = True
            live = list(self._live)
        for seq in live:
            seq.close()
        if self.on_close is not None:
            self.on_close()


def of(*items: Any) -> FixedGenerator:
    """Create a finite generator over literal values."""
    return FixedGenerator(lambda: items)


def of_fixed(factory: Callable[[], Iterable[Any]],
             on_close: Optional[Callable[[], None]] = None) -> FixedGenerator:
    """Create a finite generator from an iterable factory."""
    return FixedGenerator(factory, on_close)


class RegexGenerator(ParamGenerator):
    """Infinite generator of strings matching a regular expression."""

    def __init__(self, pattern: str, rng: Optional[random.Random] = None):
        try:
            re.compile(pattern)
        except re.error as e:
            raise InvalidConfigurationError(f"Invalid pattern '{pattern}': {e}")
        self.pattern = pattern
        self._rstr = rstr.Rstr(rng or random.Random())

    def sequence(self) -> Iterator[str]:
        while True:
            yield self._rstr.xeger(self.pattern)

    def is_infinite(self) -> bool:
        return True


def _failed(result: ExecutionResult) -> bool:
    return result.failed


class FeedbackGenerator(ParamGenerator):
    """Infinite generator mutating a corpus that grows from feedback.

    Every step picks a corpus entry at random and yields ``mutate(rng, entry)``.
    Values whose invocation satisfied ``keep`` (by default: the call raised)
    are added to the corpus; beyond ``max_corpus`` entries the oldest
    non-seed entries are evicted.
    """

    def __init__(self, seeds: Iterable[Any],
                 mutate: Callable[[random.Random, Any], Any],
                 rng: Optional[random.Random] = None,
                 keep: Callable[[ExecutionResult], bool] = _failed,
                 max_corpus: int = 1000):
        self.seeds = list(seeds)
        if not self.seeds:
            raise InvalidConfigurationError("FeedbackGenerator needs at least one seed")
        self.mutate = mutate
        self.rng = rng or random.Random()
        self.keep = keep
        self.max_corpus = max_corpus
        self._found = deque()
        self._lock = threading.Lock()

    @property
    def corpus(self) -> List[Any]:
        """Snapshot of seeds plus values kept from feedback."""
        with self._lock:
            return self.seeds + list(self._found)

    def sequence(self) -> Iterator[Any]:
        while True:
            with self._lock:
                pick = self.rng.randrange(len(self.seeds) + len(self._found))
                if pick < len(self.seeds):
                    value = self.seeds[pick]
                else:
                    value = self._found[pick - len(self.seeds)]
            yield self.mutate(self.rng, value)

    def is_infinite(self) -> bool:
        return True

    def on_complete(self, result: ExecutionResult, index: int, value: Any) -> None:
        if not self.keep(result):
            return
        with self._lock:
            if value in self._found or value in self.seeds:
                return
            self._found.append(value)
            while len(self.seeds) + len(self._found) > self.max_corpus and self._found:
                self._found.popleft()
        logger.debug("Kept value %r from parameter %d", value, index)
