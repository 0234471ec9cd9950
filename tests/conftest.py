"""Shared fixtures and helper generators for paramfuzz tests."""

import itertools
import threading

import pytest

from paramfuzz import ExecutionResult, ParamGenerator, of


class CountingGenerator(ParamGenerator):
    """Infinite generator yielding 0, 1, 2, ... on every sequence."""

    def sequence(self):
        return itertools.count()

    def is_infinite(self):
        return True


class RecordingGenerator(ParamGenerator):
    """Finite generator that records feedback and close calls."""

    def __init__(self, *values):
        self.values = values
        self.completed = []
        self.close_count = 0
        self.sequence_calls = 0
        self._lock = threading.Lock()

    def sequence(self):
        self.sequence_calls += 1
        return iter(self.values)

    def on_complete(self, result, index, value):
        with self._lock:
            self.completed.append((result, index, value))

    def close(self):
        self.close_count += 1


class EmptyGenerator(ParamGenerator):
    def sequence(self):
        return iter(())


@pytest.fixture
def ab():
    return of('a', 'b')


@pytest.fixture
def xyz():
    return of('x', 'y', 'z')


@pytest.fixture
def counter():
    return CountingGenerator()


@pytest.fixture
def make_result():
    def _make(*params, error=None):
        return ExecutionResult(target=None, params=tuple(params), error=error)
    return _make
