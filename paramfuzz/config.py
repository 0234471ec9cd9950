"""Configuration and data classes for paramfuzz."""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Optional, Tuple

from .errors import UnsupportedTypeError


# Tunable defaults for the randomized and hybrid providers
DEFAULT_SEEN_LIMIT = 20000
DEFAULT_MAX_DUPLICATE_DRAWS = 200
DEFAULT_PERMUTATION_LIMIT = 4


class ValueKind(Enum):
    """Value kinds with a curated set of interesting values"""
    BOOL = "bool"
    BYTE = "byte"
    SHORT = "short"
    INT = "int"
    LONG = "long"
    FLOAT = "float"
    DOUBLE = "double"
    CHAR = "char"

    @classmethod
    def parse(cls, value: Any) -> 'ValueKind':
        """Resolve a kind from an enum member, its name, or a Python type."""
        if isinstance(value, cls):
            return value
        if isinstance(value, type):
            kind = _PYTHON_TYPES.get(value)
            if kind is None:
                raise UnsupportedTypeError(value.__name__)
            return kind
        if isinstance(value, str):
            try:
                return cls(value.lower())
            except ValueError:
                raise UnsupportedTypeError(value)
        raise UnsupportedTypeError(repr(value))


_PYTHON_TYPES = {
    bool: ValueKind.BOOL,
    int: ValueKind.LONG,
    float: ValueKind.DOUBLE,
    str: ValueKind.CHAR,
}


@dataclass(frozen=True)
class ExecutionResult:
    """Outcome of invoking the function under test with one tuple.

    ``result`` is set when the call returned, ``error`` when it raised.
    """
    target: Any
    params: Tuple[Any, ...]
    result: Any = None
    error: Optional[BaseException] = None

    @property
    def failed(self) -> bool:
        return self.error is not None


@dataclass
class ExplorationConfig:
    """Configuration for building and previewing an exploration plan"""
    seed: Optional[int] = None
    max_tuples: Optional[int] = 100
    generators_file: Optional[Path] = None
