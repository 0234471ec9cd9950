"""Curated boundary values for numeric kinds."""

import itertools
import sys
from pathlib import Path
from typing import Any, Iterator, Union

from .config import ValueKind
from .errors import UnsupportedTypeError
from .generator import FixedGenerator, of


BYTE_MIN, BYTE_MAX = -2 ** 7, 2 ** 7 - 1
SHORT_MIN, SHORT_MAX = -2 ** 15, 2 ** 15 - 1
INT_MIN, INT_MAX = -2 ** 31, 2 ** 31 - 1
LONG_MIN, LONG_MAX = -2 ** 63, 2 ** 63 - 1

# IEEE 754 single precision limits
FLOAT32_MIN_NORMAL = 2.0 ** -126
FLOAT32_MIN_VALUE = 2.0 ** -149
FLOAT32_MAX = (2.0 - 2.0 ** -23) * 2.0 ** 127

DOUBLE_MIN_NORMAL = sys.float_info.min
DOUBLE_MIN_VALUE = 5e-324
DOUBLE_MAX = sys.float_info.max


def interesting_bytes() -> Iterator[int]:
    return itertools.chain((BYTE_MIN, 64, 100, BYTE_MAX), range(-35, 36))


def interesting_shorts() -> Iterator[int]:
    return itertools.chain(
        interesting_bytes(),
        (SHORT_MIN, -129, 128, 255, 256, 512, 1000, 1024, 4096, SHORT_MAX),
    )


def interesting_ints() -> Iterator[int]:
    return itertools.chain(
        interesting_shorts(),
        (INT_MIN, -100663046, -32769, 32768, 65535, 65536, 100663045, INT_MAX),
    )


def interesting_longs() -> Iterator[int]:
    return itertools.chain(interesting_ints(), (LONG_MIN, LONG_MAX))


def interesting_floats() -> Iterator[float]:
    return itertools.chain(
        (float(v) for v in interesting_longs()),
        (FLOAT32_MIN_NORMAL, FLOAT32_MIN_VALUE, FLOAT32_MAX,
         float('-inf'), float('inf'), float('nan')),
    )


def interesting_doubles() -> Iterator[float]:
    return itertools.chain(
        interesting_floats(),
        (DOUBLE_MIN_NORMAL, DOUBLE_MIN_VALUE, DOUBLE_MAX),
    )


INTERESTING_VALUES = {
    ValueKind.BYTE: interesting_bytes,
    ValueKind.SHORT: interesting_shorts,
    ValueKind.INT: interesting_ints,
    ValueKind.LONG: interesting_longs,
    ValueKind.FLOAT: interesting_floats,
    ValueKind.DOUBLE: interesting_doubles,
}


def _nullable(values) -> Iterator[Any]:
    return itertools.chain((None,), values())


def suggested(kind: Union[ValueKind, str, type], nullable: bool = False) -> FixedGenerator:
    """Return the curated generator for a value kind.

    With ``nullable`` the sequence starts with None.
    """
    kind = ValueKind.parse(kind)
    if kind is ValueKind.BOOL:
        return of(None, True, False) if nullable else of(True, False)
    if kind is ValueKind.CHAR:
        raise UnsupportedTypeError(kind.value, "character generation is not implemented")

    values = INTERESTING_VALUES[kind]
    if nullable:
        return FixedGenerator(lambda: _nullable(values))
    return FixedGenerator(values)


def lines(path: Union[str, Path], encoding: str = 'utf-8') -> FixedGenerator:
    """Generator over the lines of a text file.

    Every sequence holds its own file handle until it is exhausted, dropped,
    or the generator is closed.
    """
    path = Path(path)

    def read_lines() -> Iterator[str]:
        with open(path, 'r', encoding=encoding) as f:
            for line in f:
                yield line.rstrip('\n')

    return FixedGenerator(read_lines)
