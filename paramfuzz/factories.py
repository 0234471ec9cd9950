"""Built-in generator factories available to exploration plans."""

import random
from typing import Any, Dict

from .config import ValueKind
from .errors import InvalidConfigurationError
from .generator import FeedbackGenerator, ParamGenerator, RegexGenerator, of
from .registry import GeneratorRegistry, register_generator
from .values import INT_MIN, interesting_ints, lines, suggested


def _register_kind(kind: ValueKind) -> None:
    def factory(rng: random.Random, params: Dict[str, Any]) -> ParamGenerator:
        return suggested(kind, nullable=params.get('nullable', False))
    GeneratorRegistry.register(kind.value, factory)


for _kind in ValueKind:
    _register_kind(_kind)


def _require(params: Dict[str, Any], key: str, generator: str) -> Any:
    if key not in params:
        raise InvalidConfigurationError(f"Generator '{generator}' requires param '{key}'")
    return params[key]


@register_generator("values")
def gen_values(rng: random.Random, params: Dict[str, Any]) -> ParamGenerator:
    """Literal values, in order.

    Params:
        values: List of values (required)
    """
    return of(*_require(params, 'values', 'values'))


@register_generator("range")
def gen_range(rng: random.Random, params: Dict[str, Any]) -> ParamGenerator:
    """Integers from min to max inclusive.

    Params:
        min: First value (default: 0)
        max: Last value (required)
        step: Increment (default: 1)
    """
    start = params.get('min', 0)
    stop = _require(params, 'max', 'range')
    step = params.get('step', 1)
    if step == 0:
        raise InvalidConfigurationError("Generator 'range' requires a non-zero step")
    end = stop + 1 if step > 0 else stop - 1
    return of(*range(start, end, step))


@register_generator("regex")
def gen_regex(rng: random.Random, params: Dict[str, Any]) -> ParamGenerator:
    """Endless strings matching a pattern.

    Params:
        pattern: Regular expression (required)
    """
    return RegexGenerator(_require(params, 'pattern', 'regex'), rng)


@register_generator("lines")
def gen_lines(rng: random.Random, params: Dict[str, Any]) -> ParamGenerator:
    """Lines of a text file.

    Params:
        path: File to read (required)
        encoding: Text encoding (default: utf-8)
    """
    return lines(_require(params, 'path', 'lines'), params.get('encoding', 'utf-8'))


def _wrap_int32(value: int) -> int:
    return (value - INT_MIN) % 2 ** 32 + INT_MIN


def mutate_int(rng: random.Random, value: int) -> int:
    """Apply one small arithmetic or bitwise change, wrapping to 32 bits."""
    mutation = rng.choice(['add', 'flip', 'negate', 'double'])
    if mutation == 'add':
        value += rng.randint(-16, 16)
    elif mutation == 'flip':
        value ^= 1 << rng.randrange(32)
    elif mutation == 'negate':
        value = -value
    else:
        value *= 2
    return _wrap_int32(value)


@register_generator("mutate_int")
def gen_mutate_int(rng: random.Random, params: Dict[str, Any]) -> ParamGenerator:
    """Endless 32-bit integers mutated from interesting ints and failing inputs.

    Params:
        max_corpus: Corpus size limit (default: 1000)
    """
    return FeedbackGenerator(
        interesting_ints(),
        mutate_int,
        rng=rng,
        max_corpus=params.get('max_corpus', 1000),
    )
