"""Builds generators and a provider from an exploration plan."""

import itertools
import logging
import random
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional

from .config import (
    DEFAULT_MAX_DUPLICATE_DRAWS,
    DEFAULT_PERMUTATION_LIMIT,
    DEFAULT_SEEN_LIMIT,
    ExecutionResult,
    ExplorationConfig,
)
from .errors import InvalidConfigurationError
from .generator import NullableGenerator, ParamGenerator
from .provider import (
    AllPermutations,
    EvenAllParamChange,
    EvenSingleParamChange,
    ParamProvider,
    ParamTuple,
    RandomSingleParamChange,
    Suggested,
)
from .registry import GeneratorRegistry
from .schema import SchemaValidator
from . import factories  # noqa: F401  registers the built-in factories


logger = logging.getLogger(__name__)

# Provider options each strategy uses, besides "strategy" itself
STRATEGY_OPTIONS = {
    'suggested': {'permutation_limit', 'seen_limit', 'max_duplicate_draws'},
    'all_permutations': set(),
    'even_single_param_change': {'complete_when_all_cycled'},
    'even_all_param_change': {'complete_when_all_cycled'},
    'random_single_param_change': {'seen_limit', 'max_duplicate_draws'},
}


class ParamExplorer:
    """Turns a validated exploration plan into a tuple stream.

    One ``random.Random`` seeded from the configuration is shared by every
    generator and the provider, so a seed reproduces the whole stream.
    """

    def __init__(self, plan: Dict[str, Any], exploration_config: ExplorationConfig):
        self.plan = SchemaValidator().validate_data(plan)
        self.exploration_config = exploration_config
        self.rng = random.Random(exploration_config.seed)
        self.generators: List[ParamGenerator] = []
        self.provider: Optional[ParamProvider] = None

    @classmethod
    def from_file(cls, plan_path: Path, exploration_config: ExplorationConfig,
                  schema_path: Optional[Path] = None) -> 'ParamExplorer':
        plan = SchemaValidator(schema_path).validate(plan_path)
        return cls(plan, exploration_config)

    @property
    def parameter_names(self) -> List[str]:
        return [p.get('name', f"arg{i}") for i, p in enumerate(self.plan['parameters'])]

    def build(self) -> ParamProvider:
        """Create the generators and provider described by the plan."""
        if self.provider is not None:
            return self.provider

        logger.info("[1/3] Loading custom generators...")
        loaded_count = 0
        if self.exploration_config.generators_file:
            loaded_count = GeneratorRegistry.load_from_file(self.exploration_config.generators_file)
        logger.info("      Registered: %d, custom: %d",
                    len(GeneratorRegistry.list_generators()), loaded_count)

        logger.info("[2/3] Building generators...")
        for name, param in zip(self.parameter_names, self.plan['parameters']):
            gen = self._build_generator(param)
            logger.info("      %s: %s (%s)", name, param['generator'],
                        "infinite" if gen.is_infinite() else "finite")
            self.generators.append(gen)

        logger.info("[3/3] Building provider...")
        self.provider = self._build_provider()
        logger.info("      Strategy: %s, arity: %d",
                    type(self.provider).__name__, self.provider.arity)
        return self.provider

    def _build_generator(self, param: Dict[str, Any]) -> ParamGenerator:
        factory = GeneratorRegistry.get(param['generator'])
        if factory is None:
            available = ', '.join(sorted(GeneratorRegistry.list_generators()))
            raise InvalidConfigurationError(
                f"Generator '{param['generator']}' not found.\nAvailable: {available}"
            )
        gen = factory(self.rng, dict(param.get('params', {})))
        if param.get('nullable', False):
            gen = NullableGenerator(gen)
        return gen

    def _build_provider(self) -> ParamProvider:
        options = dict(self.plan.get('provider', {}))
        strategy = options.pop('strategy', 'suggested')
        unsupported = sorted(set(options) - STRATEGY_OPTIONS[strategy])
        if unsupported:
            raise InvalidConfigurationError(
                f"Strategy '{strategy}' does not accept: {', '.join(unsupported)}"
            )
        cycled = options.get('complete_when_all_cycled', True)
        seen_limit = options.get('seen_limit', DEFAULT_SEEN_LIMIT)
        max_duplicate_draws = options.get('max_duplicate_draws', DEFAULT_MAX_DUPLICATE_DRAWS)

        if strategy == 'suggested':
            return Suggested(self.generators, rng=self.rng,
                             permutation_limit=options.get('permutation_limit',
                                                           DEFAULT_PERMUTATION_LIMIT),
                             seen_limit=seen_limit,
                             max_duplicate_draws=max_duplicate_draws)
        if strategy == 'all_permutations':
            return AllPermutations(self.generators)
        if strategy == 'even_single_param_change':
            return EvenSingleParamChange(self.generators, cycled)
        if strategy == 'even_all_param_change':
            return EvenAllParamChange(self.generators, cycled)
        return RandomSingleParamChange(
            self.generators,
            rng=self.rng,
            seen_limit=seen_limit,
            max_duplicate_draws=max_duplicate_draws,
        )

    def tuples(self) -> Iterator[ParamTuple]:
        """Stream tuples, stopping after ``max_tuples`` when it is set."""
        stream = self.build().stream()
        if self.exploration_config.max_tuples is None:
            return stream
        return itertools.islice(stream, self.exploration_config.max_tuples)

    def route_result(self, result: ExecutionResult) -> None:
        self.build().route_result(result)

    def close(self) -> None:
        if self.provider is not None:
            self.provider.close()
        else:
            for gen in self.generators:
                gen.close()

    def __enter__(self) -> 'ParamExplorer':
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
