"""Named generator factories that exploration plans refer to."""

import importlib.util
import random
from pathlib import Path
from typing import Callable, Dict, List, Optional, Any

from .generator import ParamGenerator


# (shared rng, plan "params" object) -> generator for one parameter
GeneratorFactory = Callable[[random.Random, Dict[str, Any]], ParamGenerator]


class GeneratorRegistry:
    """Class-level map from plan generator names to factories.

    A plan parameter ``{"generator": "range", "params": {...}}`` is built by
    calling the factory registered as ``range`` with the explorer's seeded
    rng and a copy of ``params``. Factories should draw randomness only from
    that rng so a seed reproduces the stream.
    """

    _factories: Dict[str, GeneratorFactory] = {}

    @classmethod
    def register(cls, name: str, func: GeneratorFactory) -> None:
        """Bind ``name`` to a factory, replacing any earlier binding."""
        cls._factories[name] = func

    @classmethod
    def get(cls, name: str) -> Optional[GeneratorFactory]:
        return cls._factories.get(name)

    @classmethod
    def list_generators(cls) -> List[str]:
        return list(cls._factories.keys())

    @classmethod
    def load_from_file(cls, filepath: Path) -> int:
        """Execute a factory file, which registers through the injected
        ``register_generator`` decorator.

        Returns: How many names the file added. Rebinding a built-in name
        replaces it without counting.
        """
        if not filepath.exists():
            return 0

        spec = importlib.util.spec_from_file_location(f"paramfuzz_plugin_{filepath.stem}", filepath)
        if spec is None or spec.loader is None:
            return 0

        module = importlib.util.module_from_spec(spec)
        module.GeneratorRegistry = cls
        module.register_generator = register_generator

        known = set(cls._factories)
        spec.loader.exec_module(module)
        return len(set(cls._factories) - known)


def register_generator(name: str):
    """Decorator registering a plan generator factory under ``name``.

    Usage:
        @register_generator("port")
        def port(rng: random.Random, params: dict) -> ParamGenerator:
            return of(*params.get("ports", [0, 80, 443, 65535]))
    """
    def decorator(func: GeneratorFactory) -> GeneratorFactory:
        GeneratorRegistry.register(name, func)
        return func
    return decorator
