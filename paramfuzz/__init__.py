"""
paramfuzz - Parameter-space exploration for fuzzing multi-argument functions

Generators provide values for one parameter each; providers combine them into
streams of full argument tuples.
"""

from .config import (
    ExecutionResult,
    ExplorationConfig,
    ValueKind,
)
from .errors import (
    ClosedGeneratorError,
    InvalidConfigurationError,
    ParamFuzzError,
    UnsupportedTypeError,
)
from .generator import (
    FeedbackGenerator,
    FixedGenerator,
    MappedGenerator,
    NullableGenerator,
    ParamGenerator,
    RegexGenerator,
    of,
    of_fixed,
)
from .values import (
    interesting_bytes,
    interesting_shorts,
    interesting_ints,
    interesting_longs,
    interesting_floats,
    interesting_doubles,
    lines,
    suggested,
)
from .provider import (
    AllPermutations,
    EvenAllParamChange,
    EvenSingleParamChange,
    ParamProvider,
    Partitioned,
    RandomSingleParamChange,
    Suggested,
)
from .registry import GeneratorRegistry, register_generator
from .schema import SchemaValidator
from .explorer import ParamExplorer


__version__ = '1.0.0'

__all__ = [
    # Main entry point
    'ParamExplorer',

    # Configuration
    'ExplorationConfig',
    'ValueKind',

    # Data classes
    'ExecutionResult',

    # Errors
    'ParamFuzzError',
    'ClosedGeneratorError',
    'UnsupportedTypeError',
    'InvalidConfigurationError',

    # Generators
    'ParamGenerator',
    'MappedGenerator',
    'NullableGenerator',
    'FixedGenerator',
    'RegexGenerator',
    'FeedbackGenerator',
    'of',
    'of_fixed',
    'lines',
    'suggested',
    'interesting_bytes',
    'interesting_shorts',
    'interesting_ints',
    'interesting_longs',
    'interesting_floats',
    'interesting_doubles',

    # Providers
    'ParamProvider',
    'EvenAllParamChange',
    'EvenSingleParamChange',
    'AllPermutations',
    'RandomSingleParamChange',
    'Partitioned',
    'Suggested',

    # Components
    'SchemaValidator',

    # Registry
    'GeneratorRegistry',
    'register_generator',
]
