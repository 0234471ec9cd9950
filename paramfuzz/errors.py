"""Exceptions raised by paramfuzz."""


class ParamFuzzError(Exception):
    """Base class for all paramfuzz errors."""


class UnsupportedTypeError(ParamFuzzError, ValueError):
    """No curated generator exists for the requested value kind."""

    def __init__(self, type_name: str, reason: str = "no suggested generator"):
        self.type_name = type_name
        super().__init__(f"Unsupported type '{type_name}': {reason}")


class InvalidConfigurationError(ParamFuzzError, ValueError):
    """A generator or provider was configured in a way that cannot work."""


class ClosedGeneratorError(ParamFuzzError, ValueError):
    """A sequence was requested from a generator after ``close()``."""
