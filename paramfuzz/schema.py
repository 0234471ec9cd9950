"""Schema validation for exploration plans."""

import json
from pathlib import Path
from typing import Dict, Any, Optional

from jsonschema import validate, ValidationError

from .errors import InvalidConfigurationError
from .provider import PROVIDERS


EXPLORATION_SCHEMA: Dict[str, Any] = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "title": "paramfuzz exploration plan",
    "type": "object",
    "required": ["parameters"],
    "additionalProperties": False,
    "properties": {
        "parameters": {
            "type": "array",
            "items": {
                "type": "object",
                "required": ["generator"],
                "additionalProperties": False,
                "properties": {
                    "name": {"type": "string"},
                    "generator": {"type": "string", "minLength": 1},
                    "nullable": {"type": "boolean"},
                    "params": {"type": "object"},
                },
            },
        },
        "provider": {
            "type": "object",
            "additionalProperties": False,
            "properties": {
                "strategy": {"enum": sorted(PROVIDERS)},
                "complete_when_all_cycled": {"type": "boolean"},
                "seen_limit": {"type": "integer", "minimum": 1},
                "max_duplicate_draws": {"type": "integer", "minimum": 1},
                "permutation_limit": {"type": "integer", "minimum": 0},
            },
        },
    },
}


class SchemaValidator:
    """Validates exploration plans against the schema"""

    def __init__(self, schema_path: Optional[Path] = None):
        if schema_path is None:
            self.schema = EXPLORATION_SCHEMA
        else:
            with open(schema_path, 'r') as f:
                self.schema = json.load(f)

    def validate(self, config_path: Path) -> Dict[str, Any]:
        """Validate a plan file and return parsed data"""
        with open(config_path, 'r') as f:
            try:
                config = json.load(f)
            except json.JSONDecodeError as e:
                raise InvalidConfigurationError(f"Invalid JSON in {config_path}: {e}")
        return self.validate_data(config)

    def validate_data(self, config: Dict[str, Any]) -> Dict[str, Any]:
        """Validate an already parsed plan"""
        try:
            validate(instance=config, schema=self.schema)
        except ValidationError as e:
            raise InvalidConfigurationError(f"Invalid configuration: {e.message}")
        return config
