#!/usr/bin/env python3
"""
Example custom generator factories for paramfuzz.

Each factory is a function that takes:
  - rng: A random.Random instance for reproducible randomness
  - params: A dictionary of parameters from the exploration plan
and returns a ParamGenerator.

To use these factories:
  python -m paramfuzz plan.json --generators custom_generators.py

Then in your plan.json, use:
  "parameters": [
    {"name": "host", "generator": "ip_address", "params": {"private_only": true}}
  ]
"""

import random
from typing import Any, Dict

from paramfuzz import RegexGenerator, of


# Use the decorator to register factories
# (GeneratorRegistry and register_generator are injected by paramfuzz when loading)

@register_generator("ip_address")
def gen_ip_address(rng: random.Random, params: Dict[str, Any]):
    """Endless IPv4 addresses.

    Params:
        private_only: Only generate 10.x.x.x addresses (default: False)
    """
    if params.get('private_only', False):
        return RegexGenerator(r"10\.[0-9]{1,2}\.[0-9]{1,2}\.[1-9]", rng)
    return RegexGenerator(r"[1-9][0-9]?\.[0-9]{1,2}\.[0-9]{1,2}\.[1-9]", rng)


@register_generator("port")
def gen_port(rng: random.Random, params: Dict[str, Any]):
    """Well-known and boundary port numbers.

    Params:
        include_invalid: Add out of range ports (default: True)
    """
    ports = [0, 1, 22, 80, 443, 1023, 1024, 8080, 49151, 49152, 65535]
    if params.get('include_invalid', True):
        ports = [-1] + ports + [65536]
    return of(*ports)


@register_generator("http_method")
def gen_http_method(rng: random.Random, params: Dict[str, Any]):
    """HTTP methods, upper case, with lower case variants mapped in.

    Params:
        lowercase: Yield lower case names (default: False)
    """
    methods = of('GET', 'HEAD', 'POST', 'PUT', 'DELETE', 'PATCH', 'OPTIONS')
    if params.get('lowercase', False):
        return methods.map(str.lower, str.upper)
    return methods
