"""CLI entry point for paramfuzz: previews the tuples an exploration plan yields."""

import sys
import json
import logging
import argparse
from pathlib import Path

from .config import ExplorationConfig
from .errors import ParamFuzzError
from .explorer import ParamExplorer


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description='Preview parameter tuples produced by an exploration plan',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Print the first 100 tuples
  python -m paramfuzz plan.json -n 100

  # Reproducible randomized strategies with a seed
  python -m paramfuzz plan.json -n 50 --seed 42

  # Use generator factories from a Python file
  python -m paramfuzz plan.json -g custom_generators.py
        """
    )

    parser.add_argument('plan', type=Path,
                        help='Path to exploration plan JSON file')
    parser.add_argument('-s', '--schema', type=Path, default=None,
                        help='Path to schema file (default: built-in schema)')
    parser.add_argument('-n', '--num-tuples', type=int, default=100,
                        help='Number of tuples to print, 0 for no limit (default: 100)')
    parser.add_argument('--seed', type=int, default=None,
                        help='Random seed for reproducibility')
    parser.add_argument('-g', '--generators', type=Path, default=None,
                        help='Path to Python file with custom generator factories')
    parser.add_argument('-q', '--quiet', action='store_true',
                        help='Suppress progress output')

    args = parser.parse_args()

    if not args.plan.exists():
        print(f"ERROR: Plan file not found: {args.plan}")
        sys.exit(1)

    if args.schema is not None and not args.schema.exists():
        print(f"ERROR: Schema file not found: {args.schema}")
        sys.exit(1)

    if args.generators is not None and not args.generators.exists():
        print(f"ERROR: Generators file not found: {args.generators}")
        sys.exit(1)

    if args.num_tuples < 0:
        print("ERROR: Number of tuples must not be negative")
        sys.exit(1)

    verbose = not args.quiet and sys.stderr.isatty()
    logging.basicConfig(level=logging.INFO if verbose else logging.WARNING,
                        format='%(message)s', stream=sys.stderr)

    exploration_config = ExplorationConfig(
        seed=args.seed,
        max_tuples=args.num_tuples or None,
        generators_file=args.generators,
    )

    try:
        count = 0
        with ParamExplorer.from_file(args.plan, exploration_config, args.schema) as explorer:
            for params in explorer.tuples():
                print(json.dumps(list(params), default=repr))
                count += 1
        if count == 0:
            print("ERROR: Plan produced no tuples")
            sys.exit(1)
        logging.getLogger(__name__).info("Printed %d tuples", count)
        sys.exit(0)
    except ParamFuzzError as e:
        print(f"ERROR: {e}")
        sys.exit(1)


if __name__ == '__main__':
    main()
