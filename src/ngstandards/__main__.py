# SPDX-License-Identifier: MIT
"""Package entry point — run the linter via `python -m ngstandards`."""

import argparse
import logging
import sys

from ngstandards.lint import main
from ngstandards.rules.config import PRESETS

if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Angular coding-standards linter")
    parser.add_argument("paths", nargs="+", metavar="PATH", help="Files or directories to lint")
    parser.add_argument(
        "--preset",
        choices=sorted(PRESETS),
        default=None,
        help="Rule preset (overrides NGSTANDARDS_PRESET env var)",
    )
    parser.add_argument("--fix", action="store_true", help="Write automatic fixes back to disk")
    parser.add_argument(
        "--option",
        action="append",
        default=[],
        metavar="RULE=JSON",
        help='Rule options, e.g. enforce-feature-isolation=\'{"featureRoot": "src/app"}\'',
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log at INFO level")
    args = parser.parse_args()
    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    sys.exit(main(args.paths, preset=args.preset, fix=args.fix, options=args.option))
