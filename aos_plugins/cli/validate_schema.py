"""validate-schema: commit-time gate for plugin folders.

Validates readme.md frontmatter against the manifest model, requires an
icon and test coverage of every tool. Failing plugins are moved to
plugins/.needs-work/ unless --no-move is given.
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from aos_plugins.constants import PLUGINS_DIR
from aos_plugins.utils import setup_logging
from aos_plugins.validation import SchemaValidator

EPILOG = """
Examples:
  validate-schema                      # Validate every plugin
  validate-schema todoist linear       # Validate specific plugins
  validate-schema --filter to          # Plugins whose name contains "to"
  validate-schema todoist --no-move    # Report only, never quarantine
"""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="validate-schema",
        description="Validate plugin schema, icons and test coverage",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("plugins", nargs="*", help="Plugin folder names (default: all)")
    parser.add_argument("--all", action="store_true", help="Validate every plugin folder")
    parser.add_argument("--filter", dest="filter_value", metavar="TEXT",
                        help="Only plugins whose name contains TEXT")
    parser.add_argument("--no-move", action="store_true",
                        help="Do not move failing plugins to .needs-work")
    parser.add_argument("--plugins-dir", type=Path, default=PLUGINS_DIR, help=argparse.SUPPRESS)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging()

    names = [] if args.all else args.plugins
    summary = SchemaValidator(args.plugins_dir).run(
        names, filter_value=args.filter_value, auto_move=not args.no_move
    )
    return summary.exit_code


if __name__ == "__main__":
    sys.exit(main())
