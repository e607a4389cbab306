"""new-plugin: scaffold a plugin folder."""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from aos_plugins.constants import PLUGINS_DIR
from aos_plugins.scaffold import PluginScaffold, ScaffoldError
from aos_plugins.utils import setup_logging

EPILOG = """
Examples:
  new-plugin notion                    # Full CRUD plugin with auth
  new-plugin web-search --readonly     # Read-only plugin with auth
  new-plugin my-local-tool --local     # Local plugin (no auth)
"""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="new-plugin",
        description="Plugin Scaffold Generator",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("name", nargs="?", help="Plugin name (lowercase, a-z 0-9 -)")
    parser.add_argument("--readonly", action="store_true",
                        help="Plugin only reads data (no create/update/delete)")
    parser.add_argument("--local", action="store_true", help="Plugin doesn't need API credentials")
    parser.add_argument("--python", action="store_true", help="Write a pytest test instead of vitest")
    parser.add_argument("--plugins-dir", type=Path, default=PLUGINS_DIR, help=argparse.SUPPRESS)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging()

    if not args.name:
        parser.print_help()
        return 0

    try:
        result = PluginScaffold(args.plugins_dir).create(
            args.name, readonly=args.readonly, local=args.local, python=args.python
        )
    except ScaffoldError as e:
        print(f"❌ {e}", file=sys.stderr)
        return 1

    print(f"Creating plugin: {args.name}")
    print(f"  Type: {'local' if args.local else 'api'}{' (read-only)' if args.readonly else ''}")
    print(f"✓ Created plugins/{result.plugin}/")
    for path in result.files:
        print(f"  - {path.relative_to(result.path).as_posix()}")
    print("\nNext steps:")
    print(f"  1. Edit plugins/{result.plugin}/readme.md with your API details")
    print(f"  2. Run: lint-tests {result.plugin}")
    print(f"  3. Run: validate-schema {result.plugin} --no-move")
    return 0


if __name__ == "__main__":
    sys.exit(main())
