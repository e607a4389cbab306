"""check-structure: repository structure and convention checks."""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from aos_plugins.checks import StructureChecker, check_entities
from aos_plugins.constants import REPO_ROOT
from aos_plugins.utils import setup_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="check-structure",
        description="Check apps, connectors, plugins and entities against repo conventions",
    )
    parser.add_argument("--root", type=Path, default=REPO_ROOT, help="Repository root")
    parser.add_argument("--strict", action="store_true", help="Treat warnings as errors")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging()

    report = StructureChecker(args.root / "apps", args.root / "plugins").run()
    report.extend(check_entities(args.root / "entities"))
    report.print("Checking repository structure...")

    if args.strict and report.warnings:
        return 1
    return report.exit_code


if __name__ == "__main__":
    sys.exit(main())
