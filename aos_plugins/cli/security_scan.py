"""security-scan: block credential leaks and raw HTTP calls in plugins."""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from aos_plugins.checks import CheckReport, scan_plugin
from aos_plugins.constants import PLUGINS_DIR
from aos_plugins.plugins.discovery import PluginDiscovery
from aos_plugins.utils import setup_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="security-scan",
        description="Scan plugins for $AUTH_TOKEN exposure, curl/wget and hand-built bearer headers",
    )
    parser.add_argument("plugins", nargs="*", help="Plugin names to scan (default: all)")
    parser.add_argument("--plugins-dir", type=Path, default=PLUGINS_DIR, help=argparse.SUPPRESS)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging()

    names = args.plugins or PluginDiscovery(args.plugins_dir).list_names()
    report = CheckReport()
    for name in names:
        report.extend(scan_plugin(args.plugins_dir, name))
    report.print("Security scan...")
    return report.exit_code


if __name__ == "__main__":
    sys.exit(main())
