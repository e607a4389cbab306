#!/usr/bin/env python3
"""Plugin management CLI tool."""

import argparse
import json
import sys
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables FIRST (before importing project modules)
load_dotenv('.env')

from rich.console import Console
from rich.table import Table

from aos_plugins.cli import check_structure, lint_tests, new_plugin, security_scan, validate_schema
from aos_plugins.constants import APPS_DIR, ENTITIES_DIR, PLUGINS_DIR, SCHEMA_FILE
from aos_plugins.plugins.discovery import PluginDiscovery
from aos_plugins.plugins.manifest import manifest_json_schema
from aos_plugins.utils import setup_logging

console = Console()

# Subcommands that forward their arguments to a standalone entry point
DELEGATED = {
    "validate": (validate_schema, "Validate plugin schema, icons and test coverage"),
    "lint": (lint_tests, "Lint plugin tests"),
    "new": (new_plugin, "Scaffold a new plugin"),
    "check": (check_structure, "Check repository structure"),
    "security": (security_scan, "Scan plugins for credential leaks"),
}


def get_discovery() -> PluginDiscovery:
    """Create a PluginDiscovery instance."""
    return PluginDiscovery(PLUGINS_DIR)


def cmd_list(args):
    """List all discovered plugins."""
    plugins = get_discovery().discover_all()

    if not plugins:
        print("No plugins found.")
        return 0

    table = Table(title="Plugins")
    table.add_column("ID", style="cyan")
    table.add_column("Name")
    table.add_column("Tags")
    table.add_column("Auth")
    table.add_column("Tools", justify="right")
    table.add_column("Status")

    for p in plugins:
        info = p.to_dict()
        status = "[green]valid[/green]" if info["valid"] else "[red]invalid[/red]"
        table.add_row(
            info["id"], info["name"], ", ".join(info["tags"]), info["auth"] or "-",
            str(info["tools"]), status,
        )

    console.print(table)

    quarantined = get_discovery().list_quarantined()
    if quarantined:
        console.print(f"[yellow]{len(quarantined)} plugin(s) in .needs-work:[/yellow] {', '.join(quarantined)}")
    return 0


def cmd_info(args):
    """Show detailed plugin information."""
    discovery = get_discovery()
    if args.plugin_id not in discovery.list_names():
        print(f"Plugin '{args.plugin_id}' not found.")
        return 1

    plugin = discovery.load(args.plugin_id)
    fm = plugin.frontmatter or {}
    auth = fm.get("auth")

    print(f"Plugin: {args.plugin_id}")
    print(f"  Name:        {fm.get('name', '')}")
    print(f"  Description: {fm.get('description', '')}")
    print(f"  Tags:        {', '.join(fm.get('tags') or [])}")
    print(f"  Auth:        {auth.get('type') if isinstance(auth, dict) else 'none'}")
    print(f"  Path:        {plugin.path}")
    print(f"  Icon:        {', '.join(p.name for p in plugin.icon_files()) or 'missing'}")
    if plugin.manifest:
        print(f"  Tools:       {', '.join(plugin.manifest.tool_names())}")
    if fm.get("settings"):
        print(f"  Settings:    {json.dumps(fm['settings'], indent=4, ensure_ascii=False)}")
    if plugin.errors:
        print("  Errors:")
        for error in plugin.errors:
            print(f"    - {error}")
    return 0


def cmd_doctor(args):
    """Run health checks on the plugin repository."""
    issues = []

    # Check directories
    if not PLUGINS_DIR.exists():
        issues.append(f"Plugins directory missing: {PLUGINS_DIR}")
    if not APPS_DIR.exists():
        issues.append(f"Apps directory missing: {APPS_DIR}")
    if not ENTITIES_DIR.exists():
        issues.append(f"Entities directory missing: {ENTITIES_DIR}")

    # Check the generated schema is current
    if SCHEMA_FILE.exists():
        try:
            with open(SCHEMA_FILE, encoding="utf-8") as f:
                if json.load(f) != manifest_json_schema():
                    issues.append(f"{SCHEMA_FILE.name} is out of date (run: manage_plugins.py schema)")
        except json.JSONDecodeError as e:
            issues.append(f"{SCHEMA_FILE.name} has invalid JSON: {e}")

    # Discover and validate plugins
    discovery = get_discovery()
    plugins = discovery.discover_all()
    for p in plugins:
        for error in p.errors:
            issues.append(f"Plugin '{p.name}': {error}")
        if not p.icon_files():
            issues.append(f"Plugin '{p.name}': icon file missing")

    quarantined = discovery.list_quarantined()

    if issues:
        print(f"Found {len(issues)} issue(s):")
        for i, issue in enumerate(issues, 1):
            print(f"  {i}. {issue}")
        return 1

    print(f"All checks passed. {len(plugins)} plugin(s) found, {len(quarantined)} in .needs-work.")
    return 0


def cmd_schema(args):
    """Export the plugin manifest JSON Schema."""
    text = json.dumps(manifest_json_schema(), indent=2, ensure_ascii=False) + "\n"
    if args.output == "-":
        sys.stdout.write(text)
    else:
        Path(args.output).write_text(text, encoding="utf-8")
        print(f"Schema written to {args.output}")
    return 0


def main(argv=None):
    parser = argparse.ArgumentParser(description="AgentOS Plugin Manager")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # list
    subparsers.add_parser("list", help="List all plugins")

    # info
    info_parser = subparsers.add_parser("info", help="Show plugin details")
    info_parser.add_argument("plugin_id", help="Plugin ID")

    # doctor
    subparsers.add_parser("doctor", help="Run health checks")

    # schema
    schema_parser = subparsers.add_parser("schema", help="Export the manifest JSON Schema")
    schema_parser.add_argument("-o", "--output", default=str(SCHEMA_FILE), help="Output file ('-' for stdout)")

    # commands with their own argument parsers
    for name, (_, help_text) in DELEGATED.items():
        subparsers.add_parser(name, help=help_text, add_help=False)

    if argv is None:
        argv = sys.argv[1:]
    if argv and argv[0] in DELEGATED:
        sys.exit(DELEGATED[argv[0]][0].main(argv[1:]))

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    setup_logging()
    commands = {
        "list": cmd_list,
        "info": cmd_info,
        "doctor": cmd_doctor,
        "schema": cmd_schema,
    }

    sys.exit(commands[args.command](args))


if __name__ == "__main__":
    main()
