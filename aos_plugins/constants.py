"""Global constants for the plugin tooling."""

import os
import shlex
from pathlib import Path

# Repository root (supports AGENTOS_PLUGINS_ROOT env var, defaults to the checkout)
_root_env = os.getenv("AGENTOS_PLUGINS_ROOT", "")
REPO_ROOT = Path(_root_env).resolve() if _root_env else Path(__file__).resolve().parent.parent

# Content directories
PLUGINS_DIR = REPO_ROOT / "plugins"                   # plugins/<id>/readme.md
APPS_DIR = REPO_ROOT / "apps"                         # apps/<app>/connectors/<connector>/
ENTITIES_DIR = REPO_ROOT / "entities"                 # entities/<entity>.yaml

# Failing plugins are quarantined here by the schema validator
NEEDS_WORK_DIRNAME = ".needs-work"
NEEDS_WORK_DIR = PLUGINS_DIR / NEEDS_WORK_DIRNAME

# Generated JSON Schema for editor tooling (source of truth is the manifest model)
SCHEMA_FILE = REPO_ROOT / "plugin.schema.json"

README_FILE = "readme.md"
TESTS_DIRNAME = "tests"

# Plugin ids and folder names
PLUGIN_NAME_PATTERN = r"^[a-z][a-z0-9-]*$"

# Icons must stay small enough to inline in the host UI
MAX_ICON_BYTES = 5 * 1024

# AgentOS host used by end-to-end tests
AGENTOS_BINARY = os.path.expanduser(os.getenv(
    "AGENTOS_BINARY",
    str(Path.home() / "dev" / "agentos" / "src-tauri" / "target" / "debug" / "agentos"),
))
AGENTOS_ARGS = shlex.split(os.getenv("AGENTOS_ARGS", "--mcp"))
AGENTOS_TIMEOUT = float(os.getenv("AGENTOS_TIMEOUT", "30"))
DEBUG_MCP = os.getenv("DEBUG_MCP", "").lower() in ("1", "true", "yes", "on")

# Restrict capability tests to a single plugin id
TEST_PLUGIN = os.getenv("TEST_PLUGIN") or None

# Environment the host injects into run:/command: scripts (never set by this repo)
HOST_ENV_VARS = (
    "PARAM_{NAME}",
    "PARAM_ACTION",
    "PLUGIN_DIR",
    "AUTH_TOKEN",
    "SETTING_{NAME}",
    "AGENTOS_DOWNLOADS",
    "AGENTOS_CACHE",
    "AGENTOS_DATA",
)
