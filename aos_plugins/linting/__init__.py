"""Linting of plugin end-to-end tests."""

from .checks import FLAVOR_CHECKS, PY_CHECKS, TS_CHECKS, Check
from .linter import LintResult, PluginMeta, PluginTestLinter, build_plugin_meta, format_result, get_required_checks

__all__ = [
    'FLAVOR_CHECKS',
    'PY_CHECKS',
    'TS_CHECKS',
    'Check',
    'LintResult',
    'PluginMeta',
    'PluginTestLinter',
    'build_plugin_meta',
    'format_result',
    'get_required_checks',
]
