"""Scaffolding for new plugins."""

from .generator import PluginScaffold, ScaffoldError, ScaffoldResult, display_name, validate_plugin_name

__all__ = [
    'PluginScaffold',
    'ScaffoldError',
    'ScaffoldResult',
    'display_name',
    'validate_plugin_name',
]
