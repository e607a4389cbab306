"""Commit-time validation of plugin folders."""

from .coverage import get_tested_tools, get_tools, get_untested_tools
from .quarantine import move_to_needs_work
from .schema import PluginValidationResult, SchemaValidator, ValidationSummary

__all__ = [
    'get_tested_tools',
    'get_tools',
    'get_untested_tools',
    'move_to_needs_work',
    'PluginValidationResult',
    'SchemaValidator',
    'ValidationSummary',
]
