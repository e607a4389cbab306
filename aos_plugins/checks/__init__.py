"""Repository checks that run without the AgentOS host."""

from .entities import check_entities, check_entity_file
from .icons import check_svg, check_svg_file
from .report import ERROR, WARNING, CheckReport, Finding
from .security import SECURITY_RULES, scan_plugin, scan_text
from .structure import StructureChecker, is_file_newer_than

__all__ = [
    'check_entities',
    'check_entity_file',
    'check_svg',
    'check_svg_file',
    'CheckReport',
    'ERROR',
    'Finding',
    'is_file_newer_than',
    'scan_plugin',
    'scan_text',
    'SECURITY_RULES',
    'StructureChecker',
    'WARNING',
]
