"""
Rule Configuration

This module loads project structure rules and detects project categories.
"""

from .loader import RuleLoader, detect_project_type, detect_project_type_from_names

__all__ = ['RuleLoader', 'detect_project_type', 'detect_project_type_from_names']
