"""
Structure Analyzers

This module provides the analyzer interface and the built-in checks,
in the order the orchestrator runs them.
"""

from .base import Analyzer
from .gitignore import GitignoreAnalyzer
from .env_files import EnvFileAnalyzer
from .dependencies import DependencyFolderAnalyzer
from .required_files import RequiredFilesAnalyzer


def default_analyzers():
    """Built-in analyzers in their fixed run order."""
    return [
        GitignoreAnalyzer(),
        EnvFileAnalyzer(),
        DependencyFolderAnalyzer(),
        RequiredFilesAnalyzer(),
    ]


__all__ = [
    'Analyzer',
    'GitignoreAnalyzer',
    'EnvFileAnalyzer',
    'DependencyFolderAnalyzer',
    'RequiredFilesAnalyzer',
    'default_analyzers',
]
