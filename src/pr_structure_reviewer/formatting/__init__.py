"""
Report Formatting

This module renders analysis reports as markdown for the console
and GitHub PR comments.
"""

from .report import ReportRenderer, REPORT_HEADER

__all__ = ['ReportRenderer', 'REPORT_HEADER']
