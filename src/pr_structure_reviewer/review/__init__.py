"""
Structure Review

This module provides local project analysis, pull request file
classification, and the heuristic fallback used when files are unavailable.
"""

from .orchestrator import ProjectReviewer
from .classifier import PullRequestFileClassifier
from .fallback import HeuristicFallbackAnalyzer

__all__ = ['ProjectReviewer', 'PullRequestFileClassifier', 'HeuristicFallbackAnalyzer']
