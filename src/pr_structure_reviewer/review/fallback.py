"""
Heuristic Fallback Analyzer

Used when the changed-file list cannot be fetched. Scans the pull request
title and description for keywords. A keyword mention is not proof that a
file was committed, so mentions of risky content are warnings, never
failures.
"""

import logging
from typing import Optional

from ..models.analysis import AggregateReport, AnalysisResult
from ..rules.loader import GENERAL


logger = logging.getLogger(__name__)


class HeuristicFallbackAnalyzer:
    """Keyword-based analysis of pull request text."""

    name = "Pull Request Text Heuristics"

    def __init__(self):
        """Initialize keyword tables."""
        # (rule, tokens, message, suggestion)
        self.risk_keywords = [
            (
                "env-mentioned",
                (".env", "environment"),
                "The pull request mentions environment files",
                "Verify that no .env files with credentials were committed",
            ),
            (
                "node-modules-mentioned",
                ("node_modules",),
                "The pull request mentions node_modules",
                "Verify that node_modules/ is listed in .gitignore",
            ),
            (
                "venv-mentioned",
                (".venv", "venv"),
                "The pull request mentions Python virtual environments",
                "Verify that .venv/ or venv/ folders are listed in .gitignore",
            ),
        ]
        self.good_practice_keywords = [
            ("gitignore-mentioned", ("gitignore",), ".gitignore is mentioned (good practice)"),
            ("structure-mentioned", ("src/", "structure", "organiz"), "Code organization is mentioned"),
            ("testing-mentioned", ("test",), "Tests are mentioned (excellent practice)"),
        ]

    def analyze(
        self,
        title: Optional[str],
        body: Optional[str],
        project_path: str,
        project_type: str = GENERAL,
    ) -> AggregateReport:
        """
        Build a heuristic report from PR text.

        Args:
            title: Pull request title
            body: Pull request description
            project_path: Label for the report (repository full name)
            project_type: Project type label

        Returns:
            AggregateReport with a single analyzer result
        """
        text = f"{title or ''} {body or ''}".lower()
        result = AnalysisResult(analyzer=self.name)

        for rule, tokens, message, suggestion in self.risk_keywords:
            if any(token in text for token in tokens):
                result.add_warning(rule, message, suggestion)

        for rule, tokens, message in self.good_practice_keywords:
            if any(token in text for token in tokens):
                result.add_passed(rule, message)

        if not result.warnings:
            result.add_warning(
                "general-reminder",
                "Reminder: verify the overall project structure",
                "Check that sensitive files (.env) are not committed and code is organized in src/",
            )

        logger.info(
            f"Heuristic analysis for {project_path}: "
            f"{len(result.passed)} passed, {len(result.warnings)} warnings"
        )
        return AggregateReport.create(project_path, project_type, [result])
