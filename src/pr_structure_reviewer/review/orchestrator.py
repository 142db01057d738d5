"""
Project Reviewer

Runs the registered analyzers against a local project directory and
aggregates their findings into one report.
"""

import logging
from pathlib import Path
from typing import List, Optional, Sequence, Union

from ..analyzers import Analyzer, default_analyzers
from ..errors import ProjectPathNotFoundError
from ..models.analysis import AggregateReport, AnalysisResult
from ..rules.loader import RuleLoader, detect_project_type


logger = logging.getLogger(__name__)


class ProjectReviewer:
    """
    Orchestrates one analysis run.

    Analyzers run sequentially in registration order so that reports are
    reproducible. An analyzer that raises is recorded with ``error`` set and
    does not stop the ones after it.
    """

    def __init__(
        self,
        rule_loader: Optional[RuleLoader] = None,
        analyzers: Optional[Sequence[Analyzer]] = None,
    ):
        """
        Initialize project reviewer.

        Args:
            rule_loader: Rule loader (default: bundled rules)
            analyzers: Analyzers in run order (default: built-in analyzers)
        """
        self.rule_loader = rule_loader or RuleLoader()
        self.analyzers: List[Analyzer] = list(analyzers) if analyzers is not None else default_analyzers()

    def analyze_project(
        self,
        project_path: Union[str, Path],
        project_type: Optional[str] = None,
    ) -> AggregateReport:
        """
        Analyze a project directory.

        Args:
            project_path: Project root directory
            project_type: Category override (detected when omitted)

        Returns:
            AggregateReport for this run

        Raises:
            ProjectPathNotFoundError: If the directory does not exist
        """
        path = Path(project_path)
        logger.info(f"Analyzing project: {path}")

        if not path.exists():
            raise ProjectPathNotFoundError(str(project_path))

        if not project_type:
            project_type = detect_project_type(path)
        logger.info(f"Project type: {project_type}")

        rules = self.rule_loader.load_rules(project_type)

        results = []
        for analyzer in self.analyzers:
            logger.debug(f"Running {analyzer.name}")
            results.append(self._run_analyzer(analyzer, path, rules))

        report = AggregateReport.create(str(project_path), project_type, results)
        summary = report.summary
        logger.info(
            f"Analysis complete for {path}: {summary.passed} passed, "
            f"{summary.failed} failed, {summary.warnings} warnings"
        )
        return report

    def _run_analyzer(self, analyzer: Analyzer, path: Path, rules) -> AnalysisResult:
        try:
            return analyzer.analyze(path, rules)
        except Exception as e:
            logger.exception(f"Error in {analyzer.name}: {e}")
            return AnalysisResult.from_error(analyzer.name, str(e) or type(e).__name__)
