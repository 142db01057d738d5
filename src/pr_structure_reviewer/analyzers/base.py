"""Base analyzer interface for project structure checks."""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Union

from ..models.analysis import AnalysisResult
from ..models.rules import RuleSet


class Analyzer(ABC):
    """
    One structure check.

    Expected conditions (a missing file, a missing folder) are reported as
    findings. Unexpected I/O errors may propagate; the orchestrator records
    them against this analyzer. Analyzers keep no state between calls.
    """

    name: str = "Analyzer"

    @abstractmethod
    def analyze(self, project_path: Union[str, Path], rules: RuleSet) -> AnalysisResult:
        raise NotImplementedError

    def new_result(self) -> AnalysisResult:
        return AnalysisResult(analyzer=self.name)
