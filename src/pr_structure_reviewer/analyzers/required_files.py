"""
Required Files Analyzer

Checks the files every namespace in the rule set declares as required.
"""

from pathlib import Path
from typing import List, Union

from .base import Analyzer
from ..models.analysis import AnalysisResult
from ..models.rules import RuleSet


class RequiredFilesAnalyzer(Analyzer):
    """Reports required files missing from the project root."""

    name = "Required Files Analyzer"

    def analyze(self, project_path: Union[str, Path], rules: RuleSet) -> AnalysisResult:
        result = self.new_result()
        root = Path(project_path)

        for required in self._required_files(rules):
            rule = f"required-{required}"
            if (root / required).exists():
                result.add_passed(rule, f"Required file found: {required}")
            else:
                result.add_failed(
                    rule,
                    f"Required file missing: {required}",
                    f"Add '{required}' to the project root",
                )

        return result

    def _required_files(self, rules: RuleSet) -> List[str]:
        required = []
        for namespace in rules:
            section = rules.get(namespace)
            for name in (section.required_files or []) if section else []:
                if name not in required:
                    required.append(name)
        return required
