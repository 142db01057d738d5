"""
Gitignore Analyzer

Checks that a .gitignore exists and covers the entries the rules expect.
"""

import logging
from pathlib import Path
from typing import List, Optional, Union

from .base import Analyzer
from ..models.analysis import AnalysisResult
from ..models.rules import RuleSet


logger = logging.getLogger(__name__)


class GitignoreAnalyzer(Analyzer):
    """Checks .gitignore presence and content."""

    name = "Gitignore Analyzer"

    def analyze(self, project_path: Union[str, Path], rules: RuleSet) -> AnalysisResult:
        result = self.new_result()
        gitignore_path = Path(project_path) / ".gitignore"

        if not gitignore_path.is_file():
            result.add_failed(
                "gitignore-exists",
                "Missing .gitignore file",
                "Create a .gitignore file to exclude unnecessary files from version control",
            )
            return result

        result.add_passed("gitignore-exists", ".gitignore file found")

        try:
            content = gitignore_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Could not read {gitignore_path}: {e}")
            result.add_failed(
                "gitignore-readable",
                "Could not read .gitignore file",
                "Make sure .gitignore file is readable",
            )
            return result

        lines = [line.strip() for line in content.splitlines()]

        required_rules = self._required_rules(rules)
        if required_rules:
            self._check_required_rules(lines, required_rules, result)
        else:
            self._check_prohibited_folders(lines, rules.general.prohibited_folders or [], result)

        return result

    def _required_rules(self, rules: RuleSet) -> Optional[List[str]]:
        """Entries from the first category namespace that defines them."""
        for namespace in rules.category_namespaces():
            section = rules.get(namespace)
            if section and section.gitignore_rules:
                return section.gitignore_rules
        return rules.general.gitignore_rules

    def _check_required_rules(self, lines: List[str], required_rules: List[str], result: AnalysisResult) -> None:
        for rule in required_rules:
            bare = rule.replace("/", "", 1)
            found = any(line == rule or (bare and bare in line) for line in lines)

            if found:
                result.add_passed(f"gitignore-has-{bare}", f".gitignore includes: {rule}")
            else:
                result.add_failed(
                    f"gitignore-missing-{bare}",
                    f".gitignore missing: {rule}",
                    f"Add '{rule}' to your .gitignore file",
                )

    def _check_prohibited_folders(self, lines: List[str], folders: List[str], result: AnalysisResult) -> None:
        for folder in folders:
            if any(folder in line for line in lines):
                result.add_passed(f"gitignore-excludes-{folder}", f".gitignore excludes: {folder}")
            else:
                result.add_warning(
                    f"gitignore-should-exclude-{folder}",
                    f"Consider adding '{folder}/' to .gitignore",
                    f"Add '{folder}/' to exclude this folder from version control",
                )
