"""
Pull Request File Classifier

Classifies the changed-file list of a pull request into structure findings.
Only file names are inspected; file contents are never downloaded.
"""

import logging
import re
from typing import Dict, List

from ..models.analysis import AggregateReport, AnalysisResult
from ..models.rules import RuleSet
from ..rules.loader import GENERAL, NODEJS
from ..analyzers.env_files import is_env_file
from ..analyzers.dependencies import DEFAULT_PROHIBITED_FOLDERS


logger = logging.getLogger(__name__)

PRESENCE_FILES = [".gitignore", "package.json", "requirements.txt", "pyproject.toml"]
SRC_SUBFOLDERS = ["controllers", "services", "routes", "models", "utils", "gateways"]
RECOMMENDED_SRC_SUBFOLDERS = ["controllers", "services", "routes"]
MAX_LISTED_FILES = 3


class PullRequestFileClassifier:
    """
    Turns GitHub PR file entries into an AggregateReport.

    Works from the ``filename`` and ``status`` of each entry returned by
    the pull request files endpoint.
    """

    name = "Pull Request Files Analyzer"

    def __init__(self):
        """Initialize classifier."""
        self.source_pattern = re.compile(r'\.(js|ts|jsx|tsx)$')
        self.ignored_source_pattern = re.compile(r'^(test|spec|\.)')
        self.build_folder_pattern = re.compile(r'^(node_modules|dist|build|coverage)$')

    def classify(
        self,
        files: List[Dict],
        rules: RuleSet,
        project_type: str,
        project_path: str,
    ) -> AggregateReport:
        """
        Classify PR files.

        Args:
            files: File entries from the GitHub API
            rules: Rules for the detected project type
            project_type: Detected project type
            project_path: Label for the report (repository full name)

        Returns:
            AggregateReport with a single analyzer result
        """
        result = AnalysisResult(analyzer=self.name)
        names = self._present_file_names(files)
        logger.info(f"Classifying {len(names)} changed files for {project_path}")

        self._check_env_files(names, result)
        self._check_dependency_folders(names, rules, result)
        self._check_presence(names, result)

        if self._wants_src_checks(names, project_type):
            self._check_src_structure(names, result)

        return AggregateReport.create(project_path, project_type, [result])

    def _present_file_names(self, files: List[Dict]) -> List[str]:
        """File names that exist after the PR (removed files are skipped)."""
        names = []
        for file_data in files:
            filename = file_data.get('filename')
            if not filename or file_data.get('status') == 'removed':
                continue
            names.append(filename)
        return names

    def _check_env_files(self, names: List[str], result: AnalysisResult) -> None:
        for filename in names:
            if is_env_file(filename.rsplit('/', 1)[-1]):
                result.add_failed(
                    "env-file-committed",
                    f"Environment file should not be committed: {filename}",
                    f"Remove '{filename}' from the repository and add it to .gitignore. "
                    "Use '.env.example' to show required variables.",
                )

    def _check_dependency_folders(self, names: List[str], rules: RuleSet, result: AnalysisResult) -> None:
        folders = rules.general.prohibited_folders or DEFAULT_PROHIBITED_FOLDERS
        for folder in folders:
            prefix = f"{folder}/"
            if any(filename.startswith(prefix) for filename in names):
                result.add_failed(
                    f"no-{folder}-committed",
                    f"Dependency folder {folder}/ should not be committed",
                    f"Add {folder}/ to .gitignore and remove it from the repository",
                )

    def _check_presence(self, names: List[str], result: AnalysisResult) -> None:
        present = set(names)
        for filename in PRESENCE_FILES:
            if filename in present:
                result.add_passed(f"{filename.lstrip('.')}-found", f"{filename} file found")

        if ".gitignore" not in present:
            result.add_warning(
                "gitignore-not-in-changes",
                ".gitignore is not part of this pull request",
                "Make sure the repository has a .gitignore that excludes generated files",
            )

    def _wants_src_checks(self, names: List[str], project_type: str) -> bool:
        """
        Node.js layout checks apply to nodejs projects, and to PRs whose type
        could not be told from the changed files but which touch JS/TS sources
        or a known src/ subfolder.
        """
        if project_type == NODEJS:
            return True
        if project_type != GENERAL:
            return False
        return any(self._is_node_path(filename) for filename in names)

    def _is_node_path(self, filename: str) -> bool:
        parts = filename.split('/')
        if len(parts) > 2 and parts[0] == 'src' and parts[1] in SRC_SUBFOLDERS:
            return True
        return bool(self.source_pattern.search(parts[-1]))

    def _check_src_structure(self, names: List[str], result: AnalysisResult) -> None:
        found_subfolders = set()
        outside_src = []

        for filename in names:
            parts = filename.split('/')
            if parts[0] == 'src':
                if len(parts) > 2 and parts[1] in SRC_SUBFOLDERS:
                    found_subfolders.add(parts[1])
            elif self._is_misplaced_source(parts):
                outside_src.append(filename)

        if found_subfolders:
            result.add_passed("src-structure", "src/ structure found")

            missing = [f for f in RECOMMENDED_SRC_SUBFOLDERS if f not in found_subfolders]
            if missing:
                folders = ", ".join(f"src/{f}/" for f in missing)
                result.add_warning(
                    "src-missing-folders",
                    f"Consider adding {folders} for better organization",
                    "Organizing code in dedicated folders (controllers, services, routes) improves maintainability",
                )

        if outside_src:
            listed = ", ".join(outside_src[:MAX_LISTED_FILES])
            more = "..." if len(outside_src) > MAX_LISTED_FILES else ""
            result.add_warning(
                "files-outside-src",
                f"Source files outside src/: {listed}{more}",
                "Consider moving source files into src/ for better organization",
            )

    def _is_misplaced_source(self, parts: List[str]) -> bool:
        filename = parts[-1]
        if not self.source_pattern.search(filename):
            return False
        if self.ignored_source_pattern.match(parts[0]):
            return False
        return len(parts) == 1 or not self.build_folder_pattern.match(parts[0])
