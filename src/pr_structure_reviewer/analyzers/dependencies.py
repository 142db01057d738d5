"""
Dependency Folders Analyzer

Checks that installed dependency folders (node_modules, .venv, ...) are not
committed, and that package manager files are in place.
"""

from pathlib import Path
from typing import Union

from .base import Analyzer
from ..models.analysis import AnalysisResult
from ..models.rules import RuleSet


DEFAULT_PROHIBITED_FOLDERS = ["node_modules", ".venv", "__pycache__", "venv", "env"]
LOCKFILES = ["package-lock.json", "yarn.lock", "pnpm-lock.yaml"]


class DependencyFolderAnalyzer(Analyzer):
    """Reports committed dependency folders."""

    name = "Dependency Folders Analyzer"

    def analyze(self, project_path: Union[str, Path], rules: RuleSet) -> AnalysisResult:
        result = self.new_result()
        root = Path(project_path)
        prohibited = rules.general.prohibited_folders or DEFAULT_PROHIBITED_FOLDERS

        for folder in prohibited:
            folder_path = root / folder
            rule = f"no-{folder}-committed"

            if folder_path.is_dir():
                result.add_failed(
                    rule,
                    f"Dependency folder found: {folder}/",
                    f"Remove '{folder}/' from repository and add it to .gitignore",
                )
            elif not folder_path.exists():
                result.add_passed(rule, f"No {folder}/ folder found in repository")

        self._check_package_manager_files(root, result)
        return result

    def _check_package_manager_files(self, root: Path, result: AnalysisResult) -> None:
        if (root / "package.json").is_file():
            result.add_passed("package-json-exists", "package.json found")

            lockfile = next((name for name in LOCKFILES if (root / name).is_file()), None)
            if lockfile:
                result.add_passed("lockfile-exists", f"{lockfile} found (dependency versions locked)")
            else:
                result.add_warning(
                    "lockfile-recommended",
                    "No lockfile found (package-lock.json or yarn.lock)",
                    "Consider committing your lockfile to ensure consistent dependency versions",
                )

        if (root / "requirements.txt").is_file():
            result.add_passed("requirements-exists", "requirements.txt found")
