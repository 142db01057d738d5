"""
Environment Files Analyzer

Looks for committed .env files in the project root.
"""

import logging
from pathlib import Path
from typing import List, Union

from .base import Analyzer
from ..models.analysis import AnalysisResult
from ..models.rules import RuleSet


logger = logging.getLogger(__name__)

ENV_PREFIX = ".env"
ENV_EXAMPLE = ".env.example"
DEFAULT_PROHIBITED_FILES = [".env", ".env.local", ".env.production", ".env.development"]


def is_env_file(name: str) -> bool:
    """True for .env variants other than the example file."""
    return name.startswith(ENV_PREFIX) and name != ENV_EXAMPLE


class EnvFileAnalyzer(Analyzer):
    """Reports environment files that should not be committed."""

    name = "Environment Files Analyzer"

    def analyze(self, project_path: Union[str, Path], rules: RuleSet) -> AnalysisResult:
        result = self.new_result()
        root = Path(project_path)
        prohibited = rules.general.prohibited_files or DEFAULT_PROHIBITED_FILES

        found = self.find_env_files(root, prohibited)

        if not found:
            result.add_passed("no-env-files-committed", "No .env files found in repository")
        for env_file in found:
            result.add_failed(
                "env-file-committed",
                f"Environment file found: {env_file}",
                f"Remove '{env_file}' from repository and add it to .gitignore. "
                f"Use '{ENV_EXAMPLE}' instead to show required variables.",
            )

        if (root / ENV_EXAMPLE).exists():
            result.add_passed("env-example-exists", f"{ENV_EXAMPLE} file found (good practice)")
        else:
            result.add_warning(
                "env-example-recommended",
                f"Consider creating {ENV_EXAMPLE} file",
                f"Create {ENV_EXAMPLE} with dummy values to show required environment variables",
            )

        return result

    def find_env_files(self, root: Path, prohibited: List[str]) -> List[str]:
        """Prohibited or .env-prefixed root entries, sorted and without duplicates."""
        found = set()
        for entry in root.iterdir():
            if not entry.is_file():
                continue
            if entry.name in prohibited or is_env_file(entry.name):
                found.add(entry.name)
        return sorted(found)
