"""
Rule Loader

Reads the bundled (or configured) JSON rule files and merges the general
rules with the rules of a project category.
"""

import json
import logging
import re
from pathlib import Path
from typing import Iterable, Optional, Union

from ..errors import ConfigurationError
from ..models.rules import RuleSet


logger = logging.getLogger(__name__)

DEFAULT_RULES_DIR = Path(__file__).parent / "definitions"

NODEJS = "nodejs"
PYTHON = "python"
GENERAL = "general"

NODEJS_MARKERS = ("package.json",)
PYTHON_MARKERS = ("requirements.txt", "setup.py", "pyproject.toml")

PROJECT_TYPE_PATTERN = re.compile(r"^[a-z0-9][a-z0-9_-]*$")


def detect_project_type_from_names(names: Iterable[str]) -> str:
    """
    Classify a project from the names of its top-level entries.

    Node.js markers win over Python markers when both are present.
    """
    present = set(names)

    if any(marker in present for marker in NODEJS_MARKERS):
        return NODEJS

    if any(marker in present for marker in PYTHON_MARKERS):
        return PYTHON

    return GENERAL


def detect_project_type(project_path: Union[str, Path]) -> str:
    """
    Detect the project category from files in the project root.

    Args:
        project_path: Project root directory

    Returns:
        "nodejs", "python" or "general"
    """
    try:
        names = [entry.name for entry in Path(project_path).iterdir()]
    except OSError as e:
        logger.error(f"Error detecting project type: {e}")
        return GENERAL

    return detect_project_type_from_names(names)


class RuleLoader:
    """
    Loads rule sets by project category.

    Rule files are named ``<category>-rules.json``; ``general-rules.json``
    is the base every category is merged onto.
    """

    def __init__(self, rules_dir: Optional[Union[str, Path]] = None):
        """
        Initialize rule loader.

        Args:
            rules_dir: Directory holding rule files (default: bundled rules)
        """
        self.rules_dir = Path(rules_dir) if rules_dir else DEFAULT_RULES_DIR

    def rules_path(self, project_type: str) -> Path:
        return self.rules_dir / f"{project_type}-rules.json"

    def load_rules(self, project_type: str = GENERAL) -> RuleSet:
        """
        Load the merged rule set for a project category.

        Missing files are skipped. Unreadable or malformed files degrade to
        the default rule set instead of failing the analysis.

        Args:
            project_type: Project category (nodejs, python, general, ...)

        Returns:
            Merged RuleSet
        """
        try:
            rules = self._read_rule_file(self.rules_path(GENERAL)) or RuleSet()

            if project_type != GENERAL and not PROJECT_TYPE_PATTERN.match(project_type):
                logger.warning(f"Ignoring invalid project type: {project_type!r}")
            elif project_type != GENERAL:
                category_rules = self._read_rule_file(self.rules_path(project_type))
                if category_rules is not None:
                    rules = RuleSet.merge(rules, category_rules)
                else:
                    logger.debug(f"No rule file for project type '{project_type}'")

            logger.debug(f"Loaded rule namespaces for {project_type}: {list(rules)}")
            return rules

        except ConfigurationError as e:
            logger.error(f"Error loading rules ({e.source}): {e}")
            return RuleSet.default()

    def _read_rule_file(self, path: Path) -> Optional[RuleSet]:
        """Read one rule file, or None if it does not exist."""
        if not path.is_file():
            return None

        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            raise ConfigurationError(f"Could not read rule file: {e}", source=str(path))

        return RuleSet.from_dict(data, source=str(path))
