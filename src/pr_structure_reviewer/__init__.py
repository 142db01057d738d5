"""
PR Structure Reviewer

GitHub Pull Request 프로젝트 구조 자동 리뷰 서비스
"""

__version__ = "1.0.0"

from .api import StructureReviewerAPI
from .review.orchestrator import ProjectReviewer
from .rules.loader import RuleLoader

__all__ = ["StructureReviewerAPI", "ProjectReviewer", "RuleLoader"]
