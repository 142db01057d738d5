"""
Error Types

구조 리뷰 시스템 전반에서 사용하는 예외 계층
"""

from typing import Optional


class ReviewerError(Exception):
    """Base error for the structure reviewer."""


class ConfigurationError(ReviewerError):
    """Rule files or application settings could not be used."""
    def __init__(self, message: str, source: Optional[str] = None):
        super().__init__(message)
        self.source = source


class ProjectPathNotFoundError(ReviewerError):
    """Target project directory does not exist."""
    def __init__(self, project_path: str):
        super().__init__(f"Project directory does not exist: {project_path}")
        self.project_path = project_path


class SignatureInvalidError(ReviewerError):
    """Webhook signature is missing or does not match the payload."""
