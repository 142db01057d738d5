"""
GitHub Integration Layer

This module provides GitHub API integration, webhook verification,
and bot comment management.
"""

from .client import GitHubClient, GitHubAPIError, RateLimitExceeded
from .webhook import WebhookGate, SignatureStatus, verify_signature, compute_signature
from .comments import PRCommentManager, CommentResult, BOT_MARKER

__all__ = [
    'GitHubClient',
    'GitHubAPIError',
    'RateLimitExceeded',
    'WebhookGate',
    'SignatureStatus',
    'verify_signature',
    'compute_signature',
    'PRCommentManager',
    'CommentResult',
    'BOT_MARKER',
]
