"""
Data Models

PR 구조 리뷰 시스템의 핵심 데이터 모델들
"""

from .rules import NamespaceRules, RuleSet, GENERAL_NAMESPACE
from .analysis import Severity, Finding, AnalysisResult, ReportSummary, AggregateReport
from .webhook import (
    PullRequestIdentity,
    WebhookEvent,
    PullRequestEventPayload,
    AnalyzeRequest,
)

__all__ = [
    "NamespaceRules",
    "RuleSet",
    "GENERAL_NAMESPACE",
    "Severity",
    "Finding",
    "AnalysisResult",
    "ReportSummary",
    "AggregateReport",
    "PullRequestIdentity",
    "WebhookEvent",
    "PullRequestEventPayload",
    "AnalyzeRequest",
]
