"""
Analysis Data Models

분석 결과 관련 데이터 모델들
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


class Severity(Enum):
    """Finding classification."""
    PASSED = "passed"
    FAILED = "failed"
    WARNING = "warning"


@dataclass(frozen=True)
class Finding:
    """개별 검사 결과"""
    rule: str
    message: str
    suggestion: Optional[str] = None

    def __post_init__(self):
        """데이터 검증"""
        if not self.rule.strip():
            raise ValueError("Rule id cannot be empty")
        if not self.message.strip():
            raise ValueError("Message cannot be empty")

    def to_dict(self) -> Dict[str, str]:
        data = {'rule': self.rule, 'message': self.message}
        if self.suggestion:
            data['suggestion'] = self.suggestion
        return data


@dataclass
class AnalysisResult:
    """분석기 하나의 결과"""
    analyzer: str
    passed: List[Finding] = field(default_factory=list)
    failed: List[Finding] = field(default_factory=list)
    warnings: List[Finding] = field(default_factory=list)
    error: Optional[str] = None

    def __post_init__(self):
        """데이터 검증"""
        if self.error is not None and (self.passed or self.failed or self.warnings):
            raise ValueError("A failed analyzer cannot carry findings")

    @classmethod
    def from_error(cls, analyzer: str, error: str) -> "AnalysisResult":
        """분석기 자체가 실패한 경우의 결과"""
        return cls(analyzer=analyzer, error=error or "Unknown error")

    @property
    def has_error(self) -> bool:
        return self.error is not None

    def add(self, severity: Severity, finding: Finding) -> None:
        self.findings(severity).append(finding)

    def add_passed(self, rule: str, message: str, suggestion: Optional[str] = None) -> None:
        self.passed.append(Finding(rule, message, suggestion))

    def add_failed(self, rule: str, message: str, suggestion: Optional[str] = None) -> None:
        self.failed.append(Finding(rule, message, suggestion))

    def add_warning(self, rule: str, message: str, suggestion: Optional[str] = None) -> None:
        self.warnings.append(Finding(rule, message, suggestion))

    def findings(self, severity: Severity) -> List[Finding]:
        if severity is Severity.PASSED:
            return self.passed
        if severity is Severity.FAILED:
            return self.failed
        return self.warnings

    def to_dict(self) -> Dict[str, Any]:
        data = {
            'analyzer': self.analyzer,
            'passed': [f.to_dict() for f in self.passed],
            'failed': [f.to_dict() for f in self.failed],
            'warnings': [f.to_dict() for f in self.warnings],
        }
        if self.error is not None:
            data['error'] = self.error
        return data


@dataclass(frozen=True)
class ReportSummary:
    """전체 분석 요약"""
    total_analyzers: int
    passed: int
    failed: int
    warnings: int

    @classmethod
    def from_results(cls, results: List[AnalysisResult]) -> "ReportSummary":
        """오류가 없는 분석기 결과만 집계"""
        counted = [r for r in results if not r.has_error]
        return cls(
            total_analyzers=len(results),
            passed=sum(len(r.passed) for r in counted),
            failed=sum(len(r.failed) for r in counted),
            warnings=sum(len(r.warnings) for r in counted),
        )

    @property
    def has_problems(self) -> bool:
        return self.failed > 0 or self.warnings > 0

    def to_dict(self) -> Dict[str, int]:
        return {
            'totalAnalyzers': self.total_analyzers,
            'passed': self.passed,
            'failed': self.failed,
            'warnings': self.warnings,
        }


@dataclass(frozen=True)
class AggregateReport:
    """분석 실행 하나의 전체 결과"""
    project_path: str
    project_type: str
    timestamp: datetime
    summary: ReportSummary
    analyzers: Tuple[AnalysisResult, ...]

    @classmethod
    def create(
        cls,
        project_path: str,
        project_type: str,
        results: List[AnalysisResult],
        timestamp: Optional[datetime] = None,
    ) -> "AggregateReport":
        """새로운 리포트 생성 (요약은 결과에서 계산)"""
        return cls(
            project_path=project_path,
            project_type=project_type,
            timestamp=timestamp or datetime.now(timezone.utc),
            summary=ReportSummary.from_results(results),
            analyzers=tuple(results),
        )

    def all_findings(self, severity: Severity) -> List[Finding]:
        """모든 분석기에서 특정 심각도의 결과 반환"""
        findings = []
        for result in self.analyzers:
            findings.extend(result.findings(severity))
        return findings

    @property
    def errored_analyzers(self) -> List[AnalysisResult]:
        return [r for r in self.analyzers if r.has_error]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'projectPath': self.project_path,
            'projectType': self.project_type,
            'timestamp': self.timestamp.isoformat(),
            'summary': self.summary.to_dict(),
            'analyzers': [r.to_dict() for r in self.analyzers],
        }
