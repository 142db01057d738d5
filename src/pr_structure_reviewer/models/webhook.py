"""
Webhook Data Models

GitHub webhook 및 API 요청 관련 데이터 모델들
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


@dataclass(frozen=True)
class PullRequestIdentity:
    """PR 식별자"""
    owner: str
    repo: str
    number: int

    def __post_init__(self):
        """데이터 검증"""
        if not self.owner or not self.repo:
            raise ValueError("Owner and repo are required")
        if self.number <= 0:
            raise ValueError("PR number must be positive")

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"

    @property
    def key(self) -> str:
        """PR 단위 직렬화 키"""
        return f"{self.owner}/{self.repo}#{self.number}"

    def __str__(self) -> str:
        return self.key


@dataclass(frozen=True)
class WebhookEvent:
    """수신한 webhook 전달 하나"""
    event_type: Optional[str]
    raw_body: bytes
    signature: Optional[str]
    payload: Dict[str, Any] = field(default_factory=dict)

    @property
    def action(self) -> Optional[str]:
        action = self.payload.get('action')
        return action if isinstance(action, str) else None


# Pydantic models for payload validation
class PullRequestHead(BaseModel):
    sha: str


class PullRequestData(BaseModel):
    """Webhook payload의 pull_request 부분"""
    number: int
    title: str = ''
    body: Optional[str] = None
    head: PullRequestHead

    @field_validator('number')
    @classmethod
    def validate_number(cls, v):
        if v <= 0:
            raise ValueError('PR number must be positive')
        return v

    @property
    def short_sha(self) -> str:
        return self.head.sha[:7]


class RepositoryOwner(BaseModel):
    login: str


class RepositoryData(BaseModel):
    """Webhook payload의 repository 부분"""
    name: str
    full_name: str
    owner: RepositoryOwner


class PullRequestEventPayload(BaseModel):
    """pull_request 이벤트 payload"""
    action: str
    pull_request: PullRequestData
    repository: RepositoryData

    @property
    def identity(self) -> PullRequestIdentity:
        return PullRequestIdentity(
            owner=self.repository.owner.login,
            repo=self.repository.name,
            number=self.pull_request.number,
        )


class AnalyzeRequest(BaseModel):
    """수동 분석 API 요청"""
    model_config = ConfigDict(populate_by_name=True)

    owner: Optional[str] = None
    repo: Optional[str] = None
    pr_number: Optional[int] = None
    project_path: Optional[str] = Field(default=None, alias='projectPath')
    project_type: Optional[str] = Field(default=None, alias='projectType')

    @model_validator(mode='after')
    def validate_target(self):
        if self.project_path:
            return self
        if not self.owner or not self.repo or not self.pr_number:
            raise ValueError('Missing required fields: owner, repo, pr_number (or projectPath)')
        if self.pr_number <= 0:
            raise ValueError('PR number must be positive')
        return self

    @property
    def is_local(self) -> bool:
        return bool(self.project_path)
