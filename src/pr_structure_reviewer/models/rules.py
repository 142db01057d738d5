"""
Rule Data Models

프로젝트 유형별 구조 규칙 데이터 모델들
"""

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Any
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ..errors import ConfigurationError


GENERAL_NAMESPACE = "general"


@dataclass(frozen=True)
class NamespaceRules:
    """규칙 네임스페이스 하나 (예: general, nodejs)"""
    required_files: Optional[List[str]] = None
    prohibited_files: Optional[List[str]] = None
    prohibited_folders: Optional[List[str]] = None
    gitignore_rules: Optional[List[str]] = None

    def to_dict(self) -> Dict[str, List[str]]:
        """JSON 규칙 파일 형식으로 변환 (없는 필드는 제외)"""
        data = {}
        if self.required_files is not None:
            data['requiredFiles'] = list(self.required_files)
        if self.prohibited_files is not None:
            data['prohibitedFiles'] = list(self.prohibited_files)
        if self.prohibited_folders is not None:
            data['prohibitedFolders'] = list(self.prohibited_folders)
        if self.gitignore_rules is not None:
            data['gitignoreRules'] = list(self.gitignore_rules)
        return data


@dataclass(frozen=True)
class RuleSet:
    """
    Namespace -> NamespaceRules mapping.

    Built fresh for every analysis call. Namespaces nobody reads are kept
    so that rule files can carry sections for future analyzers.
    """
    namespaces: Dict[str, NamespaceRules] = field(default_factory=dict)

    def __contains__(self, namespace: str) -> bool:
        return namespace in self.namespaces

    def __iter__(self) -> Iterator[str]:
        return iter(self.namespaces)

    def __len__(self) -> int:
        return len(self.namespaces)

    def get(self, namespace: str) -> Optional[NamespaceRules]:
        return self.namespaces.get(namespace)

    @property
    def general(self) -> NamespaceRules:
        """general 네임스페이스 (없으면 빈 규칙)"""
        return self.namespaces.get(GENERAL_NAMESPACE) or NamespaceRules()

    def category_namespaces(self) -> List[str]:
        """general 이외의 네임스페이스 목록 (정의 순서 유지)"""
        return [name for name in self.namespaces if name != GENERAL_NAMESPACE]

    @classmethod
    def default(cls) -> "RuleSet":
        """규칙 파일을 읽을 수 없을 때 사용하는 기본값"""
        return cls({GENERAL_NAMESPACE: NamespaceRules()})

    @classmethod
    def merge(cls, base: "RuleSet", override: "RuleSet") -> "RuleSet":
        """
        Shallow merge of two rule sets.

        A namespace present in both is replaced wholesale by the override's
        value; its fields are never combined.
        """
        merged = dict(base.namespaces)
        merged.update(override.namespaces)
        return cls(merged)

    @classmethod
    def from_dict(cls, data: Any, source: Optional[str] = None) -> "RuleSet":
        """
        Parse rule file content.

        Args:
            data: Decoded JSON content
            source: File the content came from, for error messages

        Raises:
            ConfigurationError: If the content does not match the rule format
        """
        if not isinstance(data, dict):
            raise ConfigurationError("Rule file must contain a JSON object", source=source)

        namespaces = {}
        for name, section in data.items():
            if not isinstance(section, dict):
                raise ConfigurationError(
                    f"Rule namespace '{name}' must be an object", source=source
                )
            try:
                schema = NamespaceRulesSchema.model_validate(section)
            except ValidationError as e:
                raise ConfigurationError(
                    f"Invalid rules in namespace '{name}': {e}", source=source
                )
            namespaces[name] = schema.to_rules()

        return cls(namespaces)

    def to_dict(self) -> Dict[str, Dict[str, List[str]]]:
        return {name: rules.to_dict() for name, rules in self.namespaces.items()}


# Pydantic schema for rule file validation
class NamespaceRulesSchema(BaseModel):
    """규칙 파일 검증용 네임스페이스 모델"""
    model_config = ConfigDict(populate_by_name=True, extra='ignore')

    required_files: Optional[List[str]] = Field(default=None, alias='requiredFiles')
    prohibited_files: Optional[List[str]] = Field(default=None, alias='prohibitedFiles')
    prohibited_folders: Optional[List[str]] = Field(default=None, alias='prohibitedFolders')
    gitignore_rules: Optional[List[str]] = Field(default=None, alias='gitignoreRules')

    @field_validator('required_files', 'prohibited_files', 'prohibited_folders', 'gitignore_rules')
    @classmethod
    def validate_entries(cls, v):
        if v is None:
            return v
        cleaned = [entry.strip() for entry in v]
        if any(not entry for entry in cleaned):
            raise ValueError('Rule entries cannot be empty')
        return cleaned

    def to_rules(self) -> NamespaceRules:
        return NamespaceRules(
            required_files=self.required_files,
            prohibited_files=self.prohibited_files,
            prohibited_folders=self.prohibited_folders,
            gitignore_rules=self.gitignore_rules,
        )
