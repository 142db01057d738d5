"""
Configuration Management

시스템 설정 관리
"""

import logging
import os
from dataclasses import asdict, dataclass, field, fields
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .errors import ConfigurationError


logger = logging.getLogger(__name__)

DEFAULT_RELEVANT_ACTIONS = ["opened", "synchronize", "reopened"]
DEFAULT_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')


def _env_str(name: str, default: Optional[str] = None) -> Optional[str]:
    """빈 문자열은 미설정으로 취급"""
    return os.getenv(name) or default


def _env_int(name: str, default: int) -> int:
    return int(_env_str(name, str(default)))


def _env_float(name: str, default: float) -> float:
    return float(_env_str(name, str(default)))


def _env_bool(name: str, default: bool = False) -> bool:
    raw = _env_str(name)
    return default if raw is None else raw.lower() == "true"


def _env_list(name: str, default: List[str]) -> List[str]:
    raw = _env_str(name)
    if raw is None:
        return list(default)
    return [item.strip() for item in raw.split(",") if item.strip()]


@dataclass
class GitHubConfig:
    """GitHub API 설정"""
    token: Optional[str] = None
    api_base_url: str = "https://api.github.com"
    timeout_seconds: int = 30


@dataclass
class WebhookConfig:
    """Webhook 검증 및 이벤트 필터 설정"""
    secret: Optional[str] = None
    relevant_actions: List[str] = field(default_factory=lambda: list(DEFAULT_RELEVANT_ACTIONS))


@dataclass
class RulesConfig:
    """규칙 파일 위치 설정"""
    rules_dir: Optional[str] = None  # None이면 패키지 내장 규칙 사용


@dataclass
class DispatchConfig:
    """백그라운드 작업 실행 설정"""
    max_workers: int = 4
    max_retries: int = 3
    initial_backoff: float = 2.0
    max_backoff: float = 60.0
    multiplier: float = 2.0
    inline: bool = False


@dataclass
class ServerConfig:
    """HTTP 서버 설정"""
    host: str = "0.0.0.0"
    port: int = 3000
    debug: bool = False


@dataclass
class LoggingConfig:
    """로깅 설정"""
    level: str = "INFO"
    format: str = DEFAULT_LOG_FORMAT
    file_path: Optional[str] = None
    max_file_size: int = 10 * 1024 * 1024
    backup_count: int = 5


@dataclass
class AppConfig:
    """전체 애플리케이션 설정"""
    github: GitHubConfig = field(default_factory=GitHubConfig)
    webhook: WebhookConfig = field(default_factory=WebhookConfig)
    rules: RulesConfig = field(default_factory=RulesConfig)
    dispatch: DispatchConfig = field(default_factory=DispatchConfig)
    server: ServerConfig = field(default_factory=ServerConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_env(cls) -> "AppConfig":
        """환경 변수에서 설정 로드"""
        return cls(
            github=GitHubConfig(
                token=_env_str("GITHUB_TOKEN"),
                api_base_url=_env_str("GITHUB_API_URL", GitHubConfig.api_base_url),
                timeout_seconds=_env_int("GITHUB_TIMEOUT", GitHubConfig.timeout_seconds),
            ),
            webhook=WebhookConfig(
                secret=_env_str("WEBHOOK_SECRET"),
                relevant_actions=_env_list("WEBHOOK_ACTIONS", DEFAULT_RELEVANT_ACTIONS),
            ),
            rules=RulesConfig(rules_dir=_env_str("RULES_DIR")),
            dispatch=DispatchConfig(
                max_workers=_env_int("DISPATCH_WORKERS", DispatchConfig.max_workers),
                max_retries=_env_int("DISPATCH_MAX_RETRIES", DispatchConfig.max_retries),
                initial_backoff=_env_float("DISPATCH_INITIAL_BACKOFF", DispatchConfig.initial_backoff),
                max_backoff=_env_float("DISPATCH_MAX_BACKOFF", DispatchConfig.max_backoff),
                multiplier=_env_float("DISPATCH_MULTIPLIER", DispatchConfig.multiplier),
                inline=_env_bool("DISPATCH_INLINE"),
            ),
            server=ServerConfig(
                host=_env_str("HOST", ServerConfig.host),
                port=_env_int("PORT", ServerConfig.port),
                debug=_env_bool("DEBUG"),
            ),
            logging=LoggingConfig(
                level=_env_str("LOG_LEVEL", LoggingConfig.level),
                format=_env_str("LOG_FORMAT", DEFAULT_LOG_FORMAT),
                file_path=_env_str("LOG_FILE"),
                max_file_size=_env_int("LOG_MAX_SIZE", LoggingConfig.max_file_size),
                backup_count=_env_int("LOG_BACKUP_COUNT", LoggingConfig.backup_count),
            ),
        )

    @classmethod
    def from_yaml(cls, config_path: str) -> "AppConfig":
        """
        YAML 파일에서 설정 로드

        Top-level keys are section names; missing sections keep defaults.

        Raises:
            FileNotFoundError: If the file does not exist
            ConfigurationError: If the content is not a mapping of known keys
        """
        path = Path(config_path)
        if not path.is_file():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        data = yaml.safe_load(path.read_text(encoding='utf-8')) or {}
        if not isinstance(data, dict):
            raise ConfigurationError("Config file must contain a mapping", source=config_path)

        sections = {}
        for section in fields(cls):
            values = data.get(section.name) or {}
            try:
                sections[section.name] = section.default_factory(**values)
            except TypeError as e:
                raise ConfigurationError(f"Invalid '{section.name}' section: {e}", source=config_path)

        return cls(**sections)

    @property
    def signature_verification_enabled(self) -> bool:
        return bool(self.webhook.secret)

    @property
    def github_authenticated(self) -> bool:
        return bool(self.github.token)

    def validate(self) -> List[str]:
        """
        설정 유효성 검사

        Returns:
            Warnings about insecure but allowed settings

        Raises:
            ConfigurationError: For settings the service cannot run with
        """
        problems = []
        if not 0 < self.server.port < 65536:
            problems.append(f"Invalid port: {self.server.port}")
        if self.dispatch.max_workers < 1:
            problems.append("Dispatch worker count must be positive")
        if self.dispatch.max_retries < 0:
            problems.append("Dispatch retry count must be non-negative")
        if min(self.dispatch.initial_backoff, self.dispatch.max_backoff) < 0:
            problems.append("Backoff values must be non-negative")
        if self.github.timeout_seconds <= 0:
            problems.append("GitHub timeout must be positive")
        if self.logging.level.upper() not in LOG_LEVELS:
            problems.append(f"Invalid log level: {self.logging.level}")

        if problems:
            raise ConfigurationError(f"Configuration validation failed: {'; '.join(problems)}")

        warnings = []
        if not self.signature_verification_enabled:
            warnings.append("WEBHOOK_SECRET is not set: webhook signature verification is DISABLED")
        if not self.github_authenticated:
            warnings.append("GITHUB_TOKEN is not set: GitHub API calls are unauthenticated")
        if self.rules.rules_dir and not Path(self.rules.rules_dir).is_dir():
            warnings.append(f"Rules directory not found: {self.rules.rules_dir}")
        return warnings

    def to_dict(self) -> Dict[str, Any]:
        """설정을 딕셔너리로 변환 (토큰과 secret은 플래그로만 노출)"""
        data = asdict(self)
        data['github']['authenticated'] = bool(data['github'].pop('token'))
        data['webhook']['signature_verification'] = bool(data['webhook'].pop('secret'))
        return data


def configure_logging(config: LoggingConfig) -> None:
    """루트 로거 설정 (파일 경로가 있으면 로테이션 파일 핸들러 추가)"""
    logging.basicConfig(level=getattr(logging, config.level.upper()), format=config.format)

    if config.file_path:
        handler = RotatingFileHandler(
            config.file_path,
            maxBytes=config.max_file_size,
            backupCount=config.backup_count,
        )
        handler.setFormatter(logging.Formatter(config.format))
        logging.getLogger().addHandler(handler)


class ConfigManager:
    """설정 관리자: 검증, 경고 출력, 로깅 설정"""

    def __init__(self, config: Optional[AppConfig] = None, setup_logging: bool = True):
        self._config = config or AppConfig.from_env()
        self._warnings = self._config.validate()

        if setup_logging:
            configure_logging(self._config.logging)

        for warning in self._warnings:
            logger.warning(warning)

    @property
    def config(self) -> AppConfig:
        return self._config

    @property
    def warnings(self) -> List[str]:
        return list(self._warnings)


_config_manager: Optional[ConfigManager] = None


def get_config_manager() -> ConfigManager:
    """전역 설정 관리자 (최초 호출 시 환경 변수로 생성)"""
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager


def get_config() -> AppConfig:
    return get_config_manager().config
