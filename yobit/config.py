"""환경변수 기반 애플리케이션 설정 로더."""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, SecretStr

from .utils.converters import str_to_bool

ROOT_DIR = Path(__file__).resolve().parent.parent
ENV_FILE = ROOT_DIR / ".env"
load_dotenv(ENV_FILE)

DEFAULT_SERVER = "https://yobit.net"
DEFAULT_TIMEOUT_MS = 20000
DEFAULT_MAX_ATTEMPTS = 10
DEFAULT_RETRY_DELAY_MS = 500
DEFAULT_RETRY_INCREMENT_MS = 250


def _to_int(value: str | int | None, default: int) -> int:
    """문자열 값을 정수로 변환한다."""
    if isinstance(value, int):
        return value
    if value is None:
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


class LoggingSettings(BaseModel):
    """로깅 관련 설정."""

    model_config = ConfigDict(populate_by_name=True)

    level: str = Field(default="INFO")
    log_dir: Path = Field(default=Path("logs"))
    file_name: str = Field(default="yobit.log")
    to_file: bool = Field(default=False)
    rotation_when: str = Field(default="midnight")
    rotation_interval: int = Field(default=1, ge=1)
    backup_count: int = Field(default=7, ge=0)

    @classmethod
    def from_env(cls) -> "LoggingSettings":
        """환경변수에서 로깅 설정을 생성한다."""
        log_dir_value = os.getenv("LOG_DIR", "logs")
        return cls(
            level=os.getenv("LOG_LEVEL", "INFO"),
            log_dir=Path(log_dir_value).expanduser(),
            file_name=os.getenv("LOG_FILE_NAME", "yobit.log"),
            to_file=str_to_bool(os.getenv("LOG_TO_FILE"), False),
            rotation_when=os.getenv("LOG_ROTATION_WHEN", "midnight"),
            rotation_interval=_to_int(os.getenv("LOG_ROTATION_INTERVAL"), 1),
            backup_count=_to_int(os.getenv("LOG_BACKUP_COUNT"), 7),
        )

    @property
    def normalized_level(self) -> str:
        """대문자로 정규화된 로그 레벨."""
        return self.level.upper()

    def resolve_log_path(self, root_dir: Path) -> Path:
        """루트 경로 기준 로그 파일 전체 경로."""
        log_dir = self.log_dir if self.log_dir.is_absolute() else (root_dir / self.log_dir).resolve()
        return log_dir / self.file_name


class YobitSettings(BaseModel):
    """요빗 API 관련 설정."""

    model_config = ConfigDict(populate_by_name=True)

    api_key: Optional[SecretStr] = Field(default=None)
    api_secret: Optional[SecretStr] = Field(default=None)
    server: str = Field(default=DEFAULT_SERVER)
    timeout_ms: int = Field(default=DEFAULT_TIMEOUT_MS, gt=0)
    verbose: bool = Field(default=False)
    max_attempts: int = Field(default=DEFAULT_MAX_ATTEMPTS, ge=1)
    retry_delay_ms: int = Field(default=DEFAULT_RETRY_DELAY_MS, ge=0)
    retry_progressive: bool = Field(default=True)
    retry_increment_ms: int = Field(default=DEFAULT_RETRY_INCREMENT_MS, ge=0)

    @classmethod
    def from_env(cls) -> "YobitSettings":
        """환경변수에서 요빗 API 설정을 생성한다."""
        api_key = os.getenv("YOBIT_API_KEY")
        api_secret = os.getenv("YOBIT_API_SECRET")
        return cls(
            api_key=SecretStr(api_key) if api_key else None,
            api_secret=SecretStr(api_secret) if api_secret else None,
            server=os.getenv("YOBIT_SERVER", DEFAULT_SERVER),
            timeout_ms=_to_int(os.getenv("YOBIT_TIMEOUT_MS"), DEFAULT_TIMEOUT_MS),
            verbose=str_to_bool(os.getenv("YOBIT_VERBOSE"), False),
            max_attempts=_to_int(os.getenv("YOBIT_MAX_ATTEMPTS"), DEFAULT_MAX_ATTEMPTS),
            retry_delay_ms=_to_int(os.getenv("YOBIT_RETRY_DELAY_MS"), DEFAULT_RETRY_DELAY_MS),
            retry_progressive=str_to_bool(os.getenv("YOBIT_RETRY_PROGRESSIVE"), True),
            retry_increment_ms=_to_int(os.getenv("YOBIT_RETRY_INCREMENT_MS"), DEFAULT_RETRY_INCREMENT_MS),
        )


class AppSettings(BaseModel):
    """애플리케이션 전반에 사용되는 설정 묶음."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    root_dir: Path = Field(default=ROOT_DIR)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    yobit: YobitSettings = Field(default_factory=YobitSettings)

    @classmethod
    def load(cls) -> "AppSettings":
        """환경변수 및 기본값을 반영하여 설정 인스턴스를 생성한다."""
        return cls(
            root_dir=ROOT_DIR,
            logging=LoggingSettings.from_env(),
            yobit=YobitSettings.from_env(),
        )


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    """애플리케이션 전역 설정을 캐시하여 반환한다."""
    return AppSettings.load()


__all__ = [
    "AppSettings",
    "DEFAULT_MAX_ATTEMPTS",
    "DEFAULT_RETRY_DELAY_MS",
    "DEFAULT_RETRY_INCREMENT_MS",
    "DEFAULT_SERVER",
    "DEFAULT_TIMEOUT_MS",
    "LoggingSettings",
    "YobitSettings",
    "get_settings",
]
