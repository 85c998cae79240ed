from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from yobit.config import get_settings  # noqa: E402

_ENV_KEYS = (
    "YOBIT_API_KEY",
    "YOBIT_API_SECRET",
    "YOBIT_SERVER",
    "YOBIT_TIMEOUT_MS",
    "YOBIT_VERBOSE",
    "YOBIT_MAX_ATTEMPTS",
    "YOBIT_RETRY_DELAY_MS",
    "YOBIT_RETRY_PROGRESSIVE",
    "YOBIT_RETRY_INCREMENT_MS",
    "LOG_LEVEL",
    "LOG_DIR",
    "LOG_TO_FILE",
)


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch: pytest.MonkeyPatch):
    """환경변수와 설정 캐시가 테스트 사이에 새지 않도록 한다."""
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
