"""시간 관련 헬퍼 함수 모음."""

from __future__ import annotations

from datetime import datetime, timezone


def utc_now() -> datetime:
    """UTC 기준 현재 시간을 반환한다."""
    return datetime.now(timezone.utc)


def to_timestamp(dt: datetime) -> int:
    """datetime 객체를 초 단위 POSIX 타임스탬프로 변환한다.

    시간대 정보가 없으면 UTC 로 간주한다.
    """
    aware_dt = dt if dt.tzinfo is not None else dt.replace(tzinfo=timezone.utc)
    return int(aware_dt.timestamp())


def unix_time() -> int:
    """현재 유닉스 시간(초)의 정수부."""
    return to_timestamp(utc_now())


__all__ = [
    "to_timestamp",
    "unix_time",
    "utc_now",
]
