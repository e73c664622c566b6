"""Configuration models for the feed fetch client."""

from __future__ import annotations

from functools import lru_cache
from typing import Literal, Optional

from pydantic import (
    Field,
    PositiveFloat,
    PositiveInt,
    SecretStr,
    ValidationError,
    field_validator,
    model_validator,
)
from pydantic_settings import BaseSettings, SettingsConfigDict


TransportName = Literal["http", "stream"]


class Settings(BaseSettings):
    """Feed requests 서비스 연동용 환경 설정."""

    model_config = SettingsConfigDict(
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
        populate_by_name=True,
    )

    feed_requests_api_url: str = Field(
        ...,
        alias="FEED_REQUESTS_API_URL",
        description="Feed requests 서비스 동기(HTTP) 엔드포인트.",
    )
    feed_requests_api_key: SecretStr = Field(
        ...,
        alias="FEED_REQUESTS_API_KEY",
        description="Feed requests 서비스 인증 키.",
    )
    feed_requests_stream_url: Optional[str] = Field(
        None,
        alias="FEED_REQUESTS_STREAM_URL",
        description="스트리밍 채널 엔드포인트 (transport=stream 일 때 필수).",
    )
    feed_requests_stream_target: str = Field(
        "feed-requests",
        alias="FEED_REQUESTS_STREAM_TARGET",
        description="스트리밍 호출마다 첨부되는 라우팅 대상.",
    )
    feed_requests_transport: TransportName = Field(
        "http",
        alias="FEED_REQUESTS_TRANSPORT",
        description="사용할 전송 채널 (http | stream).",
    )
    feed_requests_timeout_seconds: PositiveFloat = Field(
        30.0,
        alias="FEED_REQUESTS_TIMEOUT_SECONDS",
        description="전송 호출 타임아웃(초).",
    )
    feed_requests_max_retries: PositiveInt = Field(
        5,
        alias="FEED_REQUESTS_MAX_RETRIES",
        description="네트워크 오류 시 최대 재시도 횟수.",
    )
    feed_requests_retry_min_delay_seconds: float = Field(
        1.0,
        ge=0.0,
        alias="FEED_REQUESTS_RETRY_MIN_DELAY_SECONDS",
        description="첫 재시도 대기 시간(초).",
    )
    feed_requests_retry_max_delay_seconds: float = Field(
        30.0,
        ge=0.0,
        alias="FEED_REQUESTS_RETRY_MAX_DELAY_SECONDS",
        description="재시도 대기 시간 상한(초).",
    )
    log_level: str = Field("INFO", alias="LOG_LEVEL", description="로그 레벨.")
    log_json: bool = Field(False, alias="LOG_JSON", description="로그를 JSON 형식으로 출력할지 여부.")

    @field_validator("feed_requests_api_url", "feed_requests_stream_url")
    @classmethod
    def _validate_url(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        url = value.strip()
        if "://" not in url:
            raise ValueError("Feed requests 엔드포인트는 유효한 URL이어야 합니다.")
        return url

    @field_validator("feed_requests_api_key")
    @classmethod
    def _non_empty_api_key(cls, value: SecretStr) -> SecretStr:
        if not value.get_secret_value().strip():
            raise ValueError("FEED_REQUESTS_API_KEY는 공백일 수 없습니다.")
        return value

    @model_validator(mode="after")
    def _validate_transport(self) -> "Settings":
        if self.feed_requests_transport == "stream" and not self.feed_requests_stream_url:
            raise ValueError("FEED_REQUESTS_TRANSPORT=stream 이면 FEED_REQUESTS_STREAM_URL이 필요합니다.")
        if self.feed_requests_retry_max_delay_seconds < self.feed_requests_retry_min_delay_seconds:
            raise ValueError("재시도 대기 상한은 최소 대기 시간보다 작을 수 없습니다.")
        return self


@lru_cache()
def get_settings() -> Settings:
    """환경 변수를 기준으로 Settings 인스턴스를 반환한다."""
    try:
        return Settings()
    except ValidationError as exc:
        raise RuntimeError(f"환경 변수 검증에 실패했습니다: {exc}") from exc


def reset_settings_cache() -> None:
    """Settings LRU 캐시를 초기화한다 (테스트 용도)."""
    get_settings.cache_clear()  # type: ignore[attr-defined]
