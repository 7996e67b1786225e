# stockmeta/core/config.py
from __future__ import annotations

import os
from functools import lru_cache
from typing import Any, List, Literal, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # === App Info ===
    APP_NAME: str = "Stock Metadata API"
    API_V1_PREFIX: str = "/api/v1"
    ENV: str = os.getenv("ENV", "dev")
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"

    # === CORS ===
    CORS_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def _parse_cors(cls, v: Any) -> List[str]:
        if isinstance(v, str):
            s = v.strip()
            if s.startswith("["):
                import json
                return [x.strip() for x in json.loads(s)]
            return [x.strip() for x in s.split(",") if x.strip()]
        return v

    # === OpenAI（vision 模型）===
    # 未設定金鑰時，/analyze 會回 configuration_error，而不是在啟動時直接失敗
    OPENAI_API_KEY: Optional[str] = None
    OPENAI_BASE_URL: Optional[str] = None
    OPENAI_MODEL: str = "gpt-4.1-mini"
    OPENAI_MAX_OUTPUT_TOKENS: int = 800
    OPENAI_IMAGE_DETAIL: Literal["auto", "low", "high"] = "auto"
    OPENAI_STRUCTURED_OUTPUT: bool = True
    OPENAI_TIMEOUT_SEC: Optional[float] = None

    # === 輸入限制 ===
    # base64 字元數上限（約 12MB 編碼後 ≈ 8MB 原圖）
    MAX_IMAGE_BASE64_CHARS: int = 12 * 1024 * 1024

    # === 回應正規化 ===
    EXTRACTION_MODE: Literal["lenient", "strict"] = "lenient"
    TITLE_MAX_LENGTH: int = 200
    TITLE_TRUNCATION: Literal["word", "hard"] = "word"
    TITLE_MIN_WORD_CUT: int = 40
    TITLE_FALLBACK: str = "ai generated image"
    KEYWORDS_MAX: int = 49
    CATEGORY_FALLBACK: int = 11  # Landscape

    # === 分類覆寫 ===
    CATEGORY_OVERRIDE_ENABLED: bool = True

    @field_validator(
        "TITLE_MAX_LENGTH",
        "KEYWORDS_MAX",
        "MAX_IMAGE_BASE64_CHARS",
        "OPENAI_MAX_OUTPUT_TOKENS",
    )
    @classmethod
    def _positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("must be a positive integer")
        return v

    @field_validator("TITLE_MIN_WORD_CUT")
    @classmethod
    def _non_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError("must be >= 0")
        return v

    @field_validator("CATEGORY_FALLBACK")
    @classmethod
    def _category_range(cls, v: int) -> int:
        if not 1 <= v <= 21:
            raise ValueError("CATEGORY_FALLBACK must be within 1..21")
        return v

    @field_validator("TITLE_FALLBACK")
    @classmethod
    def _title_fallback(cls, v: str) -> str:
        v = (v or "").strip()
        if not v:
            raise ValueError("TITLE_FALLBACK must not be blank")
        return v

    # === Observability（Sentry / Monitoring） ===
    SENTRY_DSN: Optional[str] = os.getenv("SENTRY_DSN")
    SENTRY_ENV: str = os.getenv("SENTRY_ENV", "dev")
    SENTRY_TRACES_SAMPLE_RATE: float = 0.1

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    """測試環境不呼叫外部模型：忽略 .env 中的 OPENAI_API_KEY"""
    s = Settings()
    if s.ENV == "test" and "OPENAI_API_KEY" not in os.environ:
        s.OPENAI_API_KEY = None
    return s


settings = get_settings()
