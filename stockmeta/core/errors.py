# stockmeta/core/errors.py
import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


# ===========================================
# 領域錯誤：每一種都對應一個穩定的 label 與 HTTP 狀態碼
# ===========================================
class StockMetaError(Exception):
    label = "internal_error"
    status_code = 500

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail

    def to_payload(self) -> dict:
        return {"error": self.label, "details": self.detail}


class InvalidInput(StockMetaError):
    """請求內容有問題（缺圖、圖太大）；不會呼叫外部模型"""
    label = "invalid_input"
    status_code = 400


class PayloadTooLarge(InvalidInput):
    label = "image_too_large"
    status_code = 413


class ConfigurationError(StockMetaError):
    """伺服器端缺少必要設定（例如 OPENAI_API_KEY）"""
    label = "configuration_error"
    status_code = 500


class UpstreamError(StockMetaError):
    """外部模型呼叫失敗；保留原始狀態碼方便診斷"""
    label = "upstream_error"
    status_code = 502

    def __init__(self, detail: str, upstream_status: Optional[int] = None) -> None:
        super().__init__(detail)
        self.upstream_status = upstream_status

    def to_payload(self) -> dict:
        payload = super().to_payload()
        if self.upstream_status is not None:
            payload["upstream_status"] = self.upstream_status
        return payload


class EmptyResponse(StockMetaError):
    label = "empty_response"
    status_code = 502


class MalformedResponse(StockMetaError):
    label = "malformed_response"
    status_code = 502


class NoJsonObjectFound(MalformedResponse):
    label = "no_json_object_found"


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(StockMetaError)
    async def domain_exc_handler(request: Request, exc: StockMetaError):
        if exc.status_code >= 500:
            logger.error("%s on %s: %s", exc.label, request.url.path, exc.detail)
        else:
            logger.warning("%s on %s: %s", exc.label, request.url.path, exc.detail)
        return JSONResponse(status_code=exc.status_code, content=exc.to_payload())

    @app.exception_handler(StarletteHTTPException)
    async def http_exc_handler(request: Request, exc: StarletteHTTPException):
        # 統一輸出格式
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})

    @app.exception_handler(RequestValidationError)
    async def validation_exc_handler(request: Request, exc: RequestValidationError):
        # 客製化，但保持資訊節制
        return JSONResponse(
            status_code=422,
            content={"detail": "Validation error", "errors": exc.errors()},
        )

    @app.middleware("http")
    async def add_security_headers(request: Request, call_next):
        resp = await call_next(request)
        resp.headers["X-Content-Type-Options"] = "nosniff"
        resp.headers["X-Frame-Options"] = "DENY"
        return resp
