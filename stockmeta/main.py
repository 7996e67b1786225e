# stockmeta/main.py
import logging
import os
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from stockmeta.core.config import settings
from stockmeta.core.logging import setup_logging
from stockmeta.core.errors import register_error_handlers
from stockmeta.core.deps import lifespan_clients
from stockmeta.api.v1.router import api_router
from stockmeta.api.v1.endpoints.analyze import router as analyze_router

# Monitoring
import sentry_sdk
from prometheus_fastapi_instrumentator import Instrumentator

logger = setup_logging(settings.LOG_LEVEL)
log = logging.getLogger(__name__)


def _check_config() -> None:
    """
    部署前檢查：prod/staging 沒有 OPENAI_API_KEY 時先警告，
    請求仍會以 configuration_error 回應。
    """
    env = (settings.ENV or "").lower()
    if env in {"prod", "production", "staging", "preview"} and not settings.OPENAI_API_KEY:
        log.warning("OPENAI_API_KEY is not set in ENV=%s; /analyze will fail", settings.ENV)


def create_app() -> FastAPI:
    _check_config()

    app = FastAPI(
        title=settings.APP_NAME,
        debug=settings.DEBUG,
        lifespan=lifespan_clients,
    )

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ---- Sentry 初始化（若 .env/SENTRY_DSN 未設定就略過）----
    sentry_dsn = settings.SENTRY_DSN or os.getenv("SENTRY_DSN")
    if sentry_dsn:
        sentry_sdk.init(
            dsn=sentry_dsn,
            traces_sample_rate=settings.SENTRY_TRACES_SAMPLE_RATE,
            environment=settings.SENTRY_ENV or settings.ENV,
        )

    # ---- Prometheus /metrics ----
    Instrumentator().instrument(app).expose(app, endpoint="/metrics", include_in_schema=False)

    # 統一錯誤處理
    register_error_handlers(app)

    # === API 路由 ===
    app.include_router(api_router, prefix=settings.API_V1_PREFIX)
    # 舊版前端仍呼叫 /api/analyze
    app.include_router(analyze_router, prefix="/api", include_in_schema=False)

    # 健康檢查（root & ops）
    @app.get("/", summary="Root")
    async def root():
        return {"app": settings.APP_NAME, "env": settings.ENV}

    @app.get("/healthz", tags=["ops"])
    async def healthz():
        return {"ok": True}

    @app.get("/readyz", tags=["ops"])
    async def readyz():
        return {"ready": True, "vision_configured": bool(settings.OPENAI_API_KEY)}

    log.info("Application initialized env=%s model=%s", settings.ENV, settings.OPENAI_MODEL)
    return app


# Uvicorn 進入點
app = create_app()
