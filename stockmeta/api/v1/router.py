# stockmeta/api/v1/router.py
from fastapi import APIRouter

# 匯入所有已定義的 endpoint 模組
from .endpoints import analyze, categories, export, health, ping

# === API v1 主路由 ===
api_router = APIRouter()

# 系統健康檢查
api_router.include_router(health.router, prefix="/health", tags=["health"])

# ping 用於連線測試
api_router.include_router(ping.router, prefix="/ping", tags=["ping"])

# 影像 → metadata
api_router.include_router(analyze.router)

# Adobe Stock 分類表
api_router.include_router(categories.router, prefix="/categories", tags=["categories"])

# CSV 匯出
api_router.include_router(export.router, prefix="/csv", tags=["csv"])
