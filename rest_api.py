"""
RESTful API for querying vehicle tail-digit restrictions by city.
该 API 受 `global.api.enable` 控制；为 true 时由 main.py 启动。

Endpoints
---------
GET    /health                                 Health check - 综合系统健康状态
GET    /limit?city=北京&force_refresh=false     当日限号
GET    /limit/weekly?city=北京&force_refresh=false  一周限号（周一至周日）
DELETE /cache?city=北京                         清除指定城市缓存，省略 city 时清除全部
"""

import logging
import time
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any, Dict, List, Optional

import uvicorn
from fastapi import FastAPI, HTTPException, Query, Request
from pydantic import BaseModel, Field

from xianhao.base.logger import get_structured_logger
from xianhao.config.config import config_manager
from xianhao.service.restriction.restriction_service import get_restriction_service

API_VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """应用生命周期管理"""
    logging.info("应用启动完成")
    yield
    logging.info("开始清理应用资源...")

    try:
        from xianhao.config.redis.connection import close_redis

        await close_redis()
    except Exception as e:
        logging.error(f"关闭 Redis 连接时出错: {e}")

    logging.info("应用资源清理完成")


app = FastAPI(title="Xianhao API", version=API_VERSION, lifespan=lifespan)

# 创建结构化日志记录器
structured_logger = get_structured_logger("rest_api")


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """记录API请求的结构化日志"""
    start_time = time.time()

    response = await call_next(request)

    response_time_ms = round((time.time() - start_time) * 1000, 2)

    # 只在DEBUG级别或错误状态码时记录API调用日志
    if logging.getLogger().isEnabledFor(logging.DEBUG) or response.status_code >= 400:
        structured_logger.log_api_call(
            method=request.method,
            endpoint=str(request.url.path),
            status_code=response.status_code,
            response_time_ms=response_time_ms,
            extra_data={
                "query_params": dict(request.query_params),
                "client_ip": request.client.host if request.client else None,
            },
        )

    return response


class DailyLimitResponse(BaseModel):
    city: str = Field(..., description="城市名称")
    limitInfo: str = Field(..., description="当日限号，如 `3和8 (07:00-20:00)`")
    shortLimitInfo: str = Field(..., description="简短展示文本，如 `3,8`")


class WeekdayLimitItem(BaseModel):
    day: str
    dayIndex: int = Field(..., description="周一为0")
    limitInfo: str
    isToday: bool


class WeeklyLimitResponse(BaseModel):
    city: str
    weeklyLimitInfo: List[WeekdayLimitItem]


class ClearCacheResponse(BaseModel):
    city: Optional[str] = None
    deleted: int


@app.get("/health")
async def health() -> Dict[str, Any]:
    """健康检查：配置、缓存后端和错误处理系统状态"""
    start_time = time.time()
    timestamp = datetime.now().isoformat()

    try:
        app_config = config_manager.load_config()
        cache_backend = app_config.global_config.cache.backend

        health_data = {
            "status": "healthy",
            "version": API_VERSION,
            "timestamp": timestamp,
            "config": {
                "city": app_config.city.name or app_config.city.default_city,
                "cache_backend": cache_backend,
            },
            "services": {},
        }

        if cache_backend == "redis":
            try:
                from xianhao.config.redis.connection import redis_manager

                if redis_manager._client is None:
                    await redis_manager.initialize()
                redis_health = await redis_manager.health_check()
                health_data["services"]["redis"] = {
                    "status": redis_health.get("status", "unknown"),
                    "ping_ms": redis_health.get("ping_ms", -1),
                    "connected": redis_health.get("status") == "healthy",
                }
            except Exception as e:
                health_data["services"]["redis"] = {
                    "status": "error",
                    "error": str(e),
                    "connected": False,
                }

            if not health_data["services"]["redis"]["connected"]:
                health_data["status"] = "degraded"

        try:
            from xianhao.base.error_handler import get_error_handling_status

            health_data["error_handling"] = get_error_handling_status()
        except Exception as e:
            health_data["error_handling"] = {"status": "error", "error": str(e)}

        health_data["response_time_ms"] = round((time.time() - start_time) * 1000, 2)
        return health_data

    except Exception as e:
        logging.error(f"健康检查失败: {e}")
        return {
            "status": "error",
            "version": API_VERSION,
            "error": str(e),
            "timestamp": timestamp,
            "response_time_ms": round((time.time() - start_time) * 1000, 2),
        }


@app.get("/limit", response_model=DailyLimitResponse)
async def get_limit(
    city: Optional[str] = Query(None, description="城市名称，省略时使用配置的城市"),
    force_refresh: bool = Query(False, description="忽略当日缓存重新抓取"),
):
    """查询当日限号"""
    result = await get_restriction_service().get_daily(city, force_refresh)
    return result.to_dict()


@app.get("/limit/weekly", response_model=WeeklyLimitResponse)
async def get_weekly_limit(
    city: Optional[str] = Query(None, description="城市名称，省略时使用配置的城市"),
    force_refresh: bool = Query(False, description="忽略当日缓存重新抓取"),
):
    """查询一周限号"""
    result = await get_restriction_service().get_weekly(city, force_refresh)
    return result.to_dict()


@app.delete("/cache", response_model=ClearCacheResponse)
async def clear_cache(city: Optional[str] = Query(None, description="城市名称")):
    """清除限号缓存"""
    try:
        result = await get_restriction_service().clear_cache(city)
        return {"city": city, "deleted": result.get("deleted", 0)}
    except Exception as e:
        logging.error(f"清除缓存失败: {e}")
        raise HTTPException(status_code=500, detail=f"清除缓存失败: {str(e)}")


def is_api_enabled() -> bool:
    """检查API是否启用"""
    try:
        return config_manager.load_config().global_config.api.enable
    except Exception as e:
        logging.error(f"检查API状态失败: {e}")
        return False


def run_api(host: str = None, port: int = None):
    """启动REST API服务
    优先级：显式参数 > 配置 global.api.(host/port) > 默认 0.0.0.0:8000
    """
    cfg_host, cfg_port = None, None
    try:
        api_config = config_manager.load_config().global_config.api
        cfg_host, cfg_port = api_config.host, api_config.port
    except Exception as e:
        logging.warning(f"读取API配置失败，使用默认地址: {e}")

    final_host = host or cfg_host or "0.0.0.0"
    final_port = port or cfg_port or 8000

    uvicorn.run(
        app, host=final_host, port=final_port, log_level="warning", access_log=False
    )
