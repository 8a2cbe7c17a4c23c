"""
限号查询配置管理包
"""

from .config import (
    # 数据类
    AppConfig,
    GlobalConfig,
    LogConfig,
    RedisConfig,
    CacheConfig,
    APIConfig,
    SearchConfig,
    CityConfig,
    DEFAULT_CITY,
    # 配置管理器
    ConfigManager,
    config_manager,
    # 接口函数
    get_redis_config,
    get_cache_config,
    get_search_config,
    get_city_config,
)

# 配置验证
from .validation import ConfigValidator, validate_config

__all__ = [
    "AppConfig",
    "GlobalConfig",
    "LogConfig",
    "RedisConfig",
    "CacheConfig",
    "APIConfig",
    "SearchConfig",
    "CityConfig",
    "DEFAULT_CITY",
    "ConfigManager",
    "config_manager",
    "get_redis_config",
    "get_cache_config",
    "get_search_config",
    "get_city_config",
    "ConfigValidator",
    "validate_config",
]
