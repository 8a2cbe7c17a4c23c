"""
限号查询配置管理模块

支持结构化配置及环境变量覆盖
"""

import logging
import os
from pathlib import Path
from typing import Dict, Optional

import yaml

from xianhao.config.config_models import (
    DEFAULT_CITY,
    LogConfig,
    RedisConfig,
    CacheConfig,
    APIConfig,
    GlobalConfig,
    SearchConfig,
    CityConfig,
    AppConfig,
)

__all__ = [
    "DEFAULT_CITY",
    "LogConfig",
    "RedisConfig",
    "CacheConfig",
    "APIConfig",
    "GlobalConfig",
    "SearchConfig",
    "CityConfig",
    "AppConfig",
    "ConfigManager",
    "config_manager",
    "get_redis_config",
    "get_cache_config",
    "get_search_config",
    "get_city_config",
]


# =============================================================================
# 配置加载和解析
# =============================================================================


class ConfigManager:
    """配置管理器"""

    def __init__(self, config_file: str = "config.yaml"):
        self.config_file = config_file
        self._config: Optional[AppConfig] = None
        self._raw_config: Optional[Dict] = None

    def load_config(self, force_reload: bool = False) -> AppConfig:
        """加载配置文件"""
        if self._config is None or force_reload:
            self._load_from_file()
        return self._config

    def reload_config(self) -> AppConfig:
        """强制重新加载配置文件"""
        return self.load_config(force_reload=True)

    def _load_from_file(self):
        """从文件加载配置"""
        try:
            if not Path(self.config_file).exists():
                logging.warning(f"配置文件 {self.config_file} 不存在，使用默认配置")
                self._config = AppConfig()
                self._apply_env_overrides(self._config)
                return

            with open(self.config_file, "r", encoding="utf-8") as f:
                self._raw_config = yaml.safe_load(f) or {}

            self._config = self._parse_structured_config(self._raw_config)
            logging.info(f"成功加载配置文件: {self.config_file}")

        except Exception as e:
            logging.error(f"加载配置文件失败: {e}")
            self._config = AppConfig()

    def _parse_structured_config(self, raw: Dict) -> AppConfig:
        """解析配置格式"""
        config = AppConfig()

        if "global" in raw:
            global_data = raw["global"] or {}

            if "log" in global_data:
                log_data = global_data["log"] or {}
                config.global_config.log = LogConfig(
                    level=log_data.get("level", "INFO")
                )

            if "redis" in global_data:
                redis_data = global_data["redis"] or {}
                config.global_config.redis = RedisConfig(
                    host=redis_data.get("host", "localhost"),
                    port=redis_data.get("port", 6379),
                    db=redis_data.get("db", 0),
                    password=redis_data.get("password"),
                    connection_pool_size=redis_data.get("connection_pool_size", 10),
                )

            if "cache" in global_data:
                cache_data = global_data["cache"] or {}
                config.global_config.cache = CacheConfig(
                    backend=cache_data.get("backend", "redis"),
                    key_prefix=cache_data.get("key_prefix", "xianhao:limit:"),
                )

            if "api" in global_data:
                api_data = global_data["api"] or {}
                config.global_config.api = APIConfig(
                    enable=api_data.get("enable", False),
                    host=api_data.get("host", "0.0.0.0"),
                    port=api_data.get("port", 8000),
                )

        if "search" in raw:
            search_data = raw["search"] or {}
            defaults = SearchConfig()
            config.search = SearchConfig(
                url=search_data.get("url", defaults.url),
                keyword=search_data.get("keyword", defaults.keyword),
                weekly_keyword=search_data.get(
                    "weekly_keyword", defaults.weekly_keyword
                ),
                alternate_urls=search_data.get(
                    "alternate_urls", defaults.alternate_urls
                ),
                timeout=search_data.get("timeout", defaults.timeout),
                max_attempts=search_data.get("max_attempts", defaults.max_attempts),
                interstitial_max_length=search_data.get(
                    "interstitial_max_length", defaults.interstitial_max_length
                ),
                min_content_length=search_data.get(
                    "min_content_length", defaults.min_content_length
                ),
                impersonate=search_data.get("impersonate", defaults.impersonate),
            )

        if "city" in raw:
            city_data = raw["city"] or {}
            defaults = CityConfig()
            # 用户配置的周末规则叠加在内置规则之上
            weekend_rules = dict(defaults.weekend_rules)
            weekend_rules.update(city_data.get("weekend_rules") or {})
            config.city = CityConfig(
                name=city_data.get("name"),
                default_city=city_data.get("default_city", DEFAULT_CITY),
                resolve_timeout=city_data.get(
                    "resolve_timeout", defaults.resolve_timeout
                ),
                weekend_rules=weekend_rules,
                weekly_table_cities=city_data.get(
                    "weekly_table_cities", defaults.weekly_table_cities
                ),
            )

        self._apply_env_overrides(config)

        return config

    def _apply_env_overrides(self, config: AppConfig):
        """应用环境变量覆盖"""
        if os.getenv("REDIS_HOST"):
            config.global_config.redis.host = os.getenv("REDIS_HOST")
        if os.getenv("REDIS_PORT"):
            config.global_config.redis.port = int(os.getenv("REDIS_PORT"))
        if os.getenv("REDIS_DB"):
            config.global_config.redis.db = int(os.getenv("REDIS_DB"))
        if os.getenv("REDIS_PASSWORD"):
            config.global_config.redis.password = os.getenv("REDIS_PASSWORD")

        if os.getenv("LOG_LEVEL"):
            config.global_config.log.level = os.getenv("LOG_LEVEL").upper()

        if os.getenv("XIANHAO_CITY"):
            config.city.name = os.getenv("XIANHAO_CITY")
        if os.getenv("XIANHAO_CACHE_BACKEND"):
            config.global_config.cache.backend = os.getenv(
                "XIANHAO_CACHE_BACKEND"
            ).lower()


# =============================================================================
# 全局配置管理器实例
# =============================================================================

config_manager = ConfigManager()


# =============================================================================
# 接口函数
# =============================================================================


def get_redis_config() -> RedisConfig:
    """获取Redis配置"""
    return config_manager.load_config().global_config.redis


def get_cache_config() -> CacheConfig:
    """获取缓存配置"""
    return config_manager.load_config().global_config.cache


def get_search_config() -> SearchConfig:
    """获取搜索抓取配置"""
    return config_manager.load_config().search


def get_city_config() -> CityConfig:
    """获取城市配置"""
    return config_manager.load_config().city
