"""
配置验证模块

验证配置文件的正确性和完整性
"""

import logging
from typing import Any, Dict, List
from urllib.parse import urlparse

from xianhao.config.config import AppConfig, CityConfig, SearchConfig


class ConfigValidator:
    """配置验证器"""

    def __init__(self):
        self.errors: List[str] = []
        self.warnings: List[str] = []

    def validate(self, config: AppConfig) -> bool:
        """验证完整配置"""
        self.errors.clear()
        self.warnings.clear()

        try:
            self._validate_global_config(config)
            self._validate_search_config(config.search)
            self._validate_city_config(config.city)

            if self.errors:
                for error in self.errors:
                    logging.error(f"配置验证错误: {error}")
                return False

            if self.warnings:
                for warning in self.warnings:
                    logging.warning(f"配置验证警告: {warning}")

            logging.info("配置验证通过")
            return True

        except Exception as e:
            logging.error(f"配置验证异常: {e}")
            return False

    def _validate_global_config(self, config: AppConfig):
        """验证全局配置"""
        cache_config = config.global_config.cache
        if cache_config.backend not in ("redis", "memory"):
            self.errors.append(
                f"缓存后端无效: {cache_config.backend}，必须为'redis'或'memory'"
            )
        if not cache_config.key_prefix:
            self.warnings.append("缓存键前缀为空，可能与其他数据冲突")

        if cache_config.backend == "redis":
            redis_config = config.global_config.redis
            if not redis_config.host:
                self.errors.append("Redis主机地址不能为空")

            if not (1 <= redis_config.port <= 65535):
                self.errors.append(f"Redis端口号无效: {redis_config.port}")

            if not (0 <= redis_config.db <= 15):
                self.errors.append(f"Redis数据库编号无效: {redis_config.db}")
        else:
            self.warnings.append("使用内存缓存，进程退出后缓存数据将丢失")

        api_config = config.global_config.api
        if api_config.enable and not (1 <= api_config.port <= 65535):
            self.errors.append(f"API端口号无效: {api_config.port}")

    def _validate_search_config(self, search: SearchConfig):
        """验证搜索抓取配置"""
        templates = [search.url] + [
            item.get("url", "") for item in search.alternate_urls
        ]
        for template in templates:
            if not self._validate_url(template):
                self.errors.append(f"搜索URL格式无效: {template}")
            elif "{query}" not in template:
                self.errors.append(f"搜索URL缺少{{query}}占位符: {template}")

        if not search.keyword:
            self.errors.append("搜索关键词不能为空")

        if search.max_attempts < 1:
            self.errors.append("最大请求次数不能小于1")
        elif search.max_attempts > 5:
            self.warnings.append("最大请求次数过多，建议不超过5次")

        if search.max_attempts > len(search.alternate_urls) + 1:
            self.warnings.append("备用搜索URL数量不足，超出部分将复用最后一个模板")

        if search.timeout < 3:
            self.warnings.append("请求超时时间过短，建议至少3秒")
        elif search.timeout > 60:
            self.warnings.append("请求超时时间过长，建议不超过60秒")

        if search.min_content_length >= search.interstitial_max_length:
            self.warnings.append("最小有效内容长度不小于过渡页判定长度")

    def _validate_city_config(self, city: CityConfig):
        """验证城市配置"""
        if not city.default_city:
            self.errors.append("默认城市不能为空")

        if city.resolve_timeout <= 0:
            self.errors.append(f"城市解析超时时间无效: {city.resolve_timeout}")

        for name, rule in city.weekend_rules.items():
            if not isinstance(rule, bool):
                self.errors.append(f"城市{name}的周末规则必须为布尔值")

    def _validate_url(self, url: str) -> bool:
        """验证URL格式"""
        try:
            result = urlparse(url)
            return all([result.scheme, result.netloc])
        except Exception:
            return False

    def get_validation_summary(self) -> Dict[str, Any]:
        """获取验证摘要"""
        return {
            "valid": len(self.errors) == 0,
            "error_count": len(self.errors),
            "warning_count": len(self.warnings),
            "errors": self.errors.copy(),
            "warnings": self.warnings.copy(),
        }


def validate_config(config: AppConfig) -> bool:
    """验证配置的快捷函数"""
    validator = ConfigValidator()
    return validator.validate(config)
