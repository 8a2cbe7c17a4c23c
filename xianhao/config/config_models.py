"""
配置数据模型定义
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

DEFAULT_CITY = "北京"


@dataclass
class LogConfig:
    """日志配置"""

    level: str = "INFO"


@dataclass
class RedisConfig:
    """Redis配置"""

    host: str = "localhost"
    port: int = 6379
    db: int = 0
    password: Optional[str] = None
    connection_pool_size: int = 10


@dataclass
class CacheConfig:
    """缓存配置"""

    backend: str = "redis"  # redis 或 memory
    key_prefix: str = "xianhao:limit:"


@dataclass
class APIConfig:
    """REST API服务配置"""

    enable: bool = False
    host: str = "0.0.0.0"
    port: int = 8000


@dataclass
class GlobalConfig:
    """全局配置"""

    log: LogConfig = field(default_factory=LogConfig)
    redis: RedisConfig = field(default_factory=RedisConfig)
    cache: CacheConfig = field(default_factory=CacheConfig)
    api: APIConfig = field(default_factory=APIConfig)


@dataclass
class SearchConfig:
    """搜索引擎抓取配置

    url 模板中的 {query} 会被替换为 URL 编码后的「城市+关键词」。
    """

    url: str = "https://m.baidu.com/s?word={query}&from=1000953h"
    keyword: str = "限号"
    weekly_keyword: str = "尾号限行"
    # 重试时依次使用的备用模板: (url模板, 关键词)
    alternate_urls: List[Dict[str, str]] = field(
        default_factory=lambda: [
            {
                "url": "https://www.baidu.com/s?wd={query}&tn=02003390_42_hao_pg",
                "keyword": "限号",
            },
            {"url": "https://www.baidu.com/s?wd={query}&rn=10", "keyword": "限行"},
        ]
    )
    timeout: int = 10
    max_attempts: int = 3
    interstitial_max_length: int = 1000  # 短于该长度且含跳转标记视为过渡页
    min_content_length: int = 100
    impersonate: str = "chrome110"


@dataclass
class CityConfig:
    """城市相关配置"""

    name: Optional[str] = None  # 固定查询的城市，为空时使用 default_city
    default_city: str = DEFAULT_CITY
    resolve_timeout: float = 30.0
    # 周末是否不限行，未列出的城市默认不限行
    weekend_rules: Dict[str, bool] = field(
        default_factory=lambda: {
            "北京": True,
            "上海": True,
            "广州": True,
            "深圳": True,
            "杭州": True,
            "西安": True,
        }
    )
    # 页面中会内嵌周一至周五轮换表的城市
    weekly_table_cities: List[str] = field(
        default_factory=lambda: ["北京", "北京市"]
    )


@dataclass
class AppConfig:
    """应用完整配置"""

    global_config: GlobalConfig = field(default_factory=GlobalConfig)
    search: SearchConfig = field(default_factory=SearchConfig)
    city: CityConfig = field(default_factory=CityConfig)
