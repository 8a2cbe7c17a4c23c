"""
城市解析模块

定位城市属于外部能力，这里只提供接口、按配置返回城市的默认实现，
以及带超时兜底的调用封装。
"""

import asyncio
import logging
from typing import Dict, Optional

from xianhao.config import DEFAULT_CITY, CityConfig, get_city_config


class CityResolver:
    """城市解析接口"""

    async def resolve(self, force_refresh: bool = False) -> str:
        raise NotImplementedError


class ConfiguredCityResolver(CityResolver):
    """使用配置中的城市，未配置时使用默认城市"""

    def __init__(self, city_config: Optional[CityConfig] = None):
        self.config = city_config or get_city_config()

    async def resolve(self, force_refresh: bool = False) -> str:
        return self.config.name or self.config.default_city


async def resolve_city_with_timeout(
    resolver: CityResolver,
    force_refresh: bool = False,
    timeout: float = 30.0,
    default_city: str = DEFAULT_CITY,
) -> str:
    """解析城市，超时或出错时回退到默认城市"""
    try:
        city = await asyncio.wait_for(resolver.resolve(force_refresh), timeout)
    except asyncio.TimeoutError:
        logging.warning(f"城市解析超时({timeout}秒)，使用默认城市: {default_city}")
        return default_city
    except Exception as e:
        logging.error(f"城市解析失败，使用默认城市{default_city}: {e}")
        return default_city

    if not city:
        logging.warning(f"城市解析结果为空，使用默认城市: {default_city}")
        return default_city
    return city.strip()


def is_weekend_unrestricted(city: str, weekend_rules: Dict[str, bool]) -> bool:
    """城市周末是否不限行，未配置的城市默认不限行"""
    if city in weekend_rules:
        return weekend_rules[city]
    short_name = city[:-1] if city.endswith("市") else city
    return weekend_rules.get(short_name, True)
