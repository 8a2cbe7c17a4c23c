"""
城市解析模块
"""

from .city_resolver import (
    CityResolver,
    ConfiguredCityResolver,
    resolve_city_with_timeout,
    is_weekend_unrestricted,
)

__all__ = [
    "CityResolver",
    "ConfiguredCityResolver",
    "resolve_city_with_timeout",
    "is_weekend_unrestricted",
]
