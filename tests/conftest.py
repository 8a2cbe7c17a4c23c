"""
pytest 配置和夹具(fixtures)

提供测试所需的通用夹具
"""

from unittest.mock import AsyncMock, Mock, patch

import fakeredis.aioredis
import pytest
import pytest_asyncio

from xianhao.base.error_handler import error_collector
from xianhao.config.config_models import CityConfig, SearchConfig
from xianhao.config.redis.connection import RedisConnectionManager
from xianhao.service.cache.cache_service import RestrictionCache
from xianhao.service.cache.kv_store import MemoryStore
from xianhao.service.restriction.page_fetcher import PageFetcher

from tests.sample_pages import BEIJING_PAGE


@pytest.fixture(autouse=True)
def clear_error_collector():
    """每个用例前后清空全局错误收集器"""
    error_collector.clear_errors()
    yield
    error_collector.clear_errors()

@pytest_asyncio.fixture
async def fake_redis():
    """提供假Redis实例用于测试"""
    fake_redis = fakeredis.aioredis.FakeRedis(decode_responses=True)
    yield fake_redis
    await fake_redis.flushall()
    await fake_redis.aclose()

@pytest_asyncio.fixture
async def mock_redis_manager(fake_redis):
    """Mock Redis连接管理器"""
    manager = Mock(spec=RedisConnectionManager)
    manager.client = fake_redis
    manager._client = fake_redis
    manager.initialize = AsyncMock(return_value=True)
    manager.close = AsyncMock()
    manager.health_check = AsyncMock(return_value={"status": "healthy"})

    with patch("xianhao.config.redis.connection.redis_manager", manager):
        yield manager

@pytest.fixture
def search_config():
    """提供测试用的搜索配置"""
    return SearchConfig()

@pytest.fixture
def city_config():
    """提供测试用的城市配置"""
    return CityConfig(name="北京")

@pytest.fixture
def memory_store():
    return MemoryStore()

@pytest.fixture
def restriction_cache(memory_store):
    """提供基于内存存储的限号缓存"""
    return RestrictionCache(kv_store=memory_store, key_prefix="test:limit:")

@pytest.fixture
def mock_fetcher():
    """Mock 页面抓取器，默认返回北京示例页面"""
    fetcher = Mock(spec=PageFetcher)
    fetcher.fetch = AsyncMock(return_value=BEIJING_PAGE)
    return fetcher
