import logging

import urllib3
from curl_cffi.requests import AsyncSession

# 禁用SSL警告
urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)

DEFAULT_HEADERS = {
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "zh-CN,zh;q=0.9",
}


async def http_get(
    url,
    verify=False,
    headers=None,
    timeout=10,
    impersonate="chrome110",
):
    """异步HTTP GET请求，单次请求，重试由调用方决定"""
    async with AsyncSession() as session:
        resp = await session.get(
            url,
            verify=verify,
            timeout=timeout,
            headers=headers or DEFAULT_HEADERS,
            # 模拟浏览器TLS指纹，降低被搜索引擎识别为爬虫的概率
            impersonate=impersonate,
        )
        logging.debug(f"HTTP GET {url} -> {resp.status_code}, {len(resp.text)}字符")
        return resp
