"""
搜索结果页面抓取模块

负责请求搜索引擎、识别跳转/过渡页，并按备用查询模板重试
"""

import logging
import re
import time
from typing import List, Optional, Tuple
from urllib.parse import quote

from xianhao.base.error_handler import (
    NetworkError,
    RedirectDetectedError,
    RetryableError,
)
from xianhao.base.http import http_get
from xianhao.base.logger import get_structured_logger
from xianhao.config import SearchConfig, get_search_config

structured_logger = get_structured_logger(__name__)

_META_REFRESH_RE = re.compile(r"""http-equiv\s*=\s*["']?refresh""", re.I)


class PageFetcher:
    """搜索结果页面抓取器"""

    def __init__(self, search_config: Optional[SearchConfig] = None):
        self.config = search_config or get_search_config()

    def build_urls(self, city: str, keyword: Optional[str] = None) -> List[str]:
        """
        生成各次尝试使用的URL

        第一次使用主模板，之后依次使用备用模板，备用模板不足时复用最后一个
        """
        templates: List[Tuple[str, str]] = [
            (self.config.url, keyword or self.config.keyword)
        ]
        for item in self.config.alternate_urls:
            templates.append(
                (item["url"], item.get("keyword") or keyword or self.config.keyword)
            )

        urls = []
        for attempt in range(max(1, self.config.max_attempts)):
            template, word = templates[min(attempt, len(templates) - 1)]
            urls.append(template.format(query=quote(f"{city}{word}")))
        return urls

    def is_interstitial(self, body: str) -> bool:
        """短页面且包含跳转标记时视为过渡页，单纯内容短不算"""
        if len(body) >= self.config.interstitial_max_length:
            return False
        return "location.replace" in body or bool(_META_REFRESH_RE.search(body))

    def _check_page(self, url: str, body: str):
        if self.is_interstitial(body):
            raise RedirectDetectedError(
                "检测到重定向页面", url=url, body_length=len(body)
            )
        if len(body) <= self.config.min_content_length:
            raise RetryableError(
                f"页面内容过短: {len(body)}字符",
                details={"url": url, "body_length": len(body)},
            )

    async def _request(self, url: str) -> str:
        start_time = time.perf_counter()
        resp = await http_get(
            url,
            timeout=self.config.timeout,
            impersonate=self.config.impersonate,
        )
        structured_logger.log_api_call(
            "GET",
            url,
            resp.status_code,
            round((time.perf_counter() - start_time) * 1000, 2),
        )
        if not 200 <= resp.status_code < 300:
            raise NetworkError(f"HTTP错误: {resp.status_code}", resp.status_code)
        return resp.text

    async def fetch(self, city: str, keyword: Optional[str] = None) -> str:
        """抓取城市的限号搜索结果页面，重试耗尽时抛出 NetworkError"""
        urls = self.build_urls(city, keyword)
        last_error: Optional[Exception] = None
        last_status: Optional[int] = None

        for attempt, url in enumerate(urls, start=1):
            logging.info(f"请求搜索页面: {url} (尝试 {attempt}/{len(urls)})")
            try:
                body = await self._request(url)
                self._check_page(url, body)
                logging.info(f"获取到有效页面，长度: {len(body)}字符")
                return body

            except RedirectDetectedError as e:
                logging.warning(f"{e.message}: 长度{e.details['body_length']}字符，改用备用URL")
                last_error = e

            except RetryableError as e:
                logging.warning(f"页面无效，改用备用URL: {e.message}")
                last_error = e

            except NetworkError as e:
                logging.warning(f"请求失败 (尝试 {attempt}/{len(urls)}): {e.message}")
                last_status = e.status_code
                last_error = e

            except Exception as e:
                logging.warning(f"请求异常 (尝试 {attempt}/{len(urls)}): {e}")
                last_error = e

        logging.error(f"获取{city}搜索页面失败，已达到最大尝试次数")
        raise NetworkError(
            "百度搜索结果无效或为重定向页面",
            status_code=last_status,
            details={
                "city": city,
                "attempts": len(urls),
                "last_error": str(last_error) if last_error else None,
            },
        )
