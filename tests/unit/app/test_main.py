"""
main 入口单元测试
"""

from datetime import date
from unittest.mock import AsyncMock, Mock, patch

import pytest

import main
from xianhao.service.restriction.restriction_models import (
    WEEK_DAYS,
    DailyLimitResult,
    RestrictionOutcome,
    RestrictionRecord,
    WeekdayLimit,
    WeeklyLimitResult,
)


@pytest.mark.unit
class TestMain:
    """main 测试类"""

    @pytest.mark.asyncio
    async def test_main_queries_daily_and_weekly(self, caplog):
        service = Mock()
        service.get_daily = AsyncMock(
            return_value=DailyLimitResult(
                "北京",
                RestrictionRecord(
                    "北京", date(2025, 8, 13), RestrictionOutcome.digit_pair(1, 6)
                ),
            )
        )
        service.get_weekly = AsyncMock(
            return_value=WeeklyLimitResult(
                "北京",
                [
                    WeekdayLimit(day, index, None, is_today=index == 2)
                    for index, day in enumerate(WEEK_DAYS)
                ],
            )
        )
        caplog.set_level("INFO")

        with patch(
            "xianhao.service.restriction.restriction_service.get_restriction_service",
            return_value=service,
        ), patch("main.cleanup_resources", new=AsyncMock()) as mock_cleanup:
            await main.main()

        service.get_weekly.assert_awaited_once_with("北京")
        mock_cleanup.assert_awaited_once()
        assert "北京 今日限号: 1和6" in caplog.text
        assert "周三: 暂无信息 (今天)" in caplog.text

    @pytest.mark.asyncio
    async def test_main_cleans_up_on_error(self):
        service = Mock()
        service.get_daily = AsyncMock(side_effect=RuntimeError("boom"))

        with patch(
            "xianhao.service.restriction.restriction_service.get_restriction_service",
            return_value=service,
        ), patch("main.cleanup_resources", new=AsyncMock()) as mock_cleanup:
            with pytest.raises(RuntimeError):
                await main.main()

        mock_cleanup.assert_awaited_once()

    def test_validate_startup_config(self):
        with patch("xianhao.config.validate_config", return_value=True) as mock_validate:
            assert main.validate_startup_config() is True

        mock_validate.assert_called_once()
