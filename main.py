# 初始化日志（需在其他自定义模块之前导入）
import xianhao.base.logger  # noqa: F401

import asyncio
import logging
import signal
import sys


async def cleanup_resources():
    """清理应用资源"""
    logging.info("开始清理应用资源...")

    try:
        from xianhao.config.redis.connection import close_redis

        await close_redis()
    except Exception as e:
        logging.error(f"关闭 Redis 连接时出错: {e}")

    logging.info("应用资源清理完成")


def signal_handler(signum, frame):
    """信号处理器"""
    logging.info(f"接收到信号 {signum}，开始退出...")
    sys.exit(0)


async def main():
    """
    主函数 - 查询一次当日与一周限号并输出到日志
    """
    from xianhao.service.restriction.restriction_service import get_restriction_service

    logging.info("开始执行限号查询任务")
    service = get_restriction_service()

    try:
        daily = await service.get_daily()
        logging.info(f"{daily.city} 今日限号: {daily.limit_info.encode()}")

        weekly = await service.get_weekly(daily.city)
        for item in weekly.weekly_limit_info:
            logging.info(
                f"{weekly.city} {item.day}: {item.limit_info}{' (今天)' if item.is_today else ''}"
            )

        logging.info("限号查询任务执行完成")

    except Exception as e:
        logging.error(f"主函数执行异常: {e}")
        raise
    finally:
        await cleanup_resources()


def validate_startup_config() -> bool:
    """启动前验证配置，存在错误时返回False"""
    from xianhao.config import config_manager, validate_config

    return validate_config(config_manager.load_config())


if __name__ == "__main__":
    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    if not validate_startup_config():
        logging.error("配置验证失败，请运行 `python cli_tools.py validate` 查看详情")
        sys.exit(1)

    from xianhao.config.config import config_manager

    app_config = config_manager.load_config()

    if app_config.global_config.api.enable:
        # 启动 REST API（阻塞）
        from rest_api import run_api

        logging.info("启动 REST API 服务")
        run_api()
    else:
        # 仅执行一次查询
        asyncio.run(main())
