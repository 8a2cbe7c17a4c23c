#!/usr/bin/env python3
"""
Xianhao CLI工具

提供配置验证、限号查询和缓存清理等功能
"""

import argparse
import asyncio
import json
import logging

# 设置基本日志
logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s"
)

from xianhao.config import config_manager
from xianhao.config.validation import ConfigValidator


def _load_config(args):
    """切换配置文件并重新加载"""
    config_manager.config_file = args.config
    return config_manager.reload_config()


def _create_service():
    from xianhao.service.restriction.restriction_service import RestrictionService

    return RestrictionService()


async def _close_resources():
    from xianhao.config.redis.connection import close_redis

    await close_redis()


async def cmd_validate(args):
    """配置验证命令"""
    print(f"🔍 验证配置文件: {args.config}")

    try:
        config = _load_config(args)

        validator = ConfigValidator()
        validator.validate(config)
        summary = validator.get_validation_summary()

        print(f"📊 验证结果:")
        print(f"   有效性: {'✅ 通过' if summary['valid'] else '❌ 失败'}")
        print(f"   错误数: {summary['error_count']}")
        print(f"   警告数: {summary['warning_count']}")

        if summary["errors"]:
            print(f"\n❌ 错误列表:")
            for error in summary["errors"]:
                print(f"   - {error}")

        if summary["warnings"]:
            print(f"\n⚠️ 警告列表:")
            for warning in summary["warnings"]:
                print(f"   - {warning}")

        if summary["valid"]:
            print(f"\n✅ 配置文件验证通过!")
        else:
            print(f"\n❌ 配置文件验证失败，请修复上述错误")

        return summary["valid"]

    except Exception as e:
        print(f"❌ 验证过程出错: {e}")
        return False


async def cmd_daily(args):
    """查询当日限号"""
    _load_config(args)
    service = _create_service()

    try:
        result = await service.get_daily(args.city, args.force)
        if args.json:
            print(json.dumps(result.to_dict(), ensure_ascii=False, indent=2))
        else:
            data = result.to_dict()
            print(f"🚗 {data['city']} 今日限号: {data['limitInfo']}")
            if args.verbose:
                print(f"   简短显示: {data['shortLimitInfo']}")
    finally:
        await _close_resources()


async def cmd_weekly(args):
    """查询一周限号"""
    _load_config(args)
    service = _create_service()

    try:
        result = await service.get_weekly(args.city, args.force)
        if args.json:
            print(json.dumps(result.to_dict(), ensure_ascii=False, indent=2))
            return

        print(f"📅 {result.city} 本周限号:")
        for item in result.weekly_limit_info:
            marker = "👉" if item.is_today else "  "
            print(f" {marker} {item.day}: {item.limit_info}")
    finally:
        await _close_resources()


async def cmd_clear_cache(args):
    """清除限号缓存"""
    _load_config(args)
    service = _create_service()

    try:
        if not args.city and not args.force:
            confirm = input("⚠️ 这将清除所有城市的限号缓存，确认继续? (y/N): ")
            if confirm.lower() != "y":
                print("❌ 取消操作")
                return

        result = await service.clear_cache(args.city)
        print(f"✅ 已清除 {args.city or '全部城市'} 的缓存，共 {result.get('deleted', 0)} 条")
    except Exception as e:
        print(f"❌ 清除缓存异常: {e}")
    finally:
        await _close_resources()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Xianhao CLI工具",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
示例用法:
  # 验证配置文件
  python cli_tools.py validate

  # 查询当日限号
  python cli_tools.py daily --city 北京

  # 查询一周限号并输出JSON
  python cli_tools.py weekly --city 北京 --json

  # 清除指定城市的缓存
  python cli_tools.py clear-cache --city 北京
        """,
    )

    parser.add_argument(
        "--config", "-c", default="config.yaml", help="配置文件路径 (默认: config.yaml)"
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="显示详细信息")

    subparsers = parser.add_subparsers(dest="command", help="可用命令")

    subparsers.add_parser("validate", help="验证配置文件")

    for name, help_text in (("daily", "查询当日限号"), ("weekly", "查询一周限号")):
        query_parser = subparsers.add_parser(name, help=help_text)
        query_parser.add_argument("--city", help="城市名称，省略时使用配置的城市")
        query_parser.add_argument(
            "--force", action="store_true", help="忽略当日缓存重新抓取"
        )
        query_parser.add_argument("--json", action="store_true", help="以JSON格式输出")

    clear_parser = subparsers.add_parser("clear-cache", help="清除限号缓存")
    clear_parser.add_argument("--city", help="城市名称，省略时清除全部城市")
    clear_parser.add_argument("--force", action="store_true", help="强制执行，不询问确认")

    return parser


def main():
    """主函数"""
    parser = build_parser()
    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    commands = {
        "validate": cmd_validate,
        "daily": cmd_daily,
        "weekly": cmd_weekly,
        "clear-cache": cmd_clear_cache,
    }
    command = commands.get(args.command)
    if command is None:
        print(f"❌ 未知命令: {args.command}")
        parser.print_help()
        return

    asyncio.run(command(args))


if __name__ == "__main__":
    main()
