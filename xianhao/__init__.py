"""
xianhao 顶级包

统一暴露 base、config、service 等子模块，避免在项目根目录散落多个包。
"""

__all__ = [
    "base",
    "config",
    "service",
]
