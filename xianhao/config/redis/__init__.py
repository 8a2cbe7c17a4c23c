"""
Redis 连接与基础操作
"""
