"""
业务服务包
"""
