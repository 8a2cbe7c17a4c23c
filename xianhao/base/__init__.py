"""
基础设施：日志、异常、HTTP
"""
