from .TrackerError import TrackerError


class ValidationError(TrackerError):
    """
    当创建或更新提案时输入不完整或格式错误时抛出。
    """
