from .TrackerError import TrackerError


class ConcurrentUpdateError(TrackerError):
    """
    当乐观锁版本号校验失败时抛出，说明记录在读取之后已被其他操作修改。
    这是唯一一个可以安全重试的异常。
    """

    def __init__(self, message: str = "记录已被并发修改，请重试。"):
        super().__init__(message)
