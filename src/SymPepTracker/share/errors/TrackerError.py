class TrackerError(Exception):
    """
    提案追踪器所有业务异常的基类。
    每个子类都对应一次流程违规，调用方应直接向用户报告，而不是重试。
    """

    def __init__(self, message: str = "提案操作失败。"):
        super().__init__(message)
