from typing import Optional

from .TrackerError import TrackerError


class NotFoundError(TrackerError):
    """
    当提案引用无法解析为现有记录时抛出。
    """

    def __init__(self, ref: Optional[int] = None, message: Optional[str] = None):
        """
        Args:
            ref (int, optional): 未找到的提案记录ID。
            message (str, optional): 自定义错误消息。
        """
        self.ref = ref
        super().__init__(message or f"找不到ID为 {ref} 的提案。")
