import logging
from datetime import date, datetime, timezone

logger = logging.getLogger("sympep_tracker.time_utils")


class TimeUtils:
    """
    一个用于处理时间相关操作的工具类。
    """

    @staticmethod
    def utc_now() -> datetime:
        """
        返回带 UTC 时区信息的当前时间，以便存入数据库。
        """
        return datetime.now(timezone.utc)

    @staticmethod
    def parse_created_date(value: str) -> date:
        """
        解析模板头部中的 Created 字段。
        支持 ISO 格式 (2020-05-01) 以及 PEP 传统格式 (01-May-2020)。

        Raises:
            ValueError: 无法识别的日期格式。
        """
        text = value.strip()
        for fmt in ("%Y-%m-%d", "%d-%b-%Y", "%d-%B-%Y"):
            try:
                return datetime.strptime(text, fmt).date()
            except ValueError:
                continue
        logger.debug(f"无法解析的日期: '{value}'")
        raise ValueError(f"无法识别的日期格式: '{value}'")
