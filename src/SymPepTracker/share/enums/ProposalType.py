import re
from enum import IntEnum


class ProposalType(IntEnum):
    """提案类型"""

    STANDARDS_TRACK = 0  # 标准跟踪
    INFORMATIONAL = 1  # 信息类
    PROCESS = 2  # 流程类

    @property
    def display_name(self) -> str:
        """模板头部中使用的名称，例如 'Standards Track'。"""
        return self.name.replace("_", " ").title()

    @classmethod
    def from_display_name(cls, name: str) -> "ProposalType":
        # 'Standards Track'、'standards-track'、'StandardsTrack' 均视为同一类型
        key = re.sub(r"[\s\-_]+", "", name).upper()
        for member in cls:
            if member.name.replace("_", "") == key:
                return member
        raise ValueError(f"未知的提案类型: '{name}'")
