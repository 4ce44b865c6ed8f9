from enum import IntEnum


class ProposalStatus(IntEnum):
    """提案当前状态"""

    DRAFT = 0  # 草案
    ACCEPTED = 1  # 已接受
    FINAL = 2  # 已定稿
    DEFERRED = 3  # 已搁置
    REJECTED = 4  # 已否决
    WITHDRAWN = 5  # 已撤回
    SUPERSEDED = 6  # 已被取代
    ACTIVE = 7  # 长期有效 (流程类文档)

    @property
    def display_name(self) -> str:
        """模板头部中使用的名称，例如 'Accepted'。"""
        return self.name.capitalize()

    @classmethod
    def from_display_name(cls, name: str) -> "ProposalStatus":
        try:
            return cls[name.strip().upper()]
        except KeyError:
            raise ValueError(f"未知的提案状态: '{name}'") from None
