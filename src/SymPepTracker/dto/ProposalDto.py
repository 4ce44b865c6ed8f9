from datetime import date
from typing import List, Optional

from SymPepTracker.share.BaseDto import BaseDto
from SymPepTracker.share.enums.ProposalStatus import ProposalStatus
from SymPepTracker.share.enums.ProposalType import ProposalType


class ProposalDto(BaseDto):
    """
    提案的数据传输对象
    """

    id: int
    number: Optional[int]
    title: str
    type: ProposalType
    status: ProposalStatus
    created: date
    resolution: Optional[str]
    champions: List[str]
    discussions: List[str]
    replaces_id: Optional[int] = None
    superseded_by_id: Optional[int] = None
    version: int

    @property
    def label(self) -> str:
        """人类可读的编号，未分配时为模板占位符 'XXXX'。"""
        return f"SymPEP {self.number if self.number is not None else 'XXXX'}"
