from datetime import date
from typing import List, Optional

from SymPepTracker.share.BaseDto import BaseDto
from SymPepTracker.share.enums.ProposalStatus import ProposalStatus
from SymPepTracker.share.enums.ProposalType import ProposalType


class ProposalHeaderDto(BaseDto):
    """
    从提案模板头部解析出的结构化字段。
    """

    title: str
    type: ProposalType
    created: date
    champions: List[str]
    status: Optional[ProposalStatus] = None
    number: Optional[int] = None
    resolution: Optional[str] = None
    discussions: List[str] = []
