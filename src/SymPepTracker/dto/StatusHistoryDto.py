from datetime import datetime
from typing import Optional

from SymPepTracker.share.BaseDto import BaseDto
from SymPepTracker.share.enums.ProposalStatus import ProposalStatus


class StatusHistoryDto(BaseDto):
    """
    状态变更历史的数据传输对象
    """

    id: int
    proposal_id: int
    from_status: ProposalStatus
    to_status: ProposalStatus
    actor: Optional[str]
    changed_at: datetime
