from dataclasses import dataclass
from typing import Optional

from SymPepTracker.share.enums.ProposalStatus import ProposalStatus


@dataclass(frozen=True)
class TransitionProposalQo:
    """
    用于记录一次状态变更的查询对象。
    """

    proposal_id: int
    from_status: ProposalStatus
    to_status: ProposalStatus
    actor: Optional[str] = None
