from .ProposalStatus import ProposalStatus
from .ProposalType import ProposalType

__all__ = [
    "ProposalStatus",
    "ProposalType",
]
