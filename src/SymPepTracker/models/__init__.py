from .BaseModel import BaseModel
from .DiscussionLink import DiscussionLink
from .NumberingCounter import NumberingCounter
from .Proposal import Proposal
from .ProposalChampion import ProposalChampion
from .StatusHistory import StatusHistory

__all__ = [
    "BaseModel",
    "DiscussionLink",
    "NumberingCounter",
    "Proposal",
    "ProposalChampion",
    "StatusHistory",
]
