from .ProposalDto import ProposalDto
from .ProposalHeaderDto import ProposalHeaderDto
from .StatusHistoryDto import StatusHistoryDto

__all__ = [
    "ProposalDto",
    "ProposalHeaderDto",
    "StatusHistoryDto",
]
