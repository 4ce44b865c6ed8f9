from .CreateProposalQo import CreateProposalQo
from .TransitionProposalQo import TransitionProposalQo

__all__ = [
    "CreateProposalQo",
    "TransitionProposalQo",
]
