from .AlreadyAssignedError import AlreadyAssignedError
from .ConcurrentUpdateError import ConcurrentUpdateError
from .IllegalTransitionError import IllegalTransitionError
from .MissingResolutionError import MissingResolutionError
from .NotFoundError import NotFoundError
from .TrackerError import TrackerError
from .ValidationError import ValidationError

__all__ = [
    "AlreadyAssignedError",
    "ConcurrentUpdateError",
    "IllegalTransitionError",
    "MissingResolutionError",
    "NotFoundError",
    "TrackerError",
    "ValidationError",
]
