from .BaseDto import BaseDto
from .DatabaseHandler import DatabaseHandler
from .LoggingConfigurator import LoggingConfigurator
from .ProposalHeaderParser import ProposalHeaderParser
from .StatusMachine import StatusMachine
from .StringUtils import StringUtils
from .TimeUtils import TimeUtils
from .UnitOfWork import UnitOfWork

__all__ = [
    "BaseDto",
    "DatabaseHandler",
    "LoggingConfigurator",
    "ProposalHeaderParser",
    "StatusMachine",
    "StringUtils",
    "TimeUtils",
    "UnitOfWork",
]
