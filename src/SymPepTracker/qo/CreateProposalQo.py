from dataclasses import dataclass
from datetime import date
from typing import Tuple

from SymPepTracker.share.enums.ProposalType import ProposalType


@dataclass(frozen=True)
class CreateProposalQo:
    """
    用于创建提案的查询对象。
    champions 已去重去空，顺序为首次出现的顺序。
    """

    title: str
    type: ProposalType
    created: date
    champions: Tuple[str, ...]
