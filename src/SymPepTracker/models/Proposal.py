from datetime import date, datetime
from typing import TYPE_CHECKING, List, Optional

from sqlmodel import Field, Relationship, text

from SymPepTracker.models.BaseModel import BaseModel
from SymPepTracker.share.enums.ProposalStatus import ProposalStatus
from SymPepTracker.share.enums.ProposalType import ProposalType
from SymPepTracker.share.TimeUtils import TimeUtils

if TYPE_CHECKING:
    from SymPepTracker.models.DiscussionLink import DiscussionLink
    from SymPepTracker.models.ProposalChampion import ProposalChampion
    from SymPepTracker.models.StatusHistory import StatusHistory


class Proposal(BaseModel, table=True):
    """
    提案表模型
    id 是提案在获得正式编号之前的临时引用 (模板中的 "XXXX")。
    """

    number: Optional[int] = Field(
        default=None, unique=True, index=True, description="正式 SymPEP 编号，分配后不可变更"
    )
    title: str = Field(description="提案标题")
    type: int = Field(
        default=ProposalType.STANDARDS_TRACK,
        description="提案类型: 0-Standards Track, 1-Informational, 2-Process",
    )
    status: int = Field(
        default=ProposalStatus.DRAFT,
        index=True,
        description=(
            "提案当前状态: 0-Draft, 1-Accepted, 2-Final, 3-Deferred, "
            "4-Rejected, 5-Withdrawn, 6-Superseded, 7-Active"
        ),
    )
    created: date = Field(description="模板中的创建日期，设置后不可变更")
    resolution: Optional[str] = Field(default=None, description="记录社区决议的链接")
    replaces_id: Optional[int] = Field(
        default=None, foreign_key="proposal.id", description="本提案取代的旧提案ID"
    )
    superseded_by_id: Optional[int] = Field(
        default=None, foreign_key="proposal.id", description="取代本提案的新提案ID"
    )
    version: int = Field(default=1, description="乐观锁版本号，每次写入递增")
    created_at: datetime = Field(
        default_factory=TimeUtils.utc_now,
        sa_column_kwargs={"server_default": text("CURRENT_TIMESTAMP")},
        description="记录创建时间",
    )
    updated_at: datetime = Field(
        default_factory=TimeUtils.utc_now,
        sa_column_kwargs={"server_default": text("CURRENT_TIMESTAMP")},
        description="最后更新时间",
    )

    # --- 关系定义 ---
    champions: List["ProposalChampion"] = Relationship(
        back_populates="proposal",
        sa_relationship_kwargs={"order_by": "ProposalChampion.id"},
    )
    discussions: List["DiscussionLink"] = Relationship(
        back_populates="proposal",
        sa_relationship_kwargs={"order_by": "DiscussionLink.position"},
    )
    history: List["StatusHistory"] = Relationship(
        back_populates="proposal",
        sa_relationship_kwargs={"order_by": "StatusHistory.id"},
    )
