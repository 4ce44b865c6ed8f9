from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlmodel import Field, Relationship, text

from SymPepTracker.models.BaseModel import BaseModel
from SymPepTracker.share.TimeUtils import TimeUtils

if TYPE_CHECKING:
    from SymPepTracker.models.Proposal import Proposal


class StatusHistory(BaseModel, table=True):
    """
    提案状态变更历史表模型，只插入不修改。
    """

    __tablename__ = "status_history"  # type: ignore

    proposal_id: int = Field(foreign_key="proposal.id", index=True, description="关联的提案ID")
    from_status: int = Field(description="变更前状态")
    to_status: int = Field(description="变更后状态")
    actor: Optional[str] = Field(default=None, description="执行变更的人")
    changed_at: datetime = Field(
        default_factory=TimeUtils.utc_now,
        sa_column_kwargs={"server_default": text("CURRENT_TIMESTAMP")},
        description="变更时间",
    )

    # --- 关系定义 ---
    proposal: Optional["Proposal"] = Relationship(back_populates="history")
