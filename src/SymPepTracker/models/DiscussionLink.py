from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, Relationship, text

from SymPepTracker.models.BaseModel import BaseModel
from SymPepTracker.share.TimeUtils import TimeUtils

if TYPE_CHECKING:
    from SymPepTracker.models.Proposal import Proposal


class DiscussionLink(BaseModel, table=True):
    """
    讨论链接表模型，只追加不修改。
    """

    __tablename__ = "discussion_link"  # type: ignore
    __table_args__ = (
        UniqueConstraint("proposal_id", "position", name="uk_discussion_link_position"),
    )

    proposal_id: int = Field(foreign_key="proposal.id", index=True, description="关联的提案ID")
    position: int = Field(description="在该提案讨论列表中的序号，从 0 开始")
    link: str = Field(description="外部讨论帖链接")
    added_at: datetime = Field(
        default_factory=TimeUtils.utc_now,
        sa_column_kwargs={"server_default": text("CURRENT_TIMESTAMP")},
        description="追加时间",
    )

    # --- 关系定义 ---
    proposal: Optional["Proposal"] = Relationship(back_populates="discussions")
