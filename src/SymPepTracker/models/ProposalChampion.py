from typing import TYPE_CHECKING, Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, Relationship

from SymPepTracker.models.BaseModel import BaseModel

if TYPE_CHECKING:
    from SymPepTracker.models.Proposal import Proposal


class ProposalChampion(BaseModel, table=True):
    """
    提案负责人表模型
    """

    __tablename__ = "proposal_champion"  # type: ignore
    __table_args__ = (
        UniqueConstraint("proposal_id", "champion_id", name="uk_proposal_champion"),
    )

    proposal_id: int = Field(foreign_key="proposal.id", index=True, description="关联的提案ID")
    champion_id: str = Field(description="负责人标识")

    # --- 关系定义 ---
    proposal: Optional["Proposal"] = Relationship(back_populates="champions")
