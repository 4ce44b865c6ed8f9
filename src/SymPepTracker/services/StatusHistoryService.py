import logging
from typing import List

from sqlmodel import col, select
from sqlmodel.ext.asyncio.session import AsyncSession

from SymPepTracker.dto.StatusHistoryDto import StatusHistoryDto
from SymPepTracker.models.StatusHistory import StatusHistory
from SymPepTracker.qo.TransitionProposalQo import TransitionProposalQo

logger = logging.getLogger(__name__)


class StatusHistoryService:
    """
    状态历史服务。历史记录只能追加，不提供修改或删除。
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def record_transition(self, qo: TransitionProposalQo) -> StatusHistoryDto:
        entry = StatusHistory(
            proposal_id=qo.proposal_id,
            from_status=qo.from_status,
            to_status=qo.to_status,
            actor=qo.actor,
        )
        self.session.add(entry)
        await self.session.flush()
        logger.debug(
            f"提案 {qo.proposal_id} 状态变更已记录: "
            f"{qo.from_status.display_name} -> {qo.to_status.display_name}"
        )
        return StatusHistoryDto.model_validate(entry)

    async def get_history(self, proposal_id: int) -> List[StatusHistoryDto]:
        """按发生顺序返回提案的状态变更历史。"""
        statement = (
            select(StatusHistory)
            .where(StatusHistory.proposal_id == proposal_id)
            .order_by(col(StatusHistory.id).asc())
        )
        result = await self.session.exec(statement)
        return [StatusHistoryDto.model_validate(row) for row in result.all()]
