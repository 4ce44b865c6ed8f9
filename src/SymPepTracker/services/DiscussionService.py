import logging
from typing import List

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlmodel import col, select
from sqlmodel.ext.asyncio.session import AsyncSession

from SymPepTracker.models.DiscussionLink import DiscussionLink
from SymPepTracker.share.errors import ConcurrentUpdateError

logger = logging.getLogger(__name__)


class DiscussionService:
    """
    讨论链接服务：每个提案一个只追加的有序链接列表。
    不去重，也不检查链接是否可访问。
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def append_link(self, proposal_id: int, link: str) -> DiscussionLink:
        """
        在列表末尾追加一个链接。

        Raises:
            ConcurrentUpdateError: 另一个事务同时占用了同一个序号。
        """
        statement = select(func.max(DiscussionLink.position)).where(
            DiscussionLink.proposal_id == proposal_id
        )
        result = await self.session.exec(statement)
        last_position = result.one()
        position = 0 if last_position is None else last_position + 1

        new_link = DiscussionLink(proposal_id=proposal_id, position=position, link=link)
        self.session.add(new_link)
        try:
            await self.session.flush()
        except IntegrityError as e:
            raise ConcurrentUpdateError(f"提案 {proposal_id} 的讨论列表已被并发修改。") from e

        logger.debug(f"已为提案 {proposal_id} 追加第 {position} 个讨论链接: {link}")
        return new_link

    async def get_links(self, proposal_id: int) -> List[str]:
        """按追加顺序返回提案的全部讨论链接。"""
        statement = (
            select(DiscussionLink)
            .where(DiscussionLink.proposal_id == proposal_id)
            .order_by(col(DiscussionLink.position).asc())
        )
        result = await self.session.exec(statement)
        return [row.link for row in result.all()]
