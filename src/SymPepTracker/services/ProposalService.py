import logging
from typing import Any, Optional, Sequence

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import selectinload
from sqlmodel import col, select
from sqlmodel.ext.asyncio.session import AsyncSession

from SymPepTracker.dto.ProposalDto import ProposalDto
from SymPepTracker.models.Proposal import Proposal
from SymPepTracker.models.ProposalChampion import ProposalChampion
from SymPepTracker.qo.CreateProposalQo import CreateProposalQo
from SymPepTracker.share.enums.ProposalStatus import ProposalStatus
from SymPepTracker.share.errors import ConcurrentUpdateError
from SymPepTracker.share.TimeUtils import TimeUtils

logger = logging.getLogger(__name__)


class ProposalService:
    """
    提供处理提案相关数据库操作的服务。
    所有对提案记录的修改都经过 compare_and_set，以版本号保证不会丢失更新。
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    def _detail_query(self):
        return (
            select(Proposal)
            .options(
                selectinload(Proposal.champions),  # type: ignore
                selectinload(Proposal.discussions),  # type: ignore
            )
            .execution_options(populate_existing=True)
        )

    async def create_proposal(self, qo: CreateProposalQo) -> Proposal:
        """
        创建一个新的草案提案及其负责人记录。

        Returns:
            已刷新到数据库、带有记录ID的 Proposal ORM 对象。
        """
        new_proposal = Proposal(
            title=qo.title,
            type=qo.type,
            status=ProposalStatus.DRAFT,
            created=qo.created,
        )
        self.session.add(new_proposal)
        await self.session.flush()
        assert new_proposal.id is not None

        for champion_id in qo.champions:
            self.session.add(ProposalChampion(proposal_id=new_proposal.id, champion_id=champion_id))
        await self.session.flush()

        logger.debug(f"成功创建草案提案 {new_proposal.id}: '{qo.title}'，负责人: {qo.champions}")
        return new_proposal

    async def get_proposal_by_id(self, proposal_id: int) -> Optional[Proposal]:
        """
        根据记录ID获取提案 ORM 对象 (预加载负责人与讨论链接)。
        """
        statement = self._detail_query().where(Proposal.id == proposal_id)
        result = await self.session.exec(statement)
        return result.one_or_none()

    async def get_proposal_by_number(self, number: int) -> Optional[Proposal]:
        """
        根据正式编号获取提案 ORM 对象。
        """
        statement = self._detail_query().where(Proposal.number == number)
        result = await self.session.exec(statement)
        return result.one_or_none()

    async def list_proposals(self, status: Optional[ProposalStatus] = None) -> Sequence[Proposal]:
        """
        按编号升序列出提案，未编号的草案排在最后。
        """
        statement = self._detail_query().order_by(
            col(Proposal.number).is_(None), col(Proposal.number).asc(), col(Proposal.id).asc()
        )
        if status is not None:
            statement = statement.where(Proposal.status == status)
        result = await self.session.exec(statement)
        return result.all()

    async def list_numbered_proposals(self) -> Sequence[Proposal]:
        """列出所有已分配编号的提案，供注册表索引使用。"""
        statement = (
            self._detail_query()
            .where(col(Proposal.number).is_not(None))
            .order_by(col(Proposal.number).asc())
        )
        result = await self.session.exec(statement)
        return result.all()

    async def compare_and_set(self, proposal_id: int, expected_version: int, **values: Any) -> int:
        """
        仅当记录版本号仍为 expected_version 时写入 values，并将版本号加一。

        Returns:
            写入后的新版本号。

        Raises:
            ConcurrentUpdateError: 记录已被其他操作修改。
        """
        statement = (
            update(Proposal)
            .where(
                Proposal.id == proposal_id,  # type: ignore
                Proposal.version == expected_version,  # type: ignore
            )
            .values(version=Proposal.version + 1, updated_at=TimeUtils.utc_now(), **values)
            .returning(Proposal.version)  # type: ignore
            .execution_options(synchronize_session=False)
        )
        result = await self.session.exec(statement)
        new_version = result.scalar_one_or_none()

        if new_version is None:
            logger.info(f"提案 {proposal_id} 的版本号已不是 {expected_version}，放弃本次写入。")
            raise ConcurrentUpdateError(f"提案 {proposal_id} 已被并发修改。")

        logger.debug(f"提案 {proposal_id} 已更新为版本 {new_version}: {values}")
        return new_version

    async def add_champion(self, proposal_id: int, champion_id: str) -> bool:
        """
        为提案添加负责人。

        Returns:
            新增返回 True；负责人已存在返回 False。
        """
        statement = select(ProposalChampion).where(
            ProposalChampion.proposal_id == proposal_id,
            ProposalChampion.champion_id == champion_id,
        )
        result = await self.session.exec(statement)
        if result.one_or_none() is not None:
            return False

        self.session.add(ProposalChampion(proposal_id=proposal_id, champion_id=champion_id))
        try:
            await self.session.flush()
        except IntegrityError as e:
            # 另一个事务刚刚插入了同一负责人，重试时会走上面的已存在分支
            raise ConcurrentUpdateError(f"提案 {proposal_id} 的负责人已被并发修改。") from e
        return True

    @staticmethod
    def to_dto(proposal: Proposal) -> ProposalDto:
        """将预加载过关系的 Proposal ORM 对象打包为 DTO。"""
        assert proposal.id is not None, "Proposal ID should not be None"
        return ProposalDto(
            id=proposal.id,
            number=proposal.number,
            title=proposal.title,
            type=proposal.type,
            status=proposal.status,
            created=proposal.created,
            resolution=proposal.resolution,
            champions=[c.champion_id for c in proposal.champions],
            discussions=[d.link for d in proposal.discussions],
            replaces_id=proposal.replaces_id,
            superseded_by_id=proposal.superseded_by_id,
            version=proposal.version,
        )
