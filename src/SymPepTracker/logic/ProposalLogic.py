import asyncio
import logging
from datetime import date, datetime
from typing import Awaitable, Callable, Iterable, List, Optional, TypeVar

from sqlalchemy.exc import OperationalError

from SymPepTracker.dto import ProposalDto, StatusHistoryDto
from SymPepTracker.models.Proposal import Proposal
from SymPepTracker.qo import CreateProposalQo, TransitionProposalQo
from SymPepTracker.registry.RegistryPublisher import RegistryPublisher
from SymPepTracker.share.DatabaseHandler import DatabaseHandler
from SymPepTracker.share.enums import ProposalStatus, ProposalType
from SymPepTracker.share.errors import (
    AlreadyAssignedError,
    ConcurrentUpdateError,
    NotFoundError,
    ValidationError,
)
from SymPepTracker.share.ProposalHeaderParser import ProposalHeaderParser
from SymPepTracker.share.StatusMachine import StatusMachine
from SymPepTracker.share.StringUtils import StringUtils
from SymPepTracker.share.UnitOfWork import UnitOfWork

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_MAX_RETRIES = 5
DEFAULT_REGISTRY_RETRIES = 3


class ProposalLogic:
    """
    处理提案生命周期相关的业务流程。
    这一层负责编排 Service、校验状态机、处理并发重试，
    并将最终结果以 DTO 的形式返回给调用方。

    合法性判断与共识判断由人做出，本层只接收其结果作为参数，从不自行推断。
    """

    def __init__(
        self,
        db_handler: Optional[DatabaseHandler],
        registry: Optional[RegistryPublisher] = None,
        max_retries: int = DEFAULT_MAX_RETRIES,
        registry_retries: int = DEFAULT_REGISTRY_RETRIES,
    ):
        self.db_handler = db_handler
        self.registry = registry
        self.max_retries = max_retries
        self.registry_retries = registry_retries
        # 读取与发布必须串行，否则较旧的快照可能覆盖较新的索引
        self._registry_lock = asyncio.Lock()

    # --- 内部工具 ---

    async def _with_retry(self, operation: Callable[[], Awaitable[T]], description: str) -> T:
        """
        执行一次完整的读-改-写操作；遇到并发冲突时重新读取并重新校验。
        """
        attempt = 0
        while True:
            attempt += 1
            try:
                return await operation()
            except (ConcurrentUpdateError, OperationalError) as e:
                if isinstance(e, OperationalError) and "locked" not in str(e):
                    raise
                if attempt > self.max_retries:
                    logger.error(f"{description} 在 {attempt} 次尝试后仍然发生并发冲突，放弃。")
                    if isinstance(e, ConcurrentUpdateError):
                        raise
                    raise ConcurrentUpdateError(f"{description} 失败：数据库繁忙。") from e
                logger.info(f"{description} 发生并发冲突，正在进行第 {attempt} 次重试...")

    @staticmethod
    async def _require(uow: UnitOfWork, ref: int) -> Proposal:
        proposal = await uow.proposal.get_proposal_by_id(ref)
        if proposal is None:
            raise NotFoundError(ref)
        return proposal

    @classmethod
    async def _load_dto(cls, uow: UnitOfWork, ref: int) -> ProposalDto:
        return uow.proposal.to_dto(await cls._require(uow, ref))

    async def _publish_registry(self) -> bool:
        """
        在事务提交后发布注册表索引。
        发布失败不会撤销已提交的数据，只记录错误，之后可通过 rebuild_registry 补发。
        """
        if self.registry is None:
            return False

        async with self._registry_lock:
            async with UnitOfWork(self.db_handler) as uow:
                proposals = [
                    uow.proposal.to_dto(p) for p in await uow.proposal.list_numbered_proposals()
                ]

            for attempt in range(1, self.registry_retries + 1):
                try:
                    await self.registry.publish(proposals)
                    return True
                except OSError:
                    logger.exception(
                        f"发布注册表索引失败 (第 {attempt}/{self.registry_retries} 次尝试)。"
                    )
        logger.error("注册表索引未能发布，请稍后调用 rebuild_registry 重新发布。")
        return False

    # --- 文档存储 ---

    async def create_proposal(
        self,
        title: str,
        proposal_type: ProposalType,
        created: date,
        champions: Iterable[str],
    ) -> ProposalDto:
        """
        创建一个处于 Draft 状态、尚未编号的提案。

        champions 传入单个字符串时按 Author 字段的写法拆分。

        Raises:
            ValidationError: 标题为空、类型无效、创建日期缺失或没有负责人。
        """
        clean_title = (title or "").strip()
        if not clean_title:
            raise ValidationError("提案标题不能为空。")
        try:
            checked_type = ProposalType(proposal_type)
        except ValueError:
            raise ValidationError(f"无效的提案类型: {proposal_type!r}。") from None
        if not isinstance(created, date):
            raise ValidationError(f"创建日期必须是日期，而不是 {created!r}。")
        if isinstance(created, datetime):
            created = created.date()
        if isinstance(champions, str):
            champions = StringUtils.split_people(champions)
        people = StringUtils.normalize_people(champions)
        if not people:
            raise ValidationError("提案至少需要一位负责人。")

        qo = CreateProposalQo(
            title=clean_title,
            type=checked_type,
            created=created,
            champions=tuple(people),
        )
        async with UnitOfWork(self.db_handler) as uow:
            proposal = await uow.proposal.create_proposal(qo)
            assert proposal.id is not None
            dto = await self._load_dto(uow, proposal.id)
            await uow.commit()

        logger.info(f"已创建提案草案 {dto.id}: '{dto.title}'")
        return dto

    async def import_proposal(self, text: str) -> ProposalDto:
        """
        根据提案模板的头部字段创建草案，并附带其中的决议与讨论链接。

        Raises:
            ValidationError: 头部字段缺失或格式错误，或者模板不是一份新的草案。
        """
        header = ProposalHeaderParser.parse(text)
        if header.status is not None and header.status != ProposalStatus.DRAFT:
            raise ValidationError(
                f"新提交的提案必须处于 Draft 状态，而不是 {header.status.display_name}。"
            )
        if header.number is not None:
            raise ValidationError("新提交的提案编号必须为占位符 XXXX，正式编号由编号机构分配。")

        qo = CreateProposalQo(
            title=header.title,
            type=header.type,
            created=header.created,
            champions=tuple(header.champions),
        )
        async with UnitOfWork(self.db_handler) as uow:
            proposal = await uow.proposal.create_proposal(qo)
            assert proposal.id is not None
            if header.resolution:
                await uow.proposal.compare_and_set(
                    proposal.id, proposal.version, resolution=header.resolution
                )
            for link in header.discussions:
                await uow.discussion.append_link(proposal.id, link)
            dto = await self._load_dto(uow, proposal.id)
            await uow.commit()

        logger.info(f"已从模板导入提案草案 {dto.id}: '{dto.title}'")
        return dto

    async def get_proposal(self, ref: int) -> ProposalDto:
        async with UnitOfWork(self.db_handler) as uow:
            return await self._load_dto(uow, ref)

    async def get_proposal_by_number(self, number: int) -> ProposalDto:
        async with UnitOfWork(self.db_handler) as uow:
            proposal = await uow.proposal.get_proposal_by_number(number)
            if proposal is None:
                raise NotFoundError(message=f"找不到编号为 SymPEP {number} 的提案。")
            return uow.proposal.to_dto(proposal)

    async def list_proposals(self, status: Optional[ProposalStatus] = None) -> List[ProposalDto]:
        async with UnitOfWork(self.db_handler) as uow:
            proposals = await uow.proposal.list_proposals(status)
            return [uow.proposal.to_dto(p) for p in proposals]

    async def set_resolution(self, ref: int, link: str) -> ProposalDto:
        """
        记录由人整理的决议链接。状态机不会代为生成它。
        """
        clean_link = (link or "").strip()
        if not clean_link:
            raise ValidationError("决议链接不能为空。")

        async def operation() -> ProposalDto:
            async with UnitOfWork(self.db_handler) as uow:
                proposal = await self._require(uow, ref)
                await uow.proposal.compare_and_set(ref, proposal.version, resolution=clean_link)
                dto = await self._load_dto(uow, ref)
                await uow.commit()
                return dto

        return await self._with_retry(operation, f"设置提案 {ref} 的决议链接")

    async def add_champion(self, ref: int, person: str) -> ProposalDto:
        """添加负责人；已存在时不做任何改动。"""
        name = (person or "").strip()
        if not name:
            raise ValidationError("负责人标识不能为空。")

        async def operation() -> ProposalDto:
            async with UnitOfWork(self.db_handler) as uow:
                await self._require(uow, ref)
                if await uow.proposal.add_champion(ref, name):
                    logger.info(f"提案 {ref} 新增负责人: {name}")
                dto = await self._load_dto(uow, ref)
                await uow.commit()
                return dto

        return await self._with_retry(operation, f"为提案 {ref} 添加负责人")

    # --- 编号机构 ---

    async def assign_number(self, ref: int, legitimized: bool) -> int:
        """
        为已被认定为正式提案的记录分配下一个编号。

        Args:
            ref: 提案记录ID。
            legitimized: 外部 (人) 对提案合法性的判断结果。

        Returns:
            新分配的编号，等于已分配最大编号加一。

        Raises:
            ValidationError: 未被认定为合法提案，或没有负责人。
            NotFoundError: 提案不存在。
            AlreadyAssignedError: 提案已有编号。
        """
        if not legitimized:
            raise ValidationError(f"提案 {ref} 尚未被认定为正式提案，不能分配编号。")

        async def operation() -> int:
            async with UnitOfWork(self.db_handler) as uow:
                proposal = await self._require(uow, ref)
                if proposal.number is not None:
                    raise AlreadyAssignedError(ref, proposal.number)
                if not proposal.champions:
                    raise ValidationError(f"提案 {ref} 没有负责人，不能分配编号。")

                number = await uow.numbering.reserve_next_number()
                await uow.proposal.compare_and_set(ref, proposal.version, number=number)
                await uow.commit()
                return number

        number = await self._with_retry(operation, f"为提案 {ref} 分配编号")
        logger.info(f"提案 {ref} 已被分配编号 SymPEP {number}。")
        await self._publish_registry()
        return number

    async def rebuild_registry(self) -> bool:
        """重新发布完整的注册表索引。"""
        return await self._publish_registry()

    # --- 状态机 ---

    async def transition(
        self, ref: int, new_status: ProposalStatus, actor: Optional[str] = None
    ) -> ProposalDto:
        """
        按状态转换表变更提案状态，并追加一条状态历史。

        Raises:
            NotFoundError: 提案不存在。
            IllegalTransitionError: 状态对不在转换表中。
            MissingResolutionError: 进入 Accepted/Rejected/Withdrawn 前尚未设置决议链接。
        """
        target = ProposalStatus(new_status)

        async def operation() -> ProposalDto:
            async with UnitOfWork(self.db_handler) as uow:
                proposal = await self._require(uow, ref)
                current = ProposalStatus(proposal.status)
                StatusMachine.validate(current, target, proposal.resolution)

                await uow.proposal.compare_and_set(ref, proposal.version, status=target)
                await uow.status_history.record_transition(
                    TransitionProposalQo(
                        proposal_id=ref,
                        from_status=current,
                        to_status=target,
                        actor=actor,
                    )
                )
                dto = await self._load_dto(uow, ref)
                await uow.commit()
                return dto

        dto = await self._with_retry(operation, f"变更提案 {ref} 的状态")
        logger.info(f"{dto.label} (记录 {ref}) 状态已变更为 {dto.status.display_name}。")
        if dto.number is not None:
            await self._publish_registry()
        return dto

    async def update_status(
        self, ref: int, new_status: ProposalStatus, actor: Optional[str] = None
    ) -> ProposalDto:
        return await self.transition(ref, new_status, actor)

    async def supersede(
        self, old_ref: int, new_ref: int, actor: Optional[str] = None
    ) -> ProposalDto:
        """
        用新提案取代旧提案：旧提案进入 Superseded，并在两者之间建立双向引用。
        旧记录不会被删除。
        """
        if old_ref == new_ref:
            raise ValidationError("提案不能取代它自己。")

        async def operation() -> ProposalDto:
            async with UnitOfWork(self.db_handler) as uow:
                old = await self._require(uow, old_ref)
                new = await self._require(uow, new_ref)
                current = ProposalStatus(old.status)
                StatusMachine.validate(current, ProposalStatus.SUPERSEDED, old.resolution)
                if new.replaces_id is not None and new.replaces_id != old_ref:
                    raise ValidationError(
                        f"提案 {new_ref} 已经取代了提案 {new.replaces_id}，"
                        f"不能再取代提案 {old_ref}。"
                    )

                await uow.proposal.compare_and_set(
                    old_ref,
                    old.version,
                    status=ProposalStatus.SUPERSEDED,
                    superseded_by_id=new_ref,
                )
                await uow.proposal.compare_and_set(new_ref, new.version, replaces_id=old_ref)
                await uow.status_history.record_transition(
                    TransitionProposalQo(
                        proposal_id=old_ref,
                        from_status=current,
                        to_status=ProposalStatus.SUPERSEDED,
                        actor=actor,
                    )
                )
                dto = await self._load_dto(uow, old_ref)
                await uow.commit()
                return dto

        dto = await self._with_retry(operation, f"用提案 {new_ref} 取代提案 {old_ref}")
        logger.info(f"{dto.label} (记录 {old_ref}) 已被记录 {new_ref} 取代。")
        if dto.number is not None:
            await self._publish_registry()
        return dto

    async def get_history(self, ref: int) -> List[StatusHistoryDto]:
        async with UnitOfWork(self.db_handler) as uow:
            await self._require(uow, ref)
            return await uow.status_history.get_history(ref)

    # --- 讨论链接 ---

    async def append_discussion(self, ref: int, link: str) -> ProposalDto:
        """
        在讨论列表末尾追加一个外部链接。允许重复，不检查可访问性。
        """
        clean_link = (link or "").strip()
        if not clean_link:
            raise ValidationError("讨论链接不能为空。")

        async def operation() -> ProposalDto:
            async with UnitOfWork(self.db_handler) as uow:
                await self._require(uow, ref)
                await uow.discussion.append_link(ref, clean_link)
                dto = await self._load_dto(uow, ref)
                await uow.commit()
                return dto

        return await self._with_retry(operation, f"为提案 {ref} 追加讨论链接")

    async def get_discussions(self, ref: int) -> List[str]:
        async with UnitOfWork(self.db_handler) as uow:
            await self._require(uow, ref)
            return await uow.discussion.get_links(ref)
