import logging

from sqlalchemy import func, update
from sqlalchemy.exc import IntegrityError
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from SymPepTracker.models.NumberingCounter import NumberingCounter
from SymPepTracker.models.Proposal import Proposal
from SymPepTracker.share.errors import ConcurrentUpdateError

logger = logging.getLogger(__name__)

COUNTER_ROW_ID = 1


class NumberingService:
    """
    编号计数器服务。
    计数器是全局共享的单行记录，只通过比较并交换递增，
    因此在并发调用下仍然是线性一致的。
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_max_assigned_number(self) -> int:
        """返回提案表中已分配的最大编号，没有则为 0。"""
        statement = select(func.max(Proposal.number))
        result = await self.session.exec(statement)
        return result.one() or 0

    async def _get_or_create_counter(self) -> NumberingCounter:
        counter = await self.session.get(NumberingCounter, COUNTER_ROW_ID, populate_existing=True)
        if counter is not None:
            return counter

        # 首次使用时以已有的最大编号为起点，兼容在计数器出现之前分配过编号的数据库
        seed = await self.get_max_assigned_number()
        counter = NumberingCounter(id=COUNTER_ROW_ID, last_number=seed)
        self.session.add(counter)
        try:
            await self.session.flush()
        except IntegrityError as e:
            raise ConcurrentUpdateError("编号计数器已被并发创建。") from e
        logger.info(f"已创建编号计数器，起始编号为 {seed}。")
        return counter

    async def reserve_next_number(self) -> int:
        """
        将计数器加一并返回新编号。
        必须与提案的编号写入处于同一事务中，事务回滚时计数器也随之回滚，从而不会产生空号。

        Raises:
            ConcurrentUpdateError: 计数器在读取之后已被其他事务修改。
        """
        counter = await self._get_or_create_counter()
        expected_version = counter.version
        next_number = counter.last_number + 1

        statement = (
            update(NumberingCounter)
            .where(
                NumberingCounter.id == COUNTER_ROW_ID,  # type: ignore
                NumberingCounter.version == expected_version,  # type: ignore
            )
            .values(last_number=next_number, version=expected_version + 1)
            .returning(NumberingCounter.last_number)  # type: ignore
            .execution_options(synchronize_session=False)
        )
        result = await self.session.exec(statement)
        reserved = result.scalar_one_or_none()

        if reserved is None:
            raise ConcurrentUpdateError("编号计数器已被并发修改。")

        logger.debug(f"已预留编号 {reserved}。")
        return reserved
