from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

from sqlmodel.ext.asyncio.session import AsyncSession

if TYPE_CHECKING:
    from SymPepTracker.services.DiscussionService import DiscussionService
    from SymPepTracker.services.NumberingService import NumberingService
    from SymPepTracker.services.ProposalService import ProposalService
    from SymPepTracker.services.StatusHistoryService import StatusHistoryService
    from SymPepTracker.share.DatabaseHandler import DatabaseHandler


logger = logging.getLogger(__name__)


class UnitOfWork:
    """
    一个实现了工作单元模式的异步上下文管理器。

    它封装了数据库会话和事务管理，并提供了对各个服务（仓库）的访问<br>
    这确保了在单个业务操作中的所有数据库更改要么一起提交，要么一起回滚。

    用法:<br>
    async with UnitOfWork(db_handler) as uow:<br>
        await uow.proposal.create_proposal(...)<br>
        await uow.commit()<br>
    """

    def __init__(self, db_handler: Optional["DatabaseHandler"]):
        self._db_handler = db_handler
        self._session: Optional[AsyncSession] = None
        self._committed = False

    async def __aenter__(self) -> "UnitOfWork":
        """在进入上下文时，获取一个新的数据库会话。"""
        if self._db_handler is None:
            raise RuntimeError(
                "UnitOfWork 在没有有效 DatabaseHandler 的情况下被使用。"
                "请确保已调用 initialize_db_handler。"
            )
        self._session = self._db_handler.get_session()
        self._committed = False  # 重置提交标志
        return self

    async def __aexit__(self, exc_type, exc_val, traceback):
        """
        在退出上下文时，根据是否发生异常来提交或回滚事务，并最终关闭会话。
        """
        if not self._session:
            return

        try:
            if exc_type:
                # 如果发生异常，记录并回滚
                if not self._committed:
                    logger.warning(
                        f"UnitOfWork 检测到异常，正在回滚事务: {exc_type.__name__}: {exc_val}"
                    )
                    await self.rollback()
            else:
                # 如果没有异常且未手动提交，提交
                if not self._committed:
                    await self.commit()
        finally:
            # 确保会话总是被关闭
            await self._session.close()
            self._session = None

    @property
    def session(self) -> AsyncSession:
        """获取当前的数据库会话。"""
        if self._session is None:
            raise RuntimeError("会话尚未初始化。请在 'async with' 块中使用 UnitOfWork。")
        return self._session

    async def commit(self):
        """提交当前事务。"""
        await self.session.commit()
        self._committed = True

    async def rollback(self):
        """回滚当前事务。"""
        await self.session.rollback()
        self._committed = True

    async def flush(self, objects=None):
        """
        将当前会话中的挂起更改刷新到数据库。
        这对于在提交前获取数据库生成的默认值（如自增ID）非常有用。
        """
        await self.session.flush(objects)

    # --- 服务/仓库访问属性 ---

    @property
    def proposal(self) -> "ProposalService":
        """获取提案服务实例。"""
        if not hasattr(self, "_proposal_service"):
            from SymPepTracker.services.ProposalService import ProposalService

            self._proposal_service = ProposalService(self.session)
        return self._proposal_service

    @property
    def numbering(self) -> "NumberingService":
        """获取编号服务实例。"""
        if not hasattr(self, "_numbering_service"):
            from SymPepTracker.services.NumberingService import NumberingService

            self._numbering_service = NumberingService(self.session)
        return self._numbering_service

    @property
    def discussion(self) -> "DiscussionService":
        """获取讨论链接服务实例。"""
        if not hasattr(self, "_discussion_service"):
            from SymPepTracker.services.DiscussionService import DiscussionService

            self._discussion_service = DiscussionService(self.session)
        return self._discussion_service

    @property
    def status_history(self) -> "StatusHistoryService":
        """获取状态历史服务实例。"""
        if not hasattr(self, "_status_history_service"):
            from SymPepTracker.services.StatusHistoryService import StatusHistoryService

            self._status_history_service = StatusHistoryService(self.session)
        return self._status_history_service
