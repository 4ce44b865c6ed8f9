from typing import Dict, FrozenSet, Optional

from SymPepTracker.share.enums.ProposalStatus import ProposalStatus
from SymPepTracker.share.errors import IllegalTransitionError, MissingResolutionError


class StatusMachine:
    """
    提案状态机。<br>
    只负责判断一次状态变更是否合法，不读写数据库。
    """

    TRANSITIONS: Dict[ProposalStatus, FrozenSet[ProposalStatus]] = {
        ProposalStatus.DRAFT: frozenset(
            {
                ProposalStatus.ACCEPTED,
                ProposalStatus.REJECTED,
                ProposalStatus.WITHDRAWN,
                ProposalStatus.DEFERRED,
                ProposalStatus.ACTIVE,
            }
        ),
        ProposalStatus.ACCEPTED: frozenset({ProposalStatus.FINAL, ProposalStatus.SUPERSEDED}),
        ProposalStatus.DEFERRED: frozenset(
            {ProposalStatus.DRAFT, ProposalStatus.REJECTED, ProposalStatus.WITHDRAWN}
        ),
        ProposalStatus.FINAL: frozenset({ProposalStatus.SUPERSEDED}),
        ProposalStatus.ACTIVE: frozenset({ProposalStatus.SUPERSEDED}),
        ProposalStatus.REJECTED: frozenset(),
        ProposalStatus.WITHDRAWN: frozenset(),
        ProposalStatus.SUPERSEDED: frozenset(),
    }

    # 进入这些状态前必须已有决议链接
    RESOLUTION_REQUIRED: FrozenSet[ProposalStatus] = frozenset(
        {ProposalStatus.ACCEPTED, ProposalStatus.REJECTED, ProposalStatus.WITHDRAWN}
    )

    # 常规流程的终态；ACTIVE 是永不完成的流程类文档的终态
    TERMINAL: FrozenSet[ProposalStatus] = frozenset(
        {
            ProposalStatus.FINAL,
            ProposalStatus.REJECTED,
            ProposalStatus.WITHDRAWN,
            ProposalStatus.SUPERSEDED,
        }
    )
    PROCESS_TERMINAL: FrozenSet[ProposalStatus] = frozenset({ProposalStatus.ACTIVE})

    @classmethod
    def allowed_targets(cls, current: ProposalStatus) -> FrozenSet[ProposalStatus]:
        return cls.TRANSITIONS[ProposalStatus(current)]

    @classmethod
    def is_allowed(cls, current: ProposalStatus, target: ProposalStatus) -> bool:
        return ProposalStatus(target) in cls.allowed_targets(current)

    @classmethod
    def is_terminal(cls, status: ProposalStatus) -> bool:
        return ProposalStatus(status) in cls.TERMINAL | cls.PROCESS_TERMINAL

    @classmethod
    def validate(
        cls,
        current: ProposalStatus,
        target: ProposalStatus,
        resolution: Optional[str],
    ) -> None:
        """
        校验一次状态变更。

        Raises:
            IllegalTransitionError: 状态对不在转换表中。
            MissingResolutionError: 目标状态需要决议链接但尚未设置。
        """
        current = ProposalStatus(current)
        target = ProposalStatus(target)
        if not cls.is_allowed(current, target):
            raise IllegalTransitionError(current, target)
        if target in cls.RESOLUTION_REQUIRED and not (resolution and resolution.strip()):
            raise MissingResolutionError(target)
