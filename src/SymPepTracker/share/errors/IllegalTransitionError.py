from SymPepTracker.share.enums.ProposalStatus import ProposalStatus

from .TrackerError import TrackerError


class IllegalTransitionError(TrackerError):
    """
    当请求的状态变更不在状态转换表中时抛出。
    """

    def __init__(self, current: ProposalStatus, target: ProposalStatus):
        self.current = current
        self.target = target
        super().__init__(
            f"不允许将提案状态从 {current.display_name} 变更为 {target.display_name}。"
        )
