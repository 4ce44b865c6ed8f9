from SymPepTracker.share.enums.ProposalStatus import ProposalStatus

from .TrackerError import TrackerError


class MissingResolutionError(TrackerError):
    """
    当提案在没有决议链接的情况下进入 Accepted / Rejected / Withdrawn 时抛出。
    """

    def __init__(self, target: ProposalStatus):
        self.target = target
        super().__init__(f"进入 {target.display_name} 状态前必须先设置决议链接 (Resolution)。")
