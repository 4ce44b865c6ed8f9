from .TrackerError import TrackerError


class AlreadyAssignedError(TrackerError):
    """
    当尝试为已有编号的提案再次分配编号时抛出。
    """

    def __init__(self, ref: int, number: int):
        self.ref = ref
        self.number = number
        super().__init__(f"提案 {ref} 已被分配编号 SymPEP {number}，不能重复分配。")
