from sqlmodel import Field

from SymPepTracker.models.BaseModel import BaseModel


class NumberingCounter(BaseModel, table=True):
    """
    编号计数器表，只有一行 (id=1)。
    last_number 即已分配的最大编号。
    """

    __tablename__ = "numbering_counter"  # type: ignore

    last_number: int = Field(default=0, description="已分配的最大编号")
    version: int = Field(default=1, description="乐观锁版本号")
