"""测试夹具：每个测试使用 tmp_path 下独立的 SQLite 数据库文件。"""
from datetime import date

import pytest
import pytest_asyncio

from SymPepTracker.logic.ProposalLogic import ProposalLogic
from SymPepTracker.registry.RegistryPublisher import RegistryPublisher
from SymPepTracker.share.DatabaseHandler import DatabaseHandler
from SymPepTracker.share.enums import ProposalType

CREATED = date(2020, 5, 1)


@pytest_asyncio.fixture
async def db_handler(tmp_path):
    handler = DatabaseHandler(f"sqlite+aiosqlite:///{tmp_path / 'sympep.db'}")
    handler.initialize()
    await handler.init_db()
    yield handler
    await handler.close()


@pytest.fixture
def registry(tmp_path):
    return RegistryPublisher(
        index_path=str(tmp_path / "registry" / "index.md"),
        json_path=str(tmp_path / "registry" / "index.json"),
    )


@pytest.fixture
def logic(db_handler, registry):
    return ProposalLogic(db_handler, registry=registry)


@pytest.fixture
def make_proposal(logic):
    async def _make(title="X", proposal_type=None, champions=("alice",)):
        return await logic.create_proposal(
            title, proposal_type or ProposalType.PROCESS, CREATED, champions
        )

    return _make
