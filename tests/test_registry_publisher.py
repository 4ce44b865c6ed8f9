import json
from datetime import date

import pytest

from SymPepTracker.dto import ProposalDto
from SymPepTracker.logic.ProposalLogic import ProposalLogic
from SymPepTracker.registry.RegistryPublisher import RegistryPublisher
from SymPepTracker.share.enums import ProposalStatus, ProposalType


def _dto(**overrides):
    data = dict(
        id=1,
        number=1,
        title="Equation class",
        type=ProposalType.STANDARDS_TRACK,
        status=ProposalStatus.DRAFT,
        created=date(2020, 5, 1),
        resolution=None,
        champions=["alice", "bob"],
        discussions=[],
        version=2,
    )
    data.update(overrides)
    return ProposalDto(**data)


def test_render_markdown_lists_only_numbered_proposals(tmp_path):
    publisher = RegistryPublisher(str(tmp_path / "index.md"), title="SymPEP Index")
    text = publisher.render_markdown(
        [_dto(), _dto(id=2, number=None, title="Unnumbered"), _dto(id=3, number=2, title="A|B")]
    )

    assert text.startswith("# SymPEP Index\n")
    assert "| 1 | Equation class | Standards Track | Draft | alice, bob |" in text
    assert "| 2 | A\\|B | Standards Track | Draft | alice, bob |" in text
    assert "Unnumbered" not in text


def test_render_json_uses_camel_case_keys(tmp_path):
    publisher = RegistryPublisher(str(tmp_path / "index.md"))
    payload = json.loads(publisher.render_json([_dto(superseded_by_id=5)]))

    assert "generatedAt" in payload
    entry = payload["proposals"][0]
    assert entry["supersededById"] == 5
    assert entry["status"] == "Draft"
    assert entry["type"] == "Standards Track"


@pytest.mark.asyncio
async def test_publish_writes_files(tmp_path):
    publisher = RegistryPublisher(
        str(tmp_path / "out" / "index.md"), json_path=str(tmp_path / "out" / "index.json")
    )
    await publisher.publish([_dto()])

    assert "Equation class" in (tmp_path / "out" / "index.md").read_text(encoding="utf-8")
    assert json.loads((tmp_path / "out" / "index.json").read_text(encoding="utf-8"))["proposals"]
    assert not [p for p in (tmp_path / "out").iterdir() if p.name.startswith(".registry-")]


@pytest.mark.asyncio
async def test_assignment_and_transition_update_the_index(make_proposal, logic, registry):
    p = await make_proposal(title="X", champions=("alice",))
    await logic.assign_number(p.id, legitimized=True)

    with open(registry.index_path, encoding="utf-8") as f:
        assert "| 1 | X | Process | Draft | alice |" in f.read()

    await logic.set_resolution(p.id, "http://example/thread")
    await logic.transition(p.id, ProposalStatus.ACCEPTED)

    with open(registry.index_path, encoding="utf-8") as f:
        assert "| 1 | X | Process | Accepted | alice |" in f.read()


@pytest.mark.asyncio
async def test_publish_failure_does_not_undo_assignment(db_handler, tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory", encoding="utf-8")
    logic = ProposalLogic(
        db_handler,
        registry=RegistryPublisher(str(blocker / "index.md")),
        registry_retries=2,
    )
    p = await logic.create_proposal("X", ProposalType.PROCESS, date(2020, 5, 1), ["alice"])

    assert await logic.assign_number(p.id, legitimized=True) == 1
    assert (await logic.get_proposal(p.id)).number == 1
    assert await logic.rebuild_registry() is False


@pytest.mark.asyncio
async def test_rebuild_registry_without_publisher(db_handler):
    assert await ProposalLogic(db_handler).rebuild_registry() is False
