from datetime import date, timedelta, timezone

import pytest

from SymPepTracker.share.enums import ProposalStatus
from SymPepTracker.share.TimeUtils import TimeUtils


def test_utc_now_carries_utc_timezone():
    now = TimeUtils.utc_now()
    assert now.tzinfo is not None
    assert now.utcoffset() == timedelta(0)
    assert now.tzinfo == timezone.utc


@pytest.mark.parametrize("value", ["2020-05-01", "01-May-2020", "1-May-2020"])
def test_parse_created_date(value):
    assert TimeUtils.parse_created_date(value) == date(2020, 5, 1)


def test_parse_created_date_rejects_unknown_format():
    with pytest.raises(ValueError):
        TimeUtils.parse_created_date("May 1st")


@pytest.mark.asyncio
async def test_timestamped_rows_are_stored(make_proposal, logic):
    p = await make_proposal()
    await logic.append_discussion(p.id, "https://lists.example/1")
    await logic.transition(p.id, ProposalStatus.DEFERRED, actor="alice")

    history = await logic.get_history(p.id)
    assert len(history) == 1
    assert history[0].changed_at is not None
