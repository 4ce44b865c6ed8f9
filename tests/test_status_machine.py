import pytest

from SymPepTracker.share.enums import ProposalStatus
from SymPepTracker.share.errors import IllegalTransitionError, MissingResolutionError
from SymPepTracker.share.StatusMachine import StatusMachine

S = ProposalStatus

ALLOWED = {
    S.DRAFT: {S.ACCEPTED, S.REJECTED, S.WITHDRAWN, S.DEFERRED, S.ACTIVE},
    S.ACCEPTED: {S.FINAL, S.SUPERSEDED},
    S.DEFERRED: {S.DRAFT, S.REJECTED, S.WITHDRAWN},
    S.FINAL: {S.SUPERSEDED},
    S.ACTIVE: {S.SUPERSEDED},
    S.REJECTED: set(),
    S.WITHDRAWN: set(),
    S.SUPERSEDED: set(),
}


@pytest.mark.parametrize("current", list(S))
def test_transition_table_matches_process(current):
    for target in S:
        assert StatusMachine.is_allowed(current, target) == (target in ALLOWED[current])


def test_draft_to_final_is_illegal():
    with pytest.raises(IllegalTransitionError) as exc_info:
        StatusMachine.validate(S.DRAFT, S.FINAL, "http://example/thread")
    assert exc_info.value.current == S.DRAFT
    assert exc_info.value.target == S.FINAL


def test_same_status_is_not_a_transition():
    with pytest.raises(IllegalTransitionError):
        StatusMachine.validate(S.DRAFT, S.DRAFT, None)


@pytest.mark.parametrize("target", [S.ACCEPTED, S.REJECTED, S.WITHDRAWN])
def test_resolution_required(target):
    with pytest.raises(MissingResolutionError):
        StatusMachine.validate(S.DRAFT, target, None)
    with pytest.raises(MissingResolutionError):
        StatusMachine.validate(S.DRAFT, target, "   ")
    StatusMachine.validate(S.DRAFT, target, "http://example/thread")


@pytest.mark.parametrize("target", [S.DEFERRED, S.ACTIVE])
def test_resolution_not_required(target):
    StatusMachine.validate(S.DRAFT, target, None)


def test_illegal_pair_reported_before_missing_resolution():
    with pytest.raises(IllegalTransitionError):
        StatusMachine.validate(S.FINAL, S.ACCEPTED, None)


def test_terminal_states():
    assert {s for s in S if StatusMachine.is_terminal(s)} == {
        S.FINAL,
        S.REJECTED,
        S.WITHDRAWN,
        S.SUPERSEDED,
        S.ACTIVE,
    }
    assert not StatusMachine.is_terminal(S.ACCEPTED)
    assert not StatusMachine.is_terminal(S.DEFERRED)
