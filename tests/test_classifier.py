"""Tests for repository state classification against an in-memory backend."""

from __future__ import annotations

import pytest

from conftest import OID_A, OID_B, FakeBackend, on_branch
from gitprompt.core import (
    BranchRef,
    Detached,
    Distance,
    GitError,
    InternalPreconditionError,
    NonTextReferenceNameError,
    OnBranch,
    RemoteTrackingInfo,
    StatusFlag,
    Unborn,
    WorkingCopyStatus,
    classify,
    render,
)
from gitprompt.core.types import BranchUpstream, HeadRef


def test_unborn_head():
    backend = FakeBackend(head=None, statuses=[StatusFlag.WT_NEW])
    assert classify(backend) == Unborn()
    assert backend.calls == ["resolve_head"]


def test_unborn_head_with_status():
    backend = FakeBackend(head=None, statuses=[StatusFlag.WT_NEW, StatusFlag.WT_NEW])
    state = classify(backend, status_when_detached=True)
    assert state == Unborn(status=WorkingCopyStatus(untracked=2))


def test_detached_head():
    backend = FakeBackend(head=HeadRef(oid=OID_B, detached=True), statuses=[StatusFlag.WT_MODIFIED])
    state = classify(backend)
    assert state == Detached(head=OID_B)
    assert state.status == WorkingCopyStatus()
    assert "scan_status" not in backend.calls


def test_detached_head_with_status():
    backend = FakeBackend(head=HeadRef(oid=OID_B, detached=True), statuses=[StatusFlag.WT_MODIFIED])
    state = classify(backend, status_when_detached=True)
    assert state == Detached(head=OID_B, status=WorkingCopyStatus(changed=1))


def test_branch_without_upstream():
    backend = FakeBackend(
        head=on_branch(b"main"),
        statuses=[StatusFlag.INDEX_MODIFIED, StatusFlag.CONFLICTED, StatusFlag.WT_NEW],
    )
    state = classify(backend)
    assert state == OnBranch(
        branch=BranchRef(name="main", remote=None),
        status=WorkingCopyStatus(staged=1, conflicts=1, untracked=1),
        head=OID_A,
    )
    assert render(state) == "main 0 0 1 1 0 1"


def test_branch_with_upstream():
    backend = FakeBackend(
        head=on_branch(b"feature/x"),
        upstreams={"feature/x": BranchUpstream(local=OID_A, upstream=OID_B, name=b"refs/remotes/origin/feature/x")},
        distances={(OID_A, OID_B): (2, 1)},
    )
    state = classify(backend)
    assert state.branch.remote == RemoteTrackingInfo(
        branch="refs/remotes/origin/feature/x", distance=Distance(ahead=2, behind=1)
    )
    assert render(state) == "feature/x 2 1 0 0 0 0"


def test_queries_run_in_order():
    backend = FakeBackend(head=on_branch())
    classify(backend)
    assert backend.calls == ["resolve_head", "find_branch_upstream", "scan_status"]


def test_missing_branch_name_is_a_defect():
    backend = FakeBackend(head=HeadRef(oid=OID_A, detached=False, shorthand=None))
    with pytest.raises(InternalPreconditionError):
        classify(backend)


def test_non_utf8_branch_name():
    backend = FakeBackend(head=on_branch(b"caf\xe9"))
    with pytest.raises(NonTextReferenceNameError):
        classify(backend)


@pytest.mark.parametrize("step", ["resolve_head", "find_branch_upstream", "scan_status"])
def test_backend_failures_propagate(step):
    backend = FakeBackend(head=on_branch(), fail_on=step)
    with pytest.raises(GitError):
        classify(backend)


def test_classify_is_idempotent():
    backend = FakeBackend(
        head=on_branch(),
        statuses=[StatusFlag.WT_NEW, StatusFlag.INDEX_DELETED | StatusFlag.WT_MODIFIED],
        upstreams={"main": BranchUpstream(local=OID_A, upstream=OID_B, name=b"refs/heads/base")},
        distances={(OID_A, OID_B): (0, 3)},
    )
    assert classify(backend) == classify(backend)
