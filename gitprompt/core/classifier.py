from __future__ import annotations

"""Классификация репозитория: ветка, detached HEAD или ветка без коммитов."""

from .git_utils import InternalPreconditionError, NonTextReferenceNameError, UnbornHeadError
from .status_analyzer import resolve_remote, scan_working_copy
from .types import BranchRef, Detached, GitBackend, OnBranch, RepositoryState, Unborn

__all__ = ["classify"]


def classify(backend: GitBackend, *, status_when_detached: bool = False) -> RepositoryState:
    """Снять снимок состояния репозитория за один проход.

    По умолчанию для detached и unborn статус рабочей копии не считается
    (в строке будут нули); ``status_when_detached=True`` включает подсчёт.
    """
    try:
        head = backend.resolve_head()
    except UnbornHeadError:
        if status_when_detached:
            return Unborn(status=scan_working_copy(backend))
        return Unborn()

    if head.detached:
        if status_when_detached:
            return Detached(head=head.oid, status=scan_working_copy(backend))
        return Detached(head=head.oid)

    if head.shorthand is None:
        raise InternalPreconditionError("HEAD is attached to a branch but the backend returned no branch name")
    try:
        name = head.shorthand.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise NonTextReferenceNameError(
            head.shorthand.decode("utf-8", errors="replace"), head.shorthand, what="name"
        ) from exc

    remote = resolve_remote(backend, name)
    status = scan_working_copy(backend)
    return OnBranch(branch=BranchRef(name=name, remote=remote), status=status, head=head.oid)
