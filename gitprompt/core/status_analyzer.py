from __future__ import annotations

"""Подсчёт изменений рабочей копии и расстояния до upstream."""

from typing import Iterable

from .git_utils import NonTextReferenceNameError, UpstreamNotFoundError
from .types import Distance, GitBackend, RemoteTrackingInfo, StatusFlag, WorkingCopyStatus

__all__ = ["aggregate_status", "scan_working_copy", "resolve_remote"]

CHANGED = StatusFlag.WT_MODIFIED | StatusFlag.WT_DELETED | StatusFlag.WT_TYPECHANGE | StatusFlag.WT_RENAMED
STAGED = StatusFlag.INDEX_MODIFIED | StatusFlag.INDEX_DELETED | StatusFlag.INDEX_TYPECHANGE | StatusFlag.INDEX_RENAMED


def aggregate_status(entries: Iterable[StatusFlag]) -> WorkingCopyStatus:
    """Посчитать пути по четырём независимым корзинам.

    Один путь может попасть в несколько корзин сразу, например
    staged и changed, или staged и conflicts.
    """
    staged = conflicts = changed = untracked = 0
    for flags in entries:
        if flags & StatusFlag.CONFLICTED:
            conflicts += 1
        if flags & CHANGED:
            changed += 1
        if flags & StatusFlag.WT_NEW:
            untracked += 1
        if flags & STAGED:
            staged += 1
    return WorkingCopyStatus(staged=staged, conflicts=conflicts, changed=changed, untracked=untracked)


def scan_working_copy(backend: GitBackend) -> WorkingCopyStatus:
    return aggregate_status(backend.scan_status())


def resolve_remote(backend: GitBackend, branch: str) -> RemoteTrackingInfo | None:
    """Найти upstream ветки *branch* и насколько она впереди/позади.

    ``None`` если upstream не настроен; остальные ошибки бэкенда
    пробрасываются как есть.
    """
    try:
        found = backend.find_branch_upstream(branch)
    except UpstreamNotFoundError:
        return None
    ahead, behind = backend.graph_ahead_behind(found.local, found.upstream)
    try:
        name = found.name.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise NonTextReferenceNameError(branch, found.name) from exc
    return RemoteTrackingInfo(branch=name, distance=Distance(ahead=ahead, behind=behind))
