from __future__ import annotations

"""Сериализация состояния репозитория в одну строку для prompt."""

from .types import Detached, OnBranch, RepositoryState, Unborn, WorkingCopyStatus

__all__ = ["render"]


def _fields(ahead: int, behind: int, status: WorkingCopyStatus) -> str:
    return f"{ahead} {behind} {status.staged} {status.conflicts} {status.changed} {status.untracked}"


def render(state: RepositoryState, *, abbrev: int | None = None) -> str:
    """``<name> <ahead> <behind> <staged> <conflicts> <changed> <untracked>``.

    Detached HEAD выводится как ``:<oid>``, ветка без коммитов как ``?``.
    *abbrev* обрезает oid до указанной длины (``None``/0 — полный).
    """
    match state:
        case OnBranch(branch=branch, status=status):
            ahead, behind = 0, 0
            if branch.remote is not None and branch.remote.distance is not None:
                ahead, behind = branch.remote.distance.as_pair()
            return f"{branch.name} {_fields(ahead, behind, status)}"
        case Detached(head=head, status=status):
            oid = head.short(abbrev) if abbrev else str(head)
            return f":{oid} {_fields(0, 0, status)}"
        case Unborn(status=status):
            return f"? {_fields(0, 0, status)}"
        case _:
            raise TypeError(f"unknown repository state: {state!r}")
