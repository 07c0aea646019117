from __future__ import annotations

"""Вспомогательные git-запросы к ссылкам и графу коммитов."""

import os
import pathlib

from .git_utils import GitError, UnbornHeadError, UpstreamNotFoundError, _check_git, _run_git
from .types import HeadRef, ObjectId

__all__ = [
    "shorthand",
    "read_head",
    "ref_exists",
    "peel_commit",
    "branch_upstream_ref",
    "calc_ahead_behind",
]

_SHORTHAND_PREFIXES = (b"refs/heads/", b"refs/tags/", b"refs/remotes/", b"refs/")


# ---------------------------------------------------------------------------
# low-level helpers


def shorthand(refname: bytes) -> bytes:
    """``refs/heads/main`` -> ``main``; остальные префиксы как у ``git``."""
    for prefix in _SHORTHAND_PREFIXES:
        if refname.startswith(prefix):
            return refname[len(prefix):]
    return refname


def ref_exists(repo: pathlib.Path, refname: str, *, git: str = "git") -> bool:
    """Есть ли ссылка *refname*; сам объект, на который она указывает, не проверяется."""
    proc = _run_git(repo, ["rev-parse", "-q", "--verify", refname], git=git)
    return proc.returncode == 0


def peel_commit(repo: pathlib.Path, rev: str, *, git: str = "git") -> ObjectId:
    """Коммит, на который указывает *rev*; битая ссылка или объект дают `GitError`."""
    out = _check_git(repo, ["rev-parse", "--verify", f"{rev}^{{commit}}"], git=git)
    return ObjectId(out.strip())


def read_head(repo: pathlib.Path, *, git: str = "git") -> HeadRef:
    sym = _run_git(repo, ["symbolic-ref", "-q", "HEAD"], git=git, text=False)
    if sym.returncode not in (0, 1):
        raise GitError(f"cannot read HEAD in {repo}: {sym.stderr.decode('utf-8', errors='replace').strip()}")
    detached = sym.returncode == 1
    refname = sym.stdout.rstrip(b"\n")

    # unborn только если самой ссылки нет; испорченная ссылка это ошибка
    if not detached and not ref_exists(repo, os.fsdecode(refname), git=git):
        raise UnbornHeadError(f"reference {refname.decode('utf-8', errors='replace')} has no commits yet")
    oid = peel_commit(repo, "HEAD", git=git)

    if detached:
        return HeadRef(oid=oid, detached=True)
    return HeadRef(oid=oid, detached=False, shorthand=shorthand(refname) or None)


# ---------------------------------------------------------------------------
# high-level helpers


def branch_upstream_ref(repo: pathlib.Path, branch: str, *, git: str = "git") -> tuple[ObjectId, bytes]:
    """Вернуть (коммит локальной ветки, полное имя её upstream)."""
    refname = f"refs/heads/{branch}"
    out = _check_git(
        repo,
        ["for-each-ref", "--format=%(refname)%00%(objectname)%00%(upstream)", refname],
        git=git,
        text=False,
    )
    # for-each-ref сопоставляет по префиксу пути, нужна точная ссылка
    for line in out.splitlines():
        name, objectname, upstream = line.split(b"\0")
        if name != os.fsencode(refname):
            continue
        if not upstream:
            raise UpstreamNotFoundError(f"branch {branch!r} has no upstream configured")
        return ObjectId(objectname.decode("ascii")), upstream
    raise GitError(f"local branch {branch!r} not found in {repo}")


def calc_ahead_behind(repo: pathlib.Path, local: ObjectId, upstream: ObjectId, *, git: str = "git") -> tuple[int, int]:
    out = _check_git(repo, ["rev-list", "--left-right", "--count", f"{local}...{upstream}"], git=git)
    parts = out.split()
    if len(parts) != 2:
        raise GitError(f"unexpected rev-list output: {out!r}")
    left, right = parts
    return (int(left), int(right))
