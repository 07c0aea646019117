from __future__ import annotations

"""Утилиты для работы с `git` через `subprocess`: запуск, ошибки, разбор статуса."""

import logging
import os
import pathlib
import subprocess
from typing import Iterator, Sequence

from .types import StatusFlag

__all__ = [
    "GitError",
    "NotARepositoryError",
    "UnbornHeadError",
    "UpstreamNotFoundError",
    "NonTextReferenceNameError",
    "InternalPreconditionError",
    "_run_git",
    "_check_git",
    "parse_porcelain_v2",
]

logger = logging.getLogger(__name__)

# сообщения git на английском (их разбирает discover), и без захвата index.lock
_GIT_ENV = {
    "LC_ALL": "C",
    "LANGUAGE": "C",
    "GIT_OPTIONAL_LOCKS": "0",
}


class GitError(RuntimeError):
    """Исключение git-операций."""


class NotARepositoryError(GitError):
    """Стартовый каталог не находится внутри рабочей копии."""


class UnbornHeadError(GitError):
    """HEAD указывает на ветку без единого коммита."""


class UpstreamNotFoundError(GitError):
    """У ветки нет upstream (или upstream-ссылка отсутствует)."""


class NonTextReferenceNameError(GitError):
    """Имя ссылки нельзя представить как текст UTF-8."""

    def __init__(self, branch: str, raw: bytes, what: str = "upstream name") -> None:
        self.branch = branch
        self.raw = raw
        super().__init__(f"{what} of branch {branch!r} is not valid UTF-8: {raw!r}")


class InternalPreconditionError(RuntimeError):
    """Нарушен контракт бэкенда: у не-detached HEAD нет имени ветки."""


def _run_git(
    path: pathlib.Path,
    args: Sequence[str],
    *,
    git: str = "git",
    text: bool = True,
) -> subprocess.CompletedProcess:
    """Выполнить git-команду в каталоге *path*.

    При ``text=False`` stdout возвращается байтами: имена ссылок и пути
    не обязаны быть валидным UTF-8.
    """
    logger.debug("git -C %s %s", path, " ".join(args))
    env = os.environ.copy()
    env.update(_GIT_ENV)
    kwargs = {
        "check": False,
        "cwd": str(path),
        "env": env,
        "stdout": subprocess.PIPE,
        "stderr": subprocess.PIPE,
    }
    if text:
        kwargs |= {"text": True, "encoding": "utf-8", "errors": "replace"}
    try:
        return subprocess.run([git, *args], **kwargs)  # type: ignore[arg-type,call-overload]
    except OSError as exc:
        raise GitError(f"cannot run {git}: {exc}") from exc


def _stderr_text(proc: subprocess.CompletedProcess) -> str:
    err = proc.stderr or proc.stdout or ""
    if isinstance(err, bytes):
        err = err.decode("utf-8", errors="replace")
    return err.strip()


def _check_git(
    path: pathlib.Path,
    args: Sequence[str],
    *,
    git: str = "git",
    text: bool = True,
) -> str | bytes:
    """Как `_run_git`, но ненулевой код возврата превращается в `GitError`."""
    proc = _run_git(path, args, git=git, text=text)
    if proc.returncode != 0:
        cmd = " ".join(args)
        raise GitError(f"git {cmd} failed in {path}: {_stderr_text(proc)}")
    return proc.stdout


# --- porcelain v2 -----------------------------------------------------

_INDEX_FLAGS = {
    "A": StatusFlag.INDEX_NEW,
    "C": StatusFlag.INDEX_NEW,
    "M": StatusFlag.INDEX_MODIFIED,
    "D": StatusFlag.INDEX_DELETED,
    "R": StatusFlag.INDEX_RENAMED,
    "T": StatusFlag.INDEX_TYPECHANGE,
}

_WORKTREE_FLAGS = {
    "A": StatusFlag.WT_NEW,  # intent-to-add
    "M": StatusFlag.WT_MODIFIED,
    "D": StatusFlag.WT_DELETED,
    "R": StatusFlag.WT_RENAMED,
    "T": StatusFlag.WT_TYPECHANGE,
}


def _xy_flags(xy: str) -> StatusFlag:
    if len(xy) != 2:
        raise GitError(f"malformed status code {xy!r}")
    flags = StatusFlag.CURRENT
    flags |= _INDEX_FLAGS.get(xy[0], StatusFlag.CURRENT)
    flags |= _WORKTREE_FLAGS.get(xy[1], StatusFlag.CURRENT)
    return flags


def parse_porcelain_v2(raw: bytes) -> Iterator[StatusFlag]:
    """Разобрать вывод ``git status --porcelain=v2 -z`` в флаги по путям.

    Пути нас не интересуют, поэтому они не декодируются.
    """
    records = iter(raw.split(b"\0"))
    for record in records:
        if not record:
            continue
        kind = record[:1]
        if kind == b"#":
            continue
        if kind == b"?":
            yield StatusFlag.WT_NEW
        elif kind == b"!":
            yield StatusFlag.IGNORED
        elif kind == b"u":
            yield StatusFlag.CONFLICTED
        elif kind in (b"1", b"2"):
            parts = record.split(b" ", 2)
            if len(parts) < 3:
                raise GitError(f"malformed status record {record!r}")
            yield _xy_flags(parts[1].decode("ascii", errors="replace"))
            if kind == b"2":
                # за записью переименования следует исходный путь
                next(records, None)
        else:
            raise GitError(f"unknown status record {record!r}")
