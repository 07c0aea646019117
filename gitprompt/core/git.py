from __future__ import annotations

"""Фасад GitRepo: реализация `GitBackend` поверх исполняемого `git`."""

import os
from pathlib import Path
from typing import Iterator

from .git_helpers import branch_upstream_ref, calc_ahead_behind, peel_commit, read_head, ref_exists
from .git_utils import GitError, NotARepositoryError, UpstreamNotFoundError, _run_git, parse_porcelain_v2
from .types import BranchUpstream, HeadRef, ObjectId, StatusFlag

__all__ = ["GitRepo"]


class GitRepo:  # noqa: D101 – simple façade
    def __init__(self, path: str | Path, *, git: str = "git") -> None:  # noqa: D401
        self.path = Path(path)
        self.git = git

    def __repr__(self) -> str:
        return f"<GitRepo {self.path}>"

    @classmethod
    def discover(cls, start: str | Path = ".", *, git: str = "git") -> "GitRepo":
        """Найти рабочую копию, содержащую *start* (как ``git rev-parse``)."""
        start = Path(start).expanduser().resolve()
        if not start.is_dir():
            raise NotARepositoryError(f"{start} is not a directory")
        proc = _run_git(start, ["rev-parse", "--show-toplevel"], git=git, text=False)
        if proc.returncode != 0:
            err = proc.stderr.decode("utf-8", errors="replace").strip()
            if "not a git repository" in err:
                raise NotARepositoryError(f"{start} is not inside a git repository")
            raise GitError(err or f"git rev-parse failed in {start}")
        return cls(os.fsdecode(proc.stdout.rstrip(b"\n")), git=git)

    # --- GitBackend ---------------------------------------

    def resolve_head(self) -> HeadRef:
        return read_head(self.path, git=self.git)

    def scan_status(self) -> Iterator[StatusFlag]:
        proc = _run_git(
            self.path,
            ["status", "--porcelain=v2", "-z", "--untracked-files=normal"],
            git=self.git,
            text=False,
        )
        if proc.returncode != 0:
            raise GitError(f"git status failed in {self.path}: {proc.stderr.decode('utf-8', errors='replace').strip()}")
        return parse_porcelain_v2(proc.stdout)

    def find_branch_upstream(self, branch: str) -> BranchUpstream:
        local, upstream_name = branch_upstream_ref(self.path, branch, git=self.git)
        upstream_ref = os.fsdecode(upstream_name)
        if not ref_exists(self.path, upstream_ref, git=self.git):
            # upstream настроен, но ссылки нет (ещё не было fetch или ветку удалили)
            raise UpstreamNotFoundError(f"upstream of {branch!r} does not exist")
        upstream = peel_commit(self.path, upstream_ref, git=self.git)
        return BranchUpstream(local=local, upstream=upstream, name=upstream_name)

    def graph_ahead_behind(self, local: ObjectId, upstream: ObjectId) -> tuple[int, int]:
        return calc_ahead_behind(self.path, local, upstream, git=self.git)
