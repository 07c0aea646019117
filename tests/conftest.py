"""Shared fixtures: an in-memory backend and throwaway git repositories."""

from __future__ import annotations

import shutil
import subprocess
from dataclasses import dataclass, field
from pathlib import Path

import pytest

from gitprompt.core import GitError, ObjectId, StatusFlag, UnbornHeadError, UpstreamNotFoundError
from gitprompt.core.types import BranchUpstream, HeadRef

OID_A = ObjectId("a" * 40)
OID_B = ObjectId("b" * 40)
OID_C = ObjectId("0123456789abcdef0123456789abcdef01234567")


@dataclass
class FakeBackend:
    """In-memory GitBackend; records every query it answers."""

    head: HeadRef | None = None
    statuses: list[StatusFlag] = field(default_factory=list)
    upstreams: dict[str, BranchUpstream] = field(default_factory=dict)
    distances: dict[tuple[ObjectId, ObjectId], tuple[int, int]] = field(default_factory=dict)
    fail_on: str | None = None
    calls: list[str] = field(default_factory=list)

    def _enter(self, name: str) -> None:
        self.calls.append(name)
        if self.fail_on == name:
            raise GitError(f"{name} exploded")

    def resolve_head(self) -> HeadRef:
        self._enter("resolve_head")
        if self.head is None:
            raise UnbornHeadError("refs/heads/main has no commits yet")
        return self.head

    def scan_status(self):
        self._enter("scan_status")
        return iter(self.statuses)

    def find_branch_upstream(self, branch: str) -> BranchUpstream:
        self._enter("find_branch_upstream")
        try:
            return self.upstreams[branch]
        except KeyError:
            raise UpstreamNotFoundError(branch) from None

    def graph_ahead_behind(self, local: ObjectId, upstream: ObjectId) -> tuple[int, int]:
        self._enter("graph_ahead_behind")
        return self.distances[(local, upstream)]


def on_branch(name: bytes = b"main", oid: ObjectId = OID_A) -> HeadRef:
    return HeadRef(oid=oid, detached=False, shorthand=name)


# --- real git -----------------------------------------------------------------

requires_git = pytest.mark.skipif(shutil.which("git") is None, reason="git is not installed")


def git(repo: Path, *args: str) -> str:
    proc = subprocess.run(["git", *args], cwd=repo, check=True, text=True, capture_output=True)
    return proc.stdout.strip()


def commit_file(repo: Path, name: str, content: str, message: str | None = None) -> str:
    (repo / name).write_text(content)
    git(repo, "add", name)
    git(repo, "commit", "-q", "-m", message or f"update {name}")
    return git(repo, "rev-parse", "HEAD")


@pytest.fixture
def git_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate git and git-prompt from the user's configuration."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(home / ".config"))
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    monkeypatch.setenv("GIT_CEILING_DIRECTORIES", str(tmp_path))
    for var in ("AUTHOR", "COMMITTER"):
        monkeypatch.setenv(f"GIT_{var}_NAME", "Prompt Tester")
        monkeypatch.setenv(f"GIT_{var}_EMAIL", "prompt@example.com")
    for var in (
        "GIT_DIR",
        "GIT_WORK_TREE",
        "GIT_INDEX_FILE",
        "GIT_PROMPT_CONFIG",
        "GIT_PROMPT_DEBUG",
        "GIT_PROMPT_STATUS_WHEN_DETACHED",
        "GIT_PROMPT_MISSING_REPO",
        "GIT_PROMPT_ABBREV",
    ):
        monkeypatch.delenv(var, raising=False)
    return tmp_path


@pytest.fixture
def repo(git_env: Path) -> Path:
    """Fresh repository on an unborn ``main`` branch."""
    path = git_env / "repo"
    path.mkdir()
    git(path, "init", "-q")
    git(path, "symbolic-ref", "HEAD", "refs/heads/main")
    return path
