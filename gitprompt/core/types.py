from __future__ import annotations

"""Типы данных снимка репозитория и протокол git-бэкенда."""

import enum
import re
from dataclasses import dataclass, field
from typing import Iterable, Protocol, TypeAlias

__all__ = [
    "ObjectId",
    "StatusFlag",
    "WorkingCopyStatus",
    "Distance",
    "RemoteTrackingInfo",
    "BranchRef",
    "OnBranch",
    "Detached",
    "Unborn",
    "RepositoryState",
    "HeadRef",
    "BranchUpstream",
    "GitBackend",
]

_HEX_RE = re.compile(r"[0-9a-f]{40}|[0-9a-f]{64}")


@dataclass(frozen=True, slots=True)
class ObjectId:
    """Идентификатор коммита в каноническом hex-виде (SHA-1 или SHA-256)."""

    hex: str

    def __post_init__(self) -> None:
        if not _HEX_RE.fullmatch(self.hex):
            raise ValueError(f"not a canonical object id: {self.hex!r}")

    def short(self, length: int) -> str:
        if length <= 0:
            raise ValueError(f"abbrev length must be positive, got {length}")
        return self.hex[:length]

    def __str__(self) -> str:
        return self.hex


class StatusFlag(enum.IntFlag):
    """Флаги состояния одного пути (словарь бэкенда)."""

    CURRENT = 0
    INDEX_NEW = enum.auto()
    INDEX_MODIFIED = enum.auto()
    INDEX_DELETED = enum.auto()
    INDEX_RENAMED = enum.auto()
    INDEX_TYPECHANGE = enum.auto()
    WT_NEW = enum.auto()
    WT_MODIFIED = enum.auto()
    WT_DELETED = enum.auto()
    WT_TYPECHANGE = enum.auto()
    WT_RENAMED = enum.auto()
    IGNORED = enum.auto()
    CONFLICTED = enum.auto()


@dataclass(frozen=True, slots=True)
class WorkingCopyStatus:
    staged: int = 0
    conflicts: int = 0
    changed: int = 0
    untracked: int = 0


@dataclass(frozen=True, slots=True)
class Distance:
    ahead: int
    behind: int

    def as_pair(self) -> tuple[int, int]:
        return self.ahead, self.behind


@dataclass(frozen=True, slots=True)
class RemoteTrackingInfo:
    branch: str  # полное имя upstream, например refs/remotes/origin/main
    distance: Distance | None = None


@dataclass(frozen=True, slots=True)
class BranchRef:
    name: str
    remote: RemoteTrackingInfo | None = None


# ---------------------------------------------------------------------------
# состояние репозитория: ровно один из трёх вариантов


@dataclass(frozen=True, slots=True)
class OnBranch:
    branch: BranchRef
    status: WorkingCopyStatus
    head: ObjectId


@dataclass(frozen=True, slots=True)
class Detached:
    head: ObjectId
    # заполняется только при status_when_detached
    status: WorkingCopyStatus = field(default_factory=WorkingCopyStatus)


@dataclass(frozen=True, slots=True)
class Unborn:
    status: WorkingCopyStatus = field(default_factory=WorkingCopyStatus)


RepositoryState: TypeAlias = OnBranch | Detached | Unborn


# ---------------------------------------------------------------------------
# ответы бэкенда


@dataclass(frozen=True, slots=True)
class HeadRef:
    oid: ObjectId
    detached: bool
    shorthand: bytes | None = None  # сырое имя ветки, может быть не UTF-8


@dataclass(frozen=True, slots=True)
class BranchUpstream:
    local: ObjectId
    upstream: ObjectId
    name: bytes  # полное имя upstream-ссылки как его хранит git


class GitBackend(Protocol):
    """Минимальный набор запросов, который нужен классификатору."""

    def resolve_head(self) -> HeadRef:
        """Вернуть HEAD; ``UnbornHeadError`` если коммитов ещё нет."""
        ...

    def scan_status(self) -> Iterable[StatusFlag]:
        """Флаги каждого изменённого пути, включая неотслеживаемые."""
        ...

    def find_branch_upstream(self, branch: str) -> BranchUpstream:
        """``UpstreamNotFoundError`` если upstream не настроен."""
        ...

    def graph_ahead_behind(self, local: ObjectId, upstream: ObjectId) -> tuple[int, int]:
        ...
