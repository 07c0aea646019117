"""Core API подпакет gitprompt.core.

Классификация репозитория, подсчёт статуса, расстояние до upstream и
отрисовка строки prompt. Логирования здесь нет, кроме трассировки
вызовов git в бэкенде.
"""

from __future__ import annotations

from .classifier import classify  # noqa: F401
from .config import Config, load_config  # noqa: F401
from .git import GitRepo  # noqa: F401
from .git_utils import (  # noqa: F401
    GitError,
    InternalPreconditionError,
    NonTextReferenceNameError,
    NotARepositoryError,
    UnbornHeadError,
    UpstreamNotFoundError,
)
from .render import render  # noqa: F401
from .status_analyzer import aggregate_status, resolve_remote, scan_working_copy  # noqa: F401
from .types import (  # noqa: F401
    BranchRef,
    Detached,
    Distance,
    ObjectId,
    OnBranch,
    RemoteTrackingInfo,
    RepositoryState,
    StatusFlag,
    Unborn,
    WorkingCopyStatus,
)

__all__ = [
    "classify",
    "render",
    "aggregate_status",
    "scan_working_copy",
    "resolve_remote",
    "Config",
    "load_config",
    "GitRepo",
    "GitError",
    "NotARepositoryError",
    "UnbornHeadError",
    "UpstreamNotFoundError",
    "NonTextReferenceNameError",
    "InternalPreconditionError",
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
]
