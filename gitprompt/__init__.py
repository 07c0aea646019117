"""git-prompt: однострочная сводка состояния git-репозитория для shell prompt."""

from __future__ import annotations

from .core import classify, render  # noqa: F401

__version__ = "0.1.0"

__all__ = ["classify", "render", "__version__"]
