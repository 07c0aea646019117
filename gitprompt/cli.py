"""Точка входа: печатает строку состояния репозитория для shell prompt.

    PS1='$(git-prompt) \\$ '
"""
from __future__ import annotations

import argparse
import logging
import sys

from .core import (
    Config,
    GitError,
    GitRepo,
    InternalPreconditionError,
    NotARepositoryError,
    classify,
    render,
)
from .core.config import MISSING_REPO_CHOICES

__all__ = ["main", "build_parser", "run"]

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="git-prompt",
        description="Print a one-line summary of the git repository for a shell prompt",
    )
    parser.add_argument("-C", "--directory", default=".", help="Каталог, с которого начинается поиск репозитория")
    parser.add_argument("--config", help="Путь к TOML-файлу конфигурации")
    parser.add_argument(
        "--debug",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Печатать ошибки и вызовы git в stderr",
    )
    parser.add_argument(
        "--status-when-detached",
        dest="status_when_detached",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Считать статус рабочей копии и для detached HEAD / ветки без коммитов",
    )
    parser.add_argument("--abbrev", type=int, default=None, help="Длина oid для detached HEAD (0 — полный)")
    parser.add_argument(
        "--missing-repo",
        dest="missing_repo",
        choices=MISSING_REPO_CHOICES,
        default=None,
        help="Поведение вне репозитория: error (код 1) или empty (пустой вывод, код 0)",
    )
    return parser


def run(cfg: Config, directory: str = ".") -> str:
    """Один проход: открыть репозиторий, классифицировать, отрисовать."""
    repo = GitRepo.discover(directory, git=cfg.git_executable)
    state = classify(repo, status_when_detached=cfg.status_when_detached)
    logger.debug("state: %r", state)
    return render(state, abbrev=cfg.abbrev or None)


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        cfg = Config.load(args.config).merged(
            {
                "debug": args.debug,
                "status_when_detached": args.status_when_detached,
                "abbrev": args.abbrev,
                "missing_repo": args.missing_repo,
            }
        )
    except (ValueError, OSError) as exc:
        print(f"[git-prompt] неверная конфигурация: {exc}", file=sys.stderr)
        return 1

    if cfg.debug:
        logging.basicConfig(level=logging.DEBUG, format="[git-prompt] %(name)s: %(message)s")
        logger.debug("config: %r", cfg)

    try:
        line = run(cfg, args.directory)
    except NotARepositoryError as exc:
        if cfg.missing_repo == "empty":
            logger.debug("%s", exc)
            return 0
        if cfg.debug:
            print(f"[git-prompt] {exc}", file=sys.stderr)
        return 1
    except (GitError, InternalPreconditionError) as exc:
        if cfg.debug:
            print(f"[git-prompt] {exc}", file=sys.stderr)
        return 1

    sys.stdout.write(line)
    sys.stdout.flush()
    return 0


if __name__ == "__main__":
    sys.exit(main())
