"""Конфигурация git-prompt.

Источники по возрастанию приоритета: значения по умолчанию, TOML-файл,
переменные окружения ``GIT_PROMPT_*``, флаги командной строки.
"""
from __future__ import annotations

import logging
import os
import pathlib
import sys
from typing import Any, Iterator, Mapping

import tomlkit  # type: ignore  # third-party

logger = logging.getLogger(__name__)

MISSING_REPO_CHOICES = ("error", "empty")


def _parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in ("1", "true", "yes", "on"):
        return True
    if text in ("0", "false", "no", "off", ""):
        return False
    raise ValueError(f"not a boolean: {value!r}")


def _parse_abbrev(value: Any) -> int:
    if isinstance(value, bool):
        raise ValueError(f"abbrev must be an integer, got {value!r}")
    number = int(value)
    if number < 0:
        raise ValueError(f"abbrev must be >= 0, got {number}")
    return number


def _parse_missing_repo(value: Any) -> str:
    text = str(value).strip().lower()
    if text not in MISSING_REPO_CHOICES:
        raise ValueError(f"missing_repo must be one of {MISSING_REPO_CHOICES}, got {value!r}")
    return text


_CONVERTERS = {
    "debug": _parse_bool,
    "status_when_detached": _parse_bool,
    "missing_repo": _parse_missing_repo,
    "abbrev": _parse_abbrev,
    "git_executable": str,
}

_ENV_VARS = {
    "GIT_PROMPT_DEBUG": "debug",
    "GIT_PROMPT_STATUS_WHEN_DETACHED": "status_when_detached",
    "GIT_PROMPT_MISSING_REPO": "missing_repo",
    "GIT_PROMPT_ABBREV": "abbrev",
}


class Config(dict[str, Any]):
    """Словарь-обёртка с дефолтами и парсингом TOML."""

    _DEFAULTS: dict[str, Any] = {
        "debug": False,
        # считать статус рабочей копии для detached HEAD и unborn
        "status_when_detached": False,
        # "error": вне репозитория выход с кодом 1; "empty": пустая строка и 0
        "missing_repo": "error",
        # 0 — полный oid для detached HEAD
        "abbrev": 0,
        "git_executable": "git",
    }

    def __init__(self, data: Mapping[str, Any] | None = None, *, source: str = "<default>") -> None:  # noqa: D401
        merged = dict(self._DEFAULTS)
        if data:
            merged.update(data)
        super().__init__(self._validate(merged))
        self["_config_source"] = source

    # --- convenience --------------------------------------

    def __getattr__(self, item: str) -> Any:  # noqa: D401
        try:
            return self[item]
        except KeyError as exc:
            raise AttributeError(item) from exc

    def __repr__(self) -> str:  # noqa: D401
        return f"<Config {dict(self)!r} from {self['_config_source']}>"

    def merged(self, overrides: Mapping[str, Any]) -> "Config":
        """Новый Config поверх текущего; значения ``None`` пропускаются."""
        data = {k: v for k, v in self.items() if k != "_config_source"}
        data.update({k: v for k, v in overrides.items() if v is not None})
        return type(self)(data, source=self["_config_source"])

    @staticmethod
    def _validate(data: dict[str, Any]) -> dict[str, Any]:
        unknown = sorted(set(data) - set(Config._DEFAULTS) - {"_config_source"})
        if unknown:
            raise ValueError(f"unknown config keys: {', '.join(unknown)}")
        return {key: _CONVERTERS[key](value) if key in _CONVERTERS else value for key, value in data.items()}

    # --- parsing helpers -----------------------------------

    @classmethod
    def _iter_candidate_files(cls, environ: Mapping[str, str]) -> Iterator[pathlib.Path]:
        if environ.get("GIT_PROMPT_CONFIG"):
            yield pathlib.Path(environ["GIT_PROMPT_CONFIG"]).expanduser()
        home = pathlib.Path(environ.get("HOME") or pathlib.Path.home())
        xdg = environ.get("XDG_CONFIG_HOME")
        if xdg:
            yield pathlib.Path(xdg) / "git-prompt" / "config.toml"
        yield home / ".config" / "git-prompt" / "config.toml"
        yield home / ".git-prompt.toml"

    @classmethod
    def _parse_toml(cls, path: pathlib.Path) -> dict[str, Any]:
        raw_text = path.read_text(encoding="utf-8")
        data: Any = tomlkit.parse(raw_text).unwrap()
        # в pyproject-подобном файле читаем только свою таблицу [tool.git_prompt]
        if "tool" in data:
            return dict(data["tool"].get("git_prompt", {}))
        return data

    @classmethod
    def _from_env(cls, environ: Mapping[str, str]) -> dict[str, Any]:
        return {key: environ[var] for var, key in _ENV_VARS.items() if environ.get(var)}

    # --- public -------------------------------------------

    @classmethod
    def load(cls, config_path: str | pathlib.Path | None = None, *, environ: Mapping[str, str] | None = None) -> "Config":
        environ = os.environ if environ is None else environ
        data: dict[str, Any] = {}
        source = "<default>"

        if config_path is not None:
            path = pathlib.Path(config_path).expanduser()
            if not path.exists():
                print(f"[git-prompt] Конфигурационный файл не найден: {path}", file=sys.stderr)
                raise SystemExit(1)
            data, source = cls._parse_toml(path), str(path)
        else:
            for candidate in cls._iter_candidate_files(environ):
                if candidate.is_file():
                    data, source = cls._parse_toml(candidate), str(candidate)
                    break
            else:
                logger.debug("no config file found, using defaults")

        data.update(cls._from_env(environ))
        return cls(data, source=source)


def load_config(config_path: pathlib.Path | str | None = None) -> Config:
    """Загрузить конфигурацию (см. `Config.load`)."""
    return Config.load(config_path)


__all__ = ["Config", "load_config", "MISSING_REPO_CHOICES"]
