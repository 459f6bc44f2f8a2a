from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from changecheck.errors import StartupConfigError


DB_ENV_VAR = "CHANGECHECK_DB"

_LIST_KEYS = ("targets", "extensions")
_BOOL_KEYS = ("recursive", "include_directories")
_STR_KEYS = ("db", "command", "method")


@dataclass(frozen=True, slots=True)
class CheckConfig:
    targets: tuple[str, ...]
    db_path: str
    recursive: bool = False
    include_directories: bool = False
    extensions: tuple[str, ...] = ()
    command: str = ""
    method: str = ""

    @property
    def db_file(self) -> Path:
        return Path(self.db_path)


def default_db_path() -> str:
    return os.getenv(DB_ENV_VAR, "")


def load_config_file(path: Path) -> dict[str, Any]:
    """Read a JSON config file whose keys mirror the command-line options.

    Recognized keys: ``targets``, ``extensions`` (lists of strings),
    ``recursive``, ``include_directories`` (booleans), ``db``, ``command`` and
    ``method`` (strings).
    """
    if not path.exists():
        raise StartupConfigError(f"Config file not found: {path}")

    try:
        with path.open("r", encoding="utf-8") as fh:
            data = json.load(fh)
    except (OSError, json.JSONDecodeError) as exc:
        raise StartupConfigError(f"Cannot read config file {path}: {exc}") from exc

    if not isinstance(data, dict):
        raise StartupConfigError(f"Config file {path} must contain a JSON object.")

    values: dict[str, Any] = {}
    for key, value in data.items():
        if key in _LIST_KEYS:
            if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
                raise StartupConfigError(f"'{key}' in {path} must be a list of strings.")
            values[key] = tuple(value)
        elif key in _BOOL_KEYS:
            if not isinstance(value, bool):
                raise StartupConfigError(f"'{key}' in {path} must be true or false.")
            values[key] = value
        elif key in _STR_KEYS:
            if not isinstance(value, str):
                raise StartupConfigError(f"'{key}' in {path} must be a string.")
            values[key] = value
        else:
            raise StartupConfigError(f"Unknown key '{key}' in config file {path}.")
    return values


def build_config(
    *,
    targets: list[str] | tuple[str, ...] | None = None,
    db_path: str | None = None,
    recursive: bool = False,
    include_directories: bool = False,
    extensions: list[str] | tuple[str, ...] | None = None,
    command: str | None = None,
    method: str | None = None,
    file_values: dict[str, Any] | None = None,
) -> CheckConfig:
    """Merge command-line values over config-file values and environment defaults."""
    file_values = file_values or {}

    resolved_targets = tuple(targets or ()) or tuple(file_values.get("targets", ()))
    if not resolved_targets:
        raise StartupConfigError("Specify at least one target path.")

    resolved_db = db_path or file_values.get("db", "") or default_db_path()
    if not resolved_db:
        raise StartupConfigError(
            f"Specify the database file with -db <DB filename> (or set {DB_ENV_VAR})."
        )

    return CheckConfig(
        targets=resolved_targets,
        db_path=resolved_db,
        recursive=recursive or file_values.get("recursive", False),
        include_directories=include_directories or file_values.get("include_directories", False),
        extensions=tuple(extensions or ()) or tuple(file_values.get("extensions", ())),
        command=command or file_values.get("command", ""),
        method=method if method is not None else file_values.get("method", ""),
    )
