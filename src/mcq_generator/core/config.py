"""Read TOML files layered over a defaults table, and write config files."""

from __future__ import annotations

import copy
import tomllib
from pathlib import Path
from typing import Any, Mapping

__all__ = [
    "TomlConfigError",
    "read_config_table",
    "write_private_text",
]

Table = dict[str, Any]


class TomlConfigError(RuntimeError):
    """Raised when a config file is unreadable or does not fit the defaults."""


def read_config_table(path: Path, defaults: Mapping[str, Any]) -> Table:
    """Return a copy of ``defaults`` with the values from ``path`` applied.

    Every key in the file must already exist in ``defaults``; a table in the
    defaults must stay a table. ``defaults`` itself is never modified.
    """

    try:
        document = tomllib.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise TomlConfigError(f"Config file not found: {path}") from exc
    except tomllib.TOMLDecodeError as exc:
        raise TomlConfigError(f"Failed to parse {path}: {exc}") from exc

    table: Table = copy.deepcopy(dict(defaults))
    pending: list[tuple[Table, Mapping[str, Any], str]] = [
        (table, document, "")
    ]
    while pending:
        target, values, prefix = pending.pop()
        for key, value in values.items():
            name = prefix + key
            if key not in target:
                raise TomlConfigError(
                    f"Unknown configuration key '{name}' in {path}."
                )
            if isinstance(target[key], dict):
                if not isinstance(value, Mapping):
                    raise TomlConfigError(
                        f"'{name}' must be a table, not "
                        f"{type(value).__name__}."
                    )
                pending.append((target[key], value, name + "."))
            else:
                target[key] = value
    return table


def write_private_text(
    path: Path, text: str, *, overwrite: bool = False
) -> Path:
    """Write ``text`` to ``path`` readable by the owner only."""

    if path.exists() and not overwrite:
        raise TomlConfigError(
            f"Config already exists: {path} (use --force to replace it)"
        )
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    path.chmod(0o600)
    return path
