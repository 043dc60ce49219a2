"""Canonical JSON serialization — single dump path for all artifacts.

Guarantees:
  - Trailing newline at EOF
  - ``Path`` objects → POSIX strings
  - Dataclasses → dicts (via ``dataclasses.asdict``)
  - Enums → their values
  - Stable key ordering unless the caller asks to keep insertion order
"""

from __future__ import annotations

import json
from dataclasses import asdict, is_dataclass
from enum import Enum
from pathlib import Path
from typing import IO, Any, Mapping


def _to_builtin(obj: Any) -> Any:
    """Convert common non-JSON types into JSON-safe builtins."""
    if obj is None:
        return None
    if isinstance(obj, Enum):
        return _to_builtin(obj.value)
    if isinstance(obj, (str, int, bool, float)):
        return obj
    if isinstance(obj, Path):
        return obj.as_posix()
    if is_dataclass(obj) and not isinstance(obj, type):
        return _to_builtin(asdict(obj))
    if isinstance(obj, Mapping):
        return {str(k): _to_builtin(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple, set, frozenset)):
        return [_to_builtin(v) for v in obj]
    # Fall back to string (keeps the CLI resilient)
    return str(obj)


def stable_json_dumps(
    obj: Any,
    *,
    indent: int | None = 2,
    sort_keys: bool = True,
) -> str:
    """
    Canonical JSON serialization used across the CLI and output documents.

    Non-ASCII text is written as-is (the file is UTF-8).
    """
    s = json.dumps(
        _to_builtin(obj),
        indent=indent,
        sort_keys=sort_keys,
        ensure_ascii=False,
    )
    return s + "\n"


def stable_json_dump(
    obj: Any,
    fp: IO[str],
    *,
    indent: int | None = 2,
    sort_keys: bool = True,
) -> None:
    fp.write(stable_json_dumps(obj, indent=indent, sort_keys=sort_keys))
