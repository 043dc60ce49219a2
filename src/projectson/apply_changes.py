"""Write-back — apply a ``{"modified_files": [...]}`` payload to the project.

Each item names a display path (``<root_basename>/rel/path``), the new
content and an action:

* ``update`` — write the file, creating parent directories.
* ``create`` — like ``update`` but refuses to overwrite an existing file.
* ``delete`` — remove the file; an already-missing file counts as applied.

A failing item is reported and the remaining items are still applied.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath

from pydantic import ValidationError

from projectson.errors import ModificationError
from projectson.model import ModificationAction
from projectson.model.modification import FileModification, ModificationResponse

_logger = logging.getLogger(__name__)


@dataclass
class ApplyResult:
    applied: int = 0
    errors: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    def summary(self) -> str:
        msg = f"Applied {self.applied} modification(s) successfully."
        if self.errors:
            msg += f"\nEncountered {len(self.errors)} error(s):\n" + "\n".join(self.errors)
        return msg


def parse_modifications(text: str) -> ModificationResponse:
    """Parse a JSON payload; raises ``ModificationError`` when malformed."""
    if not text.strip():
        raise ModificationError("modification payload is empty")
    try:
        return ModificationResponse.model_validate_json(text)
    except ValidationError as exc:
        raise ModificationError(
            'invalid modification payload; expected {"modified_files": [...]}: ' f"{exc}"
        ) from exc


def resolve_target(root: Path, display_path: str) -> Path:
    """Map a display path back onto *root*.

    Raises ``ValueError`` for paths that would land outside *root*.
    """
    rel = PurePosixPath(display_path.replace("\\", "/"))
    if rel.parts and rel.parts[0] == root.name and len(rel.parts) > 1:
        rel = PurePosixPath(*rel.parts[1:])
    else:
        _logger.warning(
            "Path %r does not start with %r, treating it as root-relative",
            display_path,
            root.name + "/",
        )
    if rel.is_absolute() or ".." in rel.parts or not rel.parts:
        raise ValueError(f"path escapes the project root: {display_path}")
    return root.joinpath(*rel.parts)


def _apply_one(root: Path, mod: FileModification) -> None:
    try:
        action = ModificationAction(mod.action.strip().lower())
    except ValueError:
        raise ValueError(f"Unknown action {mod.action!r} for file {mod.path}") from None

    target = resolve_target(root, mod.path)
    if action is ModificationAction.DELETE:
        try:
            target.unlink()
        except FileNotFoundError:
            _logger.info("File %s for deletion not found, already deleted", mod.path)
        return

    if action is ModificationAction.CREATE and target.exists():
        raise ValueError(f"File {mod.path} already exists. Use 'update' to overwrite.")
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(mod.content, encoding="utf-8")


def apply_modifications(root: Path, response: ModificationResponse) -> ApplyResult:
    """Apply every item of *response* under *root*."""
    result = ApplyResult()
    for mod in response.modified_files:
        try:
            _apply_one(root, mod)
        except (OSError, ValueError) as exc:
            _logger.error("Failed to apply %s to %s: %s", mod.action, mod.path, exc)
            result.errors.append(f"{mod.path}: {exc}")
        else:
            result.applied += 1
    return result
