"""projectson — aggregate a project's files into one compact JSON document."""

__all__ = [
    "__version__",
    "apply_modifications",
    "collect_project",
    "preview_content",
    "preview_files",
    "validate_instance",
]
__version__ = "0.1.0"

# Programmatic entrypoints (backend use).
from projectson.api import (  # noqa: E402, F401
    apply_modifications,
    collect_project,
    preview_content,
    preview_files,
    validate_instance,
)
