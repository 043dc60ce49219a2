"""Human-readable formatting helpers."""

from __future__ import annotations

_KB = 1 << 10
_MB = 1 << 20
_GB = 1 << 30


def format_size(size_bytes: int) -> str:
    """Render a byte count as ``B``, ``KB``, ``MB`` or ``GB`` (base 1024)."""
    if size_bytes < _KB:
        return f"{size_bytes} B"
    if size_bytes < _MB:
        return f"{size_bytes / _KB:.1f} KB"
    if size_bytes < _GB:
        return f"{size_bytes / _MB:.1f} MB"
    return f"{size_bytes / _GB:.1f} GB"
