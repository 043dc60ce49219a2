"""Shared fixtures: a small on-disk project tree."""

from __future__ import annotations

from pathlib import Path

import pytest

FILES = {
    "src/main.go": "package main\n\nfunc main() {\n\tprintln(\"hi\")\n}\n",
    "src/util.go": "package main\n// helper\nfunc util() {}\n",
    "src/sub/a.go": "package sub\n",
    "src/readme.md": "# readme\n",
    "node_modules/pkg/file.js": "module.exports = 1;\n",
    "web/app.js": "const app = 1;\n",
    "web/lib/x.js": "export const x = 2;\n",
    "web/page.vue": "<template>A</template>\n<style>\n.a { color: red; }\n</style>\n",
    "top.GO": "package top\n",
}


def write_tree(root: Path, files: dict[str, str]) -> Path:
    for rel, text in files.items():
        p = root / rel
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(text, encoding="utf-8")
    return root


@pytest.fixture()
def project(tmp_path: Path) -> Path:
    """``<tmp>/proj`` populated with :data:`FILES`."""
    return write_tree(tmp_path / "proj", FILES)
