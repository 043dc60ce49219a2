"""Tests for the canonical JSON normalization layer."""

import json
from pathlib import Path

from projectson.model import CollectionMode
from projectson.utils.json_norm import stable_json_dump, stable_json_dumps


def test_stable_json_dumps_sorts_keys_and_adds_newline():
    s = stable_json_dumps({"b": 1, "a": 2})
    assert s.endswith("\n")
    assert s.index('"a"') < s.index('"b"')


def test_stable_json_dumps_can_keep_insertion_order():
    s = stable_json_dumps({"path": "p", "content": "c"}, sort_keys=False)
    assert s.index('"path"') < s.index('"content"')


def test_stable_json_dumps_normalizes_paths_and_enums():
    obj = json.loads(stable_json_dumps({"p": Path("a") / "b", "m": CollectionMode.PATH}))
    assert obj == {"p": "a/b", "m": "path"}


def test_stable_json_dumps_keeps_unicode():
    assert "héllo" in stable_json_dumps({"x": "héllo"})


def test_stable_json_dump_writes_to_file_like(tmp_path):
    out = tmp_path / "x.json"
    with out.open("w", encoding="utf-8") as f:
        stable_json_dump({"b": 1, "a": 2}, f)
    txt = out.read_text(encoding="utf-8")
    assert txt.endswith("\n")
    assert '"a"' in txt and '"b"' in txt
