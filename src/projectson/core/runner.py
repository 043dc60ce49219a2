"""Runner — discover files, process them on a worker pool, write the snapshot."""

from __future__ import annotations

import logging
import os
import queue
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Callable, Sequence

import jsonschema

from projectson.contracts.load import OUTPUT_SCHEMA, validate_instance
from projectson.core.config import CollectorConfig
from projectson.core.discover import discover_files
from projectson.core.include import parse_include
from projectson.core.matcher import PathMatcher
from projectson.core.transform import ContentTransformer
from projectson.errors import CollectionCancelled, OutputError
from projectson.model.entries import FileEntry, RunStats
from projectson.utils.json_norm import stable_json_dumps

_logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int], None]
OutputRecord = dict[str, str]


def worker_count(total: int, cpus: int | None = None) -> int:
    """Pool size for *total* files: at most one worker per file, at least one."""
    if total <= 0:
        return 0
    available = cpus if cpus is not None else (os.cpu_count() or 1)
    return max(1, min(available, total))


def process_file(entry: FileEntry, transformer: ContentTransformer) -> OutputRecord | None:
    """Build the output record for *entry*; None when it contributes nothing."""
    record: OutputRecord = {}
    if entry.mode.wants_path:
        record["path"] = entry.display_path
    if entry.mode.wants_content:
        text = entry.source_path.read_bytes().decode("utf-8", errors="replace")
        content = transformer.transform(text, entry.format)
        if content:
            record["content"] = content
    return record or None


def _report(progress: ProgressCallback, current: int, total: int) -> None:
    try:
        progress(current, total)
    except Exception:
        _logger.exception("Progress callback failed at %d / %d", current, total)


def build_document(records: Sequence[OutputRecord]) -> dict[str, list[OutputRecord]]:
    return {"project_files": list(records)}


def write_document(document: dict, destination: Path) -> int:
    """Validate, serialize and write *document*; returns bytes written."""
    try:
        validate_instance(document, OUTPUT_SCHEMA)
    except jsonschema.ValidationError as exc:
        raise OutputError(f"output document violates schema: {exc.message}") from exc

    data = stable_json_dumps(document, sort_keys=False).encode("utf-8")
    try:
        destination.write_bytes(data)
    except OSError as exc:
        raise OutputError(f"writing output file {destination}: {exc}") from exc
    return len(data)


class FileCollector:
    """Collection engine bound to one configuration.

    Exclusion regexes and content-exclusion rules are compiled once here and
    reused by every ``preview_files`` / ``run`` call on this instance.
    """

    def __init__(self, config: CollectorConfig) -> None:
        self.config = config
        self.root = config.root_path
        self.directives = parse_include(config.include)
        self.matcher = PathMatcher(self.root, config.exclude_patterns)
        self.transformer = ContentTransformer(config.content_exclusions)

    def preview_files(self) -> list[FileEntry]:
        """Discovery only; no file contents are read."""
        return discover_files(
            self.root,
            self.directives,
            self.config.formats,
            matcher=self.matcher,
        )

    def get_file_content(self, original_path: str) -> str:
        """Raw text of a file given its root-relative path."""
        return (self.root / original_path).read_text(encoding="utf-8", errors="replace")

    def apply_content_exclusions(self, content: str, file_ext: str) -> str:
        return self.transformer.apply(content, file_ext)

    def _collect(
        self,
        entries: list[FileEntry],
        progress: ProgressCallback | None,
        cancel: threading.Event | None,
    ) -> list[OutputRecord]:
        total = len(entries)
        work: queue.SimpleQueue[FileEntry] = queue.SimpleQueue()
        for entry in entries:
            work.put(entry)

        lock = threading.Lock()
        collected: list[tuple[str, OutputRecord]] = []
        processed = 0

        def worker() -> None:
            nonlocal processed
            while cancel is None or not cancel.is_set():
                try:
                    entry = work.get_nowait()
                except queue.Empty:
                    return
                try:
                    record = process_file(entry, self.transformer)
                except Exception:
                    _logger.exception("Error processing file %s", entry.source_path)
                    record = None
                # Counter updates and progress calls are serialized, so
                # ``current`` only ever grows.
                with lock:
                    if record is not None:
                        collected.append((entry.display_path, record))
                    processed += 1
                    if progress is not None:
                        _report(progress, processed, total)

        n_workers = worker_count(total)
        with ThreadPoolExecutor(max_workers=n_workers) as pool:
            futures = [pool.submit(worker) for _ in range(n_workers)]
        for future in futures:
            future.result()

        if cancel is not None and cancel.is_set():
            raise CollectionCancelled(f"run cancelled after {processed} of {total} file(s)")

        # Arrival order is racy; the document is ordered by display path.
        collected.sort(key=lambda item: item[0])
        return [record for _, record in collected]

    def run(
        self,
        progress: ProgressCallback | None = None,
        *,
        cancel: threading.Event | None = None,
        output: Path | None = None,
    ) -> RunStats:
        """Collect every discovered file and write the output document.

        Returns the number of records written (not files scanned) and the
        serialized size.  Per-file failures are logged and skipped; scan and
        output failures raise.
        """
        started = time.perf_counter()
        destination = Path(output) if output is not None else self.config.output_path

        entries = self.preview_files()
        if not entries:
            if progress is not None:
                _report(progress, 0, 0)
            records: list[OutputRecord] = []
        else:
            records = self._collect(entries, progress, cancel)

        size = write_document(build_document(records), destination)
        _logger.debug(
            "Wrote %d record(s) from %d file(s) to %s", len(records), len(entries), destination
        )
        return RunStats(
            files_included=len(records),
            output_bytes=size,
            output_path=destination,
            elapsed_seconds=time.perf_counter() - started,
        )
