"""CLI entry-point for projectson.

Usage:
    python -m projectson init [--config FILE] [--root DIR] [--output FILE] [--formats go,vue] [--include src,docs/*] [--force]
    python -m projectson validate [--config FILE] [overrides]
    python -m projectson preview [--config FILE] [overrides] [--json]
    python -m projectson run [--config FILE] [overrides]
    python -m projectson apply <payload.json> [--config FILE] [--root DIR] [--yes]
    python -m projectson schema-check <output.json>

Overrides: --root/-r, --output/-o, --formats/-f, --exclude/-e (comma-separated lists).
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from projectson import __version__
from projectson.api import (
    apply_modifications as _api_apply_modifications,
    collect_project as _api_collect_project,
    preview_files as _api_preview_files,
)
from projectson.contracts.load import OUTPUT_SCHEMA, validate_file
from projectson.core.config import (
    DEFAULT_CONFIG_FILE,
    CollectorConfig,
    default_config,
    load_config,
    save_config,
    validate_config,
)
from projectson.errors import ConfigError, ModificationError, ProjectsonError
from projectson.utils.exit_codes import ExitCode
from projectson.utils.fmt import format_size
from projectson.utils.json_norm import stable_json_dump

_RULE = "-" * 50


def _split_list(values: list[str] | None) -> list[str]:
    """Flatten repeated / comma-separated flag values."""
    out: list[str] = []
    for value in values or []:
        out.extend(v.strip() for v in value.split(",") if v.strip())
    return out


def _add_override_flags(p: argparse.ArgumentParser, *, with_exclude: bool = True) -> None:
    p.add_argument("-r", "--root", default=None, help="Project root directory (overrides config).")
    p.add_argument("-o", "--output", default=None, help="Output JSON file path (overrides config).")
    p.add_argument(
        "-f",
        "--formats",
        action="append",
        default=None,
        help="File formats, comma-separated, e.g. go,vue,ts (overrides config).",
    )
    if with_exclude:
        p.add_argument(
            "-e",
            "--exclude",
            action="append",
            default=None,
            help="Exclude patterns, comma-separated, e.g. node_modules,*.log (overrides config).",
        )


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="projectson",
        description="Aggregate project files into a structured JSON snapshot.",
    )
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    p.add_argument(
        "-c",
        "--config",
        type=Path,
        default=None,
        help=f"Config file (default: {DEFAULT_CONFIG_FILE} in the current directory).",
    )
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging.")
    p.add_argument("-q", "--quiet", action="store_true", help="Only log errors.")
    sub = p.add_subparsers(dest="command")

    # ── init ────────────────────────────────────────────────────────
    init_p = sub.add_parser("init", help="Create a default configuration file.")
    _add_override_flags(init_p, with_exclude=False)
    init_p.add_argument(
        "--include",
        action="append",
        default=None,
        help="Paths to include relative to root, comma-separated (e.g. src,docs/api.md).",
    )
    init_p.add_argument("--force", action="store_true", help="Overwrite an existing config file.")

    # ── validate / preview / run ────────────────────────────────────
    val_p = sub.add_parser("validate", help="Validate the configuration.")
    _add_override_flags(val_p)

    prev_p = sub.add_parser("preview", help="List the files that would be collected.")
    _add_override_flags(prev_p)
    prev_p.add_argument(
        "--json",
        dest="json_out",
        action="store_true",
        default=False,
        help="Print entries as JSON on stdout.",
    )

    run_p = sub.add_parser("run", help="Run the collection and write the output file.")
    _add_override_flags(run_p)

    # ── apply ───────────────────────────────────────────────────────
    apply_p = sub.add_parser("apply", help="Apply a modified_files JSON payload to the project.")
    apply_p.add_argument("payload", type=Path, help="JSON file with a modified_files array.")
    apply_p.add_argument("-r", "--root", default=None, help="Project root (overrides config).")
    apply_p.add_argument("-y", "--yes", action="store_true", help="Do not ask for confirmation.")

    # ── schema-check ────────────────────────────────────────────────
    sc_p = sub.add_parser("schema-check", help="Validate an output document against the schema.")
    sc_p.add_argument("instance", type=Path, help="Output JSON file to validate.")

    return p


def _configure_logging(args: argparse.Namespace) -> None:
    level = logging.INFO
    if args.verbose:
        level = logging.DEBUG
    elif args.quiet:
        level = logging.ERROR
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )


def _load_with_overrides(args: argparse.Namespace) -> CollectorConfig:
    """Config file (explicit, default file, or defaults) plus flag overrides."""
    if args.config is not None:
        if not args.config.exists():
            raise ConfigError(f"config file not found: {args.config}")
        cfg = load_config(args.config)
    elif Path(DEFAULT_CONFIG_FILE).exists():
        cfg = load_config(DEFAULT_CONFIG_FILE)
    else:
        cfg = default_config()

    overrides: dict = {}
    if getattr(args, "root", None):
        overrides["root"] = str(Path(args.root).resolve())
    if getattr(args, "output", None):
        overrides["output"] = args.output
    if _split_list(getattr(args, "formats", None)):
        overrides["formats"] = tuple(_split_list(args.formats))
    if _split_list(getattr(args, "exclude", None)):
        overrides["exclude_patterns"] = tuple(_split_list(args.exclude))
    return cfg.with_overrides(**overrides) if overrides else cfg


def _handle_init(args: argparse.Namespace) -> int:
    """Dispatch ``projectson init``."""
    target: Path = args.config or Path(DEFAULT_CONFIG_FILE)
    if target.exists() and not args.force:
        print(
            f"error: config file '{target}' already exists. Use --force to overwrite",
            file=sys.stderr,
        )
        return ExitCode.ERROR

    overrides: dict = {}
    if args.root:
        overrides["root"] = str(Path(args.root).resolve())
    if args.output:
        overrides["output"] = args.output
    if _split_list(args.formats):
        overrides["formats"] = tuple(_split_list(args.formats))
    if _split_list(args.include):
        overrides["include"] = tuple(_split_list(args.include))

    save_config(default_config().with_overrides(**overrides), target)
    print(f"Default configuration saved to {target}")
    print("Please review and edit this file, especially the 'root' and 'formats' fields.")
    return ExitCode.SUCCESS


def _handle_validate(args: argparse.Namespace) -> int:
    """Dispatch ``projectson validate``."""
    cfg = _load_with_overrides(args)
    try:
        validate_config(cfg)
    except ConfigError as e:
        print(f"configuration validation failed: {e}", file=sys.stderr)
        return ExitCode.ERROR
    print("Configuration is valid.")
    return ExitCode.SUCCESS


def _handle_preview(args: argparse.Namespace) -> int:
    """Dispatch ``projectson preview``."""
    entries = _api_preview_files(_load_with_overrides(args))

    if args.json_out:
        stable_json_dump([e.to_dict() for e in entries], sys.stdout)
        return ExitCode.SUCCESS

    if not entries:
        print("No files found matching the criteria.")
        return ExitCode.SUCCESS

    print(f"Found {len(entries)} files:")
    print(_RULE)
    for e in entries:
        print(f"- Path: {e.display_path}")
        print(f"  Original Path: {e.original_path}")
        print(f"  Format: {e.format}, Mode: {e.mode.value}, Size: {format_size(e.size_bytes)}")
    print(_RULE)
    return ExitCode.SUCCESS


def _handle_run(args: argparse.Namespace) -> int:
    """Dispatch ``projectson run``."""
    cfg = _load_with_overrides(args)

    def progress(current: int, total: int) -> None:
        print(f"\rProcessing: {current} / {total} files", end="", file=sys.stderr)
        if current == total and total > 0:
            print("", file=sys.stderr)

    print("Starting file collection process", file=sys.stderr)
    stats = _api_collect_project(cfg, progress=progress)

    print("collection completed")
    print(_RULE)
    print(f"files processed: {stats.files_included}")
    print(f"output size: {format_size(stats.output_bytes)}")
    print(f"output written to: {stats.output_path}")
    print(_RULE)
    return ExitCode.SUCCESS


def _handle_apply(args: argparse.Namespace) -> int:
    """Dispatch ``projectson apply <payload>``."""
    cfg = _load_with_overrides(args)
    if not cfg.root:
        print("error: project root not specified (use --root or a config file)", file=sys.stderr)
        return ExitCode.ERROR
    try:
        payload = args.payload.read_text(encoding="utf-8")
    except OSError as e:
        print(f"error: cannot read {args.payload}: {e}", file=sys.stderr)
        return ExitCode.ERROR

    if not args.yes:
        answer = input(
            f"Apply file modifications under {cfg.root}? This can overwrite or delete files. [y/N] "
        )
        if answer.strip().lower() not in ("y", "yes"):
            print("File modification cancelled.", file=sys.stderr)
            return ExitCode.SUCCESS

    result = _api_apply_modifications(cfg.root, payload)
    print(result.summary())
    return ExitCode.SUCCESS if result.ok else ExitCode.VIOLATION


def _handle_schema_check(args: argparse.Namespace) -> int:
    """Dispatch ``projectson schema-check <output.json>``."""
    import jsonschema

    try:
        validate_file(args.instance, OUTPUT_SCHEMA)
    except jsonschema.ValidationError as e:
        print(f"FAIL: {e.message}", file=sys.stderr)
        return ExitCode.VIOLATION
    except (OSError, ValueError) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return ExitCode.ERROR
    print("OK")
    return ExitCode.SUCCESS


_HANDLERS = {
    "init": _handle_init,
    "validate": _handle_validate,
    "preview": _handle_preview,
    "run": _handle_run,
    "apply": _handle_apply,
    "schema-check": _handle_schema_check,
}


def main(argv: list[str] | None = None) -> int:
    """Entry-point — returns an ``ExitCode``."""
    parser = _build_parser()
    args = parser.parse_args(argv)
    if args.command is None:
        parser.print_help(sys.stderr)
        return ExitCode.ERROR

    _configure_logging(args)
    try:
        return _HANDLERS[args.command](args)
    except ConfigError as e:
        print(f"configuration error: {e}. Run 'validate' command for details", file=sys.stderr)
        return ExitCode.ERROR
    except (ModificationError, FileNotFoundError) as e:
        print(f"error: {e}", file=sys.stderr)
        return ExitCode.ERROR
    except ProjectsonError as e:
        print(f"error during file collection: {e}", file=sys.stderr)
        return ExitCode.ERROR


if __name__ == "__main__":
    raise SystemExit(main())
