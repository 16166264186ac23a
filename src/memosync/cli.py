"""CLI for memosync - split daily-note journal entries into memo notes."""

import argparse
import json
import platform
import sys
from pathlib import Path
from typing import Any

from . import __version__
from .converter import validate_note
from .errors import MemoSyncError
from .log import setup_logging
from .runtime import build_runtime


def cmd_sync(args: argparse.Namespace, rt: Any) -> int:
    """Run one sync over the source folder."""
    result = rt.sync()

    if args.json:
        print(json.dumps(result.to_dict(), indent=2))
    elif not args.quiet:
        print(f"Processed: {result.processed_entries}")
        print(f"Created: {result.created_files}")
        print(f"Skipped: {result.skipped_entries}")
        if result.failed_entries > 0:
            print(f"Failed: {result.failed_entries}")
        if args.verbose:
            for note in result.created_notes:
                print(f"  + {note.filename}")

    if not result.success or result.error_message:
        print(f"Error: {result.error_message}", file=sys.stderr)
        return 1
    return 0


def cmd_reset(args: argparse.Namespace, rt: Any) -> int:
    """Clear the dedup index and cursor."""
    if not args.confirm:
        print("Error: --confirm is required to reset sync state", file=sys.stderr)
        return 1

    rt.reset()
    if not args.quiet:
        print("Sync state reset. Existing memo files were kept.")
    return 0


def cmd_status(args: argparse.Namespace, rt: Any) -> int:
    """Print the sync summary."""
    status = rt.status()

    if args.json:
        print(json.dumps(status.to_dict(), indent=2))
        return 0

    print(f"Total processed: {status.total_processed}")
    print(f"Skipped: {status.skipped_entries}")
    print(f"Failed: {status.failed_entries}")
    print(f"Indexed entries: {status.indexed_entries}")
    print(f"Last sync: {status.last_sync_time or 'never'}")
    if status.last_processed_file:
        print(f"Last file: {status.last_processed_file}")
    return 0


def cmd_parse(args: argparse.Namespace, rt: Any) -> int:
    """Show the entries one source file yields, without writing anything."""
    path = Path(args.file)
    text = path.read_text(encoding="utf-8")
    service = rt.service

    entries = service.parser.parse_text(text, source_file=str(path))
    batch = service.converter.batch_convert(entries)

    if args.json:
        output = [
            {
                "timestamp": note.source_timestamp.isoformat(),
                "id": note.id,
                "filename": note.filename,
                "lines": note.source_entry.source_line_numbers if note.source_entry else [],
                "valid": not validate_note(note),
                "body": note.body,
            }
            for note in batch.successful
        ]
        print(json.dumps(output, indent=2, ensure_ascii=False))
    else:
        for note in batch.successful:
            first_line = note.body.split("\n", 1)[0]
            print(f"{note.source_timestamp:%Y-%m-%d %H:%M}\t{note.filename}\t{first_line[:60]}")
        if not args.quiet:
            print(f"{len(batch.successful)} entries, {len(batch.failed)} failed")

    for failure in batch.failed:
        print(f"Error: {failure.entry.timestamp:%Y-%m-%d %H:%M}: {failure.error}", file=sys.stderr)

    return 0 if not batch.failed else 1


def cmd_watch(args: argparse.Namespace, rt: Any) -> int:
    """Watch source notes and sync on change and on schedule."""
    from .watch import watch_sources

    return watch_sources(
        rt,
        debounce_ms=args.debounce_ms,
        quiet=args.quiet,
        json_output=args.json,
    )


def cmd_serve(args: argparse.Namespace, rt: Any) -> int:
    """Start local JSON API server."""
    import uvicorn

    from .api.app import create_app, generate_token

    token_arg = args.token
    token = None

    if token_arg == "auto":
        token = generate_token()
        print(f"Generated bearer token: {token}")
        print(f"Use in requests: Authorization: Bearer {token}")
    elif token_arg == "none":
        print("Warning: Running without authentication. Only use in trusted environments.")
        token = None
    else:
        token = token_arg

    app = create_app(rt, token=token, enable_cors=args.cors)

    print(f"Starting server on http://{args.host}:{args.port}")
    uvicorn.run(app, host=args.host, port=args.port, log_level="info")

    return 0


def version_text() -> str:
    return (
        f"memosync {__version__}\n"
        f"python {platform.python_version()}\n"
        f"platform {platform.system().lower()}"
    )


def main() -> None:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="memosync", description="Split daily-note journal entries into memo notes"
    )
    parser.add_argument(
        "--version", action="version", version=version_text()
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to config file (default: search cwd/memosync.toml, vault/memosync.toml)",
    )
    parser.add_argument(
        "--vault",
        type=Path,
        default=None,
        help="Path to vault directory (overrides config)",
    )
    parser.add_argument(
        "--state",
        type=Path,
        default=None,
        help="Path to sync state JSON file (overrides config)",
    )
    parser.add_argument(
        "-q", "--quiet", action="store_true", help="Minimize output"
    )
    parser.add_argument(
        "--json", action="store_true", help="Machine-readable output"
    )
    parser.add_argument(
        "--log-file", default=None, help="Also write logs to this file"
    )

    subparsers = parser.add_subparsers(dest="cmd", required=True)

    parser_sync = subparsers.add_parser("sync", help="Convert new journal entries into memo notes")
    parser_sync.add_argument(
        "-v", "--verbose", action="store_true", help="List created files"
    )

    parser_reset = subparsers.add_parser("reset", help="Clear the dedup index and cursor")
    parser_reset.add_argument(
        "--confirm", action="store_true", help="Required to proceed"
    )

    subparsers.add_parser("status", help="Show sync summary")

    parser_parse = subparsers.add_parser("parse", help="Show entries parsed from one source file")
    parser_parse.add_argument("file", help="Daily note file to inspect")

    parser_watch = subparsers.add_parser("watch", help="Sync on change and on schedule")
    parser_watch.add_argument(
        "--debounce-ms", type=int, default=1000,
        help="Quiet period after a change before syncing (default: 1000)"
    )

    parser_serve = subparsers.add_parser("serve", help="Start local JSON API server")
    parser_serve.add_argument(
        "--host", default="127.0.0.1",
        help="Host to bind to (default: 127.0.0.1)"
    )
    parser_serve.add_argument(
        "--port", type=int, default=8766,
        help="Port to bind to (default: 8766)"
    )
    parser_serve.add_argument(
        "--token", default="auto",
        help="Bearer token (auto|<string>|none, default: auto)"
    )
    parser_serve.add_argument(
        "--cors", action="store_true",
        help="Enable CORS (default: false)"
    )

    args = parser.parse_args()

    try:
        rt = build_runtime(
            vault_path=args.vault,
            state_path=args.state,
            config_path=args.config,
        )
    except MemoSyncError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    level = "DEBUG" if rt.config.sync.debug else ("ERROR" if args.quiet else "WARNING")
    setup_logging(level=level, log_file=args.log_file)

    handlers = {
        "sync": cmd_sync,
        "reset": cmd_reset,
        "status": cmd_status,
        "parse": cmd_parse,
        "watch": cmd_watch,
        "serve": cmd_serve,
    }

    handler = handlers.get(args.cmd)
    if handler:
        try:
            exit_code = handler(args, rt)
            sys.exit(exit_code)
        except Exception as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)
    else:
        print(f"Unknown command: {args.cmd}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
