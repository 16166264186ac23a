"""Watch mode: run sync on startup, on a timer, and when source notes change."""

import json
import signal
import sys
import time
from collections.abc import Callable
from pathlib import Path
from typing import Any

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from .core.model import SyncResult
from .log import get_logger

logger = get_logger(__name__)


class DebounceHandler(FileSystemEventHandler):
    """Collects source note changes and reports them once things go quiet."""

    def __init__(self, prefix: str, debounce_ms: int = 1000):
        super().__init__()
        self.prefix = prefix
        self.debounce_ms = debounce_ms
        self.changed: set[str] = set()
        self.last_event_time = 0.0

    def _should_skip(self, path: Path) -> bool:
        name = path.name
        if name.startswith(".") or name.endswith("~") or name.endswith(".swp"):
            return True
        return not (name.endswith(".md") and name.startswith(self.prefix))

    def _record(self, event: FileSystemEvent) -> None:
        if event.is_directory:
            return
        path = Path(str(event.src_path))
        if self._should_skip(path):
            return
        self.changed.add(str(path))
        self.last_event_time = time.time()

    def on_created(self, event: FileSystemEvent) -> None:
        self._record(event)

    def on_modified(self, event: FileSystemEvent) -> None:
        self._record(event)

    def pending(self, now: float | None = None) -> bool:
        """True once changes exist and the debounce window has elapsed."""
        if not self.changed:
            return False
        now = time.time() if now is None else now
        return (now - self.last_event_time) * 1000 >= self.debounce_ms

    def drain(self) -> set[str]:
        changed = set(self.changed)
        self.changed.clear()
        return changed


class SyncScheduler:
    """
    Decides when the next sync is due. Runs happen one at a time on the
    caller's thread, so a slow run delays the next check instead of overlapping.
    """

    def __init__(
        self,
        run_sync: Callable[[str], SyncResult],
        interval_minutes: int | None = None,
        on_startup: bool = False,
    ):
        self.run_sync = run_sync
        self.interval_s = interval_minutes * 60 if interval_minutes else None
        self.on_startup = on_startup
        self.next_timer_run: float | None = None
        self.runs = 0

    def start(self, now: float) -> None:
        if self.interval_s is not None:
            self.next_timer_run = now + self.interval_s
        if self.on_startup:
            self.trigger("startup")

    def tick(self, now: float, changes: bool = False) -> None:
        if changes:
            self.trigger("change")
        if self.next_timer_run is not None and now >= self.next_timer_run:
            self.trigger("timer")
            self.next_timer_run = now + self.interval_s

    def trigger(self, reason: str) -> None:
        self.runs += 1
        try:
            self.run_sync(reason)
        except Exception as e:
            logger.error("%s sync error: %s", reason.capitalize(), e)


def watch_sources(
    runtime: Any,
    debounce_ms: int = 1000,
    quiet: bool = False,
    json_output: bool = False,
) -> int:
    """
    Watch the source folder and keep memo notes in sync until interrupted.

    Args:
        runtime: Runtime with config, service and state store
        debounce_ms: Quiet period after the last change before syncing
        quiet: Suppress output
        json_output: Print one JSON object per run

    Returns:
        Exit code
    """
    config = runtime.config
    source_dir = Path(config.vault.root) / config.source.folder

    if not config.sync.enabled:
        print("Error: Sync is disabled (set sync.enabled = true)", file=sys.stderr)
        return 1
    if not config.source.folder or not source_dir.is_dir():
        print(f"Error: Source folder not found: {source_dir}", file=sys.stderr)
        return 1

    def run_sync(reason: str) -> SyncResult:
        start_time = time.time()
        result = runtime.sync()
        duration_ms = int((time.time() - start_time) * 1000)
        if json_output:
            event = {"type": "sync", "reason": reason, "duration_ms": duration_ms}
            event.update(result.to_dict())
            print(json.dumps(event), flush=True)
        elif not quiet:
            print(
                f"[{reason}] created {result.created_files}, skipped {result.skipped_entries}, "
                f"failed {result.failed_entries} ({duration_ms}ms)",
                flush=True,
            )
            if result.error_message:
                print(f"  {result.error_message}", flush=True)
        return result

    interval = config.sync.interval_minutes if config.sync.mode == "auto" else None
    scheduler = SyncScheduler(run_sync, interval_minutes=interval, on_startup=config.sync.on_startup)

    running = True

    def signal_handler(signum: int, frame: Any) -> None:
        nonlocal running
        running = False
        if not quiet and not json_output:
            print("\nShutting down...", flush=True)

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    handler = DebounceHandler(config.source.prefix, debounce_ms)
    observer = Observer()
    observer.schedule(handler, str(source_dir), recursive=True)

    if not quiet and not json_output:
        mode = f"every {interval} min + on change" if interval else "on change"
        print(f"Watching {source_dir} ({mode})", flush=True)
        print("Press Ctrl+C to stop", flush=True)

    observer.start()
    scheduler.start(time.time())

    try:
        while running:
            time.sleep(0.1)
            now = time.time()
            changed = handler.pending(now)
            if changed:
                logger.debug("Changed: %s", ", ".join(sorted(handler.drain())))
            scheduler.tick(now, changes=changed)
    finally:
        observer.stop()
        observer.join()

    if not quiet and not json_output:
        print("Watch stopped", flush=True)

    return 0
