"""Rebuild-on-change support for Folio.

Watches the posts, the template overrides and folio.yaml, and rebuilds the
listing pages and post index whenever one of them changes. Changes to
Folio's own outputs are ignored so a build never triggers another build.

Key classes:
- PostWatcher: Runs the initial build and the watchdog observer.
- _ChangeHandler: File system event handler for triggering rebuilds.
"""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Any

from watchdog.events import FileSystemEventHandler
from watchdog.observers import Observer

from .build import BuildError, build_index
from .config import CONFIG_FILENAME, ConfigError, load_config

logger = logging.getLogger(__name__)


class PostWatcher:
    """Rebuilds the index whenever a source file changes.

    Attributes:
        project_root: Root directory of the blog.
        config: Site configuration of the latest build attempt.
        ignored: Output locations whose changes never trigger a rebuild.
    """

    def __init__(self, project_root: Path, page_size: int | None = None):
        self.project_root = project_root
        self.page_size = page_size
        self._observer: Observer | None = None
        self._handler: _ChangeHandler | None = None
        self.config: dict[str, Any] = {}
        self.ignored: list[Path] = []
        self._apply_config(load_config(project_root))
        self._rebuilding = False
        self._last_rebuild_at = 0.0
        self._last_signature: tuple | None = None
        self._debounce_seconds = 0.05

    def start(self, include_drafts: bool = False) -> None:  # pragma: no cover - integration path
        self.rebuild(include_drafts, force=True)
        self._start_observer(include_drafts)
        logger.info("Watching %s for changes", self.project_root)
        try:
            while True:
                time.sleep(1)
        except KeyboardInterrupt:
            self.stop()

    def stop(self) -> None:
        if self._observer:
            self._observer.stop()
            self._observer.join()
            self._observer = None

    def _watch_paths(self, config: dict[str, Any] | None = None) -> list[Path]:
        config = config if config is not None else self.config
        return [
            self.project_root / config["posts_dir"],
            self.project_root / config["templates_dir"],
        ]

    def _apply_config(self, config: dict[str, Any]) -> None:
        """Switch to ``config``, re-targeting the observer if watched paths moved."""
        previous = self.config
        self.config = config
        self.ignored = [
            self.project_root / config["listing_dir"],
            self.project_root / config["posts_index"],
            self.project_root / config["public_dir"],
        ]
        if self._observer is not None and previous and (
            self._watch_paths(previous) != self._watch_paths()
        ):
            logger.info("Watched folders changed; rescheduling")
            self._schedule(self._observer)

    def _schedule(self, observer: Observer) -> None:
        observer.unschedule_all()
        for watch_path in self._watch_paths():
            if watch_path.exists():
                observer.schedule(self._handler, str(watch_path), recursive=True)
        # folio.yaml lives in the root
        observer.schedule(self._handler, str(self.project_root), recursive=False)

    def _start_observer(self, include_drafts: bool) -> None:
        self._handler = _ChangeHandler(self, include_drafts)
        observer = Observer()
        self._schedule(observer)
        observer.start()
        self._observer = observer

    def is_ignored(self, path: Path) -> bool:
        for ignored in self.ignored:
            if path == ignored:
                return True
            try:
                path.relative_to(ignored)
                return True
            except ValueError:
                continue
        return False

    def rebuild(self, include_drafts: bool, force: bool = False) -> bool:
        """Rebuild unless nothing changed since the last build.

        Build and configuration errors are logged and swallowed so the
        watcher keeps running until the file is fixed.

        Returns:
            True if a build ran.
        """
        now = time.time()
        if not force and (
            self._rebuilding or (now - self._last_rebuild_at) < self._debounce_seconds
        ):
            return False
        try:
            self._apply_config(load_config(self.project_root))
        except ConfigError as exc:
            logger.error("Invalid configuration: %s", exc)
            self._last_rebuild_at = time.time()
            return False
        signature = self._compute_signature()
        if not force and signature == self._last_signature:
            return False
        self._rebuilding = True
        try:
            result = build_index(
                self.project_root,
                include_drafts=include_drafts,
                page_size=self.page_size,
            )
            self._last_signature = signature
            logger.info(
                "Rebuilt %d posts into %d listing pages",
                len(result.posts),
                len(result.pages),
            )
            return True
        except BuildError as exc:
            logger.error("Build failed: %s", exc)
            return False
        except ConfigError as exc:
            logger.error("Invalid configuration: %s", exc)
            return False
        except OSError as exc:
            logger.error("Could not write output: %s", exc)
            return False
        finally:
            self._rebuilding = False
            self._last_rebuild_at = time.time()

    def _compute_signature(self) -> tuple:
        entries: list[tuple] = []
        config_path = self.project_root / CONFIG_FILENAME
        candidates = [config_path] if config_path.exists() else []
        for root in self._watch_paths():
            if root.exists():
                candidates.extend(sorted(root.rglob("*")))
        for path in candidates:
            if path.is_dir():
                continue
            try:
                stat = path.stat()
            except OSError:
                continue
            rel = path.relative_to(self.project_root)
            entries.append((str(rel), stat.st_mtime_ns, stat.st_size))
        return tuple(entries)


class _ChangeHandler(FileSystemEventHandler):
    def __init__(self, watcher: PostWatcher, include_drafts: bool):
        super().__init__()
        self.watcher = watcher
        self.include_drafts = include_drafts

    def on_any_event(self, event):
        if event.is_directory:
            return
        path = Path(event.src_path)
        if self.watcher.is_ignored(path):
            return
        self.watcher.rebuild(self.include_drafts)
