"""
File watcher for the logger configuration.

Optional continuous watch: monitors the config directory and, after a debounce
delay, runs the same timestamp check as an explicit reload. Changes to any
other file are ignored.
"""

import logging
import threading
from pathlib import Path
from typing import Callable, Optional

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

logger = logging.getLogger(__name__)


class LoggerFileHandler(FileSystemEventHandler):
    """Debounces file system events for a single watched file."""

    def __init__(self, watched_file: Path, callback: Callable[[], None], debounce_ms: int = 500):
        """
        Initialize file handler.

        Args:
            watched_file: File whose changes trigger the callback
            callback: Function to call after the debounce delay
            debounce_ms: Debounce delay in milliseconds
        """
        super().__init__()
        self.watched_file = watched_file
        self.callback = callback
        self.debounce_ms = debounce_ms
        self.timer: Optional[threading.Timer] = None
        self._lock = threading.Lock()

    def _matches(self, event: FileSystemEvent) -> bool:
        if event.is_directory:
            return False
        paths = [event.src_path, getattr(event, "dest_path", "")]
        return any(p and Path(p).name == self.watched_file.name for p in paths)

    def on_modified(self, event: FileSystemEvent):
        if self._matches(event):
            self._schedule()

    def on_created(self, event: FileSystemEvent):
        if self._matches(event):
            self._schedule()

    def on_moved(self, event: FileSystemEvent):
        # Editors often save through a rename
        if self._matches(event):
            self._schedule()

    def _schedule(self):
        logger.debug(f"File modified: {self.watched_file}")
        with self._lock:
            if self.timer:
                self.timer.cancel()
            self.timer = threading.Timer(self.debounce_ms / 1000.0, self._fire)
            self.timer.daemon = True
            self.timer.start()

    def _fire(self):
        try:
            self.callback()
        except Exception as e:
            logger.error(f"Error applying changed logger config: {e}")

    def cancel(self):
        with self._lock:
            if self.timer:
                self.timer.cancel()
                self.timer = None


class FileWatcher:
    """Watches the logger configuration file and triggers re-application."""

    def __init__(self, watched_file: Path, callback: Callable[[], None], debounce_ms: int = 500):
        """
        Initialize file watcher.

        Args:
            watched_file: File to watch (its parent directory is observed)
            callback: Function to call on changes
            debounce_ms: Debounce delay in milliseconds
        """
        self.watched_file = watched_file
        self.callback = callback
        self.debounce_ms = debounce_ms

        self.observer: Optional[Observer] = None
        self.handler: Optional[LoggerFileHandler] = None
        self.running = False

    def start(self):
        """Start file watcher."""
        if self.running:
            logger.warning("File watcher already running")
            return

        logger.info(f"Starting file watcher for {self.watched_file}")

        self.handler = LoggerFileHandler(
            watched_file=self.watched_file,
            callback=self.callback,
            debounce_ms=self.debounce_ms
        )

        self.observer = Observer()
        self.observer.schedule(
            self.handler,
            path=str(self.watched_file.parent),
            recursive=False
        )

        self.observer.start()
        self.running = True

    def stop(self):
        """Stop file watcher."""
        if not self.running:
            return

        logger.info("Stopping file watcher")

        if self.handler:
            self.handler.cancel()

        if self.observer:
            self.observer.stop()
            self.observer.join()

        self.running = False

    def is_running(self) -> bool:
        return self.running
