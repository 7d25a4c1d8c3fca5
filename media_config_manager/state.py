"""
Configuration state tracking for the configuration manager.

Tracks load/reload outcomes and timing for status reporting.
"""

from typing import List, Optional


class ConfigurationState:
    """Tracks load history and telemetry."""

    def __init__(self):
        """Initialize configuration state."""
        self.config_load_timestamp: Optional[float] = None
        self.last_errors: List[dict] = []
        self.file_watcher_active: bool = False
        self.load_count: int = 0
        self.last_load_success: bool = False
        self.logger_applied_count: int = 0

        self.telemetry = self._empty_telemetry()

    @staticmethod
    def _empty_telemetry() -> dict:
        return {
            "total_load_attempts": 0,
            "successful_loads": 0,
            "failed_loads": 0,
            "success_rate_percent": 0.0,
            "average_load_duration_ms": 0,
            "last_load_duration_ms": 0,
            "total_load_time_ms": 0
        }

    def reset(self):
        """Reset state to initial values."""
        self.__init__()

    def record_load_attempt(self, success: bool, duration_ms: int, error: Optional[dict] = None):
        """
        Record load attempt telemetry.

        Args:
            success: Whether a new snapshot was published
            duration_ms: Load duration in milliseconds
            error: Error dictionary of a failed attempt
        """
        self.telemetry["total_load_attempts"] += 1
        self.telemetry["last_load_duration_ms"] = duration_ms
        self.telemetry["total_load_time_ms"] += duration_ms

        self.last_load_success = success
        if success:
            self.telemetry["successful_loads"] += 1
            self.load_count += 1
            self.last_errors = []
        else:
            self.telemetry["failed_loads"] += 1
            self.last_errors = [error] if error else []

        attempts = self.telemetry["total_load_attempts"]
        self.telemetry["success_rate_percent"] = round(
            (self.telemetry["successful_loads"] / attempts) * 100, 2
        )
        self.telemetry["average_load_duration_ms"] = int(
            self.telemetry["total_load_time_ms"] / attempts
        )

    def to_dict(self) -> dict:
        """
        Convert state to dictionary.

        Returns:
            State as dictionary with telemetry
        """
        return {
            "config_load_timestamp": self.config_load_timestamp,
            "last_errors": self.last_errors,
            "file_watcher_active": self.file_watcher_active,
            "load_count": self.load_count,
            "last_load_success": self.last_load_success,
            "logger_applied_count": self.logger_applied_count,
            "telemetry": self.telemetry
        }
