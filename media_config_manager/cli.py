#!/usr/bin/env python3
"""
Media Config Manager CLI

Command-line interface for loading, inspecting and saving server configuration.
"""

import argparse
import json
import logging
import sys
import threading
from pathlib import Path
from typing import List, Optional

from . import __version__
from .config.serializer import tree_to_string
from .errors import ConfigError
from .log_control import setup_logging
from .manager import ConfigManager
from .models import LoadResult
from .settings import ManagerSettings

logger = logging.getLogger(__name__)


class MediaConfigCLI:
    """CLI front end for ConfigManager."""

    def __init__(self, settings: Optional[ManagerSettings] = None):
        """Initialize CLI."""
        self.settings = settings or ManagerSettings.from_env()
        self.manager: Optional[ConfigManager] = None

    def _load(self, args) -> LoadResult:
        self.manager = ConfigManager(settings=self.settings)
        config_dir = Path(args.config_dir) if args.config_dir else None
        result = self.manager.load_configs(config_dir)

        for warning in result.warnings:
            print(f"⚠️  {warning}", file=sys.stderr)

        if not result.success:
            print("❌ Configuration load failed", file=sys.stderr)
            print(result.message, file=sys.stderr)
            if result.suggestion:
                print(f"  → {result.suggestion}", file=sys.stderr)

        return result

    def cmd_check(self, args) -> int:
        """Load and validate configuration."""
        result = self._load(args)
        if not result.success:
            return 1

        snapshot = self.manager.snapshot
        print(f"✅ {snapshot.root_name}.xml v{snapshot.version} loaded from {result.config_dir}")
        print(f"   Server ID: {snapshot.server_id}")
        return 0

    def cmd_show(self, args) -> int:
        """Print the loaded configuration."""
        if not self._load(args).success:
            return 1

        if args.format == "json":
            print(json.dumps(self.manager.get_current_config_as_json(), indent=2))
        else:
            print(tree_to_string(self.manager.get_current_config_as_xml()))
        return 0

    def cmd_save(self, args) -> int:
        """Write the loaded configuration back to disk."""
        if not self._load(args).success:
            return 1

        output = Path(args.output) if args.output else None
        if self.manager.save_current_config(output):
            print("✅ Configuration saved")
            return 0

        print("❌ Could not save configuration", file=sys.stderr)
        return 1

    def cmd_status(self, args) -> int:
        """Load configuration and print manager state."""
        result = self._load(args)
        status = {
            "result": result.model_dump(mode="json"),
            "state": self.manager.state.to_dict(),
            "server_id": self.manager.server_id,
        }
        print(json.dumps(status, indent=2))
        return 0 if result.success else 1

    def cmd_watch(self, args) -> int:
        """Load configuration, then re-apply Logger.xml whenever it changes."""
        if not self._load(args).success:
            return 1

        try:
            self.manager.start_watching(debounce_ms=args.debounce_ms)
        except ConfigError as e:
            print(f"❌ {e.message}", file=sys.stderr)
            return 1

        print(f"👀 Watching {self.manager.config_dir} (Ctrl+C to stop)")
        try:
            threading.Event().wait()
        finally:
            self.manager.close()
        return 0

    def run(self, argv: Optional[List[str]] = None) -> int:
        """Run CLI."""
        parser = argparse.ArgumentParser(
            description="Media server configuration manager",
            prog="media-config"
        )
        parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
        parser.add_argument("--config-dir", help="Configuration directory (default: $MEDIA_CONFIG_DIR or <install>/conf)")
        parser.add_argument("--log-level", default=None, help="Console log level")

        subparsers = parser.add_subparsers(dest="command", help="Command to execute")

        subparsers.add_parser("check", help="Load and validate configuration")

        show_parser = subparsers.add_parser("show", help="Show current configuration")
        show_parser.add_argument("--format", choices=["json", "xml"], default="xml")

        save_parser = subparsers.add_parser("save", help="Save current configuration")
        save_parser.add_argument("--output", help="Target file (default: LastAppliedConfig.xml)")

        subparsers.add_parser("status", help="Show load result and telemetry as JSON")

        watch_parser = subparsers.add_parser("watch", help="Re-apply Logger.xml on change")
        watch_parser.add_argument("--debounce-ms", type=int, default=500)

        args = parser.parse_args(argv)

        if not args.command:
            parser.print_help()
            return 1

        setup_logging(args.log_level or self.settings.log_level)

        cmd_map = {
            "check": self.cmd_check,
            "show": self.cmd_show,
            "save": self.cmd_save,
            "status": self.cmd_status,
            "watch": self.cmd_watch,
        }

        try:
            return cmd_map[args.command](args)
        except KeyboardInterrupt:
            print("\nInterrupted")
            return 130


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    return MediaConfigCLI().run(argv)


if __name__ == "__main__":
    sys.exit(main())
