"""
Log control tests.
"""

import logging

from media_config_manager.log_control import LogControl


class TestLevelRules:

    def test_unknown_level_rejected(self, log_control):
        assert log_control.set_enable("Thread", "loud") is False

    def test_invalid_pattern_rejected(self, log_control):
        assert log_control.set_enable("[unclosed", "info") is False

    def test_last_matching_rule_wins(self, log_control):
        log_control.set_enable(".*", "error")
        log_control.set_enable("RTMP.*", "debug")

        assert log_control.level_for("RTMPProvider") == logging.DEBUG
        assert log_control.level_for("HLS") == logging.ERROR

    def test_warn_alias(self, log_control):
        log_control.set_enable("Thread", "WARN")

        assert log_control.level_for("Thread") == logging.WARNING

    def test_disabled_tag_is_silent(self, log_control):
        log_control.set_enable("Noisy", "debug", enable=False)

        assert log_control.level_for("Noisy") > logging.CRITICAL

    def test_existing_loggers_updated(self, log_control):
        tag_logger = log_control.get_logger("Provider")
        assert tag_logger.level == log_control.default_level

        log_control.set_enable("Provider", "debug")

        assert tag_logger.level == logging.DEBUG

    def test_reset_restores_defaults(self, log_control):
        tag_logger = log_control.get_logger("Provider")
        log_control.set_enable("Provider", "critical")

        log_control.reset_enable()

        assert log_control.level_for("Provider") == log_control.default_level
        assert tag_logger.level == logging.NOTSET


class TestSinks:

    def test_redirect_creates_directory(self, temp_config_dir):
        control = LogControl(root_name="media_test_sinks")
        target = temp_config_dir / "nested" / "logs"

        try:
            control.redirect_all(target)

            assert target.is_dir()
            handlers = logging.getLogger("media_test_sinks").handlers
            assert len([h for h in handlers if getattr(h, "_media_sink", False)]) == 1

            control.set_path(target)
            handlers = logging.getLogger("media_test_sinks").handlers
            assert len([h for h in handlers if getattr(h, "_media_sink", False)]) == 1
        finally:
            control.close()

        assert not logging.getLogger("media_test_sinks").handlers
