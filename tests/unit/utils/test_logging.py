# ABOUTME: Unit tests for structured logging utilities
# ABOUTME: Validates loguru configuration, convenience functions, and context attachment

import sys
import tempfile
from pathlib import Path
from unittest.mock import patch

import pytest
from loguru import logger

from scaffold.config import settings as settings_module
from scaffold.utils.logging import (
    DEFAULT_FORMAT,
    get_logger,
    log_status_transition,
    log_turn_event,
    setup_logging,
)


@pytest.fixture(autouse=True)
def reset_logger():
    """Reset logger state before each test"""
    logger.remove()
    yield
    logger.remove()


@pytest.fixture
def temp_log_dir():
    """Create a temporary directory for log files"""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


def read_log(log_dir: Path) -> str:
    """Flush pending writes and return the first log file's content"""
    logger.complete()
    log_files = list(log_dir.glob("*.log"))
    assert len(log_files) > 0
    return log_files[0].read_text()


class TestSetupLogging:
    """Test suite for setup_logging function"""

    def test_valid_log_levels(self):
        """Test that all valid log levels are accepted"""
        for level in ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]:
            logger.remove()
            setup_logging(log_level=level, console_output=True, file_output=False)

    def test_log_level_case_insensitive(self):
        """Test that log level is case-insensitive"""
        for level in ["debug", "Debug", "DEBUG", "DeBuG"]:
            logger.remove()
            setup_logging(log_level=level, console_output=True, file_output=False)

    def test_invalid_log_level_raises_error(self):
        """Test that invalid log level raises ValueError"""
        with pytest.raises(ValueError, match="Invalid log level"):
            setup_logging(log_level="INVALID")

        with pytest.raises(ValueError, match="Invalid log level"):
            setup_logging(log_level="TRACE")  # Valid in loguru but not in our API

    def test_console_output_enabled(self):
        """Test that console output goes to stderr"""
        with patch.object(logger, 'add') as mock_add:
            setup_logging(log_level="INFO", console_output=True, file_output=False)

            assert mock_add.called
            assert mock_add.call_args[0][0] == sys.stderr

    def test_console_output_disabled(self):
        """Test that no handlers are added when both outputs are off"""
        with patch.object(logger, 'add') as mock_add:
            setup_logging(log_level="INFO", console_output=False, file_output=False)
            assert not mock_add.called

    def test_file_output_enabled(self, temp_log_dir):
        """Test that file output writes a dated scaffold log"""
        setup_logging(
            log_level="INFO",
            log_dir=temp_log_dir,
            console_output=False,
            file_output=True
        )
        logger.info("test message")
        logger.complete()

        log_files = list(temp_log_dir.glob("scaffold_*.log"))
        assert len(log_files) == 1

    def test_file_output_disabled(self, temp_log_dir):
        """Test that file output can be disabled"""
        setup_logging(
            log_level="INFO",
            log_dir=temp_log_dir,
            console_output=False,
            file_output=False
        )
        logger.info("test message")

        assert list(temp_log_dir.glob("*.log")) == []

    def test_log_directory_creation(self, temp_log_dir):
        """Test that nested log directories are created"""
        nested_dir = temp_log_dir / "nested" / "logs"

        setup_logging(
            log_level="INFO",
            log_dir=nested_dir,
            console_output=False,
            file_output=True
        )

        assert nested_dir.exists()

    def test_custom_format_string(self):
        """Test that custom format string is used"""
        custom_format = "{time} | {level} | {message}"

        with patch.object(logger, 'add') as mock_add:
            setup_logging(
                log_level="INFO",
                console_output=True,
                file_output=False,
                format_string=custom_format
            )
            assert mock_add.call_args[1]['format'] == custom_format

    def test_default_format_string(self):
        """Test that the structured format is the default"""
        with patch.object(logger, 'add') as mock_add:
            setup_logging(log_level="INFO", console_output=True, file_output=False)
            assert mock_add.call_args[1]['format'] == DEFAULT_FORMAT

    def test_file_handler_options(self, temp_log_dir):
        """Test that rotation, retention and compression reach the file handler"""
        with patch.object(logger, 'add') as mock_add:
            setup_logging(
                log_level="INFO",
                log_dir=temp_log_dir,
                console_output=False,
                file_output=True,
                rotation="50 MB",
                retention="7 days",
                compression="gz"
            )

            kwargs = mock_add.call_args[1]
            assert kwargs['rotation'] == "50 MB"
            assert kwargs['retention'] == "7 days"
            assert kwargs['compression'] == "gz"

    def test_log_level_filtering(self, temp_log_dir):
        """Test that messages below the configured level are dropped"""
        setup_logging(log_level="WARNING", console_output=False, file_output=True, log_dir=temp_log_dir)

        logger.info("info message")
        logger.warning("warning message")

        content = read_log(temp_log_dir)
        assert "info message" not in content
        assert "warning message" in content


class TestSettingsDefaults:
    """Test suite for defaults taken from Settings"""

    @pytest.fixture(autouse=True)
    def fresh_settings(self, monkeypatch):
        """Force get_settings() to re-read the environment"""
        monkeypatch.setattr(settings_module, "_settings", None)

    def test_level_from_settings(self, monkeypatch, temp_log_dir):
        """Test that SCAFFOLD_LOG_LEVEL applies when no level is passed"""
        monkeypatch.setenv("SCAFFOLD_LOG_LEVEL", "warning")
        setup_logging(console_output=False, file_output=True, log_dir=temp_log_dir)

        logger.info("info message")
        logger.warning("warning message")

        content = read_log(temp_log_dir)
        assert "info message" not in content
        assert "warning message" in content

    def test_explicit_level_wins(self, monkeypatch, temp_log_dir):
        """Test that an explicit level overrides the setting"""
        monkeypatch.setenv("SCAFFOLD_LOG_LEVEL", "ERROR")
        setup_logging(log_level="INFO", console_output=False, file_output=True, log_dir=temp_log_dir)

        logger.info("info message")

        assert "info message" in read_log(temp_log_dir)

    def test_log_dir_from_settings(self, monkeypatch, temp_log_dir):
        """Test that SCAFFOLD_LOG_DIR applies when no directory is passed"""
        target = temp_log_dir / "from_env"
        monkeypatch.setenv("SCAFFOLD_LOG_DIR", str(target))
        setup_logging(log_level="INFO", console_output=False, file_output=True)

        logger.info("test message")

        assert "test message" in read_log(target)


class TestGetLogger:
    """Test suite for get_logger function"""

    def test_returns_loguru_logger(self):
        """Test that get_logger returns the shared loguru logger"""
        assert get_logger() is logger


class TestLogTurnEvent:
    """Test suite for log_turn_event convenience function"""

    def test_attaches_status_and_turn(self):
        """Test that status and turn context are attached"""
        with patch.object(logger, 'bind') as mock_bind:
            mock_bind.return_value = logger

            log_turn_event(message="Turn started", status="playing", turn_number=4)

            call_kwargs = mock_bind.call_args[1]
            assert call_kwargs['status'] == "playing"
            assert call_kwargs['turn'] == 4

    def test_attaches_player_id_when_provided(self):
        """Test that player_id is attached when provided"""
        with patch.object(logger, 'bind') as mock_bind:
            mock_bind.return_value = logger

            log_turn_event(
                message="Turn started",
                status="playing",
                turn_number=4,
                player_id="2"
            )

            assert mock_bind.call_args[1]['player_id'] == "2"

    def test_omits_player_id_when_not_provided(self):
        """Test that player_id is omitted when not provided"""
        with patch.object(logger, 'bind') as mock_bind:
            mock_bind.return_value = logger

            log_turn_event(message="Turn started", status="playing", turn_number=4)

            assert 'player_id' not in mock_bind.call_args[1]

    def test_accepts_extra_context_kwargs(self):
        """Test that extra keyword arguments are included in context"""
        with patch.object(logger, 'bind') as mock_bind:
            mock_bind.return_value = logger

            log_turn_event(
                message="Turn started",
                status="playing",
                turn_number=4,
                instruction="ADD",
                turn_seconds=21
            )

            call_kwargs = mock_bind.call_args[1]
            assert call_kwargs['instruction'] == "ADD"
            assert call_kwargs['turn_seconds'] == 21

    def test_logs_at_warning_level(self, temp_log_dir):
        """Test that the requested level is used"""
        setup_logging(log_level="INFO", console_output=False, file_output=True, log_dir=temp_log_dir)

        log_turn_event(
            message="Turn timed out",
            status="playing",
            turn_number=7,
            level="warning"
        )

        content = read_log(temp_log_dir)
        assert "Turn timed out" in content
        assert "WARNING" in content

    def test_debug_dropped_at_info(self, temp_log_dir):
        """Test that DEBUG events respect the configured level"""
        setup_logging(log_level="INFO", console_output=False, file_output=True, log_dir=temp_log_dir)

        log_turn_event(message="noisy detail", status="playing", turn_number=1, level="DEBUG")
        log_turn_event(message="visible", status="playing", turn_number=1)

        content = read_log(temp_log_dir)
        assert "noisy detail" not in content
        assert "visible" in content


class TestLogStatusTransition:
    """Test suite for log_status_transition convenience function"""

    def test_attaches_transition_context(self):
        """Test that from/to status and turn are attached"""
        with patch.object(logger, 'bind') as mock_bind:
            mock_bind.return_value = logger

            log_status_transition(from_status="playing", to_status="finished", turn_number=12)

            call_kwargs = mock_bind.call_args[1]
            assert call_kwargs['from_status'] == "playing"
            assert call_kwargs['to_status'] == "finished"
            assert call_kwargs['turn'] == 12
            assert 'game_time_remaining' not in call_kwargs

    def test_attaches_game_time_when_provided(self):
        """Test that zero seconds remaining is still attached"""
        with patch.object(logger, 'bind') as mock_bind:
            mock_bind.return_value = logger

            log_status_transition(
                from_status="playing",
                to_status="finished",
                turn_number=12,
                game_time_remaining=0
            )

            assert mock_bind.call_args[1]['game_time_remaining'] == 0

    def test_logs_transition_message(self, temp_log_dir):
        """Test that the transition message is written"""
        setup_logging(log_level="INFO", console_output=False, file_output=True, log_dir=temp_log_dir)

        log_status_transition(from_status="setup", to_status="playing", turn_number=1)

        content = read_log(temp_log_dir)
        assert "Status transition: setup -> playing" in content
