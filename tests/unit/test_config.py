"""
Unit tests for configuration and logging utilities.
"""

import logging
from pathlib import Path

import pytest

from registry_sync.utils.config import Config, SecureString
from registry_sync.utils.logger import SensitiveDataFilter, mask_sensitive, setup_logger


ENV_VARS = [
    "REGISTRY_BASE_URL",
    "REGISTRY_USERNAME",
    "REGISTRY_PASSWORD",
    "LESSON_DURATION_MINUTES",
    "EXTRA_LESSON_ACTION",
    "APPLY_MAX_RETRIES",
    "CIRCUIT_BREAKER_THRESHOLD",
    "OUTPUT_DIR",
    "LOG_LEVEL",
]


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Environment without any registry settings and no .env file."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    return monkeypatch


class TestSecureString:
    """Test cases for SecureString."""

    def test_value_is_masked(self):
        password = SecureString("hunter22")

        assert str(password) == "********"
        assert "hunter22" not in repr(password)
        assert password.get_value() == "hunter22"

    def test_equality(self):
        assert SecureString("a") == SecureString("a")
        assert SecureString("a") != "a"


class TestConfig:
    """Test cases for Config."""

    def test_defaults(self, clean_env):
        config = Config()

        assert config.registry_base_url == "http://crd.usm.md/studregistry/"
        assert config.registry_username is None
        assert config.registry_password is None
        assert config.lesson_duration == 90
        assert config.extra_lesson_action == "leave_alone"
        assert config.apply_max_retries == 3
        assert config.circuit_breaker_threshold == 3
        assert config.output_dir == Path("output")
        assert config.log_level == "INFO"
        assert config.validate()

    def test_values_from_environment(self, clean_env):
        clean_env.setenv("REGISTRY_BASE_URL", "https://registry.example.edu/")
        clean_env.setenv("REGISTRY_USERNAME", "i.popescu")
        clean_env.setenv("REGISTRY_PASSWORD", "hunter22")
        clean_env.setenv("EXTRA_LESSON_ACTION", "DELETE")
        clean_env.setenv("LOG_LEVEL", "debug")

        config = Config()

        assert config.registry_base_url == "https://registry.example.edu/"
        assert isinstance(config.registry_password, SecureString)
        assert config.registry_password.get_value() == "hunter22"
        assert config.extra_lesson_action == "delete"
        assert config.log_level == "DEBUG"
        assert config.validate()

    @pytest.mark.parametrize("url", ["ftp://registry", "registry.example.edu", "http://"])
    def test_invalid_url_rejected(self, clean_env, url):
        clean_env.setenv("REGISTRY_BASE_URL", url)

        with pytest.raises(ValueError):
            Config()

    def test_non_integer_rejected(self, clean_env):
        clean_env.setenv("APPLY_MAX_RETRIES", "three")

        with pytest.raises(ValueError, match="APPLY_MAX_RETRIES"):
            Config()

    @pytest.mark.parametrize("name, value, message", [
        ("LESSON_DURATION_MINUTES", "0", "LESSON_DURATION_MINUTES"),
        ("EXTRA_LESSON_ACTION", "archive", "EXTRA_LESSON_ACTION"),
        ("APPLY_MAX_RETRIES", "0", "APPLY_MAX_RETRIES"),
        ("CIRCUIT_BREAKER_THRESHOLD", "-1", "CIRCUIT_BREAKER_THRESHOLD"),
        ("LOG_LEVEL", "VERBOSE", "LOG_LEVEL"),
        ("REGISTRY_PASSWORD", "hunter22", "REGISTRY_USERNAME is required"),
    ])
    def test_validate_rejects(self, clean_env, name, value, message):
        clean_env.setenv(name, value)

        with pytest.raises(ValueError, match=message):
            Config().validate()

    def test_create_output_directories(self, clean_env, tmp_path):
        clean_env.setenv("OUTPUT_DIR", str(tmp_path / "out"))

        Config().create_output_directories()

        assert (tmp_path / "out" / "reports").is_dir()
        assert (tmp_path / "out" / "logs").is_dir()

    def test_create_output_directories_under_given_dir(self, clean_env, tmp_path):
        Config().create_output_directories(tmp_path / "run")

        assert (tmp_path / "run" / "reports").is_dir()
        assert (tmp_path / "run" / "logs").is_dir()
        assert not (tmp_path / "output").exists()


class TestLogging:
    """Test cases for log masking."""

    @pytest.mark.parametrize("message, secret", [
        ("login password=hunter22", "hunter22"),
        ('payload {"password": "hunter22"}', "hunter22"),
        ("cookie PHPSESSID=abc123; path=/", "abc123"),
        ("form _csrf_token=f00dfeed", "f00dfeed"),
        ("Authorization: Bearer abc.def", "abc.def"),
    ])
    def test_mask_sensitive(self, message, secret):
        assert secret not in mask_sensitive(message)

    def test_plain_text_untouched(self):
        message = "Applied 3 commands to lesson/edit/7"

        assert mask_sensitive(message) == message

    def test_filter_masks_arguments(self):
        record = logging.LogRecord(
            "registry_sync", logging.INFO, __file__, 1,
            "Logging in with pwd=%s", ("hunter22",), None
        )

        assert SensitiveDataFilter().filter(record)
        assert "hunter22" not in record.getMessage()

    def test_setup_logger_file_output(self, tmp_path):
        log_file = tmp_path / "logs" / "sync.log"
        logger = setup_logger("registry_sync.test_file", level="DEBUG", log_file=str(log_file))

        logger.info("password=hunter22")
        for handler in logger.handlers:
            handler.flush()

        content = log_file.read_text(encoding="utf-8")
        assert "password: ********" in content
        assert "hunter22" not in content

    def test_setup_logger_is_idempotent(self):
        first = setup_logger("registry_sync.test_idempotent")
        second = setup_logger("registry_sync.test_idempotent")

        assert first is second
        assert len(second.handlers) == 1
