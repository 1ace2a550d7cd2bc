"""Tests for environment-driven configuration and logging setup."""

import json
import logging

import pytest

from lector.config import LectorConfig
from lector.logging_config import JSONFormatter, configure_logging
from lector.repository import DEFAULT_EXCLUDES


class TestLectorConfig:

    def test_defaults(self):
        config = LectorConfig.from_env({})

        assert config.llm_provider == "gemini"
        assert config.llm_model_id is None
        assert config.max_steps == 15
        assert config.commit_max_length == 72
        assert config.report_filename == "code-review.md"
        assert config.output_dir == "."
        assert config.include_metadata is True
        assert config.exclude_patterns == DEFAULT_EXCLUDES
        assert (config.host, config.port) == ("127.0.0.1", 8000)

    def test_reads_values(self):
        config = LectorConfig.from_env({
            "LLM_PROVIDER": "Anthropic",
            "LLM_MODEL_ID": "claude-3-5-haiku-20241022",
            "LLM_API_KEY": "secret",
            "LECTOR_MAX_STEPS": "5",
            "LECTOR_COMMIT_MAX_LENGTH": "50",
            "LECTOR_REPORT_FILENAME": "demo-review-report.md",
            "LECTOR_OUTPUT_DIR": "/tmp/reviews",
            "LECTOR_INCLUDE_METADATA": "false",
            "LECTOR_EXCLUDE": "dist, *.lock ,,vendor",
            "LECTOR_HOST": "0.0.0.0",
            "LECTOR_PORT": "9000",
        })

        assert config.llm_provider == "anthropic"
        assert config.llm_api_key == "secret"
        assert config.max_steps == 5
        assert config.commit_max_length == 50
        assert config.report_filename == "demo-review-report.md"
        assert config.include_metadata is False
        assert config.exclude_patterns == ("dist", "*.lock", "vendor")
        assert config.port == 9000

    @pytest.mark.parametrize("value", ["many", "0", "-3", ""])
    def test_bad_numbers_fall_back(self, value):
        assert LectorConfig.from_env({"LECTOR_MAX_STEPS": value}).max_steps == 15

    def test_empty_exclude_disables_exclusions(self):
        assert LectorConfig.from_env({"LECTOR_EXCLUDE": ""}).exclude_patterns == ()

    def test_to_dict_hides_api_key(self):
        data = LectorConfig.from_env({"LLM_API_KEY": "secret"}).to_dict()
        assert "secret" not in json.dumps(data)


class TestLogging:

    @pytest.fixture(autouse=True)
    def restore_root_logger(self):
        root = logging.getLogger()
        handlers, level = root.handlers[:], root.level
        yield
        root.handlers[:] = handlers
        root.setLevel(level)

    def test_json_format(self):
        configure_logging(level="debug", format_style="json")

        root = logging.getLogger()
        assert root.level == logging.DEBUG
        assert isinstance(root.handlers[0].formatter, JSONFormatter)
        assert logging.getLogger("git").level == logging.WARNING

    def test_invalid_level_defaults_to_info(self):
        configure_logging(level="chatty", format_style="simple")
        assert logging.getLogger().level == logging.INFO

    def test_json_formatter_output(self):
        record = logging.LogRecord("lector.test", logging.INFO, __file__, 10, "hello %s", ("world",), None)
        data = json.loads(JSONFormatter().format(record))
        assert data["message"] == "hello world"
        assert data["level"] == "INFO"
        assert data["logger"] == "lector.test"
