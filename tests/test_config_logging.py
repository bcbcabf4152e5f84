import json
import logging
import os
import sys
from decimal import Decimal
from pathlib import Path

import pytest

# Ensure project root on path for direct module imports
sys.path.insert(0, os.path.abspath(os.path.join(Path(__file__).resolve().parent, "..")))

from errors import ConfigurationError
from log_config import JsonFormatter, setup_logging
from settings import DEFAULT_DATA_FILE, PlannerConfig


@pytest.fixture
def clean_env(monkeypatch):
    for name in (
        "PAYOFF_DATA_FILE",
        "PAYOFF_LOG_LEVEL",
        "PAYOFF_LOG_FORMAT",
        "PAYOFF_DEFAULT_EXTRA",
    ):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_default_config(clean_env):
    config = PlannerConfig.from_env()
    assert config.data_file == DEFAULT_DATA_FILE
    assert config.data_file.name == "financial_data.json"
    assert config.log_level == "WARNING"
    assert config.log_format == "standard"
    assert config.default_extra_payment == 0


def test_config_from_env(clean_env, tmp_path):
    clean_env.setenv("PAYOFF_DATA_FILE", str(tmp_path / "debts.json"))
    clean_env.setenv("PAYOFF_LOG_LEVEL", "DEBUG")
    clean_env.setenv("PAYOFF_LOG_FORMAT", "JSON")
    clean_env.setenv("PAYOFF_DEFAULT_EXTRA", "150.50")
    config = PlannerConfig.from_env()
    assert config.data_file == tmp_path / "debts.json"
    assert config.log_level == "DEBUG"
    assert config.log_format == "json"
    assert config.default_extra_payment == Decimal("150.50")


@pytest.mark.parametrize("value", ["abc", "-5", "Infinity"])
def test_bad_default_extra(clean_env, value):
    clean_env.setenv("PAYOFF_DEFAULT_EXTRA", value)
    with pytest.raises(ConfigurationError):
        PlannerConfig.from_env()


def test_bad_log_format(clean_env):
    clean_env.setenv("PAYOFF_LOG_FORMAT", "xml")
    with pytest.raises(ConfigurationError, match="PAYOFF_LOG_FORMAT"):
        PlannerConfig.from_env()


def test_setup_logging_sets_levels():
    setup_logging("DEBUG")
    assert logging.getLogger().level == logging.DEBUG
    assert logging.getLogger("payoff").level == logging.DEBUG
    setup_logging("bogus")
    assert logging.getLogger().level == logging.WARNING
    assert logging.getLogger("payoff").level == logging.WARNING


def test_setup_logging_json_handler():
    setup_logging("INFO", "json")
    handlers = logging.getLogger().handlers
    assert len(handlers) == 1
    assert isinstance(handlers[0].formatter, JsonFormatter)
    setup_logging("WARNING")


def test_json_formatter_output():
    record = logging.LogRecord(
        name="payoff",
        level=logging.WARNING,
        pathname=__file__,
        lineno=1,
        msg="%s did not pay off",
        args=("Debt Avalanche",),
        exc_info=None,
    )
    data = json.loads(JsonFormatter().format(record))
    assert data["level"] == "WARNING"
    assert data["logger"] == "payoff"
    assert data["message"] == "Debt Avalanche did not pay off"
    assert "timestamp" in data
