"""
Unit tests for logging setup
"""

import logging
import pytest
from core.logging import QUIET_LOGGERS, setup_logging


@pytest.fixture(autouse=True)
def restore_logging():
    yield
    setup_logging()


class TestSetupLogging:

    def test_level_name_is_case_insensitive(self):
        assert setup_logging("debug") == logging.DEBUG
        assert logging.getLogger().level == logging.DEBUG

    @pytest.mark.parametrize("level", ["verbose", "basic_format"])
    def test_unknown_level_falls_back_to_info(self, level):
        assert setup_logging(level) == logging.INFO
        assert logging.getLogger().level == logging.INFO

    def test_third_party_loggers_stay_quiet(self):
        setup_logging("DEBUG")

        for name in QUIET_LOGGERS:
            assert logging.getLogger(name).level == logging.WARNING
