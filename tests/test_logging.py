"""Tests for logging setup."""

import logging

import pytest

from clusterbench.logging_config import ROOT_LOGGER, get_logger, setup_logging


@pytest.fixture(autouse=True)
def restore_root_logger():
    logger = logging.getLogger(ROOT_LOGGER)
    saved = (list(logger.handlers), logger.level, logger.propagate)
    yield
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    handlers, level, propagate = saved
    for handler in handlers:
        logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = propagate


class TestSetupLogging:
    """Test verbosity mapping and handler installation."""

    @pytest.mark.parametrize(
        "verbosity, level",
        [("quiet", logging.ERROR), ("normal", logging.INFO), ("verbose", logging.DEBUG)],
    )
    def test_levels(self, verbosity, level):
        assert setup_logging(verbosity).level == level

    def test_repeated_setup_does_not_stack_handlers(self):
        setup_logging("normal")
        logger = setup_logging("verbose")
        assert len(logger.handlers) == 1

    def test_log_file(self, tmp_path):
        log_file = tmp_path / "bench.log"
        setup_logging("normal", log_file=str(log_file))
        get_logger("benchmarking.harness").info("[acme/widgets] done")
        for handler in logging.getLogger(ROOT_LOGGER).handlers:
            handler.flush()
        assert "[acme/widgets] done" in log_file.read_text()


class TestGetLogger:
    """Test logger naming."""

    def test_root(self):
        assert get_logger().name == ROOT_LOGGER

    def test_prefixed(self):
        assert get_logger("graph").name == "clusterbench.graph"

    def test_module_name_kept(self):
        assert get_logger("clusterbench.graph.ablation").name == "clusterbench.graph.ablation"
