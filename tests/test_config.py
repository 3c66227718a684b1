"""Tests for configuration and logging setup."""

import logging

import pytest

from loransac import LoRansacParams
from loransac.utils import default_log_level, setup_logger


class TestLoRansacParams:
    """Test parameter defaults and validation."""

    def test_defaults(self):
        params = LoRansacParams()
        assert params.max_iters == 1000
        assert params.confidence == 0.99
        assert params.min_inliers is None
        assert params.lo_rounds == 4
        assert params.weight_eps == 1e-3

    @pytest.mark.parametrize("kwargs", [
        {"max_iters": 0},
        {"confidence": 0.0},
        {"confidence": 1.0},
        {"min_inliers": 0},
        {"lo_rounds": 0},
        {"lo_inner_repetitions": -1},
        {"lo_inner_sample_size": 0},
        {"weight_eps": 0.0},
    ])
    def test_invalid(self, kwargs):
        with pytest.raises(ValueError):
            LoRansacParams(**kwargs)

    def test_frozen(self):
        params = LoRansacParams()
        with pytest.raises(AttributeError):
            params.max_iters = 5


class TestLogger:
    """Test logger setup."""

    def test_debug_env_var(self, monkeypatch):
        monkeypatch.setenv("LORANSAC_DEBUG", "1")
        assert default_log_level() == logging.DEBUG
        monkeypatch.setenv("LORANSAC_DEBUG", "0")
        assert default_log_level() == logging.INFO

    def test_no_duplicate_console_handlers(self):
        logger = setup_logger("loransac.test_setup", log_level=logging.WARNING)
        setup_logger("loransac.test_setup", log_level=logging.WARNING)
        assert len(logger.handlers) == 1
        assert logger.level == logging.WARNING

    def test_file_handler(self, tmp_path):
        log_file = tmp_path / "logs" / "run.log"
        logger = setup_logger("loransac.test_file", log_level=logging.INFO, log_file=str(log_file))
        logger.info("hello")
        for h in logger.handlers:
            h.flush()
        assert "hello" in log_file.read_text()
        for h in list(logger.handlers):
            h.close()
            logger.removeHandler(h)
