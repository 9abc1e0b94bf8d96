"""
Tests for configuration and logging setup.
"""

from __future__ import annotations

import sys

import pytest
from loguru import logger
from pydantic import ValidationError

from tokentx.config import Settings, get_settings, setup_logging
from tokentx.constants import DEFAULT_FIXED_FEE


class TestSettings:
    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        for name in ("TOKENTX_RPC_URL", "TOKENTX_FIXED_FEE", "TOKENTX_NETWORK"):
            monkeypatch.delenv(name, raising=False)

        settings = Settings(_env_file=None)

        assert settings.network == "dev"
        assert settings.rpc_url == "http://127.0.0.1:12381"
        assert settings.fixed_fee == DEFAULT_FIXED_FEE

    def test_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("TOKENTX_RPC_URL", "http://node:2377")
        monkeypatch.setenv("TOKENTX_FIXED_FEE", "500")
        monkeypatch.setenv("TOKENTX_NETWORK", "prod")

        settings = get_settings()

        assert settings.rpc_url == "http://node:2377"
        assert settings.fixed_fee == 500
        assert settings.network == "prod"

    def test_negative_fee_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Settings(fixed_fee=-1)

    def test_unknown_network_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Settings(network="mainnet")


class TestLogging:
    def test_setup_logging_level(self, capsys: pytest.CaptureFixture[str]) -> None:
        setup_logging("warning")
        try:
            logger.info("hidden message")
            logger.warning("visible message")
        finally:
            logger.remove()
            logger.add(lambda message: sys.stderr.write(message))

        captured = capsys.readouterr()
        assert "hidden message" not in captured.err
        assert "visible message" in captured.err
        assert "WARNING" in captured.err
