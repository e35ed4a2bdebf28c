# tests/test_config.py
"""Tests for YAML ledger configuration."""

import tempfile
from pathlib import Path

import pytest

from prodledger.config import LedgerConfig


class TestLedgerConfig:

    def test_defaults(self):
        config = LedgerConfig.from_yaml("")
        assert config.max_products == 10000
        assert config.registration_fee == 500
        assert config.authorities == []
        assert config.store_dir is None
        assert config.log_level == "WARNING"

    def test_from_yaml(self):
        config = LedgerConfig.from_yaml(
            """
max_products: 25
registration_fee: 1000
store_dir: /var/lib/ledger
log_level: debug
authorities:
  - ST1TEST
  - ST1OTHER
"""
        )
        assert config.max_products == 25
        assert config.registration_fee == 1000
        assert config.store_dir == Path("/var/lib/ledger")
        assert config.log_level == "DEBUG"
        assert config.authorities == ["ST1TEST", "ST1OTHER"]

    def test_from_file(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "ledger.yaml"
            path.write_text("registration_fee: 42\n")
            assert LedgerConfig.from_file(path).registration_fee == 42

    def test_unknown_key(self):
        with pytest.raises(ValueError, match="fee"):
            LedgerConfig.from_yaml("fee: 10\n")

    def test_not_a_mapping(self):
        with pytest.raises(ValueError):
            LedgerConfig.from_yaml("- a\n- b\n")

    def test_negative_cap(self):
        with pytest.raises(ValueError):
            LedgerConfig.from_yaml("max_products: -1\n")

    @pytest.mark.parametrize("text", [
        "max_products: true\n",
        "registration_fee: false\n",
        "max_products: ten\n",
    ])
    def test_rejects_non_integer_counts(self, text):
        with pytest.raises(ValueError):
            LedgerConfig.from_yaml(text)

    def test_new_state(self):
        state = LedgerConfig(max_products=3, registration_fee=9).new_state()
        assert state.max_products == 3
        assert state.registration_fee == 9
        assert state.authority_contract is None
