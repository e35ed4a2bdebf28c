# tests/test_cli.py
"""Tests for the prodledger command line."""

import json
import tempfile
from pathlib import Path

import pytest

from prodledger.cli import main
from prodledger.hashing import hash_file

HASH_HEX = "00" * 32


@pytest.fixture
def ledger_dir():
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def config_file(ledger_dir):
    path = ledger_dir / "ledger.yaml"
    path.write_text(
        f"store_dir: {ledger_dir / 'store'}\n"
        "authorities:\n"
        "  - ST1TEST\n"
    )
    return path


def run(config_file, *argv):
    return main(["--config", str(config_file), "--time", "7", *argv])


def register_args(hash_hex=HASH_HEX):
    return [
        "register", "--caller", "ST1TEST", "--hash", hash_hex,
        "--origin", "OriginX", "--production-date", "100", "--compliance", "Compliant",
        "--type", "organic", "--quality", "90", "--expiry", "365",
        "--location", "LocationY", "--currency", "STX",
        "--min", "50", "--max", "1000", "--batch", "10",
    ]


class TestCli:

    def test_no_command(self, capsys):
        assert main([]) == 1

    def test_register_without_authority_contract(self, config_file, capsys):
        assert run(config_file, *register_args()) == 1
        assert "AUTHORITY_NOT_VERIFIED" in capsys.readouterr().err

    def test_register_show_count(self, config_file, ledger_dir, capsys):
        assert run(config_file, "set-authority", "ST2TEST") == 0
        capsys.readouterr()
        assert run(config_file, *register_args()) == 0
        out = capsys.readouterr().out
        assert json.loads(out) == {"id": 0, "hash": HASH_HEX}

        assert run(config_file, "show", "0") == 0
        shown = json.loads(capsys.readouterr().out)
        assert shown["origin"] == "OriginX"
        assert shown["timestamp"] == 7
        assert shown["producer"] == "ST1TEST"

        assert run(config_file, "count") == 0
        assert capsys.readouterr().out.strip() == "1"

        assert run(config_file, "transfers") == 0
        transfers = json.loads(capsys.readouterr().out)
        assert transfers == [{"amount": 500, "sender": "ST1TEST", "recipient": "ST2TEST"}]

    def test_duplicate_register(self, config_file, capsys):
        run(config_file, "set-authority", "ST2TEST")
        run(config_file, *register_args())
        capsys.readouterr()
        assert run(config_file, *register_args()) == 1
        assert "PRODUCT_ALREADY_EXISTS" in capsys.readouterr().err

    def test_update(self, config_file, capsys):
        run(config_file, "set-authority", "ST2TEST")
        run(config_file, *register_args())
        assert run(
            config_file, "update", "0", "--caller", "ST1TEST",
            "--origin", "NewOrigin", "--production-date", "200",
        ) == 0
        assert run(
            config_file, "update", "0", "--caller", "ST9OTHER",
            "--origin", "Other", "--production-date", "200",
        ) == 1
        capsys.readouterr()

        run(config_file, "show", "0")
        shown = json.loads(capsys.readouterr().out)
        assert shown["origin"] == "NewOrigin"
        assert shown["last_update"]["updater"] == "ST1TEST"

    def test_exists(self, config_file, capsys):
        assert run(config_file, "exists", HASH_HEX) == 1
        run(config_file, "set-authority", "ST2TEST")
        run(config_file, *register_args())
        capsys.readouterr()
        assert run(config_file, "exists", HASH_HEX) == 0
        assert capsys.readouterr().out.strip() == "true"

    def test_bad_hash(self, config_file, capsys):
        assert run(config_file, "exists", "nothex") == 2

    def test_set_fee(self, config_file, capsys):
        assert run(config_file, "set-fee", "900") == 1
        run(config_file, "set-authority", "ST2TEST")
        assert run(config_file, "set-fee", "900") == 0
        run(config_file, *register_args())
        capsys.readouterr()
        run(config_file, "transfers")
        assert json.loads(capsys.readouterr().out)[0]["amount"] == 900

    def test_register_from_file(self, config_file, ledger_dir, capsys):
        label = ledger_dir / "label.txt"
        label.write_text("batch 42")
        run(config_file, "set-authority", "ST2TEST")
        args = register_args()
        capsys.readouterr()
        hash_index = args.index("--hash")
        args[hash_index:hash_index + 2] = ["--file", str(label)]
        assert run(config_file, *args) == 0
        assert json.loads(capsys.readouterr().out)["hash"] == hash_file(label).hex()

    def test_hash_command(self, ledger_dir, capsys):
        label = ledger_dir / "label.txt"
        label.write_text("batch 42")
        assert main(["hash", str(label)]) == 0
        assert capsys.readouterr().out.strip() == hash_file(label).hex()

    def test_register_missing_file(self, config_file, ledger_dir, capsys):
        run(config_file, "set-authority", "ST2TEST")
        capsys.readouterr()
        args = register_args()
        hash_index = args.index("--hash")
        args[hash_index:hash_index + 2] = ["--file", str(ledger_dir / "missing.pdf")]
        assert run(config_file, *args) == 2
        assert capsys.readouterr().err.startswith("ERROR:")
        assert run(config_file, "count") == 0
        assert capsys.readouterr().out.strip() == "0"
