# tests/test_store.py
"""Tests for ledger persistence."""

import json
import tempfile
from pathlib import Path
from typing import Optional

import pytest

from prodledger import (
    ErrorCode,
    LedgerError,
    LedgerStore,
    ManualClock,
    ProductRegistry,
    RecordingPaymentProvider,
    RegistryState,
    StaticAuthorities,
    Transfer,
)

PRODUCER = "ST1TEST"
AUTHORITY = "ST2TEST"


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


def open_registry(store_dir: Path, clock: Optional[ManualClock] = None) -> ProductRegistry:
    store = LedgerStore(store_dir)
    return ProductRegistry(
        store.load(),
        verifier=StaticAuthorities([PRODUCER]),
        payments=RecordingPaymentProvider(),
        clock=clock or ManualClock(5),
        store=store,
    )


def register(registry: ProductRegistry, fill: int = 0):
    return registry.register_product(
        PRODUCER, bytes([fill]) * 32, "OriginX", 100, "Compliant", "organic",
        90, 365, "LocationY", "STX", 50, 1000, 10,
    )


class TestLedgerStore:
    """Tests for LedgerStore."""

    def test_store_creates_directory(self, temp_dir):
        store = LedgerStore(temp_dir / "nested" / "ledger")
        assert store.store_dir.exists()
        assert not store.exists()

    def test_load_empty(self, temp_dir):
        state = LedgerStore(temp_dir).load()
        assert state.next_product_id == 0
        assert state.registration_fee == 500
        assert state.max_products == 10000

    def test_load_default(self, temp_dir):
        default = RegistryState(max_products=3)
        assert LedgerStore(temp_dir).load(default=default) is default

    def test_state_survives_reload(self, temp_dir):
        registry = open_registry(temp_dir)
        registry.set_authority_contract(AUTHORITY)
        registry.set_registration_fee(700)
        register(registry, 0)
        register(registry, 1)
        registry.update_product(PRODUCER, 1, "Amended", 300, "")

        reloaded = open_registry(temp_dir)
        assert reloaded.get_product_count().value == 2
        assert reloaded.get_authority_contract() == AUTHORITY
        assert reloaded.get_registration_fee() == 700
        assert reloaded.get_product(0) == registry.get_product(0)
        assert reloaded.get_product(1).origin == "Amended"
        assert reloaded.get_product_update(1).updater == PRODUCER
        assert reloaded.check_product_existence(bytes([1]) * 32).value is True

    def test_hash_uniqueness_survives_reload(self, temp_dir):
        registry = open_registry(temp_dir)
        registry.set_authority_contract(AUTHORITY)
        register(registry, 0)

        reloaded = open_registry(temp_dir)
        assert register(reloaded, 0).value == ErrorCode.PRODUCT_ALREADY_EXISTS
        assert register(reloaded, 1).value == 1

    def test_authority_stays_set_after_reload(self, temp_dir):
        open_registry(temp_dir).set_authority_contract(AUTHORITY)
        assert not open_registry(temp_dir).set_authority_contract("ST3OTHER").ok

    def test_duplicate_hash_on_disk_rejected(self, temp_dir):
        registry = open_registry(temp_dir)
        registry.set_authority_contract(AUTHORITY)
        register(registry, 0)
        register(registry, 1)

        path = temp_dir / "ledger.json"
        data = json.loads(path.read_text())
        products = data["ledger"]["products"]
        products["1"]["hash"] = products["0"]["hash"]
        path.write_text(json.dumps(data))

        with pytest.raises(LedgerError) as exc:
            LedgerStore(temp_dir).load()
        assert exc.value.code == ErrorCode.PRODUCT_ALREADY_EXISTS

    def test_transfers_round_trip(self, temp_dir):
        store = LedgerStore(temp_dir)
        assert store.load_transfers() == []
        transfers = [Transfer(500, PRODUCER, AUTHORITY), Transfer(700, PRODUCER, AUTHORITY)]
        store.save_transfers(transfers)
        assert store.load_transfers() == transfers


class FailingStore(LedgerStore):
    def __init__(self, store_dir):
        super().__init__(store_dir)
        self.fail = False

    def save(self, state):
        if self.fail:
            raise OSError("disk full")
        super().save(state)


class TestCommitRollback:
    """A failed write leaves the in-memory ledger as it was."""

    def test_register_rolled_back(self, temp_dir):
        store = FailingStore(temp_dir)
        state = RegistryState()
        payments = RecordingPaymentProvider()
        registry = ProductRegistry(
            state,
            verifier=StaticAuthorities([PRODUCER]),
            payments=payments,
            clock=ManualClock(),
            store=store,
        )
        registry.set_authority_contract(AUTHORITY)

        store.fail = True
        with pytest.raises(OSError):
            register(registry, 0)

        assert state.next_product_id == 0
        assert state.products == {}
        assert registry.check_product_existence(bytes(32)).value is False
        assert payments.transfers == []

        store.fail = False
        assert register(registry, 0).value == 0
        assert payments.transfers == [Transfer(500, PRODUCER, AUTHORITY)]
