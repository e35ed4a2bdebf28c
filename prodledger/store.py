# prodledger/store.py
"""
On-disk persistence for the ledger.

Structure:
    store_dir/
        ledger.json       # Counter, fee, authority, products, updates
        transfers.json    # Fee transfer journal

The hash index is not stored; it is rebuilt from the product table on load,
so the two views cannot drift apart on disk.
"""

import json
import logging
from pathlib import Path
from typing import List, Optional

from .errors import ErrorCode, LedgerError
from .models import (
    DEFAULT_MAX_PRODUCTS,
    DEFAULT_REGISTRATION_FEE,
    Product,
    ProductUpdate,
    RegistryState,
)
from .payments import Transfer

logger = logging.getLogger(__name__)

STORE_VERSION = "1.0"


def state_from_dict(data: dict) -> RegistryState:
    """
    Rebuild RegistryState from its serialized form.

    Raises:
        LedgerError: if two products share a hash or the counter is behind
            the highest stored id
    """
    state = RegistryState(
        next_product_id=data.get("next_product_id", 0),
        max_products=data.get("max_products", DEFAULT_MAX_PRODUCTS),
        registration_fee=data.get("registration_fee", DEFAULT_REGISTRATION_FEE),
        authority_contract=data.get("authority_contract"),
    )
    for pid_str, product_data in data.get("products", {}).items():
        pid = int(pid_str)
        product = Product.from_dict(product_data)
        if product.hash in state.products_by_hash:
            raise LedgerError(
                ErrorCode.PRODUCT_ALREADY_EXISTS,
                f"Duplicate product hash in store: {product.hash_hex}",
            )
        if pid >= state.next_product_id:
            raise LedgerError(None, f"Product id {pid} beyond counter {state.next_product_id}")
        state.products[pid] = product
        state.products_by_hash[product.hash] = pid
    for pid_str, update_data in data.get("product_updates", {}).items():
        state.product_updates[int(pid_str)] = ProductUpdate.from_dict(update_data)
    return state


class LedgerStore:
    """JSON file store for a single ledger."""

    def __init__(self, store_dir: Path | str):
        self.store_dir = Path(store_dir)
        self.store_dir.mkdir(parents=True, exist_ok=True)

    def _ledger_path(self) -> Path:
        return self.store_dir / "ledger.json"

    def _transfers_path(self) -> Path:
        return self.store_dir / "transfers.json"

    def exists(self) -> bool:
        return self._ledger_path().exists()

    def load(self, default: Optional[RegistryState] = None) -> RegistryState:
        """Load the ledger, or return default (a fresh state) if none is stored."""
        path = self._ledger_path()
        if not path.exists():
            return default if default is not None else RegistryState()
        with open(path) as f:
            data = json.load(f)
        state = state_from_dict(data.get("ledger", {}))
        logger.debug(f"Loaded ledger with {len(state.products)} products from {path}")
        return state

    def save(self, state: RegistryState) -> None:
        data = {
            "version": STORE_VERSION,
            "ledger": state.to_dict(),
        }
        with open(self._ledger_path(), "w") as f:
            json.dump(data, f, indent=2)

    def load_transfers(self) -> List[Transfer]:
        path = self._transfers_path()
        if not path.exists():
            return []
        with open(path) as f:
            data = json.load(f)
        return [Transfer.from_dict(t) for t in data.get("transfers", [])]

    def save_transfers(self, transfers: List[Transfer]) -> None:
        data = {
            "version": STORE_VERSION,
            "transfers": [t.to_dict() for t in transfers],
        }
        with open(self._transfers_path(), "w") as f:
            json.dump(data, f, indent=2)
