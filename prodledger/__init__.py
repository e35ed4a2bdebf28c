# prodledger - Authority-gated product registration ledger
#
# Records immutable product records keyed by a 32-byte content hash,
# charges a registration fee per product and lets the original producer
# amend origin, production date and compliance data.
#
# Core concepts:
# - Product: A registered record, keyed by id and by content hash
# - RegistryState: All mutable ledger state, owned by the caller
# - ProductRegistry: The operations, over an injected state
# - AuthorityVerifier: Decides who may register
# - PaymentProvider: Moves the registration fee

from .errors import ErrorCode, LedgerError, Result
from .models import Currency, Product, ProductType, ProductUpdate, RegistryState
from .authority import (
    BURN_PRINCIPAL,
    AuthorityVerifier,
    CallableAuthorities,
    StaticAuthorities,
)
from .payments import PaymentProvider, RecordingPaymentProvider, Transfer
from .clock import Clock, ManualClock, SystemClock
from .registry import ProductRegistry
from .store import LedgerStore
from .config import LedgerConfig
from .hashing import hash_bytes, hash_file, parse_hash

__all__ = [
    # Records
    "Product",
    "ProductUpdate",
    "ProductType",
    "Currency",
    "RegistryState",
    # Results
    "ErrorCode",
    "LedgerError",
    "Result",
    # Registry
    "ProductRegistry",
    "AuthorityVerifier",
    "StaticAuthorities",
    "CallableAuthorities",
    "BURN_PRINCIPAL",
    "PaymentProvider",
    "RecordingPaymentProvider",
    "Transfer",
    "Clock",
    "ManualClock",
    "SystemClock",
    # Persistence and config
    "LedgerStore",
    "LedgerConfig",
    # Hashing
    "hash_bytes",
    "hash_file",
    "parse_hash",
]

__version__ = "0.1.0"
