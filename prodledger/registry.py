# prodledger/registry.py
"""
The product registry.

ProductRegistry owns no state of its own: it operates on an injected
RegistryState, asks an AuthorityVerifier who may register, charges fees
through a PaymentProvider and stamps records with a Clock. Every mutating
call holds one lock for its whole transition, including persistence.

Example:
    registry = ProductRegistry(
        RegistryState(),
        verifier=StaticAuthorities(["ST1TEST"]),
        payments=RecordingPaymentProvider(),
        clock=ManualClock(),
    )
    registry.set_authority_contract("ST2TEST")
    result = registry.register_product("ST1TEST", digest, "Valencia", ...)
    product = registry.get_product(result.value)
"""

import dataclasses
import logging
import threading
from typing import Optional

from .authority import AuthorityVerifier, is_valid_principal
from .clock import Clock, SystemClock
from .errors import ErrorCode, Result
from .models import Product, ProductUpdate, RegistryState
from .payments import PaymentProvider
from .store import LedgerStore
from .validation import (
    check_product_fields,
    check_update_fields,
    parse_currency,
    parse_product_type,
)

logger = logging.getLogger(__name__)


class ProductRegistry:
    """Authority-gated, fee-charging registry of products keyed by content hash."""

    def __init__(
        self,
        state: RegistryState,
        verifier: AuthorityVerifier,
        payments: PaymentProvider,
        clock: Optional[Clock] = None,
        store: Optional[LedgerStore] = None,
    ):
        """
        Args:
            state: Ledger state to operate on (shared by reference)
            verifier: Decides which callers may register
            payments: Executes registration fee transfers
            clock: Time source for record timestamps (default: SystemClock)
            store: If given, state is saved after every successful mutation
        """
        self.state = state
        self.verifier = verifier
        self.payments = payments
        self.clock = clock or SystemClock()
        self.store = store
        self._lock = threading.RLock()

    def _commit(self, snapshot: RegistryState) -> None:
        """Persist state, restoring snapshot if the write fails."""
        if self.store is None:
            return
        try:
            self.store.save(self.state)
        except Exception:
            logger.error("Failed to persist ledger, rolling back")
            self.state.restore(snapshot)
            raise

    # Administration

    def set_authority_contract(self, principal: str) -> Result:
        """Set the fee recipient. Allowed once, never to the burn address."""
        with self._lock:
            if not is_valid_principal(principal):
                logger.debug(f"Rejected authority contract {principal!r}: invalid principal")
                return Result.failure(False)
            if self.state.authority_contract is not None:
                logger.debug(
                    f"Rejected authority contract {principal!r}: "
                    f"already set to {self.state.authority_contract}"
                )
                return Result.failure(False)
            snapshot = self.state.copy()
            self.state.authority_contract = principal
            self._commit(snapshot)
        logger.info(f"Authority contract set: {principal}")
        return Result.success(True)

    def set_registration_fee(self, fee: int) -> Result:
        """Change the registration fee. Requires an authority contract."""
        with self._lock:
            if self.state.authority_contract is None:
                logger.debug("Rejected fee change: authority contract not set")
                return Result.failure(False)
            snapshot = self.state.copy()
            self.state.registration_fee = fee
            self._commit(snapshot)
        logger.info(f"Registration fee set: {fee}")
        return Result.success(True)

    # Registration

    def register_product(
        self,
        caller: str,
        hash: bytes,
        origin: str,
        production_date: int,
        compliance_data: str,
        product_type: str,
        quality_rating: int,
        expiry_period: int,
        location: str,
        currency: str,
        min_value: int,
        max_value: int,
        batch_size: int,
    ) -> Result:
        """
        Register a new product and charge the registration fee.

        Checks run in this order and the first failure is returned:
        capacity, field validation (see check_product_fields), caller is a
        verified authority, hash is new, authority contract is set.

        The fee is transferred from caller to the authority contract before
        anything is written; a refused transfer leaves the ledger unchanged,
        and the fee is refunded if the ledger cannot be saved afterwards.

        Returns:
            Result with the new product id, or with the failing ErrorCode
        """
        with self._lock:
            state = self.state

            if state.next_product_id >= state.max_products:
                return self._reject(ErrorCode.MAX_PRODUCTS_EXCEEDED)

            error = check_product_fields(
                hash, origin, production_date, compliance_data, product_type,
                quality_rating, expiry_period, location, currency,
                min_value, max_value, batch_size,
            )
            if error is not None:
                return self._reject(error)

            if not self.verifier.is_verified_authority(caller):
                return self._reject(ErrorCode.NOT_AUTHORIZED)

            hash = bytes(hash)
            if hash in state.products_by_hash:
                return self._reject(ErrorCode.PRODUCT_ALREADY_EXISTS)

            if state.authority_contract is None:
                return self._reject(ErrorCode.AUTHORITY_NOT_VERIFIED)

            fee = state.registration_fee
            if not self.payments.transfer(fee, caller, state.authority_contract):
                logger.warning(
                    f"Registration fee transfer of {fee} from {caller} failed"
                )
                return Result.failure(ErrorCode.TRANSFER_FAILED)

            product_id = state.next_product_id
            product = Product(
                hash=hash,
                origin=origin,
                production_date=production_date,
                compliance_data=compliance_data,
                timestamp=self.clock.now(),
                producer=caller,
                product_type=parse_product_type(product_type),
                quality_rating=quality_rating,
                expiry_period=expiry_period,
                location=location,
                currency=parse_currency(currency),
                status=True,
                min_value=min_value,
                max_value=max_value,
                batch_size=batch_size,
            )

            snapshot = state.copy()
            state.products[product_id] = product
            state.products_by_hash[hash] = product_id
            state.next_product_id = product_id + 1
            try:
                self._commit(snapshot)
            except Exception:
                self.payments.refund(fee, caller, state.authority_contract)
                raise

        logger.info(f"Registered product {product_id} ({hash.hex()[:16]}...) for {caller}")
        return Result.success(product_id)

    def _reject(self, code: ErrorCode) -> Result:
        logger.debug(f"Registration rejected: {code.name}")
        return Result.failure(code)

    # Amendment

    def update_product(
        self,
        caller: str,
        product_id: int,
        new_origin: str,
        new_production_date: int,
        new_compliance_data: str,
    ) -> Result:
        """
        Amend origin, production date and compliance data of a product.

        Only the producer may amend. All other fields, including hash and
        producer, are fixed at registration. The amendment replaces the
        product's ProductUpdate record.

        Failures carry no error code: the Result value is False.
        """
        with self._lock:
            product = self.state.products.get(product_id)
            if product is None:
                return self._reject_update(product_id, "product not found")
            if product.producer != caller:
                return self._reject_update(product_id, f"{caller} is not the producer")
            reason = check_update_fields(new_origin, new_production_date, new_compliance_data)
            if reason is not None:
                return self._reject_update(product_id, reason)

            now = self.clock.now()
            snapshot = self.state.copy()
            self.state.products[product_id] = dataclasses.replace(
                product,
                origin=new_origin,
                production_date=new_production_date,
                compliance_data=new_compliance_data,
                timestamp=now,
            )
            self.state.product_updates[product_id] = ProductUpdate(
                update_origin=new_origin,
                update_production_date=new_production_date,
                update_compliance_data=new_compliance_data,
                update_timestamp=now,
                updater=caller,
            )
            self._commit(snapshot)

        logger.info(f"Updated product {product_id} by {caller}")
        return Result.success(True)

    def _reject_update(self, product_id: int, reason: str) -> Result:
        logger.debug(f"Update of product {product_id} rejected: {reason}")
        return Result.failure(False)

    # Queries

    def get_product(self, product_id: int) -> Optional[Product]:
        return self.state.products.get(product_id)

    def get_product_update(self, product_id: int) -> Optional[ProductUpdate]:
        """The latest amendment of a product, if it was ever amended."""
        return self.state.product_updates.get(product_id)

    def get_product_by_hash(self, hash: bytes) -> Optional[Product]:
        if not isinstance(hash, (bytes, bytearray)):
            return None
        product_id = self.state.products_by_hash.get(bytes(hash))
        if product_id is None:
            return None
        return self.state.products.get(product_id)

    def get_product_count(self) -> Result:
        """Number of successful registrations (also the next id)."""
        return Result.success(self.state.next_product_id)

    def check_product_existence(self, hash: bytes) -> Result:
        if not isinstance(hash, (bytes, bytearray)):
            return Result.success(False)
        return Result.success(bytes(hash) in self.state.products_by_hash)

    def is_verified_authority(self, principal: str) -> Result:
        return Result.success(self.verifier.is_verified_authority(principal))

    def get_registration_fee(self) -> int:
        return self.state.registration_fee

    def get_authority_contract(self) -> Optional[str]:
        return self.state.authority_contract
