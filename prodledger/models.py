# prodledger/models.py
"""
Ledger records.

A Product is keyed by an integer id and by its 32-byte content hash.
Records are frozen: an update builds a replacement record, so readers
always see a whole product and never a half-applied amendment.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional

DEFAULT_MAX_PRODUCTS = 10000
DEFAULT_REGISTRATION_FEE = 500


class ProductType(str, Enum):
    """How a product was made."""
    ORGANIC = "organic"
    MANUFACTURED = "manufactured"
    PROCESSED = "processed"


class Currency(str, Enum):
    """Currency the product's value range is quoted in."""
    STX = "STX"
    USD = "USD"
    BTC = "BTC"


@dataclass(frozen=True)
class Product:
    """
    A registered product.

    Attributes:
        hash: 32-byte content hash, unique across the ledger
        origin: Where the product comes from (1-100 chars)
        production_date: Production timestamp (positive)
        compliance_data: Free-form compliance notes (up to 200 chars)
        timestamp: Ledger time of registration or of the last amendment
        producer: Principal that registered the product
        product_type: organic, manufactured or processed
        quality_rating: 0-100
        expiry_period: Shelf life (positive)
        location: Where the product is held (1-100 chars)
        currency: STX, USD or BTC
        status: Active flag, True at creation
        min_value: Lower bound of the value range (positive)
        max_value: Upper bound of the value range (positive)
        batch_size: Units in the batch (positive)
    """
    hash: bytes
    origin: str
    production_date: int
    compliance_data: str
    timestamp: int
    producer: str
    product_type: ProductType
    quality_rating: int
    expiry_period: int
    location: str
    currency: Currency
    status: bool
    min_value: int
    max_value: int
    batch_size: int

    @property
    def hash_hex(self) -> str:
        return self.hash.hex()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "hash": self.hash.hex(),
            "origin": self.origin,
            "production_date": self.production_date,
            "compliance_data": self.compliance_data,
            "timestamp": self.timestamp,
            "producer": self.producer,
            "product_type": self.product_type.value,
            "quality_rating": self.quality_rating,
            "expiry_period": self.expiry_period,
            "location": self.location,
            "currency": self.currency.value,
            "status": self.status,
            "min_value": self.min_value,
            "max_value": self.max_value,
            "batch_size": self.batch_size,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Product":
        return cls(
            hash=bytes.fromhex(data["hash"]),
            origin=data["origin"],
            production_date=data["production_date"],
            compliance_data=data.get("compliance_data", ""),
            timestamp=data["timestamp"],
            producer=data["producer"],
            product_type=ProductType(data["product_type"]),
            quality_rating=data["quality_rating"],
            expiry_period=data["expiry_period"],
            location=data["location"],
            currency=Currency(data["currency"]),
            status=data.get("status", True),
            min_value=data["min_value"],
            max_value=data["max_value"],
            batch_size=data["batch_size"],
        )


@dataclass(frozen=True)
class ProductUpdate:
    """The most recent amendment of a product. Replaced on every update."""
    update_origin: str
    update_production_date: int
    update_compliance_data: str
    update_timestamp: int
    updater: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "update_origin": self.update_origin,
            "update_production_date": self.update_production_date,
            "update_compliance_data": self.update_compliance_data,
            "update_timestamp": self.update_timestamp,
            "updater": self.updater,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ProductUpdate":
        return cls(
            update_origin=data["update_origin"],
            update_production_date=data["update_production_date"],
            update_compliance_data=data.get("update_compliance_data", ""),
            update_timestamp=data["update_timestamp"],
            updater=data["updater"],
        )


@dataclass
class RegistryState:
    """
    All mutable ledger state.

    products and products_by_hash are two views of the same entity set and
    are only ever changed together, under the registry lock.
    """
    next_product_id: int = 0
    max_products: int = DEFAULT_MAX_PRODUCTS
    registration_fee: int = DEFAULT_REGISTRATION_FEE
    authority_contract: Optional[str] = None
    products: Dict[int, Product] = field(default_factory=dict)
    product_updates: Dict[int, ProductUpdate] = field(default_factory=dict)
    products_by_hash: Dict[bytes, int] = field(default_factory=dict)

    def copy(self) -> "RegistryState":
        """Shallow snapshot; records are frozen so sharing them is safe."""
        return RegistryState(
            next_product_id=self.next_product_id,
            max_products=self.max_products,
            registration_fee=self.registration_fee,
            authority_contract=self.authority_contract,
            products=dict(self.products),
            product_updates=dict(self.product_updates),
            products_by_hash=dict(self.products_by_hash),
        )

    def restore(self, snapshot: "RegistryState") -> None:
        """Overwrite this state in place with a snapshot taken by copy()."""
        self.next_product_id = snapshot.next_product_id
        self.max_products = snapshot.max_products
        self.registration_fee = snapshot.registration_fee
        self.authority_contract = snapshot.authority_contract
        self.products = snapshot.products
        self.product_updates = snapshot.product_updates
        self.products_by_hash = snapshot.products_by_hash

    def to_dict(self) -> Dict[str, Any]:
        return {
            "next_product_id": self.next_product_id,
            "max_products": self.max_products,
            "registration_fee": self.registration_fee,
            "authority_contract": self.authority_contract,
            "products": {str(pid): p.to_dict() for pid, p in self.products.items()},
            "product_updates": {
                str(pid): u.to_dict() for pid, u in self.product_updates.items()
            },
        }
