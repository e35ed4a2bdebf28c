# prodledger/validation.py
"""
Field validation for registrations and amendments.

Checks run in a fixed order and stop at the first failure; the returned
ErrorCode is observable by callers, so the order is part of the contract.
"""

from typing import Any, Optional

from .errors import ErrorCode
from .models import Currency, ProductType

HASH_LENGTH = 32
MAX_ORIGIN_LENGTH = 100
MAX_LOCATION_LENGTH = 100
MAX_COMPLIANCE_LENGTH = 200
MAX_QUALITY_RATING = 100


def _is_uint(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


def _is_positive(value: Any) -> bool:
    return _is_uint(value) and value > 0


def valid_hash(value: Any) -> bool:
    return isinstance(value, (bytes, bytearray)) and len(value) == HASH_LENGTH


def valid_origin(value: Any) -> bool:
    return isinstance(value, str) and 0 < len(value) <= MAX_ORIGIN_LENGTH


def valid_production_date(value: Any) -> bool:
    return _is_positive(value)


def valid_compliance_data(value: Any) -> bool:
    return isinstance(value, str) and len(value) <= MAX_COMPLIANCE_LENGTH


def valid_location(value: Any) -> bool:
    return isinstance(value, str) and 0 < len(value) <= MAX_LOCATION_LENGTH


def parse_product_type(value: Any) -> Optional[ProductType]:
    """Return the ProductType for value, or None if it names none."""
    try:
        return ProductType(value)
    except ValueError:
        return None


def parse_currency(value: Any) -> Optional[Currency]:
    """Return the Currency for value, or None if it names none."""
    try:
        return Currency(value)
    except ValueError:
        return None


def check_product_fields(
    hash: Any,
    origin: Any,
    production_date: Any,
    compliance_data: Any,
    product_type: Any,
    quality_rating: Any,
    expiry_period: Any,
    location: Any,
    currency: Any,
    min_value: Any,
    max_value: Any,
    batch_size: Any,
) -> Optional[ErrorCode]:
    """
    Validate the caller-supplied fields of a registration.

    Capacity, authority, duplicate and authority-contract checks depend on
    ledger state and are done by the registry around this call.

    Returns:
        The first failing ErrorCode, or None if every field is valid
    """
    if not valid_hash(hash):
        return ErrorCode.INVALID_HASH
    if not valid_origin(origin):
        return ErrorCode.INVALID_ORIGIN
    if not valid_production_date(production_date):
        return ErrorCode.INVALID_PRODUCTION_DATE
    if not valid_compliance_data(compliance_data):
        return ErrorCode.INVALID_COMPLIANCE_DATA
    if parse_product_type(product_type) is None:
        return ErrorCode.INVALID_PRODUCT_TYPE
    if not (_is_uint(quality_rating) and quality_rating <= MAX_QUALITY_RATING):
        return ErrorCode.INVALID_QUALITY_RATING
    if not _is_positive(expiry_period):
        return ErrorCode.INVALID_EXPIRY_PERIOD
    if not valid_location(location):
        return ErrorCode.INVALID_LOCATION
    if parse_currency(currency) is None:
        return ErrorCode.INVALID_CURRENCY
    if not _is_positive(min_value):
        return ErrorCode.INVALID_MIN_VALUE
    if not _is_positive(max_value):
        return ErrorCode.INVALID_MAX_VALUE
    if not _is_positive(batch_size):
        return ErrorCode.INVALID_BATCH_SIZE
    return None


def check_update_fields(origin: Any, production_date: Any, compliance_data: Any) -> Optional[str]:
    """
    Validate the amendable fields of an update.

    Returns a short reason for logging, or None if valid. Update failures
    are reported to callers without a code.
    """
    if not valid_origin(origin):
        return "invalid origin"
    if not valid_production_date(production_date):
        return "invalid production date"
    if not valid_compliance_data(compliance_data):
        return "invalid compliance data"
    return None
