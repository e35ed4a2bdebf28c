# prodledger/config.py
"""
Ledger configuration.

Example ledger.yaml:

    max_products: 10000
    registration_fee: 500
    store_dir: ./ledger
    log_level: INFO
    authorities:
      - ST1TEST
      - ST1OTHER
"""

import logging
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .models import DEFAULT_MAX_PRODUCTS, DEFAULT_REGISTRATION_FEE, RegistryState

logger = logging.getLogger(__name__)


def _is_count(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


@dataclass
class LedgerConfig:
    """
    Settings for a ledger instance.

    Attributes:
        max_products: Registration ceiling
        registration_fee: Fee for a ledger created from this config
        authorities: Principals allowed to register products
        store_dir: Where the ledger is persisted (None keeps it in memory)
        log_level: Logging level name for the CLI
    """
    max_products: int = DEFAULT_MAX_PRODUCTS
    registration_fee: int = DEFAULT_REGISTRATION_FEE
    authorities: List[str] = field(default_factory=list)
    store_dir: Optional[Path] = None
    log_level: str = "WARNING"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LedgerConfig":
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown config keys: {', '.join(unknown)}")

        config = cls(**data)
        if not _is_count(config.max_products):
            raise ValueError(f"max_products must be a non-negative integer: {config.max_products!r}")
        if not _is_count(config.registration_fee):
            raise ValueError(
                f"registration_fee must be a non-negative integer: {config.registration_fee!r}"
            )
        if not isinstance(config.authorities, list):
            raise ValueError("authorities must be a list of principals")
        config.authorities = [str(a) for a in config.authorities]
        if config.store_dir is not None:
            config.store_dir = Path(config.store_dir)
        config.log_level = str(config.log_level).upper()
        return config

    @classmethod
    def from_yaml(cls, yaml_content: str) -> "LedgerConfig":
        data = yaml.safe_load(yaml_content) or {}
        if not isinstance(data, dict):
            raise ValueError("Config must be a YAML mapping")
        return cls.from_dict(data)

    @classmethod
    def from_file(cls, path: Path | str) -> "LedgerConfig":
        with open(path, "r") as f:
            config = cls.from_yaml(f.read())
        logger.debug(f"Loaded config from {path}")
        return config

    def new_state(self) -> RegistryState:
        """A fresh ledger state with this config's cap and fee."""
        return RegistryState(
            max_products=self.max_products,
            registration_fee=self.registration_fee,
        )
