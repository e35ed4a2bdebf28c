# prodledger/authority.py
"""
Verified-authority checks.

Registration is open only to principals an AuthorityVerifier accepts. The
source of trust is pluggable: a fixed set, or any callable (for example a
lookup against an external role list).
"""

import logging
from abc import ABC, abstractmethod
from typing import Callable, Iterable, Set

logger = logging.getLogger(__name__)

# Standard burn address; can never hold the authority contract role.
BURN_PRINCIPAL = "SP000000000000000000002Q6VF78"


def is_valid_principal(principal: str) -> bool:
    """A principal is usable if it is a non-empty string other than the burn address."""
    return isinstance(principal, str) and bool(principal) and principal != BURN_PRINCIPAL


class AuthorityVerifier(ABC):
    """Decides whether a principal may register products."""

    @abstractmethod
    def is_verified_authority(self, principal: str) -> bool:
        pass


class StaticAuthorities(AuthorityVerifier):
    """
    A fixed, in-process set of verified principals.

    Usage:
        verifier = StaticAuthorities(["ST1TEST"])
        verifier.add("ST2OTHER")
    """

    def __init__(self, principals: Iterable[str] = ()):
        self._principals: Set[str] = set(principals)

    def add(self, principal: str) -> None:
        self._principals.add(principal)
        logger.info(f"Authority added: {principal}")

    def remove(self, principal: str) -> bool:
        if principal not in self._principals:
            return False
        self._principals.discard(principal)
        logger.info(f"Authority removed: {principal}")
        return True

    def is_verified_authority(self, principal: str) -> bool:
        return principal in self._principals

    def __contains__(self, principal: str) -> bool:
        return principal in self._principals

    def __len__(self) -> int:
        return len(self._principals)


class CallableAuthorities(AuthorityVerifier):
    """Delegates the check to a function, e.g. a call into another registry."""

    def __init__(self, check_fn: Callable[[str], bool]):
        self._check = check_fn

    def is_verified_authority(self, principal: str) -> bool:
        return bool(self._check(principal))
