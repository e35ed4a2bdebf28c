# prodledger/payments.py
"""
Fee transfers.

The registry never moves value itself. It asks a PaymentProvider to
transfer the registration fee and aborts the registration if the provider
reports failure.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Transfer:
    """A completed fee transfer."""
    amount: int
    sender: str
    recipient: Optional[str]

    def to_dict(self) -> Dict[str, Any]:
        return {"amount": self.amount, "sender": self.sender, "recipient": self.recipient}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Transfer":
        return cls(
            amount=data["amount"],
            sender=data["sender"],
            recipient=data.get("recipient"),
        )


class PaymentProvider(ABC):
    """Moves value between principals. Blocking and fallible."""

    @abstractmethod
    def transfer(self, amount: int, sender: str, recipient: str) -> bool:
        """
        Transfer amount from sender to recipient.

        Returns:
            True if the transfer happened, False if it did not
        """
        pass

    @abstractmethod
    def refund(self, amount: int, sender: str, recipient: str) -> None:
        """Reverse a completed transfer() made with the same arguments."""
        pass


class RecordingPaymentProvider(PaymentProvider):
    """
    Payment provider that journals transfers instead of moving value.

    Used by tests and by the CLI, which persists the journal alongside the
    ledger. Set fail_next to make the next transfer report failure.
    """

    def __init__(self, transfers: List[Transfer] = None):
        self.transfers: List[Transfer] = list(transfers or [])
        self.fail_next = False

    def transfer(self, amount: int, sender: str, recipient: str) -> bool:
        if self.fail_next:
            self.fail_next = False
            logger.warning(f"Transfer refused: {amount} from {sender} to {recipient}")
            return False
        self.transfers.append(Transfer(amount=amount, sender=sender, recipient=recipient))
        logger.debug(f"Transfer: {amount} from {sender} to {recipient}")
        return True

    def refund(self, amount: int, sender: str, recipient: str) -> None:
        reversed_transfer = Transfer(amount=amount, sender=sender, recipient=recipient)
        for i in range(len(self.transfers) - 1, -1, -1):
            if self.transfers[i] == reversed_transfer:
                del self.transfers[i]
                logger.warning(f"Refunded: {amount} from {recipient} to {sender}")
                return
        raise ValueError(f"No transfer to refund: {reversed_transfer}")

    def total_to(self, recipient: str) -> int:
        """Sum of all journaled transfers to recipient."""
        return sum(t.amount for t in self.transfers if t.recipient == recipient)
