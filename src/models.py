from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Optional

from exceptions import MalformedTransactionError


class TransactionType(Enum):
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    DISPUTE = "dispute"
    RESOLVE = "resolve"
    CHARGEBACK = "chargeback"

    @classmethod
    def parse(cls, text: str) -> "TransactionType":
        """Parse an exact, lowercase type keyword. Anything else is fatal."""
        try:
            return cls(text)
        except ValueError:
            raise MalformedTransactionError(f"Unsupported transaction type: {text!r}") from None

    @property
    def carries_amount(self) -> bool:
        return self in (TransactionType.DEPOSIT, TransactionType.WITHDRAWAL)


class ProcessingResult(Enum):
    SUCCESS = "success"
    ACCOUNT_LOCKED = "account_locked"
    INSUFFICIENT_FUNDS = "insufficient_funds"
    NO_DISPUTE_FOUND = "no_dispute_found"
    INSUFFICIENT_HELD_FUNDS = "insufficient_held_funds"

    @property
    def accepted(self) -> bool:
        return self is ProcessingResult.SUCCESS


@dataclass(frozen=True)
class Transaction:
    transaction_type: TransactionType
    client_id: int
    transaction_id: int
    amount: Optional[Decimal] = None

    def __post_init__(self):
        if self.transaction_type.carries_amount and self.amount is None:
            raise MalformedTransactionError(
                f"{self.transaction_type.value} tx {self.transaction_id}: amount is required"
            )

    def __repr__(self) -> str:
        return f"Transaction({self.transaction_type.value}, client={self.client_id}, tx={self.transaction_id}, amount={self.amount})"
