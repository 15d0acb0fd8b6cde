import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, List, Optional

from exceptions import ClientMismatchError
from models import Transaction, TransactionType, ProcessingResult

logger = logging.getLogger(__name__)


# The only transaction type each referencing type may point back at.
# Withdrawals are never a valid antecedent: only credits can be disputed.
ANTECEDENT_TYPES: Dict[TransactionType, TransactionType] = {
    TransactionType.DISPUTE: TransactionType.DEPOSIT,
    TransactionType.RESOLVE: TransactionType.DISPUTE,
    TransactionType.CHARGEBACK: TransactionType.DISPUTE,
}


def extract_transaction(
    history: List[Transaction],
    transaction_id: int,
    calling_type: TransactionType,
) -> Optional[Transaction]:
    """
    Find the antecedent of a referencing transaction in an account's history.

    Only a transaction of the type ANTECEDENT_TYPES allows for calling_type can
    match. History is scanned in insertion order and the first match wins.
    """
    try:
        wanted_type = ANTECEDENT_TYPES[calling_type]
    except KeyError:
        raise ValueError(f"{calling_type.value} transactions do not reference a prior transaction") from None

    for logged in history:
        if logged.transaction_id == transaction_id and logged.transaction_type is wanted_type:
            return logged
    return None


@dataclass
class ClientAccount:
    client_id: int
    available: Decimal = Decimal("0")
    held: Decimal = Decimal("0")
    locked: bool = False
    history: List[Transaction] = field(default_factory=list)

    @property
    def total(self) -> Decimal:
        return self.available + self.held

    def apply(self, transaction: Transaction) -> ProcessingResult:
        """
        Apply a single transaction to this account.

        Every rejection check runs before any balance is touched, so a rejected
        transaction leaves the account exactly as it was.

        Returns:
            SUCCESS: Applied, or a tolerated dispute/resolve no-op
            ACCOUNT_LOCKED, INSUFFICIENT_FUNDS, NO_DISPUTE_FOUND,
            INSUFFICIENT_HELD_FUNDS: Rejected by a business rule

        Raises:
            ClientMismatchError: The transaction belongs to another client.
        """
        if transaction.client_id != self.client_id:
            raise ClientMismatchError(
                f"tx {transaction.transaction_id} for client {transaction.client_id} "
                f"routed to account {self.client_id}"
            )

        if self.locked:
            return ProcessingResult.ACCOUNT_LOCKED

        match transaction.transaction_type:
            case TransactionType.DEPOSIT:
                return self._handle_deposit(transaction)
            case TransactionType.WITHDRAWAL:
                return self._handle_withdrawal(transaction)
            case TransactionType.DISPUTE:
                return self._handle_dispute(transaction)
            case TransactionType.RESOLVE:
                return self._handle_resolve(transaction)
            case TransactionType.CHARGEBACK:
                return self._handle_chargeback(transaction)

    def _handle_deposit(self, transaction: Transaction) -> ProcessingResult:
        self.available += transaction.amount
        self.history.append(transaction)
        return ProcessingResult.SUCCESS

    def _handle_withdrawal(self, transaction: Transaction) -> ProcessingResult:
        if transaction.amount > self.available:
            return ProcessingResult.INSUFFICIENT_FUNDS

        self.available -= transaction.amount
        self.history.append(transaction)
        return ProcessingResult.SUCCESS

    def _handle_dispute(self, transaction: Transaction) -> ProcessingResult:
        deposit = extract_transaction(self.history, transaction.transaction_id, transaction.transaction_type)

        if deposit is None:
            logger.info(f"Dispute for tx {transaction.transaction_id}: no deposit on client {self.client_id}, ignoring")
            return ProcessingResult.SUCCESS

        self.available -= deposit.amount
        self.held += deposit.amount
        self.history.append(transaction)
        return ProcessingResult.SUCCESS

    def _handle_resolve(self, transaction: Transaction) -> ProcessingResult:
        deposit = self._find_disputed_deposit(transaction)

        if deposit is None:
            logger.info(f"Resolve for tx {transaction.transaction_id}: no dispute on client {self.client_id}, ignoring")
            return ProcessingResult.SUCCESS

        self.held -= deposit.amount
        self.available += deposit.amount
        self.history.append(transaction)
        return ProcessingResult.SUCCESS

    def _handle_chargeback(self, transaction: Transaction) -> ProcessingResult:
        deposit = self._find_disputed_deposit(transaction)

        if deposit is None:
            return ProcessingResult.NO_DISPUTE_FOUND

        if self.held < deposit.amount:
            return ProcessingResult.INSUFFICIENT_HELD_FUNDS

        self.held -= deposit.amount
        self.history.append(transaction)
        self.locked = True
        return ProcessingResult.SUCCESS

    def _find_disputed_deposit(self, transaction: Transaction) -> Optional[Transaction]:
        """Follow a resolve/chargeback back through its dispute to the deposit."""
        dispute = extract_transaction(self.history, transaction.transaction_id, transaction.transaction_type)
        if dispute is None:
            return None

        # A dispute only enters history once its deposit was found, so this cannot miss.
        return extract_transaction(self.history, transaction.transaction_id, dispute.transaction_type)
