from functools import reduce
from typing import Iterable, Optional

from ledger import Ledger
from models import Transaction


def process_transaction(ledger: Optional[Ledger], transaction: Transaction) -> Ledger:
    """Apply one transaction, starting a new ledger if none is given."""
    if ledger is None:
        ledger = Ledger()
    return ledger.add_transaction(transaction)


def process_transactions(transactions: Iterable[Transaction], ledger: Optional[Ledger] = None) -> Ledger:
    """Fold a sequence of transactions, in order, into a ledger."""
    result = reduce(process_transaction, transactions, ledger)
    if result is None:
        result = Ledger()
    return result
