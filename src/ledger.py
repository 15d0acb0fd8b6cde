import logging
from typing import Dict, List, Optional

from account import ClientAccount
from models import Transaction

logger = logging.getLogger(__name__)


class Ledger:
    """
    Owns every client account for one processing run, plus audit logs of
    accepted and rejected transactions.
    Every submitted transaction ends up in exactly one of the two logs.
    """

    def __init__(self):
        self._accounts: Dict[int, ClientAccount] = {}
        self.accepted_log: List[Transaction] = []
        self.rejected_log: List[Transaction] = []

    def add_transaction(self, transaction: Transaction) -> "Ledger":
        """
        Route a transaction to its client's account and record the outcome.

        A fresh account is only installed once a transaction on it is accepted.
        "Accepted" means no rule was broken, not that anything changed.
        """
        account = self._accounts.get(transaction.client_id)
        if account is None:
            account = ClientAccount(client_id=transaction.client_id)

        result = account.apply(transaction)

        if result.accepted:
            self._accounts[transaction.client_id] = account
            self.accepted_log.append(transaction)
        else:
            logger.warning(f"Rejected {transaction}: {result.value}")
            self.rejected_log.append(transaction)

        return self

    def get_account(self, client_id: int) -> Optional[ClientAccount]:
        return self._accounts.get(client_id)

    def get_all_accounts(self) -> Dict[int, ClientAccount]:
        """Return all accounts (for final output)."""
        return dict(self._accounts)
