"""Fatal errors for the payments ledger.

Business-rule rejections are not exceptions; they are ProcessingResult values.
Anything raised from here means the input or the caller is broken and the run
must stop.
"""


class LedgerError(Exception):
    """Base exception for all fatal ledger errors."""


class MalformedTransactionError(LedgerError):
    """Raised when an input record cannot be turned into a Transaction."""


class ClientMismatchError(LedgerError):
    """Raised when a transaction is applied to an account it does not belong to."""
