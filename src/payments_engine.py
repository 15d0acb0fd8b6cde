import csv
import logging
import sys
from decimal import Decimal, InvalidOperation, localcontext
from typing import Dict, Iterator, Optional, TextIO

from account import ClientAccount
from exceptions import MalformedTransactionError
from ledger import Ledger
from models import Transaction, TransactionType
from transaction_processor import process_transactions

logger = logging.getLogger(__name__)

OUTPUT_HEADER = ["client", "available", "held", "total", "locked"]
OUTPUT_PRECISION = Decimal("0.0001")


class PaymentsEngine:
    """
    Reads a transaction CSV and folds it, in file order, into a Ledger.
    Malformed rows abort the whole run with MalformedTransactionError.
    """

    def __init__(self):
        self.ledger: Optional[Ledger] = None

    def process_file(self, filepath: str) -> Dict[int, ClientAccount]:
        """Process CSV file and return final account states."""
        logger.info(f"Starting processing of {filepath}")

        with open(filepath, "r", newline="") as f:
            self.ledger = process_transactions(read_transactions(f))

        logger.info("Processing complete")

        # Print final processing report to stderr
        print(
            f"Processed: {len(self.ledger.accepted_log)}, "
            f"Rejected: {len(self.ledger.rejected_log)}",
            file=sys.stderr
        )

        return self.ledger.get_all_accounts()


def read_transactions(stream: TextIO) -> Iterator[Transaction]:
    """Yield one Transaction per CSV row, in order."""
    reader = csv.DictReader(stream)
    for row in reader:
        yield parse_csv_row(row, reader.line_num)


def parse_csv_row(row: Dict[Optional[str], Optional[str]], line_num: int = 0) -> Transaction:
    """
    Parse CSV row into Transaction.

    Header names and values are whitespace-stripped; type keywords are not
    case-folded. Amounts on dispute/resolve/chargeback rows are dropped.
    """
    normalized = {k.strip(): (v or "").strip() for k, v in row.items() if k is not None}

    try:
        transaction_type = TransactionType.parse(normalized["type"])
        client_id = parse_id(normalized["client"])
        transaction_id = parse_id(normalized["tx"])

        amount = None
        amount_str = normalized.get("amount", "")
        if amount_str and transaction_type.carries_amount:
            amount = Decimal(amount_str)
            if not amount.is_finite():
                raise ValueError(f"amount must be a finite number, got {amount_str!r}")

        return Transaction(
            transaction_type=transaction_type,
            client_id=client_id,
            transaction_id=transaction_id,
            amount=amount,
        )
    except MalformedTransactionError as e:
        raise MalformedTransactionError(f"line {line_num}: {e}") from e
    except KeyError as e:
        raise MalformedTransactionError(f"line {line_num}: missing column {e}") from e
    except (ValueError, InvalidOperation) as e:
        raise MalformedTransactionError(f"line {line_num}: failed to parse row {row}: {e}") from e


def parse_id(text: str) -> int:
    """Parse a client or transaction id: an optional sign and ASCII digits only."""
    digits = text[1:] if text[:1] in ("+", "-") else text
    if not (digits.isascii() and digits.isdigit()):
        raise ValueError(f"invalid id {text!r}")
    return int(text)


def format_decimal(value: Decimal) -> str:
    """Format decimal with up to 4 decimal places, removing trailing zeros."""
    with localcontext() as ctx:
        # Room for every integer digit plus the four decimal places.
        ctx.prec = max(ctx.prec, value.adjusted() + 1 + 4)
        normalized = value.quantize(OUTPUT_PRECISION).normalize()
    return f"{normalized:f}"


def write_accounts(accounts: Dict[int, ClientAccount], stream: TextIO) -> None:
    """Write the account snapshot as CSV, one row per client in id order."""
    writer = csv.writer(stream, lineterminator="\n")
    writer.writerow(OUTPUT_HEADER)
    for client_id in sorted(accounts.keys()):
        account = accounts[client_id]
        writer.writerow([
            client_id,
            format_decimal(account.available),
            format_decimal(account.held),
            format_decimal(account.total),
            str(account.locked).lower(),
        ])
